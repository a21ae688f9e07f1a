"""
HTTP transport boundary.

The request executor only depends on the Transport protocol; AiohttpTransport
is the default implementation.
"""

from revmax.transport.http_client import (
    AiohttpTransport,
    Transport,
    TransportFailure,
    TransportResponse,
    create_session,
)

__all__ = [
    "AiohttpTransport",
    "Transport",
    "TransportFailure",
    "TransportResponse",
    "create_session",
]
