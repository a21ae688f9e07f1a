"""
RevMax Python SDK.

Async client for the RevMax billing API: API key authentication, a retrying
request executor, request telemetry and typed errors.

Example:
    >>> from revmax import RevMaxClient
    >>> client = RevMaxClient("revx_pk_...", {"retries": 2})
    >>> await client.connect()
    >>> client.get_organization()["name"]
"""

from revmax.api import ApiClient
from revmax.client import RevMaxClient
from revmax.config import ClientOptions, LoggingOptions, load_options
from revmax.errors import (
    ApiError,
    AuthenticationError,
    ErrorKind,
    InitializationError,
    NotFoundError,
    RateLimitError,
    RevMaxError,
    TransportError,
    ValidationError,
)
from revmax.resources import (
    CustomerCreateParams,
    CustomerListParams,
    CustomerUpdateParams,
    UsageRecord,
)
from revmax.telemetry import RequestMetrics, Telemetry, TelemetryOptions, TelemetryStats
from revmax.version import __version__

__all__ = [
    "__version__",
    # Client
    "RevMaxClient",
    "ApiClient",
    # Config
    "ClientOptions",
    "LoggingOptions",
    "TelemetryOptions",
    "load_options",
    # Errors
    "ErrorKind",
    "RevMaxError",
    "ApiError",
    "RateLimitError",
    "NotFoundError",
    "AuthenticationError",
    "ValidationError",
    "InitializationError",
    "TransportError",
    # Telemetry
    "Telemetry",
    "RequestMetrics",
    "TelemetryStats",
    # Resources
    "UsageRecord",
    "CustomerCreateParams",
    "CustomerUpdateParams",
    "CustomerListParams",
]
