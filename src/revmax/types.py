"""
Core types and protocols used across modules.

This module provides the error discriminant and protocol definitions that are
shared across the SDK to keep classification and authentication consistent.
"""

from enum import Enum
from typing import Protocol


class ErrorKind(Enum):
    """
    Closed set of error kinds surfaced by the SDK.

    Every RevMaxError carries exactly one kind. Callers should match on
    ``error.kind`` instead of inspecting the class hierarchy.

    Kinds:
        AUTHENTICATION: Invalid or rejected API key (401, bad key format)
        RATE_LIMIT: Server throttled the request (429), may carry retry_after
        VALIDATION: Server rejected the payload with field-level errors (422)
        NOT_FOUND: Requested resource does not exist
        API: Any other HTTP error response
        INITIALIZATION: Handshake failed or returned an unexpected shape
        TRANSPORT: No response was received (network error, timeout)
    """

    AUTHENTICATION = "authentication_error"
    RATE_LIMIT = "rate_limit_error"
    VALIDATION = "validation_error"
    NOT_FOUND = "not_found_error"
    API = "api_error"
    INITIALIZATION = "initialization_error"
    TRANSPORT = "transport_error"


class AuthMethod(Protocol):
    """
    Protocol for authentication methods.

    Implementations turn a credential into request headers and track whether
    the credential was accepted by the verification handshake.
    """

    def get_headers(self) -> dict[str, str]:
        """
        Get headers to attach to every outbound request.

        Returns:
            Mapping of header name to value
        """
        ...

    def set_verified(self, status: bool) -> None:
        ...

    def is_verified(self) -> bool:
        ...


__all__ = [
    "ErrorKind",
    "AuthMethod",
]
