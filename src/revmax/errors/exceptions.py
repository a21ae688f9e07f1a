"""
Unified exception hierarchy for the RevMax SDK.

Every error that reaches a caller is a RevMaxError subclass with a stable
``kind`` discriminant, a human-readable message and, when available, the
request id the server can use for support correlation.
"""

from typing import Any

# Re-exported from revmax.types
from revmax.types import ErrorKind


class RevMaxError(Exception):
    """
    Base exception for all SDK errors.

    Attributes:
        message: Human-readable error description (never empty)
        kind: Error discriminant for exhaustive handling
        metadata: Additional context (requestId, url, method, responseData)
        request_id: Request id for support correlation, if known
        cause: Original exception if wrapping
    """

    kind: ErrorKind = ErrorKind.TRANSPORT
    default_message: str = "Unknown error"

    def __init__(
        self,
        message: str | None = None,
        metadata: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.message = message if message and str(message).strip() else self.default_message
        self.metadata = metadata or {}
        self.request_id: str | None = self.metadata.get("requestId")
        self.cause = cause
        super().__init__(self.message)

    @property
    def status_code(self) -> int | None:
        return None

    def to_dict(self) -> dict[str, Any]:
        """Structured form for logs and telemetry sinks."""
        data: dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
            "request_id": self.request_id,
        }
        if self.status_code is not None:
            data["status_code"] = self.status_code
        return data

    def __str__(self) -> str:
        if self.request_id and self.request_id != "unknown":
            return f"{self.message} (request_id={self.request_id})"
        return self.message


# =============================================================================
# API Errors (server responded)
# =============================================================================


class ApiError(RevMaxError):
    """Server returned an error response."""

    kind = ErrorKind.API
    default_message = "API request failed"

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        error_code: str | None = None,
        metadata: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, metadata, cause)
        self._status_code = status_code
        self.error_code = error_code

    @property
    def status_code(self) -> int | None:
        return self._status_code

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.error_code:
            data["error_code"] = self.error_code
        return data


class RateLimitError(ApiError):
    """Rate limited (429) - should back off."""

    kind = ErrorKind.RATE_LIMIT
    default_message = "Rate limit exceeded"

    def __init__(
        self,
        message: str | None = None,
        retry_after: int | None = None,
        metadata: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, 429, "rate_limit_exceeded", metadata, cause)
        self.retry_after = retry_after  # Seconds to wait if provided

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["retry_after"] = self.retry_after
        return data


class NotFoundError(ApiError):
    """Requested resource does not exist."""

    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"

    def __init__(
        self,
        message: str | None = None,
        status_code: int = 404,
        metadata: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, status_code, "not_found", metadata, cause)


# =============================================================================
# Authentication Errors
# =============================================================================


class AuthenticationError(RevMaxError):
    """API key missing, malformed or rejected by the server."""

    kind = ErrorKind.AUTHENTICATION
    default_message = "Authentication failed"

    def __init__(
        self,
        message: str | None = None,
        metadata: dict[str, Any] | None = None,
        cause: Exception | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, metadata, cause)
        self._status_code = status_code

    @property
    def status_code(self) -> int | None:
        return self._status_code


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(RevMaxError):
    """Payload rejected with field-level errors (422 from the server, or local checks)."""

    kind = ErrorKind.VALIDATION
    default_message = "Validation failed"

    def __init__(
        self,
        message: str | None = None,
        validation_errors: dict[str, list[str]] | None = None,
        metadata: dict[str, Any] | None = None,
        cause: Exception | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, metadata, cause)
        self.validation_errors = validation_errors or {}
        self._status_code = status_code

    @property
    def status_code(self) -> int | None:
        return self._status_code

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["validation_errors"] = self.validation_errors
        return data


# =============================================================================
# Lifecycle and Network Errors
# =============================================================================


class InitializationError(RevMaxError):
    """Verification handshake failed or returned an unexpected shape."""

    kind = ErrorKind.INITIALIZATION
    default_message = "Failed to initialize the SDK"


class TransportError(RevMaxError):
    """No response received (connection failure, timeout)."""

    kind = ErrorKind.TRANSPORT
    default_message = "Network request failed"


__all__ = [
    "ErrorKind",
    "RevMaxError",
    "ApiError",
    "RateLimitError",
    "NotFoundError",
    "AuthenticationError",
    "ValidationError",
    "InitializationError",
    "TransportError",
]
