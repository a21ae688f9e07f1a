"""
HTTP failure classification.

Maps a TransportFailure into the typed RevMaxError hierarchy and decides
whether a failure is worth retrying.
"""

from typing import Any

from revmax.errors.exceptions import (
    ApiError,
    AuthenticationError,
    RateLimitError,
    RevMaxError,
    TransportError,
    ValidationError,
)
from revmax.transport.http_client import TransportFailure

REQUEST_ID_HEADER = "X-Request-ID"
RETRY_AFTER_HEADER = "retry-after"


def is_retryable_failure(failure: TransportFailure) -> bool:
    """
    Check if a transport failure should be retried.

    Retryable:
    - 429 rate limiting
    - 5xx server errors
    - Network failures where no response was received

    Every other 4xx is permanent.
    """
    if not failure.has_response:
        return True

    status = failure.status_code
    return status == 429 or 500 <= status < 600


def parse_retry_after(value: str | None) -> int:
    """Parse a retry-after header as whole seconds, defaulting to 0.

    Fractional values are truncated (``"5.0"`` and ``"5.9"`` give 5).
    """
    if value is None:
        return 0
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return 0


def _response_data(failure: TransportFailure) -> dict[str, Any]:
    return failure.body if isinstance(failure.body, dict) else {}


def _resolve_request_id(
    failure: TransportFailure,
    response_data: dict[str, Any],
    request_id: str | None,
) -> str:
    if request_id:
        return request_id
    for key, value in failure.request_headers.items():
        if key.lower() == REQUEST_ID_HEADER.lower() and value:
            return value
    return response_data.get("requestId") or "unknown"


def build_error_metadata(
    failure: TransportFailure,
    request_id: str | None = None,
) -> dict[str, Any]:
    """Metadata attached to every classified error."""
    response_data = _response_data(failure)
    return {
        "requestId": _resolve_request_id(failure, response_data, request_id),
        "url": failure.url,
        "method": failure.method,
        "responseData": failure.body if failure.body is not None else {},
    }


def classify_transport_failure(
    failure: TransportFailure,
    request_id: str | None = None,
) -> RevMaxError:
    """
    Classify a failed HTTP call into the appropriate error type.

    Args:
        failure: Failure raised by the transport
        request_id: Request id of the failing attempt (falls back to the
            outbound header, then the response body, then "unknown")

    Returns:
        Classified RevMaxError subclass
    """
    response_data = _response_data(failure)
    metadata = build_error_metadata(failure, request_id)
    server_message = response_data.get("message")
    status = failure.status_code

    if status == 401:
        return AuthenticationError(
            server_message or "Authentication failed",
            metadata=metadata,
            cause=failure,
            status_code=401,
        )

    if status == 429:
        return RateLimitError(
            server_message or "Rate limit exceeded",
            retry_after=parse_retry_after(failure.get_header(RETRY_AFTER_HEADER)),
            metadata=metadata,
            cause=failure,
        )

    if status == 422 and response_data.get("errors"):
        return ValidationError(
            server_message or "Validation failed",
            validation_errors=response_data["errors"],
            metadata=metadata,
            cause=failure,
            status_code=422,
        )

    if status is not None:
        return ApiError(
            server_message or failure.message,
            status_code=status,
            error_code=response_data.get("code"),
            metadata=metadata,
            cause=failure,
        )

    return TransportError(failure.message, metadata=metadata, cause=failure)


__all__ = [
    "REQUEST_ID_HEADER",
    "RETRY_AFTER_HEADER",
    "is_retryable_failure",
    "parse_retry_after",
    "build_error_metadata",
    "classify_transport_failure",
]
