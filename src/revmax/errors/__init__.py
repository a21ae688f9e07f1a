"""
Error classification and exception hierarchy.

Provides:
- ErrorKind enum, the discriminant carried by every SDK error
- RevMaxError hierarchy for typed exceptions
- Classification of transport failures into typed errors
"""

from revmax.errors.classifiers import (
    # Constants
    REQUEST_ID_HEADER,
    RETRY_AFTER_HEADER,
    # Functions
    build_error_metadata,
    classify_transport_failure,
    is_retryable_failure,
    parse_retry_after,
)
from revmax.errors.exceptions import (
    ApiError,
    AuthenticationError,
    # Enums
    ErrorKind,
    InitializationError,
    NotFoundError,
    RateLimitError,
    # Base class
    RevMaxError,
    TransportError,
    ValidationError,
)

__all__ = [
    # Enums
    "ErrorKind",
    # Base class
    "RevMaxError",
    # Typed errors
    "ApiError",
    "AuthenticationError",
    "RateLimitError",
    "ValidationError",
    "NotFoundError",
    "InitializationError",
    "TransportError",
    # Classification
    "REQUEST_ID_HEADER",
    "RETRY_AFTER_HEADER",
    "build_error_metadata",
    "classify_transport_failure",
    "is_retryable_failure",
    "parse_retry_after",
]
