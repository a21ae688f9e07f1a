"""
Resilience patterns module.

Components:
    - RetryConfig: Exponential backoff with server retry-after support
    - log_retry_attempt / log_retry_failure: Structured retry logging
"""

from .retry import (
    RetryConfig,
    log_retry_attempt,
    log_retry_failure,
)

__all__ = [
    "RetryConfig",
    "log_retry_attempt",
    "log_retry_failure",
]
