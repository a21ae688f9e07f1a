"""
Retry policy with exception-aware handling.

Uses failure classification to make retry decisions:
- Rate limited (429): retry, honoring the server's retry-after hint
- Server errors (5xx) and network failures: retry with exponential backoff
- Any other 4xx: fail immediately (no retry)

Delays are deterministic (no jitter): ``retry_delay_ms * 2 ** retry_ordinal``.
"""

import logging
from dataclasses import dataclass

from revmax.errors.classifiers import RETRY_AFTER_HEADER, is_retryable_failure, parse_retry_after
from revmax.transport.http_client import TransportFailure

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    # Additional attempts after the first one
    max_retries: int = 0

    # Base for exponential backoff, in milliseconds
    retry_delay_ms: float = 300.0

    exponential_base: float = 2.0

    # If True, use retry-after from 429 responses when available
    respect_retry_after: bool = True

    def __post_init__(self):
        """Ensure proper types from YAML/env vars."""
        self.max_retries = max(0, int(self.max_retries))
        self.retry_delay_ms = max(0.0, float(self.retry_delay_ms))
        self.exponential_base = float(self.exponential_base)

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def server_retry_after_ms(self, failure: TransportFailure | None) -> float | None:
        """Server-provided wait for a 429 response, in milliseconds."""
        if not self.respect_retry_after or failure is None or failure.status_code != 429:
            return None
        retry_after = parse_retry_after(failure.get_header(RETRY_AFTER_HEADER))
        if retry_after > 0:
            return retry_after * 1000.0
        return None

    def get_delay_ms(self, retry_ordinal: int, failure: TransportFailure | None = None) -> float:
        """
        Calculate delay before the next attempt.

        Args:
            retry_ordinal: 0-indexed ordinal of the attempt that just failed
            failure: Failure to check for a retry-after hint

        Returns:
            Delay in milliseconds
        """
        server_delay = self.server_retry_after_ms(failure)
        if server_delay is not None:
            return server_delay
        return self.retry_delay_ms * (self.exponential_base**retry_ordinal)

    def get_delay(self, retry_ordinal: int, failure: TransportFailure | None = None) -> float:
        """Delay before the next attempt, in seconds."""
        return self.get_delay_ms(retry_ordinal, failure) / 1000.0

    def should_retry(self, failure: TransportFailure, retry_ordinal: int) -> bool:
        """
        Determine if a failure should be retried.

        Args:
            failure: The transport failure that occurred
            retry_ordinal: 0-indexed ordinal of the attempt that failed

        Returns:
            True if should retry
        """
        if retry_ordinal >= self.max_retries:
            return False
        return is_retryable_failure(failure)


def log_retry_attempt(
    operation: str,
    retry_ordinal: int,
    config: RetryConfig,
    delay: float,
    failure: TransportFailure,
    request_id: str,
    log: logging.Logger | None = None,
) -> None:
    """Emit the retry-attempt warning with delay source."""
    log_extras: dict[str, object] = {
        "operation": operation,
        "request_id": request_id,
        "attempt": retry_ordinal + 1,
        "max_attempts": config.max_attempts,
        "http_status": failure.status_code,
        "delay_seconds": round(delay, 3),
        "error_message": str(failure)[:200],
    }

    if config.server_retry_after_ms(failure) is not None:
        log_extras["delay_source"] = "server"
        log_message = "Retryable error for %s, will retry (using server-provided delay)"
    else:
        log_extras["delay_source"] = "exponential_backoff"
        log_message = "Retryable error for %s, will retry"

    (log or logger).warning(log_message, operation, extra=log_extras)


def log_retry_failure(
    operation: str,
    retry_ordinal: int,
    config: RetryConfig,
    failure: TransportFailure,
    request_id: str,
    log: logging.Logger | None = None,
) -> None:
    """Log permanent-error or max-retries-exhausted."""
    log = log or logger
    log_extras = {
        "operation": operation,
        "request_id": request_id,
        "attempt": retry_ordinal + 1,
        "max_attempts": config.max_attempts,
        "http_status": failure.status_code,
        "error_message": str(failure)[:200],
    }

    if not is_retryable_failure(failure):
        log.warning(
            "Permanent error for %s, not retrying: %s",
            operation,
            str(failure)[:200],
            extra=log_extras,
        )
        return

    log.error(
        "Max retries exhausted for %s: %s",
        operation,
        str(failure)[:200],
        extra=log_extras,
    )


__all__ = [
    "RetryConfig",
    "log_retry_attempt",
    "log_retry_failure",
]
