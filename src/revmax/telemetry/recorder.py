"""
Request telemetry: sampling, timing and aggregation.

Each physical attempt may be tracked independently. A tracked attempt has one
in-flight RequestMetrics entry from start_request until end_request, at which
point it is folded into the aggregate counters, handed to the handler, and
discarded. Entries for attempts that never complete are simply lost.

Usage:
    telemetry = Telemetry(TelemetryOptions(enabled=True, sample_rate=0.5))
    tracking = telemetry.start_request("GET", "/customers/42")
    ...
    telemetry.end_request(tracking.request_id, status_code=200)
    telemetry.get_stats().success_rate
"""

import logging
import random
import re
import threading
import time
import uuid

from revmax.errors.exceptions import RevMaxError
from revmax.telemetry.models import (
    RequestMetrics,
    RequestTracking,
    TelemetryHandler,
    TelemetryOptions,
    TelemetryStats,
)

logger = logging.getLogger(__name__)

ID_PLACEHOLDER = "/:id"

UUID_SEGMENT_PATTERN = re.compile(
    r"/[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)
NUMERIC_SEGMENT_PATTERN = re.compile(r"/\d+(?=/|$)")


def default_telemetry_handler(
    metrics: RequestMetrics,
    log: logging.Logger | None = None,
) -> None:
    """Log one line per completed request."""
    (log or logger).info(
        "[TELEMETRY] %s %s - %sms (%s)",
        metrics.method,
        metrics.path,
        metrics.duration,
        "SUCCESS" if metrics.success else "FAILED",
        extra={
            "request_id": metrics.request_id,
            "http_method": metrics.method,
            "http_status": metrics.status_code,
            "duration_ms": metrics.duration,
            "retry_count": metrics.retry_count,
            "error_kind": metrics.error_type,
        },
    )


def error_kind_of(error: BaseException) -> str:
    """Histogram key for an error: its kind for SDK errors, else its class name."""
    if isinstance(error, RevMaxError):
        return error.kind.value
    return type(error).__name__ or "UnknownError"


class Telemetry:
    """
    Per-client telemetry recorder. Thread-safe.

    The in-flight table and the aggregate counters are the only shared state;
    every mutation happens under ``_lock``. The handler is invoked outside
    the lock.
    """

    def __init__(
        self,
        options: TelemetryOptions | None = None,
        logger: logging.Logger | None = None,
    ):
        options = options or TelemetryOptions()
        self.enabled = options.enabled
        self.sample_rate = options.sample_rate
        self.logger = logger or logging.getLogger(__name__)
        self.handler: TelemetryHandler = options.handler or self._log_metrics

        self._active_requests: dict[str, RequestMetrics] = {}
        self._lock = threading.Lock()

        # Aggregates
        self._request_count = 0
        self._success_count = 0
        self._error_count = 0
        self._total_duration = 0.0
        self._error_types: dict[str, int] = {}

    def _log_metrics(self, metrics: RequestMetrics) -> None:
        default_telemetry_handler(metrics, self.logger)

    def should_collect(self) -> bool:
        if not self.enabled:
            return False
        return random.random() < self.sample_rate

    @staticmethod
    def generate_request_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def normalize_path(path: str) -> str:
        """
        Replace ID-like path segments with a placeholder.

        Keeps aggregate cardinality bounded: ``/customers/4821`` and
        ``/customers/<uuid>`` both become ``/customers/:id``.
        """
        if not path:
            return ""

        normalized = path if path.startswith("/") else f"/{path}"
        normalized = UUID_SEGMENT_PATTERN.sub(ID_PLACEHOLDER, normalized)
        return NUMERIC_SEGMENT_PATTERN.sub(ID_PLACEHOLDER, normalized)

    @property
    def active_request_count(self) -> int:
        with self._lock:
            return len(self._active_requests)

    def start_request(
        self,
        method: str,
        path: str,
        request_id: str | None = None,
    ) -> RequestTracking:
        """
        Start tracking an attempt if sampling selects it.

        Args:
            method: HTTP method
            path: Raw request path
            request_id: Attempt id (generated if not provided)

        Returns:
            RequestTracking with the id (always) and whether it is tracked
        """
        is_tracked = self.should_collect()
        request_id = request_id or self.generate_request_id()

        if is_tracked:
            normalized_path = self.normalize_path(path)
            metrics = RequestMetrics(
                request_id=request_id,
                method=method.upper(),
                path=normalized_path,
                start_time=time.time() * 1000,
            )
            with self._lock:
                self._active_requests[request_id] = metrics

            self.logger.debug(
                "Started tracking request %s: %s %s",
                request_id,
                method.upper(),
                normalized_path,
                extra={"request_id": request_id},
            )

        return RequestTracking(request_id=request_id, is_tracked=is_tracked)

    def end_request(
        self,
        request_id: str,
        status_code: int | None = None,
        error: BaseException | None = None,
        retry_count: int = 0,
    ) -> None:
        """
        Complete a tracked attempt.

        Unknown ids (never tracked, or already completed) are ignored.

        Args:
            request_id: Attempt id from start_request
            status_code: HTTP status, if a response was received
            error: Error if the attempt failed
            retry_count: Retry ordinal of this attempt within its logical call
        """
        with self._lock:
            metrics = self._active_requests.pop(request_id, None)
            if metrics is None:
                return

            metrics.end_time = time.time() * 1000
            metrics.duration = max(0.0, metrics.end_time - metrics.start_time)
            metrics.status_code = status_code
            metrics.success = error is None and (status_code is None or status_code < 400)
            metrics.retry_count = retry_count or 0

            if error is not None:
                metrics.error_message = str(error) or type(error).__name__
                metrics.error_type = error_kind_of(error)
            elif not metrics.success:
                metrics.error_type = f"http_{status_code}"

            if metrics.success:
                self._success_count += 1
            else:
                self._error_count += 1
                self._error_types[metrics.error_type] = (
                    self._error_types.get(metrics.error_type, 0) + 1
                )

            self._request_count += 1
            self._total_duration += metrics.duration

        self._invoke_handler(metrics)

        self.logger.debug(
            "Completed tracking request %s: %.0fms, success: %s",
            request_id,
            metrics.duration,
            metrics.success,
            extra={"request_id": request_id, "duration_ms": metrics.duration},
        )

    def _invoke_handler(self, metrics: RequestMetrics) -> None:
        """Call the handler, swallowing and logging any errors."""
        try:
            self.handler(metrics)
        except Exception as handler_err:
            self.logger.warning(
                "Error in telemetry handler for %s: %s",
                metrics.request_id,
                str(handler_err)[:100],
                extra={
                    "request_id": metrics.request_id,
                    "callback_error": str(handler_err)[:100],
                },
            )

    def get_stats(self) -> TelemetryStats:
        """Get snapshot of aggregate statistics."""
        with self._lock:
            count = self._request_count
            return TelemetryStats(
                request_count=count,
                success_count=self._success_count,
                error_count=self._error_count,
                success_rate=self._success_count / count if count > 0 else 1.0,
                average_duration=self._total_duration / count if count > 0 else 0.0,
                error_breakdown=dict(self._error_types),
            )

    def reset_stats(self) -> None:
        """Zero the aggregates. In-flight entries are untouched."""
        with self._lock:
            self._request_count = 0
            self._success_count = 0
            self._error_count = 0
            self._total_duration = 0.0
            self._error_types.clear()
        self.logger.debug("Telemetry stats reset")


__all__ = [
    "ID_PLACEHOLDER",
    "Telemetry",
    "default_telemetry_handler",
    "error_kind_of",
]
