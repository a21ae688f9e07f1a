"""Data models for request telemetry."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from revmax.utils.coercion import clamp, to_bool


@dataclass
class RequestMetrics:
    """
    Metrics for one tracked physical attempt.

    Created by Telemetry.start_request and completed by Telemetry.end_request.
    Timestamps are epoch milliseconds; duration is milliseconds.
    """

    request_id: str
    method: str
    path: str
    start_time: float
    end_time: float | None = None
    duration: float | None = None
    status_code: int | None = None
    success: bool | None = None
    error_message: str | None = None
    error_type: str | None = None
    retry_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "requestId": self.request_id,
            "method": self.method,
            "path": self.path,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
            "statusCode": self.status_code,
            "success": self.success,
            "errorMessage": self.error_message,
            "errorType": self.error_type,
            "retryCount": self.retry_count,
        }


TelemetryHandler = Callable[[RequestMetrics], None]


@dataclass
class TelemetryOptions:
    """Configuration for request telemetry."""

    enabled: bool = False

    # Fraction of attempts to track, drawn independently per attempt
    sample_rate: float = 1.0

    # Sink for completed metrics; None uses the logging sink
    handler: TelemetryHandler | None = None

    def __post_init__(self):
        """Ensure proper types from YAML/env vars."""
        self.enabled = to_bool(self.enabled)
        self.sample_rate = clamp(float(self.sample_rate), 0.0, 1.0)


@dataclass(frozen=True)
class RequestTracking:
    """Result of Telemetry.start_request."""

    request_id: str
    is_tracked: bool


@dataclass
class TelemetryStats:
    """Snapshot of aggregate telemetry counters."""

    request_count: int = 0
    success_count: int = 0
    error_count: int = 0
    success_rate: float = 1.0
    average_duration: float = 0.0
    error_breakdown: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "requestCount": self.request_count,
            "successCount": self.success_count,
            "errorCount": self.error_count,
            "successRate": self.success_rate,
            "averageDuration": self.average_duration,
            "errorBreakdown": dict(self.error_breakdown),
        }


__all__ = [
    "RequestMetrics",
    "RequestTracking",
    "TelemetryHandler",
    "TelemetryOptions",
    "TelemetryStats",
]
