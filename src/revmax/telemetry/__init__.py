"""
Request telemetry module.

Samples, times and aggregates per-attempt request metrics.
"""

from revmax.telemetry.models import (
    RequestMetrics,
    RequestTracking,
    TelemetryHandler,
    TelemetryOptions,
    TelemetryStats,
)
from revmax.telemetry.recorder import (
    ID_PLACEHOLDER,
    Telemetry,
    default_telemetry_handler,
    error_kind_of,
)

__all__ = [
    # Models
    "RequestMetrics",
    "RequestTracking",
    "TelemetryHandler",
    "TelemetryOptions",
    "TelemetryStats",
    # Recorder
    "ID_PLACEHOLDER",
    "Telemetry",
    "default_telemetry_handler",
    "error_kind_of",
]
