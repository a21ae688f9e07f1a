"""Logging setup and configuration."""

import itertools
import logging
import sys
from typing import Any

from revmax.config import LoggingOptions, LogHandler
from revmax.logging.formatters import ConsoleFormatter, JSONFormatter

SDK_LOGGER_NAME = "revmax"
CLIENT_LOGGER_PREFIX = f"{SDK_LOGGER_NAME}.clients"

_client_sequence = itertools.count(1)

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_LEVEL_NAMES = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}

# Standard LogRecord attributes; anything else on a record came from extra=
_RESERVED_LOG_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "asctime",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "exc_info",
        "exc_text",
        "stack_info",
        "taskName",
    }
)


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Extract the extra= fields attached to a log record."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_LOG_KEYS and not key.startswith("_")
    }


class CallbackHandler(logging.Handler):
    """
    Forward log records to a user-supplied sink.

    The sink is called as ``handler(level, message, data)`` where level is one
    of debug/info/warn/error and data holds the record's extra fields (or None).
    Sink exceptions go through ``handleError`` and never reach SDK callers.
    """

    def __init__(self, sink: LogHandler, level: int = logging.NOTSET):
        super().__init__(level)
        self.sink = sink

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = _LEVEL_NAMES.get(record.levelno, "info")
            data = record_extras(record) or None
            self.sink(level, record.getMessage(), data)
        except Exception:
            self.handleError(record)


def configure_logging(
    options: LoggingOptions | None = None,
    name: str = SDK_LOGGER_NAME,
) -> logging.Logger:
    """
    Configure the SDK logger from LoggingOptions.

    Disabled logging installs a NullHandler and stops propagation so the
    SDK stays silent. Enabled logging uses the custom sink if one is given,
    otherwise a stderr StreamHandler whose formatter follows
    ``options.format`` (ConsoleFormatter or JSONFormatter). Repeated calls
    replace the handlers instead of stacking them.

    Each RevMaxClient configures its own logger (see client_logger_name),
    so clients never overwrite each other's logging options.

    Args:
        options: Logging options (defaults to disabled)
        name: Logger name to configure

    Returns:
        Configured logger instance
    """
    options = options or LoggingOptions()
    sdk_logger = logging.getLogger(name)

    for handler in list(sdk_logger.handlers):
        sdk_logger.removeHandler(handler)

    if not options.enabled:
        sdk_logger.addHandler(logging.NullHandler())
        sdk_logger.setLevel(logging.CRITICAL + 1)
        sdk_logger.propagate = False
        return sdk_logger

    sdk_logger.setLevel(LEVELS[options.level])
    sdk_logger.propagate = False

    if options.handler is not None:
        sdk_logger.addHandler(CallbackHandler(options.handler))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(_build_formatter(options.format))
        sdk_logger.addHandler(console_handler)

    return sdk_logger


def client_logger_name() -> str:
    """Unique logger name for one client: ``revmax.clients.<n>``."""
    return f"{CLIENT_LOGGER_PREFIX}.{next(_client_sequence)}"


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JSONFormatter()
    return ConsoleFormatter()


# Silent unless a client (or the application) configures the SDK logger
logging.getLogger(SDK_LOGGER_NAME).addHandler(logging.NullHandler())
