"""
Structured logging module.

Provides SDK logger configuration, JSON/console formatters and request-id
context propagation.
"""

from revmax.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from revmax.logging.formatters import ConsoleFormatter, JSONFormatter
from revmax.logging.setup import (
    CLIENT_LOGGER_PREFIX,
    SDK_LOGGER_NAME,
    CallbackHandler,
    configure_logging,
    client_logger_name,
    record_extras,
)

__all__ = [
    # Setup
    "CLIENT_LOGGER_PREFIX",
    "SDK_LOGGER_NAME",
    "CallbackHandler",
    "configure_logging",
    "client_logger_name",
    "record_extras",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
]
