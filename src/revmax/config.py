"""Client configuration.

Options can be built directly, from a dict (camelCase or snake_case keys), or
loaded from a YAML file:

    revmax:
      baseURL: ${REVMAX_BASE_URL:-https://api.revmax.com/v1/sdk}
      timeout: 10000
      retries: 2
      retryDelay: 300
      logging:
        enabled: true
        level: debug
        format: console
      telemetry:
        enabled: true
        sampleRate: 0.25

Environment variables are supported using ${VAR_NAME} syntax in YAML files.
All timing values are in milliseconds.
"""

import logging
import os
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

from revmax.telemetry.models import TelemetryOptions
from revmax.utils.coercion import to_bool

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.revmax.com/v1/sdk"
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_RETRIES = 0
DEFAULT_RETRY_DELAY_MS = 300

LOG_LEVELS = ("debug", "info", "warn", "error")
LOG_FORMATS = ("console", "json")

LogHandler = Callable[[str, str, Any], None]


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        pattern = r"\$\{([^}:]+)(?::-(([^}]*))?)?\}"

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return re.sub(pattern, replacer, data)
    else:
        return data


def _snake_case(key: str) -> str:
    if key == "baseURL":
        return "base_url"
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    return {_snake_case(key): value for key, value in data.items()}


@dataclass
class LoggingOptions:
    """Logging configuration for the SDK logger."""

    enabled: bool = False
    level: str = "info"

    # Output format of the built-in stderr handler: console or json
    format: str = "console"

    # Custom sink called as handler(level, message, data)
    handler: LogHandler | None = None

    def __post_init__(self):
        self.enabled = to_bool(self.enabled)
        self.level = str(self.level).lower()
        if self.level == "warning":
            self.level = "warn"
        if self.level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.level}. Must be one of {', '.join(LOG_LEVELS)}"
            )
        self.format = str(self.format).lower()
        if self.format not in LOG_FORMATS:
            raise ValueError(
                f"Invalid log format: {self.format}. Must be one of {', '.join(LOG_FORMATS)}"
            )


@dataclass
class ClientOptions:
    """RevMax client configuration."""

    base_url: str = DEFAULT_BASE_URL
    timeout: int = DEFAULT_TIMEOUT_MS
    retries: int = DEFAULT_RETRIES
    retry_delay: int = DEFAULT_RETRY_DELAY_MS

    # Extra static headers, merged under the auth headers
    headers: Dict[str, str] = field(default_factory=dict)

    logging: LoggingOptions = field(default_factory=LoggingOptions)
    telemetry: TelemetryOptions = field(default_factory=TelemetryOptions)

    def __post_init__(self):
        """Ensure proper types from YAML/env vars."""
        self.base_url = str(self.base_url).rstrip("/")
        self.timeout = int(self.timeout)
        self.retries = max(0, int(self.retries))
        self.retry_delay = max(0, int(self.retry_delay))
        self.headers = {str(k): str(v) for k, v in (self.headers or {}).items()}

        if isinstance(self.logging, dict):
            self.logging = LoggingOptions(**_normalize_keys(self.logging))
        if isinstance(self.telemetry, dict):
            self.telemetry = TelemetryOptions(**_normalize_keys(self.telemetry))

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "ClientOptions":
        """Build options from a dict with camelCase or snake_case keys.

        Unknown keys are ignored.
        """
        known = {f for f in cls.__dataclass_fields__}
        kwargs = {}
        for key, value in _normalize_keys(data or {}).items():
            if key not in known:
                logger.debug("Ignoring unknown client option: %s", key)
                continue
            if value is None:
                continue
            kwargs[key] = value
        return cls(**kwargs)


def load_options(path: Path | str, section: str = "revmax") -> ClientOptions:
    """Load client options from a YAML file.

    Reads the ``section`` mapping if present, otherwise the whole document.
    A missing file yields default options.
    """
    data = _expand_env_vars(load_yaml(Path(path)))
    if isinstance(data.get(section), dict):
        data = data[section]
    logger.debug("Loaded client options from %s", path)
    return ClientOptions.from_dict(data)


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_MS",
    "DEFAULT_RETRIES",
    "DEFAULT_RETRY_DELAY_MS",
    "LOG_LEVELS",
    "LOG_FORMATS",
    "LogHandler",
    "LoggingOptions",
    "ClientOptions",
    "TelemetryOptions",
    "load_options",
]
