"""Type coercion for option values that may arrive as strings (YAML, env)."""

from typing import Any

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


def to_bool(value: Any) -> bool:
    # bool('false') would be True, so strings are matched explicitly
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


__all__ = ["to_bool", "clamp"]
