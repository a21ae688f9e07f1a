"""Shared JSON serialization utilities for type-safe JSON encoding."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def _serialize_known_type(obj: Any) -> tuple[bool, Any]:
    """Try to serialize by known type. Returns (handled, result)."""
    if isinstance(obj, (datetime, date)):
        return True, obj.isoformat()
    if isinstance(obj, Decimal):
        return True, float(obj)
    if isinstance(obj, Enum):
        return True, obj.value
    return False, None


def json_serializer(obj: Any) -> Any:
    """
    JSON ``default=`` hook for log records and request bodies.

    - datetime/date -> ISO 8601 string
    - Decimal -> float
    - Enums -> value
    - Objects with ``to_dict`` (RevMaxError, metrics) -> dict
    - Everything else -> string (fallback)
    """
    handled, result = _serialize_known_type(obj)
    if handled:
        return result
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return str(obj)


__all__ = ["json_serializer"]
