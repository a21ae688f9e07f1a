"""Utility functions shared across the SDK."""

from revmax.utils.coercion import clamp, to_bool
from revmax.utils.json_serializers import json_serializer

__all__ = ["clamp", "to_bool", "json_serializer"]
