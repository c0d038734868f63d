"""Engine error types."""

from __future__ import annotations


class MalformedInputError(Exception):
    """The findings argument is neither a mapping nor JSON text for one."""

    def __init__(self, message: str, received_type: str) -> None:
        super().__init__(message)
        self.message = message
        self.received_type = received_type


def json_type_name(value: object) -> str:
    """Name of a value's JSON type, as a caller of the engine would see it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
