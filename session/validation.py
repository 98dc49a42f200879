"""Validation of typed free-text input."""

from __future__ import annotations

import re

from templates.errors import InputValidationError
from templates.types import ValueType

_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

HINTS = {
    ValueType.STRING: "Enter any text",
    ValueType.NUMBER: "Enter a number (e.g. 42)",
    ValueType.PATH: "Enter a file or directory path",
}


def validate_value(value_type: ValueType, raw: str) -> str:
    """Check raw input against a value type and return the value to record.

    Raises:
        InputValidationError: If the input does not match `value_type`.
    """
    if not raw.strip():
        raise InputValidationError(value_type, raw, f"A value is required. {HINTS[value_type]}")

    if value_type is ValueType.NUMBER:
        value = raw.strip()
        if not _NUMBER_RE.match(value):
            raise InputValidationError(value_type, raw, f"'{raw}' is not a number")
        return value
    if value_type is ValueType.PATH:
        # Existence is left to the caller
        return raw
    if value_type is ValueType.STRING:
        return raw
    raise AssertionError(f"Unhandled value type: {value_type}")
