"""Error taxonomy for command templates and selection sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import ValueType


class DefinitionError(Exception):
    """Raised when a template definition cannot be loaded.

    Fatal to the offending entry only; the registry keeps loading the rest.
    """

    def __init__(
        self,
        message: str,
        template: str | None = None,
        group: str | None = None,
        source: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.template = template
        self.group = group
        self.source = source

    def __str__(self) -> str:
        where = ""
        if self.template is not None:
            where = f"Template '{self.template}'"
        if self.group is not None:
            where = f"{where} group '{self.group}'".strip()
        text = f"{where}: {self.message}" if where else self.message
        if self.source:
            text = f"[{self.source}] {text}"
        return text


class InputValidationError(Exception):
    """Typed value does not match the declared value type."""

    def __init__(self, value_type: ValueType, value: str, hint: str):
        super().__init__(hint)
        self.value_type = value_type
        self.value = value
        self.hint = hint


class SelectionStateError(Exception):
    """An action is not allowed in the engine's current state."""

    pass
