"""Data models for command templates."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Union

from .errors import DefinitionError


class ValueType(Enum):
    """Kind of free-text value a group or flag argument accepts."""

    STRING = "string"
    NUMBER = "number"
    PATH = "path"

    @classmethod
    def parse(cls, name: object) -> ValueType:
        for value_type in cls:
            if value_type.value == name:
                return value_type
        expected = ", ".join(v.value for v in cls)
        raise DefinitionError(f"Unknown value type '{name}' (expected one of: {expected})")


@dataclass(frozen=True, slots=True)
class Text:
    """Literal text inside a word."""

    value: str


@dataclass(frozen=True, slots=True)
class Placeholder:
    """Reference to a group (or to a flag's own argument slot)."""

    name: str


@dataclass(frozen=True, slots=True)
class Word:
    """Whitespace-free run of literal text and placeholders."""

    parts: tuple[Text | Placeholder, ...]

    @property
    def placeholders(self) -> list[str]:
        return [p.name for p in self.parts if isinstance(p, Placeholder)]


@dataclass(frozen=True, slots=True)
class OptionalSegment:
    """Tokens enclosed in `[ ]`, rendered only when their groups were taken."""

    children: tuple[Node, ...]

    @property
    def direct_groups(self) -> list[str]:
        names: list[str] = []
        for child in self.children:
            if isinstance(child, Word):
                names.extend(child.placeholders)
        return names


Node = Union[Word, OptionalSegment]


@dataclass(frozen=True, slots=True)
class FlagOption:
    """One selectable flag within a flag group."""

    template: str  # raw, bold markers included (e.g. "*-A* _NUM_")
    description: str
    nodes: tuple[Word, ...]
    expect: ValueType | None = None
    suggest: tuple[str, ...] = ()
    multiple: bool = False

    @property
    def takes_argument(self) -> bool:
        return self.expect is not None

    @property
    def argument_name(self) -> str | None:
        for word in self.nodes:
            names = word.placeholders
            if names:
                return names[0]
        return None


@dataclass(frozen=True, slots=True)
class ValueGroup:
    name: str
    expect: ValueType
    optional: bool = False


@dataclass(frozen=True, slots=True)
class FlagGroup:
    name: str
    flags: tuple[FlagOption, ...]
    optional: bool = False


Group = Union[ValueGroup, FlagGroup]


@dataclass(frozen=True, eq=False)
class CommandTemplate:
    """Immutable, parsed description of one command's shape."""

    template: str
    description: str
    nodes: tuple[Node, ...]
    groups: Mapping[str, Group] = field(default_factory=lambda: MappingProxyType({}))
    source: str = "builtin"

    @property
    def group_order(self) -> list[str]:
        """Group names in the order their placeholders appear."""
        order: list[str] = []

        def _walk(nodes: tuple[Node, ...]) -> None:
            for node in nodes:
                if isinstance(node, Word):
                    order.extend(node.placeholders)
                else:
                    _walk(node.children)

        _walk(self.nodes)
        return order
