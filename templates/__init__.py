"""Command templates: model, parser and registry."""

from .errors import DefinitionError, InputValidationError, SelectionStateError
from .loader import BUILTIN_COMMANDS_FILE
from .parser import parse_entry, parse_template, strip_markers
from .registry import TemplateRegistry, normalize_template, search_templates
from .types import (
    CommandTemplate,
    FlagGroup,
    FlagOption,
    OptionalSegment,
    Placeholder,
    Text,
    ValueGroup,
    ValueType,
    Word,
)

__all__ = [
    "BUILTIN_COMMANDS_FILE",
    "CommandTemplate",
    "DefinitionError",
    "FlagGroup",
    "FlagOption",
    "InputValidationError",
    "OptionalSegment",
    "Placeholder",
    "SelectionStateError",
    "TemplateRegistry",
    "Text",
    "ValueGroup",
    "ValueType",
    "Word",
    "normalize_template",
    "parse_entry",
    "parse_template",
    "search_templates",
    "strip_markers",
]
