"""Interactive selection over one command template."""

from .engine import (
    AwaitingFlagArgument,
    AwaitingGroup,
    AwaitingMoreFlags,
    Cancelled,
    Complete,
    FlagMenu,
    FlagMenuItem,
    SelectionEngine,
    ValuePrompt,
)
from .render import render_command, render_flag
from .selection import FlagChoice, GroupStatus, Selection
from .validation import validate_value

__all__ = [
    "AwaitingFlagArgument",
    "AwaitingGroup",
    "AwaitingMoreFlags",
    "Cancelled",
    "Complete",
    "FlagChoice",
    "FlagMenu",
    "FlagMenuItem",
    "GroupStatus",
    "Selection",
    "SelectionEngine",
    "ValuePrompt",
    "render_command",
    "render_flag",
    "validate_value",
]
