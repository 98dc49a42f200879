"""TUI (Terminal User Interface) package for cmdrecall.

This package provides:
- Theme support (dark/light modes)
- Inline emphasis for template descriptions
- prompt_toolkit menus and prompts (see utils.tui.menu_ui)
"""

from utils.tui.markup import split_markup, to_fragments, to_rich_markup
from utils.tui.theme import Theme, set_theme

__all__ = [
    # Theme
    "Theme",
    "set_theme",
    # Markup
    "split_markup",
    "to_fragments",
    "to_rich_markup",
]
