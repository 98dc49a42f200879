"""Theme system for TUI with dark and light mode support."""

from dataclasses import dataclass
from typing import Dict

from rich.style import Style
from rich.theme import Theme as RichTheme


@dataclass
class ThemeColors:
    """Color palette for a TUI theme."""

    # Primary colors
    primary: str  # Main accent color
    secondary: str  # Secondary accent
    success: str  # Success/positive
    warning: str  # Warning/caution
    error: str  # Error/negative

    # Background colors
    bg_primary: str  # Main background
    bg_secondary: str  # Panel/card background

    # Text colors
    text_primary: str  # Primary text
    text_secondary: str  # Secondary/muted text
    text_muted: str  # Very muted text

    # Semantic colors
    command: str  # Rendered command text
    placeholder: str  # Undecided <NAME> placeholders in the preview
    flag_accent: str  # Flag templates in menus


# Dark theme - Professional, high contrast
DARK_THEME = ThemeColors(
    primary="#00D9FF",  # Bright cyan
    secondary="#A78BFA",  # Soft purple
    success="#10B981",  # Emerald green
    warning="#F59E0B",  # Amber
    error="#EF4444",  # Red
    bg_primary="#0D1117",  # Deep blue-black
    bg_secondary="#161B22",  # Slightly lighter
    text_primary="#F0F6FC",  # Bright white
    text_secondary="#8B949E",  # Gray
    text_muted="#484F58",  # Dark gray
    command="#F0F6FC",  # White
    placeholder="#A371F7",  # Purple
    flag_accent="#F78166",  # Orange
)

# Light theme - Clean, professional
LIGHT_THEME = ThemeColors(
    primary="#0969DA",  # Blue
    secondary="#8250DF",  # Purple
    success="#1A7F37",  # Green
    warning="#9A6700",  # Amber
    error="#CF222E",  # Red
    bg_primary="#FFFFFF",  # White
    bg_secondary="#F6F8FA",  # Light gray
    text_primary="#1F2328",  # Near black
    text_secondary="#57606A",  # Medium gray
    text_muted="#8C959F",  # Light gray
    command="#1F2328",  # Dark
    placeholder="#8250DF",  # Purple
    flag_accent="#BC4C00",  # Orange
)


class Theme:
    """TUI Theme manager."""

    _current_theme: str = "dark"
    _themes: Dict[str, ThemeColors] = {
        "dark": DARK_THEME,
        "light": LIGHT_THEME,
    }

    @classmethod
    def get_colors(cls) -> ThemeColors:
        """Get the current theme colors."""
        return cls._themes[cls._current_theme]

    @classmethod
    def set_theme(cls, name: str) -> None:
        """Set the current theme.

        Args:
            name: Theme name ('dark' or 'light')

        Raises:
            ValueError: If theme name is invalid
        """
        if name not in cls._themes:
            raise ValueError(f"Unknown theme: {name}. Available: {list(cls._themes.keys())}")
        cls._current_theme = name

    @classmethod
    def get_theme_name(cls) -> str:
        """Get the current theme name."""
        return cls._current_theme

    @classmethod
    def get_rich_theme(cls) -> RichTheme:
        """Get a Rich Theme object for the current theme."""
        colors = cls.get_colors()
        return RichTheme(
            {
                "primary": Style(color=colors.primary),
                "secondary": Style(color=colors.secondary),
                "success": Style(color=colors.success),
                "warning": Style(color=colors.warning),
                "error": Style(color=colors.error),
                "text": Style(color=colors.text_primary),
                "text.secondary": Style(color=colors.text_secondary),
                "text.muted": Style(color=colors.text_muted),
                "command": Style(color=colors.command, bold=True),
                "placeholder": Style(color=colors.placeholder, italic=True),
                "flag": Style(color=colors.flag_accent),
            }
        )

    @classmethod
    def get_prompt_toolkit_style(cls) -> Dict[str, str]:
        """Get style dict for prompt_toolkit."""
        colors = cls.get_colors()
        return {
            "prompt": f"{colors.primary} bold",
            "": colors.text_primary,  # Default text
            "title": f"{colors.primary} bold",
            "hint": colors.text_muted,
            "item": colors.text_primary,
            "item.disabled": colors.text_muted,
            "description": colors.text_secondary,
            "flag": colors.flag_accent,
            "selected": f"bg:{colors.primary} {colors.bg_primary}",
            "preview": f"{colors.command} bold",
            "preview.label": colors.text_muted,
            "error": colors.error,
            "bottom-toolbar": f"bg:{colors.bg_secondary} {colors.text_primary}",
            "completion-menu": f"bg:{colors.bg_secondary} {colors.text_primary}",
            "completion-menu.completion": f"bg:{colors.bg_secondary} {colors.text_primary}",
            "completion-menu.completion.current": f"bg:{colors.primary} {colors.bg_primary}",
        }


def set_theme(name: str) -> None:
    """Set the current theme (convenience function)."""
    Theme.set_theme(name)
