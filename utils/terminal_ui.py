"""Terminal UI utilities using Rich library for output.

All UI goes to stderr so that stdout carries nothing but the final command.
"""

from typing import TYPE_CHECKING, Iterable, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from config import Config
from utils.tui.markup import to_rich_markup
from utils.tui.theme import Theme, set_theme

if TYPE_CHECKING:
    from templates import CommandTemplate, DefinitionError

# Initialize theme from config
if Config.TUI_THEME in ("dark", "light"):
    set_theme(Config.TUI_THEME)

# Global console instance with theme support
console = Console(theme=Theme.get_rich_theme(), stderr=True)


def _get_colors():
    """Get current theme colors."""
    return Theme.get_colors()


def apply_theme(name: str) -> None:
    """Switch theme and rebuild the console with it.

    Raises:
        ValueError: If theme name is invalid
    """
    global console
    set_theme(name)
    console = Console(theme=Theme.get_rich_theme(), stderr=True)


def print_header(title: str, subtitle: Optional[str] = None) -> None:
    """Print a formatted header panel.

    Args:
        title: Main title text
        subtitle: Optional subtitle text
    """
    colors = _get_colors()
    content = f"[bold {colors.primary}]{title}[/bold {colors.primary}]"
    if subtitle:
        content += f"\n[{colors.text_secondary}]{subtitle}[/{colors.text_secondary}]"

    console.print(Panel(content, border_style=colors.primary, box=box.DOUBLE, padding=(0, 2)))


def print_templates(templates: Iterable["CommandTemplate"]) -> None:
    """Print available command templates in a table.

    Args:
        templates: Templates in registry order
    """
    colors = _get_colors()
    table = Table(
        show_header=True,
        header_style=f"bold {colors.primary}",
        box=box.ROUNDED,
        border_style=colors.text_muted,
        padding=(0, 1),
    )
    table.add_column("Template", style=colors.command, no_wrap=True)
    table.add_column("Description", style=colors.text_secondary)
    table.add_column("Source", style=colors.text_muted)

    for template in templates:
        table.add_row(
            Text(template.template),
            to_rich_markup(template.description),
            template.source,
        )

    console.print(table)


def print_definition_errors(errors: Iterable["DefinitionError"]) -> None:
    """Report rejected template definitions, one warning per entry.

    Args:
        errors: Errors collected while loading the registry
    """
    for error in errors:
        print_warning(f"Skipped definition: {error}")


def print_command(command: str, title: str = "Command") -> None:
    """Print a rendered command in a panel.

    Args:
        command: Command string
        title: Panel title
    """
    colors = _get_colors()
    console.print(
        Panel(
            Text(command, style=f"bold {colors.command}"),
            title=f"[bold {colors.success}]{title}[/bold {colors.success}]",
            title_align="left",
            border_style=colors.success,
            box=box.ROUNDED,
            padding=(0, 1),
        )
    )


def print_error(message: str, title: str = "Error") -> None:
    """Print an error message.

    Args:
        message: Error message
        title: Error title (default: "Error")
    """
    colors = _get_colors()
    console.print(
        Panel(
            Text(message, style=colors.error),
            title=f"[bold {colors.error}]{title}[/bold {colors.error}]",
            border_style=colors.error,
            box=box.ROUNDED,
        )
    )


def print_warning(message: str) -> None:
    """Print a warning message.

    Args:
        message: Warning message
    """
    colors = _get_colors()
    console.print(Text(message, style=colors.warning))


def print_info(message: str) -> None:
    colors = _get_colors()
    console.print(Text(f"ℹ {message}", style=colors.primary))


def print_log_location(log_file: str) -> None:
    """Print log file location.

    Args:
        log_file: Path to log file
    """
    colors = _get_colors()
    console.print(f"[{colors.text_muted}]Detailed logs: {log_file}[/{colors.text_muted}]")
