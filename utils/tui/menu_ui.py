"""TUI pickers and prompts for building a command."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.application import Application
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.completion import Completer, PathCompleter, WordCompleter
from prompt_toolkit.document import Document
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import BufferControl, FormattedTextControl
from prompt_toolkit.layout.processors import BeforeInput
from prompt_toolkit.styles import Style

from templates import ValueType, search_templates
from utils.tui.markup import to_fragments
from utils.tui.theme import Theme

if TYPE_CHECKING:
    from session import FlagMenu, ValuePrompt
    from templates import CommandTemplate


class MenuAction:
    CHOOSE = "choose"
    DESELECT = "deselect"
    SKIP = "skip"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class MenuChoice:
    action: str
    index: int | None = None


@dataclass(frozen=True, slots=True)
class MenuRow:
    choice: MenuChoice
    label: str  # may carry *bold* / _underline_ markup
    description: str = ""
    marker: str = ""
    enabled: bool = True
    selected: bool = False


def build_menu_rows(menu: FlagMenu) -> list[MenuRow]:
    rows: list[MenuRow] = []
    for item in menu.items:
        if item.flag.multiple:
            marker = f"×{item.count}" if item.count else ""
        else:
            marker = "✓" if item.selected else ""
        rows.append(
            MenuRow(
                choice=MenuChoice(MenuAction.CHOOSE, item.index),
                label=item.flag.template,
                description=item.flag.description,
                marker=marker,
                enabled=item.enabled,
                selected=item.selected,
            )
        )

    if menu.can_skip:
        rows.append(
            MenuRow(
                choice=MenuChoice(MenuAction.SKIP),
                label="Skip",
                description=f"Leave {menu.group} out",
            )
        )

    if not menu.can_skip or any(item.selected for item in menu.items):
        rows.append(
            MenuRow(
                choice=MenuChoice(MenuAction.DONE),
                label="Done",
                description=f"Continue with the chosen {menu.group}",
            )
        )
    return rows


def value_prompt_hint(prompt: ValuePrompt) -> str:
    """One-line help shown under a value prompt."""
    parts = [f"Expects {prompt.value_type.value}"]
    if prompt.suggestions:
        parts.append("Tab for suggestions")
    if prompt.can_skip:
        parts.append("leave empty to skip")
    elif prompt.flag is not None:
        parts.append("leave empty to go back")
    parts.append("Ctrl-C to cancel")
    return ", ".join(parts)


def _style() -> Style:
    return Style.from_dict(Theme.get_prompt_toolkit_style())


async def pick_template(
    templates: Sequence[CommandTemplate],
    title: str = "Choose a command",
    query: str = "",
) -> CommandTemplate | None:
    """Pick a template from a list filtered by typing (keyboard only)."""
    if not templates:
        return None

    buffer = Buffer(document=Document(query, len(query)), multiline=False)
    selected_index = 0

    def _matches() -> list[CommandTemplate]:
        return search_templates(templates, buffer.text)

    def _reset_selection(_buffer: Buffer) -> None:
        nonlocal selected_index
        selected_index = 0

    buffer.on_text_changed += _reset_selection

    kb = KeyBindings()

    @kb.add("up")
    def _up(event) -> None:
        nonlocal selected_index
        count = len(_matches())
        if count:
            selected_index = (selected_index - 1) % count

    @kb.add("down")
    def _down(event) -> None:
        nonlocal selected_index
        count = len(_matches())
        if count:
            selected_index = (selected_index + 1) % count

    @kb.add("enter")
    def _enter(event) -> None:
        matches = _matches()
        if matches:
            event.app.exit(result=matches[min(selected_index, len(matches) - 1)])

    @kb.add("escape", eager=True)
    @kb.add("c-c")
    def _cancel(event) -> None:
        event.app.exit(result=None)

    def _render() -> list[tuple[str, str]]:
        lines: list[tuple[str, str]] = []
        lines.append(("class:title", f"{title}\n"))
        lines.append(("class:hint", "Type to filter, ↑/↓ and Enter to select, Esc to cancel.\n\n"))

        matches = _matches()
        if not matches:
            lines.append(("class:hint", "  (no matching commands)\n"))
        for idx, template in enumerate(matches):
            is_selected = idx == min(selected_index, len(matches) - 1)
            style = "class:selected" if is_selected else "class:item"
            lines.append((style, "› " if is_selected else "  "))
            lines.extend(to_fragments(template.description, style))
            lines.append(("class:description", f"  {template.template}\n"))
        return lines

    list_window = Window(
        content=FormattedTextControl(_render), dont_extend_height=True, always_hide_cursor=True
    )
    input_window = Window(
        content=BufferControl(
            buffer=buffer, input_processors=[BeforeInput("Filter: ", style="class:prompt")]
        ),
        height=1,
    )
    layout = Layout(HSplit([list_window, input_window]), focused_element=input_window)

    app = Application(
        layout=layout,
        key_bindings=kb,
        style=_style(),
        full_screen=False,
        mouse_support=False,
    )
    return await app.run_async()


async def pick_menu_action(menu: FlagMenu, title: str) -> MenuChoice | None:
    """Show a flag group's menu with the live preview; None means cancel."""
    rows = build_menu_rows(menu)
    selected_index = next((i for i, row in enumerate(rows) if row.enabled), 0)

    kb = KeyBindings()

    @kb.add("up")
    @kb.add("k")
    def _up(event) -> None:
        nonlocal selected_index
        selected_index = (selected_index - 1) % len(rows)

    @kb.add("down")
    @kb.add("j")
    def _down(event) -> None:
        nonlocal selected_index
        selected_index = (selected_index + 1) % len(rows)

    @kb.add("enter")
    def _enter(event) -> None:
        row = rows[selected_index]
        if row.enabled:
            event.app.exit(result=row.choice)

    @kb.add("backspace")
    @kb.add("delete")
    def _deselect(event) -> None:
        row = rows[selected_index]
        if row.selected and row.choice.action == MenuAction.CHOOSE:
            event.app.exit(result=MenuChoice(MenuAction.DESELECT, row.choice.index))

    @kb.add("escape", eager=True)
    @kb.add("c-c")
    def _cancel(event) -> None:
        event.app.exit(result=None)

    def _render() -> list[tuple[str, str]]:
        lines: list[tuple[str, str]] = []
        lines.append(("class:title", f"{title}\n"))
        lines.append(
            (
                "class:hint",
                "↑/↓ and Enter to choose, Backspace to remove a chosen flag, Esc to cancel.\n\n",
            )
        )

        for idx, row in enumerate(rows):
            is_selected = idx == selected_index
            if is_selected:
                style = "class:selected"
            elif not row.enabled:
                style = "class:item.disabled"
            else:
                style = "class:item"
            lines.append((style, "› " if is_selected else "  "))
            lines.append((style, f"{row.marker:>3} "))
            lines.extend(to_fragments(row.label, f"{style} class:flag" if row.enabled else style))
            if row.description:
                lines.append((style if is_selected else "class:description", "  "))
                lines.extend(
                    to_fragments(row.description, style if is_selected else "class:description")
                )
            lines.append(("", "\n"))

        lines.append(("class:preview.label", "\n$ "))
        lines.append(("class:preview", f"{menu.preview}\n"))
        return lines

    control = FormattedTextControl(_render, focusable=True)
    window = Window(content=control, dont_extend_height=True, always_hide_cursor=True)
    layout = Layout(HSplit([window]))

    app = Application(
        layout=layout,
        key_bindings=kb,
        style=_style(),
        full_screen=False,
        mouse_support=False,
    )
    return await app.run_async()


async def prompt_value(prompt: ValuePrompt, error: str | None = None) -> str | None:
    """Ask for a typed value; None means the user cancelled (Ctrl-C / Ctrl-D)."""
    completer: Completer | None = None
    if prompt.suggestions:
        completer = WordCompleter(list(prompt.suggestions), ignore_case=True, sentence=True)
    elif prompt.value_type is ValueType.PATH:
        completer = PathCompleter(expanduser=True)

    message = [
        ("class:prompt", prompt.label),
        ("class:hint", f" ({prompt.value_type.value})"),
        ("class:prompt", ": "),
    ]

    def _toolbar() -> list[tuple[str, str]]:
        fragments = [("class:preview.label", " $ "), ("class:preview", prompt.preview)]
        if error:
            fragments.append(("class:error", f"  {error}"))
        else:
            fragments.append(("class:hint", f"  {value_prompt_hint(prompt)}"))
        return fragments

    session: PromptSession[str] = PromptSession(style=_style())
    try:
        return await session.prompt_async(
            message,
            completer=completer,
            complete_while_typing=bool(prompt.suggestions),
            bottom_toolbar=_toolbar,
        )
    except (KeyboardInterrupt, EOFError):
        return None
