"""Render a command template and a (possibly partial) selection to a string."""

from __future__ import annotations

from templates.types import (
    CommandTemplate,
    FlagGroup,
    Group,
    Node,
    OptionalSegment,
    Placeholder,
    ValueGroup,
    Word,
)

from .selection import FlagChoice, GroupStatus, Selection

PLACEHOLDER_FORMAT = "<{name}>"


def render_command(template: CommandTemplate, selection: Selection, final: bool = False) -> str:
    """Render the command line for the current selection.

    Pure function of its arguments. With `final=False` (live preview) undecided
    groups show as `<NAME>` and optional segments that are still pending are
    wrapped in brackets. With `final=True` anything undecided is left out.

    Args:
        template: Parsed command template
        selection: Current choices
        final: Whether to produce the final command string

    Returns:
        Words joined by single spaces
    """
    return " ".join(_render_nodes(template.nodes, template, selection, final))


def render_flag(choice: FlagChoice) -> str:
    """Render a chosen flag with its argument value (if any)."""
    words = []
    for word in choice.flag.nodes:
        text = "".join(
            (choice.value or "") if isinstance(part, Placeholder) else part.value
            for part in word.parts
        )
        if text:
            words.append(text)
    return " ".join(words)


def _render_nodes(
    nodes: tuple[Node, ...],
    template: CommandTemplate,
    selection: Selection,
    final: bool,
) -> list[str]:
    words: list[str] = []
    for node in nodes:
        if isinstance(node, Word):
            text = _render_word(node, template, selection, final)
            if text:
                words.append(text)
        else:
            words.extend(_render_segment(node, template, selection, final)[0])
    return words


def _render_word(word: Word, template: CommandTemplate, selection: Selection, final: bool) -> str:
    pieces = []
    for part in word.parts:
        if isinstance(part, Placeholder):
            pieces.append(_render_group(template.groups[part.name], selection, final))
        else:
            pieces.append(part.value)
    return "".join(pieces)


def _render_group(group: Group, selection: Selection, final: bool) -> str:
    status = selection.status(group.name)
    if status is GroupStatus.ABSENT:
        return ""
    if status is GroupStatus.UNDECIDED:
        return "" if final else PLACEHOLDER_FORMAT.format(name=group.name)

    if isinstance(group, ValueGroup):
        return selection.values[group.name]
    if isinstance(group, FlagGroup):
        return " ".join(render_flag(c) for c in selection.chosen_flags(group.name))
    raise AssertionError(f"Unhandled group kind: {group!r}")


def _render_segment(
    segment: OptionalSegment,
    template: CommandTemplate,
    selection: Selection,
    final: bool,
) -> tuple[list[str], bool]:
    """Return the segment's words and whether it is still pending."""
    statuses = [selection.status(name) for name in segment.direct_groups]
    if GroupStatus.ABSENT in statuses:
        return [], False
    pending = GroupStatus.UNDECIDED in statuses
    if final and pending:
        return [], False

    words: list[str] = []
    nested_included = False
    for child in segment.children:
        if isinstance(child, Word):
            text = _render_word(child, template, selection, final)
            if text:
                words.append(text)
        else:
            inner, inner_pending = _render_segment(child, template, selection, final)
            if inner:
                nested_included = True
                pending = pending or inner_pending
                words.extend(inner)

    # Literal-only framing around nested segments
    if not statuses and not nested_included:
        return [], False

    if pending and words:
        words[0] = f"[{words[0]}"
        words[-1] = f"{words[-1]}]"
    return words, pending
