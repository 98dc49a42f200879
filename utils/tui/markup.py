"""Inline emphasis used in template descriptions.

`*text*` is bold, `_text_` is underlined and `\\` escapes the next character.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.markup import escape


@dataclass(frozen=True, slots=True)
class Span:
    text: str
    bold: bool = False
    underline: bool = False


def split_markup(text: str) -> list[Span]:
    """Split marked-up text into styled spans (unclosed markers end at the string end)."""
    spans: list[Span] = []
    buf: list[str] = []
    bold = underline = False
    escaped = False

    def _flush() -> None:
        if buf:
            spans.append(Span("".join(buf), bold, underline))
            buf.clear()

    for c in text:
        if escaped:
            buf.append(c)
            escaped = False
        elif c == "\\":
            escaped = True
        elif c == "*":
            _flush()
            bold = not bold
        elif c == "_":
            _flush()
            underline = not underline
        else:
            buf.append(c)
    _flush()
    return spans


def to_rich_markup(text: str) -> str:
    """Convert to Rich console markup."""
    out = []
    for span in split_markup(text):
        chunk = escape(span.text)
        if span.bold:
            chunk = f"[bold]{chunk}[/bold]"
        if span.underline:
            chunk = f"[underline]{chunk}[/underline]"
        out.append(chunk)
    return "".join(out)


def to_fragments(text: str, style: str = "") -> list[tuple[str, str]]:
    """Convert to prompt_toolkit formatted-text fragments."""
    fragments = []
    for span in split_markup(text):
        parts = [style] if style else []
        if span.bold:
            parts.append("bold")
        if span.underline:
            parts.append("underline")
        fragments.append((" ".join(parts), span.text))
    return fragments
