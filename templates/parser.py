"""Parsing helpers for command template definitions.

Template grammar (recursive descent over the raw string):

    sequence := (whitespace | segment | word)*
    segment  := "[" sequence "]"
    word     := (text | placeholder)+
    placeholder := "_" NAME "_"

`\\` escapes the next character and unescaped `*` marks bold text, which is
display-only and dropped from the parsed tree.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from utils import get_logger

from .errors import DefinitionError
from .types import (
    CommandTemplate,
    FlagGroup,
    FlagOption,
    Group,
    Node,
    OptionalSegment,
    Placeholder,
    Text,
    ValueGroup,
    ValueType,
    Word,
)

logger = get_logger(__name__)

_WORD_STOP = "[]"
_NAME_STOP = "_[]*\\"


class _Scanner:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def eof(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos]

    def advance(self) -> str:
        c = self.text[self.pos]
        self.pos += 1
        return c


def parse_nodes(text: str) -> tuple[Node, ...]:
    """Parse a template string into a tree of words and optional segments.

    Raises:
        DefinitionError: On unmatched brackets or unterminated placeholders.
    """
    scanner = _Scanner(text)
    return tuple(_parse_sequence(scanner, closing=False))


def _parse_sequence(scanner: _Scanner, closing: bool) -> list[Node]:
    nodes: list[Node] = []
    while not scanner.eof():
        c = scanner.peek()
        if c.isspace():
            scanner.advance()
        elif c == "[":
            scanner.advance()
            nodes.append(OptionalSegment(tuple(_parse_sequence(scanner, closing=True))))
        elif c == "]":
            if not closing:
                raise DefinitionError(f"Unexpected ']' at position {scanner.pos}")
            scanner.advance()
            return nodes
        else:
            word = _parse_word(scanner)
            if word.parts:
                nodes.append(word)

    if closing:
        raise DefinitionError("Unclosed '[' (missing ']')")
    return nodes


def _parse_word(scanner: _Scanner) -> Word:
    parts: list[Text | Placeholder] = []
    buf: list[str] = []

    def _flush() -> None:
        if buf:
            parts.append(Text("".join(buf)))
            buf.clear()

    while not scanner.eof():
        c = scanner.peek()
        if c.isspace() or c in _WORD_STOP:
            break
        scanner.advance()
        if c == "\\":
            buf.append(scanner.advance() if not scanner.eof() else "\\")
        elif c == "*":
            # Bold marker
            continue
        elif c == "_":
            _flush()
            parts.append(Placeholder(_parse_name(scanner)))
        else:
            buf.append(c)

    _flush()
    return Word(tuple(parts))


def _parse_name(scanner: _Scanner) -> str:
    name: list[str] = []
    while not scanner.eof():
        c = scanner.peek()
        if c == "_":
            scanner.advance()
            if not name:
                raise DefinitionError("Empty placeholder '__' (escape literal underscores as '\\_')")
            return "".join(name)
        if c.isspace() or c in _NAME_STOP:
            break
        name.append(scanner.advance())
    raise DefinitionError(f"Placeholder '_{''.join(name)}' is not closed")


def _collect_placeholders(
    nodes: tuple[Node, ...], optional: bool = False
) -> list[tuple[str, bool]]:
    found: list[tuple[str, bool]] = []
    for node in nodes:
        if isinstance(node, Word):
            found.extend((name, optional) for name in node.placeholders)
        else:
            inner = _collect_placeholders(node.children, optional=True)
            if not inner:
                raise DefinitionError("Optional segment has no placeholder")
            found.extend(inner)
    return found


def parse_flag(definition: object) -> FlagOption:
    """Parse one entry of a flag group's `flags` list."""
    if not isinstance(definition, Mapping):
        raise DefinitionError("Flag definition must be a mapping")

    template = definition.get("template")
    if not isinstance(template, str) or not template.strip():
        raise DefinitionError("Flag is missing a 'template'")
    description = definition.get("description", "")
    if not isinstance(description, str):
        raise DefinitionError(f"Flag '{template}' description must be a string")

    try:
        nodes = parse_nodes(template)
    except DefinitionError as e:
        raise DefinitionError(f"In flag '{template}': {e.message}") from e

    words: list[Word] = []
    for node in nodes:
        if isinstance(node, OptionalSegment):
            raise DefinitionError(f"Flag '{template}' cannot contain optional segments")
        words.append(node)

    names = [name for word in words for name in word.placeholders]
    if len(names) > 1:
        raise DefinitionError(
            f"Flag '{template}' has more than one embedded placeholder: {', '.join(names)}"
        )

    raw_expect = definition.get("expect")
    expect = ValueType.parse(raw_expect) if raw_expect is not None else None
    if expect is not None and not names:
        raise DefinitionError(f"Flag '{template}' expects a value but has no placeholder")
    if expect is None and names:
        raise DefinitionError(f"Flag '{template}' has a placeholder but no 'expect'")

    raw_suggest = definition.get("suggest")
    suggest: tuple[str, ...] = ()
    if raw_suggest is not None:
        if expect is None:
            raise DefinitionError(f"Flag '{template}' has 'suggest' without 'expect'")
        if not isinstance(raw_suggest, list) or not all(isinstance(s, str) for s in raw_suggest):
            raise DefinitionError(f"Flag '{template}' 'suggest' must be a list of strings")
        suggest = tuple(raw_suggest)

    multiple = definition.get("multiple", False)
    if not isinstance(multiple, bool):
        raise DefinitionError(f"Flag '{template}' 'multiple' must be true or false")

    return FlagOption(
        template=template,
        description=description,
        nodes=tuple(words),
        expect=expect,
        suggest=suggest,
        multiple=multiple,
    )


def parse_group(name: str, definition: object, optional: bool) -> Group:
    """Build a value group or a flag group from its definition."""
    if not isinstance(definition, Mapping):
        raise DefinitionError("Group definition must be a mapping", group=name)

    expect = definition.get("expect")
    flags = definition.get("flags")
    if expect is not None and flags is not None:
        raise DefinitionError("Group defines both 'expect' and 'flags'", group=name)
    if expect is None and flags is None:
        raise DefinitionError("Group should define 'expect' or 'flags'", group=name)

    try:
        if expect is not None:
            if definition.get("multiple"):
                raise DefinitionError("'multiple' only applies to flags, not value groups")
            return ValueGroup(name=name, expect=ValueType.parse(expect), optional=optional)

        if not isinstance(flags, list) or not flags:
            raise DefinitionError("'flags' must be a non-empty list")
        return FlagGroup(
            name=name,
            flags=tuple(parse_flag(flag) for flag in flags),
            optional=optional,
        )
    except DefinitionError as e:
        if e.group is None:
            e.group = name
        raise


def parse_template(
    template: str,
    description: str,
    groups: Mapping[str, object],
    source: str = "builtin",
) -> CommandTemplate:
    """Parse and validate a command template against its group definitions.

    Raises:
        DefinitionError: Naming the offending template (and group, when known).
    """
    try:
        if not template.strip():
            raise DefinitionError("Empty template")

        nodes = parse_nodes(template)
        placeholders = _collect_placeholders(nodes)

        seen: set[str] = set()
        for name, _ in placeholders:
            if name in seen:
                raise DefinitionError("Placeholder appears more than once", group=name)
            seen.add(name)

        for name, _ in placeholders:
            if name not in groups:
                raise DefinitionError("Missing group definition", group=name)
        for name in groups:
            if name not in seen:
                raise DefinitionError("Group is never referenced by the template", group=name)

        parsed = {
            name: parse_group(name, groups[name], optional) for name, optional in placeholders
        }
    except DefinitionError as e:
        e.template = template
        e.source = source
        raise

    logger.debug(f"Parsed template '{template}' with groups {list(parsed)}")
    return CommandTemplate(
        template=template,
        description=description,
        nodes=nodes,
        groups=MappingProxyType(parsed),
        source=source,
    )


def parse_entry(entry: object, source: str = "builtin") -> CommandTemplate:
    """Parse one decoded command entry (`template`, `description`, `groups`)."""
    if not isinstance(entry, Mapping):
        raise DefinitionError("Command entry must be a mapping", source=source)

    template = entry.get("template")
    if not isinstance(template, str):
        raise DefinitionError("Command entry is missing a 'template' string", source=source)

    description = entry.get("description")
    if not isinstance(description, str):
        raise DefinitionError(
            "Command entry is missing a 'description' string", template=template, source=source
        )

    groups = entry.get("groups") or {}
    if not isinstance(groups, Mapping):
        raise DefinitionError("'groups' must be a mapping", template=template, source=source)

    return parse_template(template, description, groups, source=source)


def strip_markers(text: str) -> str:
    """Drop `*` bold and `_` underline markers and escapes, keeping the visible text."""
    out: list[str] = []
    escaped = False
    for c in text:
        if escaped:
            out.append(c)
            escaped = False
        elif c == "\\":
            escaped = True
        elif c not in "*_":
            out.append(c)
    return "".join(out)
