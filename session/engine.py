"""Selection engine: a state machine that walks one template's groups.

The engine never blocks. Callers read `request()` to learn what to show next,
then feed the user's decision back through one of the action methods
(`submit`, `skip`, `choose_flag`, `deselect_flag`, `done`, `back`, `cancel`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from templates.errors import SelectionStateError
from templates.types import (
    CommandTemplate,
    FlagGroup,
    FlagOption,
    Group,
    Node,
    OptionalSegment,
    ValueGroup,
    ValueType,
    Word,
)
from utils import get_logger

from .render import render_command
from .selection import FlagChoice, GroupStatus, Selection
from .validation import validate_value

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AwaitingGroup:
    index: int


@dataclass(frozen=True, slots=True)
class AwaitingFlagArgument:
    group: str
    flag: int


@dataclass(frozen=True, slots=True)
class AwaitingMoreFlags:
    group: str


@dataclass(frozen=True, slots=True)
class Complete:
    pass


@dataclass(frozen=True, slots=True)
class Cancelled:
    pass


EngineState = Union[AwaitingGroup, AwaitingFlagArgument, AwaitingMoreFlags, Complete, Cancelled]


@dataclass(frozen=True, slots=True)
class ValuePrompt:
    """Request for a typed free-text value."""

    group: str
    value_type: ValueType
    preview: str
    can_skip: bool = False
    suggestions: tuple[str, ...] = ()
    flag: FlagOption | None = None

    @property
    def label(self) -> str:
        if self.flag is not None:
            return self.flag.argument_name or self.group
        return self.group


@dataclass(frozen=True, slots=True)
class FlagMenuItem:
    index: int
    flag: FlagOption
    count: int
    enabled: bool

    @property
    def selected(self) -> bool:
        return self.count > 0


@dataclass(frozen=True, slots=True)
class FlagMenu:
    """Request to pick a flag from a group (or to skip / finish the group)."""

    group: str
    items: tuple[FlagMenuItem, ...]
    preview: str
    can_skip: bool = False


class SelectionEngine:
    """Turn a sequence of user decisions into a concrete command string."""

    def __init__(
        self,
        template: CommandTemplate,
        on_preview: Callable[[str], None] | None = None,
    ) -> None:
        self.template = template
        self.selection = Selection()
        self.on_preview = on_preview
        self.state: EngineState = AwaitingGroup(0)
        self.preview = ""
        self._order = template.group_order
        self._segments = _enclosing_segments(template.nodes)
        self._final: str | None = None

        if not self._order:
            self._complete()
        else:
            self._refresh()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_finished(self) -> bool:
        return isinstance(self.state, (Complete, Cancelled))

    @property
    def final_command(self) -> str:
        if not isinstance(self.state, Complete) or self._final is None:
            raise SelectionStateError(f"No final command in state {self.state!r}")
        return self._final

    def request(self) -> ValuePrompt | FlagMenu | None:
        """Return the prompt or menu for the current state (None when finished)."""
        state = self.state
        if isinstance(state, AwaitingFlagArgument):
            group, flag, value_type = self._flag_argument(state)
            return ValuePrompt(
                group=group.name,
                value_type=value_type,
                preview=self.preview,
                suggestions=flag.suggest,
                flag=flag,
            )
        if isinstance(state, AwaitingMoreFlags):
            return self._flag_menu(self._flag_group(state.group), can_skip=False)
        if isinstance(state, AwaitingGroup):
            group = self._group(state.index)
            if isinstance(group, ValueGroup):
                return ValuePrompt(
                    group=group.name,
                    value_type=group.expect,
                    preview=self.preview,
                    can_skip=group.optional,
                )
            return self._flag_menu(group, can_skip=True)
        return None

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def submit(self, raw: str) -> None:
        """Record a typed value for a value group or a flag argument.

        Raises:
            InputValidationError: The value does not match the expected type;
                the engine state is unchanged.
            SelectionStateError: No value is expected in the current state.
        """
        state = self.state
        if isinstance(state, AwaitingFlagArgument):
            group, flag, value_type = self._flag_argument(state)
            value = validate_value(value_type, raw)
            self.selection.add_flag(group.name, FlagChoice(state.flag, flag, value))
            logger.debug(f"Flag '{flag.template}' = {value!r} added to {group.name}")
            self._after_flag_added(group)
            return

        if isinstance(state, AwaitingGroup):
            group = self._group(state.index)
            if isinstance(group, ValueGroup):
                value = validate_value(group.expect, raw)
                self.selection.set_value(group.name, value)
                logger.debug(f"Group {group.name} = {value!r}")
                self._advance(state.index)
                return

        raise SelectionStateError(f"Cannot submit a value in state {state!r}")

    def skip(self) -> None:
        """Skip the current optional value group or any flag group."""
        state = self.state
        if not isinstance(state, AwaitingGroup):
            raise SelectionStateError(f"Cannot skip in state {state!r}")
        group = self._group(state.index)
        if isinstance(group, ValueGroup) and not group.optional:
            raise SelectionStateError(f"Group '{group.name}' is required")
        self.selection.skip(group.name)
        logger.debug(f"Group {group.name} skipped")
        self._advance(state.index)

    def choose_flag(self, index: int) -> None:
        """Choose a flag from the current flag menu."""
        group = self._menu_group()
        if not 0 <= index < len(group.flags):
            raise SelectionStateError(f"Flag index {index} out of range for '{group.name}'")
        flag = group.flags[index]
        if not flag.multiple and self.selection.flag_count(group.name, index):
            raise SelectionStateError(f"Flag '{flag.template}' is already selected")

        if flag.takes_argument:
            self.state = AwaitingFlagArgument(group.name, index)
            self._refresh()
            return

        self.selection.add_flag(group.name, FlagChoice(index, flag))
        logger.debug(f"Flag '{flag.template}' added to {group.name}")
        self._after_flag_added(group)

    def deselect_flag(self, index: int) -> None:
        """Remove the most recent occurrence of a chosen flag."""
        group = self._menu_group()
        if not self.selection.remove_flag(group.name, index):
            raise SelectionStateError(f"Flag {index} is not selected in '{group.name}'")
        logger.debug(f"Flag {index} removed from {group.name}")
        if not self.selection.chosen_flags(group.name):
            self.state = AwaitingGroup(self._order.index(group.name))
        self._refresh()

    def done(self) -> None:
        """Finish the current flag group."""
        state = self.state
        if isinstance(state, AwaitingMoreFlags):
            self._advance(self._order.index(state.group))
            return
        if isinstance(state, AwaitingGroup):
            group = self._group(state.index)
            if isinstance(group, FlagGroup):
                # Finishing with nothing chosen leaves the group out
                self.selection.skip(group.name)
                self._advance(state.index)
                return
        raise SelectionStateError(f"Cannot finish a group in state {state!r}")

    def back(self) -> None:
        """Leave a flag-argument prompt without choosing the flag."""
        state = self.state
        if not isinstance(state, AwaitingFlagArgument):
            raise SelectionStateError(f"Cannot go back in state {state!r}")
        if self.selection.chosen_flags(state.group):
            self.state = AwaitingMoreFlags(state.group)
        else:
            self.state = AwaitingGroup(self._order.index(state.group))
        self._refresh()

    def cancel(self) -> None:
        """Abort the session and discard every choice."""
        if self.is_finished:
            raise SelectionStateError(f"Cannot cancel in state {self.state!r}")
        self.selection.clear()
        self.state = Cancelled()
        self.preview = ""
        logger.debug(f"Session for '{self.template.template}' cancelled")
        if self.on_preview:
            self.on_preview(self.preview)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _group(self, index: int) -> Group:
        return self.template.groups[self._order[index]]

    def _flag_group(self, name: str) -> FlagGroup:
        group = self.template.groups[name]
        if not isinstance(group, FlagGroup):
            raise SelectionStateError(f"Group '{name}' is not a flag group")
        return group

    def _flag_argument(self, state: AwaitingFlagArgument) -> tuple[FlagGroup, FlagOption, ValueType]:
        group = self._flag_group(state.group)
        flag = group.flags[state.flag]
        if flag.expect is None:
            raise SelectionStateError(f"Flag '{flag.template}' takes no argument")
        return group, flag, flag.expect

    def _menu_group(self) -> FlagGroup:
        state = self.state
        if isinstance(state, AwaitingMoreFlags):
            return self._flag_group(state.group)
        if isinstance(state, AwaitingGroup):
            group = self._group(state.index)
            if isinstance(group, FlagGroup):
                return group
        raise SelectionStateError(f"No flag menu in state {state!r}")

    def _flag_menu(self, group: FlagGroup, can_skip: bool) -> FlagMenu:
        items = []
        for index, flag in enumerate(group.flags):
            count = self.selection.flag_count(group.name, index)
            items.append(
                FlagMenuItem(
                    index=index,
                    flag=flag,
                    count=count,
                    enabled=flag.multiple or count == 0,
                )
            )
        return FlagMenu(group=group.name, items=tuple(items), preview=self.preview, can_skip=can_skip)

    def _after_flag_added(self, group: FlagGroup) -> None:
        exhausted = all(
            not flag.multiple and self.selection.flag_count(group.name, index)
            for index, flag in enumerate(group.flags)
        )
        if exhausted:
            self._advance(self._order.index(group.name))
        else:
            self.state = AwaitingMoreFlags(group.name)
            self._refresh()

    def _advance(self, index: int) -> None:
        index += 1
        # Groups inside a segment that is already left out are never asked for
        while index < len(self._order) and self._is_excluded(self._order[index]):
            name = self._order[index]
            self.selection.skip(name)
            logger.debug(f"Group {name} skipped with its enclosing segment")
            index += 1

        if index >= len(self._order):
            self._complete()
        else:
            self.state = AwaitingGroup(index)
            self._refresh()

    def _is_excluded(self, name: str) -> bool:
        return any(
            self.selection.status(other) is GroupStatus.ABSENT
            for segment in self._segments[name]
            for other in segment.direct_groups
        )

    def _complete(self) -> None:
        undecided = [
            name
            for name in self._order
            if not self.template.groups[name].optional
            and isinstance(self.template.groups[name], ValueGroup)
            and not self.selection.is_decided(name)
        ]
        if undecided:
            raise SelectionStateError(f"Required groups left undecided: {', '.join(undecided)}")

        self.state = Complete()
        self._final = render_command(self.template, self.selection, final=True)
        self.preview = self._final
        logger.debug(f"Session complete: {self._final!r}")
        if self.on_preview:
            self.on_preview(self.preview)

    def _refresh(self) -> None:
        self.preview = render_command(self.template, self.selection)
        if self.on_preview:
            self.on_preview(self.preview)


def _enclosing_segments(
    nodes: tuple[Node, ...], outer: tuple[OptionalSegment, ...] = ()
) -> dict[str, tuple[OptionalSegment, ...]]:
    """Map each group name to the optional segments around its placeholder, outermost first."""
    found: dict[str, tuple[OptionalSegment, ...]] = {}
    for node in nodes:
        if isinstance(node, Word):
            for name in node.placeholders:
                found[name] = outer
        else:
            found.update(_enclosing_segments(node.children, outer + (node,)))
    return found
