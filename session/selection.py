"""Per-session record of the user's choices."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from templates.types import FlagOption


class GroupStatus(Enum):
    """Decision state of one group."""

    UNDECIDED = "undecided"
    ABSENT = "absent"  # skipped, or finished without choosing a flag
    PRESENT = "present"


@dataclass(frozen=True, slots=True)
class FlagChoice:
    """One chosen flag, identified by its position in the group's `flags`."""

    index: int
    flag: FlagOption
    value: str | None = None


class Selection:
    """Mutable choices for one template, owned by a single session."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.flags: dict[str, list[FlagChoice]] = {}
        self.skipped: set[str] = set()

    def set_value(self, group: str, value: str) -> None:
        self.skipped.discard(group)
        self.values[group] = value

    def skip(self, group: str) -> None:
        self.values.pop(group, None)
        self.flags.pop(group, None)
        self.skipped.add(group)

    def add_flag(self, group: str, choice: FlagChoice) -> None:
        self.skipped.discard(group)
        self.flags.setdefault(group, []).append(choice)

    def remove_flag(self, group: str, index: int) -> bool:
        """Remove the most recent occurrence of a flag; returns False if it was not chosen."""
        choices = self.flags.get(group, [])
        for pos in range(len(choices) - 1, -1, -1):
            if choices[pos].index == index:
                del choices[pos]
                if not choices:
                    del self.flags[group]
                return True
        return False

    def flag_count(self, group: str, index: int) -> int:
        return sum(1 for c in self.flags.get(group, []) if c.index == index)

    def chosen_flags(self, group: str) -> list[FlagChoice]:
        return list(self.flags.get(group, []))

    def status(self, group: str) -> GroupStatus:
        if group in self.skipped:
            return GroupStatus.ABSENT
        if group in self.values or self.flags.get(group):
            return GroupStatus.PRESENT
        return GroupStatus.UNDECIDED

    def is_decided(self, group: str) -> bool:
        return self.status(group) is not GroupStatus.UNDECIDED

    def clear(self) -> None:
        self.values.clear()
        self.flags.clear()
        self.skipped.clear()
