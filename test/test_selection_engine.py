import pytest

from session import (
    AwaitingFlagArgument,
    AwaitingGroup,
    AwaitingMoreFlags,
    Cancelled,
    Complete,
    FlagMenu,
    GroupStatus,
    SelectionEngine,
    ValuePrompt,
)
from templates import InputValidationError, SelectionStateError, ValueType, parse_template


def test_grep_with_simple_flag(grep_template) -> None:
    engine = SelectionEngine(grep_template)

    engine.choose_flag(0)  # -i
    engine.done()
    engine.submit("foo")
    engine.submit("./src")

    assert isinstance(engine.state, Complete)
    assert engine.final_command == "grep -i foo ./src"


def test_grep_with_value_flags(grep_template) -> None:
    engine = SelectionEngine(grep_template)

    engine.choose_flag(2)  # -A
    assert isinstance(engine.state, AwaitingFlagArgument)
    engine.submit("3")
    engine.choose_flag(3)  # -B
    engine.submit("2")
    engine.done()
    engine.submit("TODO")
    engine.submit(".")

    assert engine.final_command == "grep -A 3 -B 2 TODO ."


def test_curl_with_repeated_header(curl_template) -> None:
    engine = SelectionEngine(curl_template)

    engine.choose_flag(0)
    engine.submit("Accept: json")
    engine.choose_flag(0)
    engine.submit("X-Id: 1")
    engine.done()
    engine.submit("http://x")

    assert engine.final_command == "curl -H Accept: json -H X-Id: 1 http://x"


def test_find_with_expression_left_out(find_template) -> None:
    engine = SelectionEngine(find_template)

    engine.submit("/tmp")
    menu = engine.request()
    assert isinstance(menu, FlagMenu)
    assert menu.can_skip is True
    engine.skip()

    assert engine.final_command == "find /tmp"


def test_preview_follows_every_transition(grep_template) -> None:
    previews: list[str] = []
    engine = SelectionEngine(grep_template, on_preview=previews.append)

    engine.choose_flag(1)
    engine.done()
    engine.submit("x")
    engine.submit("y")

    assert previews == [
        "grep [<OPTIONS>] <PATTERN> <PATH>",
        "grep -v <PATTERN> <PATH>",
        "grep -v <PATTERN> <PATH>",
        "grep -v x <PATH>",
        "grep -v x y",
    ]
    assert engine.preview == engine.final_command


def test_optional_flag_group_can_be_skipped(grep_template) -> None:
    engine = SelectionEngine(grep_template)
    menu = engine.request()
    assert isinstance(menu, FlagMenu)
    assert menu.can_skip is True

    engine.skip()
    assert engine.preview == "grep <PATTERN> <PATH>"


def test_required_value_group_cannot_be_skipped(find_template) -> None:
    engine = SelectionEngine(find_template)

    with pytest.raises(SelectionStateError):
        engine.skip()
    assert engine.state == AwaitingGroup(0)


def test_unbracketed_flag_group_can_be_finished_empty(find_template) -> None:
    engine = SelectionEngine(find_template)
    engine.submit("/tmp")

    engine.done()

    assert engine.final_command == "find /tmp"
    assert engine.selection.skipped == {"EXPRESSION"}


def test_invalid_number_keeps_state(grep_template) -> None:
    engine = SelectionEngine(grep_template)
    engine.choose_flag(2)
    state = engine.state

    with pytest.raises(InputValidationError) as exc_info:
        engine.submit("abc")

    assert exc_info.value.value_type is ValueType.NUMBER
    assert engine.state == state
    assert engine.selection.chosen_flags("OPTIONS") == []

    engine.submit("42")
    assert engine.selection.chosen_flags("OPTIONS")[0].value == "42"


def test_single_use_flag_cannot_be_chosen_twice(grep_template) -> None:
    engine = SelectionEngine(grep_template)
    engine.choose_flag(0)

    menu = engine.request()
    assert isinstance(menu, FlagMenu)
    assert menu.items[0].selected
    assert not menu.items[0].enabled
    assert menu.items[1].enabled

    with pytest.raises(SelectionStateError):
        engine.choose_flag(0)


def test_multiple_flag_stays_enabled(curl_template) -> None:
    engine = SelectionEngine(curl_template)
    engine.choose_flag(0)
    engine.submit("A: 1")

    menu = engine.request()
    assert menu.items[0].enabled
    assert menu.items[0].count == 1


def test_deselect_removes_most_recent_occurrence(curl_template) -> None:
    engine = SelectionEngine(curl_template)
    engine.choose_flag(0)
    engine.submit("A: 1")
    engine.choose_flag(0)
    engine.submit("B: 2")

    engine.deselect_flag(0)

    assert [c.value for c in engine.selection.chosen_flags("OPTIONS")] == ["A: 1"]
    assert isinstance(engine.state, AwaitingMoreFlags)


def test_deselecting_last_flag_returns_to_group(grep_template) -> None:
    engine = SelectionEngine(grep_template)
    engine.choose_flag(0)

    engine.deselect_flag(0)

    assert engine.state == AwaitingGroup(0)
    assert engine.preview == "grep [<OPTIONS>] <PATTERN> <PATH>"
    with pytest.raises(SelectionStateError):
        engine.deselect_flag(0)


def test_auto_advance_when_every_flag_is_used(git_template) -> None:
    engine = SelectionEngine(git_template)

    engine.choose_flag(0)

    assert engine.state == AwaitingGroup(1)
    assert engine.preview == "git config --global user.email <EMAIL>"


def test_back_from_flag_argument(grep_template) -> None:
    engine = SelectionEngine(grep_template)
    engine.choose_flag(2)

    prompt = engine.request()
    assert isinstance(prompt, ValuePrompt)
    assert prompt.label == "NUM"
    assert prompt.value_type is ValueType.NUMBER

    engine.back()
    assert engine.state == AwaitingGroup(0)

    engine.choose_flag(0)
    engine.choose_flag(2)
    engine.back()
    assert engine.state == AwaitingMoreFlags("OPTIONS")


def test_flag_argument_prompt_carries_suggestions(curl_template) -> None:
    engine = SelectionEngine(curl_template)
    engine.choose_flag(1)

    prompt = engine.request()
    assert prompt.suggestions == ("GET", "POST")
    assert prompt.flag is curl_template.groups["OPTIONS"].flags[1]
    assert prompt.can_skip is False


def test_cancel_discards_selection(grep_template) -> None:
    engine = SelectionEngine(grep_template)
    engine.choose_flag(0)

    engine.cancel()

    assert isinstance(engine.state, Cancelled)
    assert engine.selection.chosen_flags("OPTIONS") == []
    assert engine.request() is None
    with pytest.raises(SelectionStateError):
        engine.final_command
    with pytest.raises(SelectionStateError):
        engine.cancel()


@pytest.mark.parametrize(
    "action",
    [
        lambda e: e.submit("x"),
        lambda e: e.back(),
        lambda e: e.deselect_flag(0),
        lambda e: e.choose_flag(9),
    ],
)
def test_illegal_actions_on_flag_menu(grep_template, action) -> None:
    engine = SelectionEngine(grep_template)

    with pytest.raises(SelectionStateError):
        action(engine)
    assert engine.state == AwaitingGroup(0)


def test_actions_after_completion_are_rejected(git_template) -> None:
    engine = SelectionEngine(git_template)
    engine.done()
    engine.submit("me@example.com")

    assert engine.final_command == "git config user.email me@example.com"
    with pytest.raises(SelectionStateError):
        engine.submit("again")
    with pytest.raises(SelectionStateError):
        engine.done()


def test_value_group_prompt(grep_template) -> None:
    engine = SelectionEngine(grep_template)
    engine.skip()

    prompt = engine.request()
    assert isinstance(prompt, ValuePrompt)
    assert prompt.group == "PATTERN"
    assert prompt.flag is None
    assert prompt.preview == "grep <PATTERN> <PATH>"


def test_optional_value_group_can_be_skipped() -> None:
    template = parse_template(
        "tar -czf _ARCHIVE_ [-C _DIR_] _FILES_",
        "Archive",
        {"ARCHIVE": {"expect": "path"}, "DIR": {"expect": "path"}, "FILES": {"expect": "path"}},
    )
    engine = SelectionEngine(template)
    engine.submit("out.tgz")
    assert engine.request().can_skip is True

    engine.skip()
    engine.submit("src")

    assert engine.final_command == "tar -czf out.tgz src"


def test_template_without_groups_completes_immediately() -> None:
    template = parse_template("git status", "Status", {})

    engine = SelectionEngine(template)

    assert engine.is_finished
    assert engine.final_command == "git status"


def test_groups_inside_skipped_segment_are_not_asked() -> None:
    template = parse_template(
        "cmd [-a _A_ [-b _B_]] _F_",
        "Nested",
        {"A": {"expect": "string"}, "B": {"expect": "string"}, "F": {"expect": "path"}},
    )
    engine = SelectionEngine(template)

    engine.skip()

    prompt = engine.request()
    assert prompt.group == "F"
    assert engine.selection.status("B") is GroupStatus.ABSENT
    assert engine.preview == "cmd <F>"

    engine.submit("f")
    assert engine.final_command == "cmd f"


def test_skipped_sibling_leaves_segment_out() -> None:
    template = parse_template(
        "cmd [_X_ _Y_] _F_",
        "Pair",
        {"X": {"expect": "string"}, "Y": {"expect": "string"}, "F": {"expect": "string"}},
    )
    engine = SelectionEngine(template)

    engine.skip()

    assert engine.request().group == "F"
    assert engine.selection.status("Y") is GroupStatus.ABSENT


def test_nested_segment_is_asked_when_outer_is_filled() -> None:
    template = parse_template(
        "cmd [-a _A_ [-b _B_]] _F_",
        "Nested",
        {"A": {"expect": "string"}, "B": {"expect": "string"}, "F": {"expect": "path"}},
    )
    engine = SelectionEngine(template)

    engine.submit("x")

    assert engine.request().group == "B"
    engine.submit("y")
    engine.submit("f")
    assert engine.final_command == "cmd -a x -b y f"


def test_header_repeated_three_times(curl_template) -> None:
    engine = SelectionEngine(curl_template)

    for value in ("A: 1", "B: 2", "C: 3"):
        engine.choose_flag(0)
        engine.submit(value)

    menu = engine.request()
    assert menu.items[0].count == 3
    assert menu.items[0].enabled is True

    engine.done()
    engine.submit("http://x")
    assert engine.final_command == "curl -H A: 1 -H B: 2 -H C: 3 http://x"


def test_flag_argument_state_without_argument_is_rejected(grep_template) -> None:
    engine = SelectionEngine(grep_template)
    engine.state = AwaitingFlagArgument("OPTIONS", 0)  # -i takes no argument

    with pytest.raises(SelectionStateError, match="takes no argument"):
        engine.request()

    engine.state = AwaitingFlagArgument("PATTERN", 0)
    with pytest.raises(SelectionStateError, match="not a flag group"):
        engine.submit("x")
