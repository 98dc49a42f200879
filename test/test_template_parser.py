import pytest

from templates import (
    DefinitionError,
    FlagGroup,
    OptionalSegment,
    Placeholder,
    Text,
    ValueGroup,
    ValueType,
    Word,
    parse_entry,
    parse_template,
    strip_markers,
)
from templates.parser import parse_flag, parse_nodes


def _word(*parts):
    return Word(tuple(Text(p) if isinstance(p, str) else p for p in parts))


def test_parse_nodes_splits_words_and_segments() -> None:
    nodes = parse_nodes("grep [_OPTIONS_] _PATTERN_ _PATH_")

    assert nodes == (
        _word("grep"),
        OptionalSegment((_word(Placeholder("OPTIONS")),)),
        _word(Placeholder("PATTERN")),
        _word(Placeholder("PATH")),
    )


def test_parse_nodes_collapses_whitespace() -> None:
    assert parse_nodes("  ls \t  -la  ") == (_word("ls"), _word("-la"))


def test_placeholder_embedded_in_word() -> None:
    nodes = parse_nodes("--file=_PATH_.txt")

    assert nodes == (_word("--file=", Placeholder("PATH"), ".txt"),)


def test_placeholder_inside_quotes() -> None:
    nodes = parse_nodes("ssh-keygen -C '_EMAIL_'")

    assert nodes[-1] == _word("'", Placeholder("EMAIL"), "'")


def test_bold_markers_are_dropped() -> None:
    assert parse_nodes("*-A* _NUM_") == (_word("-A"), _word(Placeholder("NUM")))


def test_escapes_produce_literal_characters() -> None:
    nodes = parse_nodes(r"echo \_x\_ \* \[a\]")

    assert nodes == (_word("echo"), _word("_x_"), _word("*"), _word("[a]"))


def test_nested_optional_segments() -> None:
    nodes = parse_nodes("cmd [-a _A_ [-b _B_]]")

    assert nodes == (
        _word("cmd"),
        OptionalSegment(
            (
                _word("-a"),
                _word(Placeholder("A")),
                OptionalSegment((_word("-b"), _word(Placeholder("B")))),
            )
        ),
    )


@pytest.mark.parametrize(
    ("template", "message"),
    [
        ("cmd [_A_", "Unclosed '['"),
        ("cmd _A_]", "Unexpected ']'"),
        ("cmd _A", "is not closed"),
        ("cmd __", "Empty placeholder"),
    ],
)
def test_malformed_templates(template: str, message: str) -> None:
    with pytest.raises(DefinitionError) as exc_info:
        parse_template(template, "desc", {"A": {"expect": "string"}}, source="user.yaml")

    assert message in exc_info.value.message
    assert exc_info.value.template == template
    assert exc_info.value.source == "user.yaml"


def test_parse_template_builds_groups_in_order(grep_template) -> None:
    assert grep_template.group_order == ["OPTIONS", "PATTERN", "PATH"]

    options = grep_template.groups["OPTIONS"]
    assert isinstance(options, FlagGroup)
    assert options.optional is True
    assert [f.template for f in options.flags] == ["-i", "-v", "*-A* _NUM_", "*-B* _NUM_"]

    pattern = grep_template.groups["PATTERN"]
    assert isinstance(pattern, ValueGroup)
    assert pattern.expect is ValueType.STRING
    assert pattern.optional is False
    assert grep_template.groups["PATH"].expect is ValueType.PATH


def test_parsed_groups_are_read_only(grep_template) -> None:
    with pytest.raises(TypeError):
        grep_template.groups["PATH"] = grep_template.groups["PATTERN"]
    assert list(grep_template.groups) == grep_template.group_order


def test_flag_group_outside_brackets_is_required(find_template) -> None:
    assert find_template.groups["EXPRESSION"].optional is False


def test_flag_option_argument(grep_template) -> None:
    flag = grep_template.groups["OPTIONS"].flags[2]

    assert flag.takes_argument
    assert flag.argument_name == "NUM"
    assert flag.expect is ValueType.NUMBER
    assert not grep_template.groups["OPTIONS"].flags[0].takes_argument


def test_duplicate_placeholder_rejected() -> None:
    with pytest.raises(DefinitionError) as exc_info:
        parse_template("cp _A_ _A_", "Copy", {"A": {"expect": "path"}})

    assert exc_info.value.group == "A"
    assert "more than once" in str(exc_info.value)


def test_missing_group_definition() -> None:
    with pytest.raises(DefinitionError) as exc_info:
        parse_template("cp _SRC_ _DST_", "Copy", {"SRC": {"expect": "path"}})

    assert exc_info.value.group == "DST"
    assert str(exc_info.value) == "[builtin] Template 'cp _SRC_ _DST_' group 'DST': Missing group definition"


def test_unreferenced_group_rejected() -> None:
    with pytest.raises(DefinitionError, match="never referenced"):
        parse_template("ls _DIR_", "List", {"DIR": {"expect": "path"}, "X": {"expect": "string"}})


def test_literal_only_segment_rejected() -> None:
    with pytest.raises(DefinitionError, match="no placeholder"):
        parse_template("ls [-l] _DIR_", "List", {"DIR": {"expect": "path"}})


@pytest.mark.parametrize(
    ("definition", "message"),
    [
        ({"expect": "string", "flags": [{"template": "-x"}]}, "both"),
        ({}, "should define"),
        ({"expect": "int"}, "Unknown value type"),
        ({"expect": "string", "multiple": True}, "only applies to flags"),
        ({"flags": []}, "non-empty"),
        ({"flags": [{"template": "-a _X_ _Y_", "expect": "string"}]}, "more than one"),
        ({"flags": [{"template": "-a _X_"}]}, "no 'expect'"),
        ({"flags": [{"template": "-a", "expect": "string"}]}, "no placeholder"),
        ({"flags": [{"template": "-a", "suggest": ["x"]}]}, "without 'expect'"),
        ({"flags": [{"template": "-a", "multiple": "yes"}]}, "true or false"),
        ({"flags": [{"template": "-a [_X_]", "expect": "string"}]}, "optional segments"),
        ({"flags": [{"description": "no template"}]}, "missing a 'template'"),
    ],
)
def test_invalid_group_definitions(definition: dict, message: str) -> None:
    with pytest.raises(DefinitionError) as exc_info:
        parse_template("cmd _G_", "desc", {"G": definition})

    assert message in exc_info.value.message
    assert exc_info.value.group == "G"
    assert exc_info.value.template == "cmd _G_"


def test_parse_flag_with_suggestions() -> None:
    flag = parse_flag(
        {"template": "*-X* _METHOD_", "expect": "string", "suggest": ["GET", "POST"]}
    )

    assert flag.suggest == ("GET", "POST")
    assert flag.multiple is False
    assert flag.argument_name == "METHOD"


def test_parse_entry_requires_description() -> None:
    with pytest.raises(DefinitionError) as exc_info:
        parse_entry({"template": "ls"}, source="mine.yaml")

    assert exc_info.value.template == "ls"
    assert exc_info.value.source == "mine.yaml"


def test_parse_entry_without_groups() -> None:
    template = parse_entry({"template": "git status", "description": "Status"})

    assert template.groups == {}
    assert template.group_order == []
    assert template.source == "builtin"


def test_parse_entry_rejects_non_mapping() -> None:
    with pytest.raises(DefinitionError, match="must be a mapping"):
        parse_entry(["ls"])


def test_strip_markers() -> None:
    assert strip_markers(r"Find *files* named \*.py") == "Find files named *.py"
    assert strip_markers(r"Print _NUM_ lines, keep \_a_b") == "Print NUM lines, keep _ab"
