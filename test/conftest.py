"""Shared template fixtures."""

import pytest

from templates import parse_template

GREP_GROUPS = {
    "PATTERN": {"expect": "string"},
    "PATH": {"expect": "path"},
    "OPTIONS": {
        "flags": [
            {"template": "-i", "description": "Case insensitive matching"},
            {"template": "-v", "description": "Invert match"},
            {"template": "*-A* _NUM_", "description": "Lines after", "expect": "number"},
            {"template": "*-B* _NUM_", "description": "Lines before", "expect": "number"},
        ]
    },
}

CURL_GROUPS = {
    "URL": {"expect": "string"},
    "OPTIONS": {
        "flags": [
            {"template": "*-H* _VALUE_", "expect": "string", "multiple": True},
            {"template": "*-X* _METHOD_", "expect": "string", "suggest": ["GET", "POST"]},
            {"template": "-L", "description": "Follow redirects"},
        ]
    },
}

FIND_GROUPS = {
    "PATH": {"expect": "path"},
    "EXPRESSION": {
        "flags": [
            {"template": "*-iname* _PATTERN_", "expect": "string"},
            {"template": "*-type* _TYPE_", "expect": "string", "suggest": ["f", "d"]},
        ]
    },
}


@pytest.fixture
def grep_template():
    return parse_template("grep [_OPTIONS_] _PATTERN_ _PATH_", "Find lines in a file", GREP_GROUPS)


@pytest.fixture
def curl_template():
    return parse_template("curl [_OPTIONS_] _URL_", "Send an HTTP request", CURL_GROUPS)


@pytest.fixture
def find_template():
    return parse_template("find _PATH_ _EXPRESSION_", "Find files", FIND_GROUPS)


@pytest.fixture
def git_template():
    return parse_template(
        "git config [_OPTIONS_] user.email _EMAIL_",
        "Set git email",
        {
            "EMAIL": {"expect": "string"},
            "OPTIONS": {"flags": [{"template": "--global"}]},
        },
    )
