from enum import Enum
from pathlib import Path
from typing import Literal

import pytest

from clapkit.parser import (
    ArgumentDescriptor,
    ArgumentFlags,
    ArgumentSchema,
    CommandDefinition,
    CommandGroupArgumentType,
    get_completions,
)


class Color(Enum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"


@pytest.fixture
def schema():
    return ArgumentSchema(
        [
            ArgumentDescriptor("value", int),
            ArgumentDescriptor("flag", bool),
            ArgumentDescriptor("color", Color),
            ArgumentDescriptor("secret", str, hidden=True),
        ]
    )


@pytest.mark.parametrize(
    "token, expected",
    [
        ("--", ["--color", "--flag", "--value"]),
        ("--f", ["--flag"]),
        ("--F", ["--flag"]),
        ("--color=r", ["--color=red"]),
        ("--color=", ["--color=blue", "--color=green", "--color=red"]),
        ("--flag=t", ["--flag=true"]),
        ("-", ["-c", "-f", "-v"]),
        ("--nope=", []),
    ],
)
def test_named_argument_completions(schema, token, expected):
    assert get_completions(schema, [token], 0) == expected


def test_completing_past_the_end(schema):
    assert get_completions(schema, ["--flag"], 1) == []


def test_index_out_of_range(schema):
    with pytest.raises(IndexError):
        get_completions(schema, ["--flag"], 2)


def test_positional_completions():
    schema = ArgumentSchema(
        [
            ArgumentDescriptor("first", Color, positional=True),
            ArgumentDescriptor("second", Literal["json", "text"], positional=True),
        ]
    )
    assert get_completions(schema, ["g"], 0) == ["green"]
    assert get_completions(schema, ["green", ""], 1) == ["json", "text"]
    assert get_completions(schema, ["green", "text", ""], 2) == []


def test_value_in_succeeding_token():
    schema = ArgumentSchema(
        [ArgumentDescriptor("output", Literal["json", "text"])], style="getopt"
    )
    assert get_completions(schema, ["--output", "t"], 1) == ["text"]
    assert get_completions(schema, ["-o", ""], 1) == ["json", "text"]


def test_answer_file_completions(schema, tmp_path, monkeypatch):
    (tmp_path / "args.txt").write_text("--flag\n", encoding="UTF-8")
    (tmp_path / "other.txt").write_text("", encoding="UTF-8")
    monkeypatch.chdir(tmp_path)
    assert get_completions(schema, ["@ar"], 0) == ["@args.txt"]


def test_path_completions(tmp_path):
    (tmp_path / "alpha.txt").write_text("", encoding="UTF-8")
    (tmp_path / "beta.txt").write_text("", encoding="UTF-8")
    schema = ArgumentSchema([ArgumentDescriptor("path", Path, positional=True)])
    assert get_completions(schema, [f"{tmp_path}/a"], 0) == [f"{tmp_path}/alpha.txt"]


def test_completions_follow_command_groups():
    class Add:
        pass

    add_schema = ArgumentSchema(
        [
            ArgumentDescriptor("name", str, ArgumentFlags.REQUIRED, positional=True),
            ArgumentDescriptor("force", bool),
        ]
    )
    schema = ArgumentSchema(
        [
            ArgumentDescriptor(
                "command",
                CommandGroupArgumentType(
                    {
                        "add": CommandDefinition(Add, add_schema),
                        "remove": CommandDefinition(Add),
                    }
                ),
                positional=True,
            ),
            ArgumentDescriptor("verbose", bool),
        ]
    )
    assert get_completions(schema, [""], 0) == ["add", "remove"]
    assert get_completions(schema, ["a"], 0) == ["add"]
    assert get_completions(schema, ["add", "widget", "--"], 2) == ["--force", "--verbose"]
    assert get_completions(schema, ["--"], 0) == ["--verbose"]
