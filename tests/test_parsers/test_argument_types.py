from datetime import datetime
from enum import Enum, IntEnum
from pathlib import Path
from typing import Literal, Optional

import pytest

from clapkit.parser import ArgumentDescriptor, ArgumentSchema, get_argument_type, parse
from clapkit.parser.argument_types import (
    ArgumentParseContext,
    BoolArgumentType,
    CoercedArgumentType,
    EnumArgumentType,
    IntegerArgumentType,
    LiteralArgumentType,
    PathArgumentType,
    StringArgumentType,
)
from clapkit.parser.utils import coerce_bool, coerce_enum, coerce_value


class Color(Enum):
    RED = 1
    GREEN = 2


class Level(IntEnum):
    LOW = 1
    HIGH = 2


@pytest.fixture
def context():
    return ArgumentParseContext()


@pytest.mark.parametrize(
    "value_type, expected",
    [
        (str, StringArgumentType),
        (int, IntegerArgumentType),
        (bool, BoolArgumentType),
        (Path, PathArgumentType),
        (Color, EnumArgumentType),
        (Literal["a", "b"], LiteralArgumentType),
        (int | None, CoercedArgumentType),
        (lambda text: text.upper(), CoercedArgumentType),
    ],
)
def test_get_argument_type(value_type, expected):
    assert isinstance(get_argument_type(value_type), expected)


def test_existing_argument_type_is_returned_as_is():
    argument_type = StringArgumentType(allow_empty=True)
    assert get_argument_type(argument_type) is argument_type


def test_unsupported_type():
    with pytest.raises(TypeError):
        get_argument_type(3)


@pytest.mark.parametrize(
    "value_type, text, expected",
    [
        (str, "hello", "hello"),
        (int, " 42 ", 42),
        (int, "0b101", 5),
        (int, "-7", -7),
        (float, "2.5", 2.5),
        (bool, "", True),
        (bool, "+", True),
        (bool, "-", False),
        (bool, "off", False),
        (Color, "green", Color.GREEN),
        (Color, "1", Color.RED),
        (Literal["json", "text"], "text", "text"),
        (Literal[1, 2], "2", 2),
        (datetime, "2024-01-02", datetime(2024, 1, 2)),
        (Path, "a/b", Path("a/b")),
        (int | str, "x", "x"),
    ],
)
def test_try_parse_success(context, value_type, text, expected):
    result = get_argument_type(value_type).try_parse(context, text)
    assert result.success
    assert result.value == expected


@pytest.mark.parametrize(
    "value_type, text",
    [
        (str, ""),
        (int, ""),
        (int, "ten"),
        (float, "x"),
        (bool, "maybe"),
        (Color, "purple"),
        (Literal["json", "text"], "xml"),
        (datetime, "not a date"),
        (Path, ""),
    ],
)
def test_try_parse_failure(context, value_type, text):
    result = get_argument_type(value_type).try_parse(context, text)
    assert not result.success
    assert result.error


def test_empty_strings_can_be_allowed(context):
    assert StringArgumentType(allow_empty=True).try_parse(context, "").value == ""


def test_enum_names_respect_case_sensitivity():
    argument_type = get_argument_type(Color)
    assert argument_type.try_parse(ArgumentParseContext(case_sensitive=True), "RED").success
    assert not argument_type.try_parse(
        ArgumentParseContext(case_sensitive=True), "red"
    ).success


def test_formatting():
    assert get_argument_type(bool).format(True) == "true"
    assert get_argument_type(Color).format(Color.GREEN) == "green"
    assert get_argument_type(datetime).format(datetime(2024, 1, 2)) == "2024-01-02T00:00:00"


@pytest.mark.parametrize(
    "value_type, value",
    [
        (int, 42),
        (int, -7),
        (float, 2.5),
        (float, 1e20),
        (float, float("inf")),
        (bool, True),
        (bool, False),
        (str, "hello world"),
        (Path, Path("some dir/file.txt")),
        (datetime, datetime(2024, 1, 2, 3, 4, 5, 123456)),
        (Color, Color.GREEN),
        (Level, Level.HIGH),
        (Literal["json", "text"], "text"),
        (Literal[1, 2], 2),
        (int | str, 5),
        (int | str, "five"),
        (Optional[int], 3),
    ],
)
def test_formatted_values_parse_back(context, value_type, value):
    argument_type = get_argument_type(value_type)
    result = argument_type.try_parse(context, argument_type.format(value))
    assert result.success
    assert result.value == value


@pytest.mark.parametrize(
    "value_type, collection, values",
    [
        (int, list, [3, -1, 3]),
        (Path, tuple, (Path("a b"), Path("c/d"))),
        (Color, set, {Color.RED, Color.GREEN}),
    ],
)
def test_formatted_collections_parse_back(value_type, collection, values):
    argument_type = get_argument_type(value_type)
    schema = ArgumentSchema([ArgumentDescriptor("x", value_type, collection=collection)])
    tokens = [f"--x={argument_type.format(value)}" for value in values]
    assert parse(schema, tokens).x == values


def test_display_names():
    assert get_argument_type(int).display_name == "int"
    assert get_argument_type(Literal["a", "b"]).display_name == "{a,b}"


def test_value_completions():
    assert get_argument_type(bool).get_completions(None, "") == ["false", "true"]
    assert get_argument_type(Color).get_completions(None, "G") == ["green"]
    assert get_argument_type(Literal["json", "text"]).get_completions(None, "j") == ["json"]
    assert get_argument_type(int).get_completions(None, "") == []


@pytest.mark.parametrize(
    "value, expected",
    [("true", True), ("YES", True), ("1", True), ("n", False), (False, False)],
)
def test_coerce_bool(value, expected):
    assert coerce_bool(value) is expected


def test_coerce_bool_rejects_unknown_words():
    with pytest.raises(ValueError):
        coerce_bool("sometimes")


def test_coerce_enum():
    assert coerce_enum("RED", Color) is Color.RED
    assert coerce_enum(2, Color) is Color.GREEN
    with pytest.raises(ValueError, match="should be one of"):
        coerce_enum("blue", Color)


def test_coerce_value_union_failure():
    with pytest.raises(ValueError, match="could not be coerced"):
        coerce_value("abc", int | float)
