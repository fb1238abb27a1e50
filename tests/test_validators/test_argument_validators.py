from datetime import datetime
from pathlib import Path

import pytest

from clapkit.parser import get_argument_type
from clapkit.parser.argument_types import ArgumentParseContext
from clapkit.parser.validators import (
    MustBeInRange,
    MustExist,
    MustMatchRegex,
    MustNotBeEmpty,
    MustNotExist,
    MustNotMatchRegex,
)


@pytest.fixture
def context():
    return ArgumentParseContext()


def test_must_not_be_empty(context):
    validator = MustNotBeEmpty()
    assert validator.validate(context, "x") is None
    assert validator.validate(context, "") == "Value must not be empty"


@pytest.mark.parametrize(
    "value, expected",
    [
        (1, None),
        (10, None),
        (0, "Value 0 must be greater than or equal to 1"),
        (11, "Value 11 must be less than or equal to 10"),
    ],
)
def test_must_be_in_range(context, value, expected):
    assert MustBeInRange(1, 10).validate(context, value) == expected


def test_must_be_in_range_with_one_bound(context):
    assert MustBeInRange(maximum=datetime(2000, 1, 1)).validate(
        context, datetime(1999, 1, 1)
    ) is None
    with pytest.raises(ValueError):
        MustBeInRange()


def test_regex_validators(context):
    assert MustMatchRegex(r"^\d+$").validate(context, "123") is None
    assert "does not match" in MustMatchRegex(r"^\d+$").validate(context, "12a")
    assert MustNotMatchRegex(r"\s").validate(context, "abc") is None
    assert "must not match" in MustNotMatchRegex(r"\s").validate(context, "a b")


def test_path_existence(context, tmp_path):
    existing = tmp_path / "file.txt"
    existing.write_text("", encoding="UTF-8")
    missing = tmp_path / "missing.txt"

    assert MustExist().validate(context, existing) is None
    assert MustExist("file").validate(context, existing) is None
    assert MustExist("directory").validate(context, tmp_path) is None
    assert MustExist("directory").validate(context, existing) == (
        f"The directory '{existing}' does not exist"
    )
    assert MustExist().validate(context, missing) == f"The path '{missing}' does not exist"

    assert MustNotExist().validate(context, missing) is None
    assert MustNotExist("file").validate(context, existing) == (
        f"The file '{existing}' already exists"
    )


def test_invalid_path_kind():
    with pytest.raises(ValueError):
        MustExist("socket")


@pytest.mark.parametrize(
    "validator, value_type, accepted",
    [
        (MustNotBeEmpty(), str, True),
        (MustNotBeEmpty(), Path, True),
        (MustNotBeEmpty(), int, False),
        (MustBeInRange(0), int, True),
        (MustBeInRange(0), float, True),
        (MustBeInRange(0), str, False),
        (MustMatchRegex("x"), str, True),
        (MustMatchRegex("x"), Path, False),
        (MustExist(), Path, True),
        (MustExist(), str, False),
    ],
)
def test_accepted_types(validator, value_type, accepted):
    assert validator.accepts(get_argument_type(value_type)) is accepted
