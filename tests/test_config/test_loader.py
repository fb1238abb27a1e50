from datetime import datetime
from pathlib import Path, PurePosixPath

import pytest

from clapkit.config import build_validator, loader, resolve_type
from clapkit.exceptions import ArgumentParseError, InvalidConfigError
from clapkit.parser import parse
from clapkit.parser.validators import MustBeInRange, MustExist, MustNotBeEmpty

DEPLOY_YAML = """\
name: deploy
style: getopt
arguments:
  - name: target
    positional: true
    flags: required
  - name: replicas
    type: int
    default: 1
    validators:
      - must_be_in_range: {minimum: 1, maximum: 10}
  - name: tags
    collection: list
    flags: [multiple, unique]
"""

REPORT_TOML = """\
name = "report"

[[arguments]]
name = "since"
type = "datetime"
default = "2024-01-01"

[[arguments]]
name = "verbose"
type = "bool"
default = false
description = "Print more detail."
"""


@pytest.fixture
def write_config(tmp_path):
    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="UTF-8")
        return path

    return _write


def test_yaml_config(write_config):
    schema = loader(write_config("deploy.yaml", DEPLOY_YAML))
    assert schema.name == "deploy"
    result = parse(schema, ["prod", "--replicas", "3", "--tags", "a", "-t", "b"])
    assert result.target == "prod"
    assert result.replicas == 3
    assert result.tags == ["a", "b"]

    result = parse(schema, ["prod"])
    assert result.replicas == 1
    assert result.tags == []


def test_yaml_config_validators(write_config):
    schema = loader(write_config("deploy.yml", DEPLOY_YAML))
    with pytest.raises(ArgumentParseError) as excinfo:
        parse(schema, ["prod", "--replicas=11"])
    assert any("less than or equal to 10" in error for error in excinfo.value.errors)


def test_toml_config(write_config):
    schema = loader(write_config("report.toml", REPORT_TOML))
    result = parse(schema, [])
    assert result.since == datetime(2024, 1, 1)
    assert result.verbose is False
    assert parse(schema, ["--verbose"]).verbose is True
    assert schema.named_arguments[1].description == "Print more detail."


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        loader(tmp_path / "missing.yaml")


def test_file_path_type():
    with pytest.raises(TypeError):
        loader(42)


@pytest.mark.parametrize(
    "name, text",
    [
        ("args.json", "{}"),
        ("bad.yaml", "arguments: ["),
        ("bad.toml", "arguments = ["),
        ("list.yaml", "- a\n- b\n"),
        ("validator.yaml", "arguments:\n  - name: x\n    validators: [must_be_shiny]\n"),
        ("style.yaml", "style: fancy\n"),
        ("flags.yaml", "arguments:\n  - name: x\n    flags: [sometimes]\n"),
        ("collection.yaml", "arguments:\n  - name: x\n    collection: bag\n"),
        (
            "default.yaml",
            "arguments:\n  - name: x\n    flags: required\n    default: a\n",
        ),
        ("bad_default.yaml", "arguments:\n  - name: x\n    type: int\n    default: ten\n"),
        ("separators.yaml", "argument_value_separators: ['==']\n"),
        ("import.yaml", "arguments:\n  - name: x\n    type: no_such_module.Thing\n"),
        ("attribute.yaml", "arguments:\n  - name: x\n    type: pathlib.NoSuchPath\n"),
        ("duplicate.yaml", "arguments:\n  - name: x\n  - name: X\n"),
    ],
)
def test_invalid_configs(write_config, name, text):
    with pytest.raises(InvalidConfigError):
        loader(write_config(name, text))


def test_settings_overrides(write_config):
    schema = loader(
        write_config(
            "settings.yaml",
            "named_argument_prefixes: ['+']\n"
            "argument_value_separators: ['#']\n"
            "arguments:\n"
            "  - name: level\n"
            "    type: int\n",
        )
    )
    assert parse(schema, ["+level#4"]).level == 4


def test_dotted_type(write_config):
    schema = loader(
        write_config(
            "dotted.yaml",
            "arguments:\n  - name: where\n    type: pathlib.PurePosixPath\n",
        )
    )
    assert parse(schema, ["--where=a/b"]).where == PurePosixPath("a/b")


def test_resolve_type():
    assert resolve_type("Integer") is int
    assert resolve_type("path") is Path
    assert resolve_type("pathlib.PurePosixPath") is PurePosixPath
    with pytest.raises(InvalidConfigError):
        resolve_type("Unknown")


@pytest.mark.parametrize(
    "spec, expected",
    [
        ("must_not_be_empty", MustNotBeEmpty),
        ({"must-not-be-empty": None}, MustNotBeEmpty),
        ({"must_be_in_range": {"minimum": 1}}, MustBeInRange),
        ({"MUST_EXIST": {"kind": "file"}}, MustExist),
    ],
)
def test_build_validator(spec, expected):
    assert isinstance(build_validator(spec), expected)


@pytest.mark.parametrize(
    "spec",
    [
        "must_be_shiny",
        {"must_not_be_empty": {}, "must_exist": {}},
        {"must_be_in_range": {}},
        {"must_be_in_range": {"lowest": 1}},
        {"must_exist": "file"},
    ],
)
def test_build_validator_errors(spec):
    with pytest.raises(InvalidConfigError):
        build_validator(spec)
