import json
import re

import pytest

from clapkit.__main__ import (
    CompleteCommand,
    ParseCommand,
    get_root_schema,
    main,
    split_passthrough,
)
from clapkit.parser import parse

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")

SCHEMA_YAML = """\
name: tool
arguments:
  - name: value
    type: int
  - name: flag
    type: bool
"""


def plain(text: str) -> str:
    return " ".join(ANSI_ESCAPE.sub("", text).split())


@pytest.fixture
def config(tmp_path):
    path = tmp_path / "tool.yaml"
    path.write_text(SCHEMA_YAML, encoding="UTF-8")
    return str(path)


def test_split_passthrough():
    assert split_passthrough(["a", "--", "b", "--", "c"]) == (["a"], ["b", "--", "c"])
    assert split_passthrough(["a"]) == (["a"], None)
    assert split_passthrough(["--"]) == ([], [])


def test_root_schema_selects_commands(config):
    result = parse(get_root_schema(), ["complete", config, "--index", "2", "a", "b"])
    assert isinstance(result.command.instance, CompleteCommand)
    assert result.command.instance.index == 2
    assert result.command.instance.arguments == ["a", "b"]
    assert result.debug is False
    assert result.log_mode is None

    result = parse(get_root_schema(), ["parse", config])
    assert isinstance(result.command.instance, ParseCommand)
    assert result.command.instance.arguments == []


def test_parse_command(config, capsys):
    assert main(["parse", config, "--", "--value=10", "--flag"]) == 0
    output = json.loads(plain(capsys.readouterr().out))
    assert output == {"value": 10, "flag": True}


def test_parse_command_with_invalid_arguments(config, capsys):
    assert main(["parse", config, "--", "--value=ten"]) == 1
    assert "'ten' is not a valid value" in plain(capsys.readouterr().err)


def test_unknown_command(capsys):
    assert main(["bogus"]) == 2
    assert "bogus" in plain(capsys.readouterr().err)


def test_missing_command():
    assert main([]) == 2


def test_missing_config(tmp_path, capsys):
    assert main(["parse", str(tmp_path / "missing.yaml")]) == 2
    assert "does not exist" in plain(capsys.readouterr().err)


def test_invalid_config(tmp_path, capsys):
    path = tmp_path / "tool.yaml"
    path.write_text("- not\n- a mapping\n", encoding="UTF-8")
    assert main(["parse", str(path)]) == 1
    assert "must contain a dictionary" in plain(capsys.readouterr().err)


def test_complete_command(config, capsys):
    assert main(["complete", config, "--", "--f"]) == 0
    assert plain(capsys.readouterr().out).split() == ["--flag"]


def test_complete_command_past_the_end(config, capsys):
    assert main(["complete", config, "--index", "1", "--", "--flag"]) == 0
    assert plain(capsys.readouterr().out) == ""
    assert main(["complete", config, "--index", "5", "--", "--f"]) == 0


def test_repl_does_not_take_passthrough_arguments(config, capsys):
    assert main(["repl", config, "--", "--value=1"]) == 2
    assert "does not take arguments" in plain(capsys.readouterr().err)
