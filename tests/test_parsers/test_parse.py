from argparse import Namespace
from enum import Enum
from pathlib import Path

import pytest

from clapkit.exceptions import ArgumentParseError
from clapkit.parser import (
    ArgumentDescriptor,
    ArgumentFlags,
    ArgumentSchema,
    ParserOptions,
    parse,
    try_parse,
)
from clapkit.parser.validators import MustBeInRange, MustMatchRegex


class Color(Enum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"


@pytest.fixture
def schema():
    return ArgumentSchema(
        [
            ArgumentDescriptor("value", int, ArgumentFlags.REQUIRED),
            ArgumentDescriptor("flag", bool),
        ]
    )


def parse_errors(schema, tokens, **kwargs):
    with pytest.raises(ArgumentParseError) as excinfo:
        parse(schema, tokens, **kwargs)
    return excinfo.value.errors


@pytest.mark.parametrize(
    "tokens, expected",
    [
        (["--value=10", "--flag"], {"value": 10, "flag": True}),
        (["--value:10"], {"value": 10, "flag": None}),
        (["--VALUE=10", "--FLAG"], {"value": 10, "flag": True}),
        (["-v=3", "-f"], {"value": 3, "flag": True}),
        (["--value=0x10"], {"value": 16, "flag": None}),
        (["--value=1", "--flag-"], {"value": 1, "flag": False}),
        (["--value=1", "--flag+"], {"value": 1, "flag": True}),
        (["--value=1", "--flag=false"], {"value": 1, "flag": False}),
        (["--value=1", "--flag=yes"], {"value": 1, "flag": True}),
    ],
)
def test_named_arguments(schema, tokens, expected):
    assert vars(parse(schema, tokens)) == expected


def test_missing_required_named_argument(schema):
    assert parse_errors(schema, ["--flag"]) == [
        "Missing required named argument '--value'."
    ]


def test_invalid_value(schema):
    errors = parse_errors(schema, ["--value=x"])
    assert errors == [
        "'x' is not a valid value for the 'value' command line option: "
        "'x' is not a valid integer"
    ]


def test_missing_option_argument(schema):
    assert parse_errors(schema, ["--value"]) == [
        "Missing required argument to command line option: '--value'."
    ]


def test_value_in_succeeding_token_needs_the_style(schema):
    errors = parse_errors(schema, ["--value", "10"])
    assert errors[0] == "Missing required argument to command line option: '--value'."
    assert "Unrecognized command line argument '10'." in errors


def test_unknown_argument_suggests_similar_names(schema):
    assert parse_errors(schema, ["--valeu=10"]) == [
        "Unrecognized command line argument '--valeu=10'.",
        "Did you mean one of: '--value'?",
    ]


def test_unknown_argument_without_suggestions(schema):
    assert parse_errors(schema, ["--value=1", "--zzzzzzzz"]) == [
        "Unrecognized command line argument '--zzzzzzzz'."
    ]


def test_every_error_is_collected(schema):
    errors = parse_errors(schema, ["--value=x", "--nope", "extra"])
    assert len(errors) == 3
    assert errors[1] == "Unrecognized command line argument '--nope'."
    assert errors[2] == "Unrecognized command line argument 'extra'."


def test_errors_are_forwarded_to_the_reporter(schema):
    reported = []
    with pytest.raises(ArgumentParseError):
        parse(schema, ["--flag"], options=ParserOptions(reporter=reported.append))
    assert reported == ["Missing required named argument '--value'."]


def test_try_parse_reports_errors_and_usage(schema):
    reported = []
    destination = Namespace()
    options = ParserOptions(reporter=reported.append)
    assert try_parse(schema, ["--flag"], destination, options) is False
    assert reported[0] == "Missing required named argument '--value'."
    assert reported[1].startswith("Usage:")
    assert "--value=<int>" in reported[1]
    assert "[--flag]" in reported[1]


def test_try_parse_success(schema):
    destination = Namespace()
    assert try_parse(schema, ["--value=7"], destination, ParserOptions.quiet())
    assert destination.value == 7


def test_parse_into_a_mapping(schema):
    destination = {}
    assert parse(schema, ["--value=7", "--flag"], destination) is destination
    assert destination == {"value": 7, "flag": True}


def test_parse_into_an_object(schema):
    class Settings:
        value: int
        flag: bool

    settings = parse(schema, ["--value=2"], Settings())
    assert settings.value == 2
    assert settings.flag is None


def test_defaults_apply_when_absent():
    schema = ArgumentSchema(
        [
            ArgumentDescriptor("count", int, default=5),
            ArgumentDescriptor("name", str),
            ArgumentDescriptor("level", int, default=None, validators=(MustBeInRange(1),)),
        ]
    )
    assert vars(parse(schema, [])) == {"count": 5, "name": None, "level": None}
    assert parse(schema, ["--count=2"]).count == 2


def test_invalid_default_fails_finalization():
    schema = ArgumentSchema(
        [ArgumentDescriptor("count", int, default=0, validators=(MustBeInRange(1),))]
    )
    errors = parse_errors(schema, [])
    assert errors[0].startswith("'0' is not a valid value for the 'count' command line option")


def test_at_most_once_rejects_repeats(schema):
    assert parse_errors(schema, ["--value=1", "--value=2"]) == [
        "Duplicate 'value' argument '2'."
    ]


def test_multiple_keeps_the_last_value():
    schema = ArgumentSchema([ArgumentDescriptor("level", int, ArgumentFlags.MULTIPLE)])
    assert parse(schema, ["--level=1", "--level=2"]).level == 2


def test_at_least_once():
    schema = ArgumentSchema(
        [ArgumentDescriptor("tag", str, ArgumentFlags.AT_LEAST_ONCE, collection=list)]
    )
    assert parse(schema, ["--tag=a", "--tag=b"]).tag == ["a", "b"]
    assert parse_errors(schema, []) == ["Missing required named argument '--tag'."]


@pytest.mark.parametrize(
    "collection, expected",
    [
        (list, ["b", "a", "b"]),
        (tuple, ("b", "a", "b")),
        (set, {"a", "b"}),
        (frozenset, frozenset({"a", "b"})),
    ],
)
def test_collections(collection, expected):
    schema = ArgumentSchema([ArgumentDescriptor("tag", str, collection=collection)])
    assert parse(schema, ["--tag=b", "--tag=a", "--tag=b"]).tag == expected


def test_empty_collection_when_absent():
    schema = ArgumentSchema([ArgumentDescriptor("tag", str, collection=list)])
    assert parse(schema, []).tag == []


def test_unique_collection_rejects_duplicates():
    schema = ArgumentSchema(
        [ArgumentDescriptor("tag", str, ArgumentFlags.UNIQUE, collection=list)]
    )
    assert parse(schema, ["--tag=a", "--tag=b"]).tag == ["a", "b"]
    assert parse_errors(schema, ["--tag=a", "--tag=a"]) == ["Duplicate 'tag' argument 'a'."]


def test_positional_arguments():
    schema = ArgumentSchema(
        [
            ArgumentDescriptor("source", str, ArgumentFlags.REQUIRED, positional=True),
            ArgumentDescriptor("dest", str, positional=True),
        ]
    )
    assert vars(parse(schema, ["a", "b"])) == {"source": "a", "dest": "b"}
    assert vars(parse(schema, ["a"])) == {"source": "a", "dest": None}
    assert parse_errors(schema, []) == ["Missing required positional argument '<source>'."]
    assert parse_errors(schema, ["a", "b", "c"]) == [
        "Unrecognized command line argument 'c'."
    ]


def test_positionals_mix_with_named_arguments():
    schema = ArgumentSchema(
        [
            ArgumentDescriptor("files", Path, positional=True, collection=list),
            ArgumentDescriptor("force", bool, default=False),
        ]
    )
    result = parse(schema, ["a.txt", "--force", "b.txt"])
    assert result.files == [Path("a.txt"), Path("b.txt")]
    assert result.force is True


def test_positional_rest_of_line():
    schema = ArgumentSchema(
        [
            ArgumentDescriptor("command", str, positional=True),
            ArgumentDescriptor(
                "args", str, ArgumentFlags.REST_OF_LINE, positional=True, collection=list
            ),
        ]
    )
    result = parse(schema, ["run", "x", "--y", "@z"])
    assert result.command == "run"
    assert result.args == ["x", "--y", "@z"]


def test_named_rest_of_line_joins_tokens():
    schema = ArgumentSchema(
        [
            ArgumentDescriptor("exec", str, ArgumentFlags.REST_OF_LINE),
            ArgumentDescriptor("verbose", bool),
        ]
    )
    result = parse(schema, ["--exec=ls", "-l", "two words", "--verbose"])
    assert result.exec == 'ls -l "two words" --verbose'
    assert result.verbose is None


def test_conflicting_arguments():
    schema = ArgumentSchema(
        [
            ArgumentDescriptor("quiet", bool, conflicts_with=("verbose",)),
            ArgumentDescriptor("verbose", bool),
        ]
    )
    assert parse(schema, ["--quiet"]).quiet is True
    errors = parse_errors(schema, ["--quiet", "--verbose"])
    assert "conflicts with the use of argument 'quiet'" in errors[0]


def test_validators_reject_values():
    schema = ArgumentSchema(
        [
            ArgumentDescriptor("port", int, validators=(MustBeInRange(1, 65535),)),
            ArgumentDescriptor("name", str, validators=(MustMatchRegex(r"^[a-z]+$"),)),
        ]
    )
    assert parse(schema, ["--port=80", "--name=web"]).port == 80
    assert parse_errors(schema, ["--port=0"]) == [
        "'0' is not a valid value for the 'port' command line option: "
        "Value 0 must be greater than or equal to 1"
    ]
    assert len(parse_errors(schema, ["--name=Web"])) == 1


def test_enum_values_and_suggestions():
    schema = ArgumentSchema([ArgumentDescriptor("color", Color)])
    assert parse(schema, ["--color=RED"]).color is Color.RED
    assert parse(schema, ["--color=green"]).color is Color.GREEN
    errors = parse_errors(schema, ["--color=purple"])
    assert errors[0].startswith("'purple' is not a valid value for the 'color'")
    assert errors[1] == "Possible argument values include: 'blue', 'green', 'red'."


def test_answer_file(schema, tmp_path):
    answer_file = tmp_path / "args.txt"
    answer_file.write_text("--value=5\n# comment\n\n   --flag   \n", encoding="UTF-8")
    assert vars(parse(schema, [f"@{answer_file}"])) == {"value": 5, "flag": True}


def test_missing_answer_file(schema, tmp_path):
    missing = tmp_path / "missing.txt"
    errors = parse_errors(schema, [f"@{missing}", "--value=1"])
    assert errors[0].startswith(f"Unable to read or parse argument answer file '{missing}'")


def test_answer_file_including_itself(schema, tmp_path):
    answer_file = tmp_path / "self.txt"
    answer_file.write_text(f"--value=1\n@{answer_file}\n", encoding="UTF-8")
    errors = parse_errors(schema, [f"@{answer_file}"])
    assert errors == [
        f"Unable to read or parse argument answer file '{answer_file}': it includes itself"
    ]


def test_answer_files_including_each_other(schema, tmp_path):
    first = tmp_path / "first.txt"
    second = tmp_path / "second.txt"
    first.write_text(f"@{second}\n", encoding="UTF-8")
    second.write_text(f"--value=2\n@{first}\n", encoding="UTF-8")
    destination = Namespace()
    assert try_parse(schema, [f"@{first}"], destination, ParserOptions.quiet()) is False
    assert destination.value == 2


def test_answer_file_can_be_read_twice(tmp_path):
    answer_file = tmp_path / "flag.txt"
    answer_file.write_text("--flag\n", encoding="UTF-8")
    schema = ArgumentSchema([ArgumentDescriptor("flag", bool, ArgumentFlags.MULTIPLE)])
    assert parse(schema, [f"@{answer_file}", f"@{answer_file}"]).flag is True


def test_answer_file_through_custom_reader(schema):
    class FakeReader:
        def file_exists(self, path):
            return path == "args"

        def directory_exists(self, path):
            return False

        def get_lines(self, path):
            if path != "args":
                raise FileNotFoundError(path)
            return ["--value=9"]

        def enumerate_entries(self, directory, pattern="*"):
            return []

    options = ParserOptions.quiet()
    options.file_system_reader = FakeReader()
    assert parse(schema, ["@args"], options=options).value == 9


class TestGetoptStyle:
    @pytest.fixture
    def schema(self):
        return ArgumentSchema(
            [
                ArgumentDescriptor("verbose", bool),
                ArgumentDescriptor("all", bool),
                ArgumentDescriptor("output", str),
                ArgumentDescriptor("MaxCount", int),
            ],
            style="getopt",
        )

    def test_bundled_short_names(self, schema):
        result = parse(schema, ["-va"])
        assert result.verbose is True
        assert result.all is True

    def test_elided_short_value(self, schema):
        assert parse(schema, ["-ofile.txt"]).output == "file.txt"

    def test_bundle_ending_in_elided_value(self, schema):
        result = parse(schema, ["-vaofile.txt"])
        assert result.verbose is True
        assert result.output == "file.txt"

    @pytest.mark.parametrize(
        "tokens",
        [["--output", "out.txt"], ["-o", "out.txt"], ["--output=out.txt"]],
    )
    def test_value_forms(self, schema, tokens):
        assert parse(schema, tokens).output == "out.txt"

    def test_hyphenated_long_name(self, schema):
        assert parse(schema, ["--max-count=3"]).MaxCount == 3
        assert parse(schema, ["-m", "4"]).MaxCount == 4

    def test_trailing_option_without_value(self, schema):
        assert parse_errors(schema, ["--output"]) == [
            "Missing required argument to command line option: '--output'."
        ]

    def test_unknown_short_name_in_bundle(self, schema):
        errors = parse_errors(schema, ["-vx"])
        assert errors[0] == "Unrecognized command line argument '-vx'."


def test_windows_style():
    schema = ArgumentSchema([ArgumentDescriptor("value", int)], style="windows")
    assert parse(schema, ["/value:3"]).value == 3
    assert parse(schema, ["-value=4"]).value == 4


def test_powershell_style():
    schema = ArgumentSchema([ArgumentDescriptor("Value", int)], style="powershell")
    assert parse(schema, ["-Value", "3"]).Value == 3
    assert parse(schema, ["-v:5"]).Value == 5
