"""
Clapkit CLI Toolkit

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.

Command line front end for trying out argument schemas described in YAML or TOML:

    clapkit parse schema.yaml -- --value=10 --flag
    clapkit complete schema.yaml --index 1 -- --flag --val
    clapkit repl schema.yaml

The front end is itself described with Clapkit: a command group argument selects
the sub-command and each sub-command contributes its own arguments. Everything
after the first bare `--` is handed to the sub-command untouched, so the command
line being examined may use options of its own.
"""
from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Literal, Sequence

from clapkit.completer import ArgumentSetCompleter
from clapkit.config import loader
from clapkit.console import console, error_console
from clapkit.console_input import History, LineEditor, TerminalConsole
from clapkit.exceptions import ClapkitError
from clapkit.parser import (
    ArgumentDescriptor,
    ArgumentFlags,
    ArgumentSchema,
    CommandDefinition,
    CommandGroupArgumentType,
    ParserOptions,
    get_completions,
    try_parse,
)
from clapkit.parser.validators import MustBeInRange, MustExist
from clapkit.tokenizer import tokenize
from clapkit.utils import setup_logging


def _config_argument() -> ArgumentDescriptor:
    return ArgumentDescriptor(
        "config",
        Path,
        ArgumentFlags.REQUIRED,
        positional=True,
        validators=(MustExist("file"),),
        description="YAML or TOML file describing the argument set.",
    )


def _print_namespace(destination: Namespace) -> None:
    console.print_json(data=vars(destination), default=str)


class ParseCommand:
    """Parse arguments against a schema file and print the result as JSON."""

    config: Path
    arguments: list[str]

    def execute(self) -> int:
        schema = loader(self.config)
        destination = Namespace()
        if not try_parse(schema, self.arguments, destination):
            return 1
        _print_namespace(destination)
        return 0


class CompleteCommand:
    """Print the completions for one token of a command line."""

    config: Path
    index: int | None
    arguments: list[str]

    def execute(self) -> int:
        schema = loader(self.config)
        tokens = list(self.arguments)
        index = self.index if self.index is not None else max(len(tokens) - 1, 0)
        if index >= len(tokens):
            tokens.extend([""] * (index - len(tokens) + 1))
        for completion in get_completions(schema, tokens, index):
            console.print(completion, markup=False, highlight=False)
        return 0


class ReplCommand:
    """Read command lines interactively, with completion, and parse each one."""

    config: Path
    prompt: str
    history_size: int | None

    def execute(self) -> int:
        schema = loader(self.config)
        terminal = TerminalConsole()
        editor = LineEditor(
            terminal,
            terminal,
            history=History(self.history_size),
            completer=ArgumentSetCompleter(schema),
            prompt=self.prompt,
            comment_character="#",
        )
        while True:
            line = editor.read_line()
            if line is None:
                return 0
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            try:
                tokens = [token.contents for token in tokenize(line)]
            except ValueError as error:
                error_console.print(str(error), style="error", markup=False)
                continue
            destination = Namespace()
            if try_parse(schema, tokens, destination):
                _print_namespace(destination)


def get_root_schema() -> ArgumentSchema:
    parse_schema = ArgumentSchema(
        [
            _config_argument(),
            ArgumentDescriptor(
                "arguments",
                str,
                ArgumentFlags.REST_OF_LINE,
                positional=True,
                collection=list,
                default=[],
                description="Arguments to parse.",
            ),
        ],
        style="getopt",
    )
    complete_schema = ArgumentSchema(
        [
            _config_argument(),
            ArgumentDescriptor(
                "index",
                int,
                default=None,
                validators=(MustBeInRange(minimum=0),),
                description="Index of the token to complete; the last token by default.",
            ),
            ArgumentDescriptor(
                "arguments",
                str,
                ArgumentFlags.REST_OF_LINE,
                positional=True,
                collection=list,
                default=[],
                description="The partial command line.",
            ),
        ],
        style="getopt",
    )
    repl_schema = ArgumentSchema(
        [
            _config_argument(),
            ArgumentDescriptor("prompt", str, default="> ", description="Prompt text."),
            ArgumentDescriptor(
                "history_size",
                int,
                long_name="history-size",
                default=None,
                validators=(MustBeInRange(minimum=1),),
                description="Maximum number of history entries.",
            ),
        ],
        style="getopt",
    )
    commands = {
        "parse": CommandDefinition(ParseCommand, parse_schema, ParseCommand.__doc__ or ""),
        "complete": CommandDefinition(
            CompleteCommand, complete_schema, CompleteCommand.__doc__ or ""
        ),
        "repl": CommandDefinition(ReplCommand, repl_schema, ReplCommand.__doc__ or ""),
    }
    return ArgumentSchema(
        [
            ArgumentDescriptor(
                "command",
                CommandGroupArgumentType(commands),
                ArgumentFlags.REQUIRED,
                positional=True,
                description="The sub-command to run.",
            ),
            ArgumentDescriptor(
                "log_mode",
                Literal["cli", "json"],
                long_name="log-mode",
                default=None,
                description="Enable logging in the given mode.",
            ),
            ArgumentDescriptor("debug", bool, default=False, description="Log debug output."),
        ],
        style="getopt",
        name="clapkit",
    )


def split_passthrough(tokens: list[str]) -> tuple[list[str], list[str] | None]:
    """Split tokens at the first bare `--` into our own and the examined ones."""
    if "--" not in tokens:
        return tokens, None
    split = tokens.index("--")
    return tokens[:split], tokens[split + 1 :]


def main(argv: Sequence[str] | None = None) -> int:
    tokens, passthrough = split_passthrough(list(sys.argv[1:] if argv is None else argv))
    args = Namespace()
    if not try_parse(get_root_schema(), tokens, args, ParserOptions()):
        return 2

    if passthrough is not None:
        command = args.command.get_destination()
        if not hasattr(command, "arguments"):
            error_console.print(
                f"The '{args.command}' command does not take arguments after '--'.",
                style="error",
                markup=False,
            )
            return 2
        command.arguments = [*command.arguments, *passthrough]

    if args.log_mode or args.debug:
        setup_logging(
            args.log_mode,
            console_log_level=logging.DEBUG if args.debug else logging.WARNING,
        )

    try:
        return args.command.execute()
    except (ClapkitError, FileNotFoundError) as error:
        error_console.print(str(error), style="error", markup=False)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
