# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Entry points for parsing command lines against an `ArgumentSchema`.

Functions:
- try_parse: Parse into a destination, report errors and return a success flag.
- parse: Parse into a destination (an `argparse.Namespace` by default) and raise
  `ArgumentParseError` carrying every collected error message on failure.
- get_completions: Complete one token of a partially typed command line.
- format_usage: Build a one-line usage summary for a schema.

Each call builds a fresh `ArgumentSetParser`, so calls are independent.
"""
from __future__ import annotations

from argparse import Namespace
from dataclasses import replace
from typing import Any, Callable, Sequence

from clapkit.exceptions import ArgumentParseError
from clapkit.logger import logger
from clapkit.parser.argument_set_parser import ArgumentSetParser
from clapkit.parser.parser_options import ParserOptions
from clapkit.parser.schema import ArgumentSchema
from clapkit.utils import get_program_invocation


def try_parse(
    schema: ArgumentSchema,
    tokens: Sequence[str],
    destination: Any,
    options: ParserOptions | None = None,
) -> bool:
    """
    Parse `tokens` into `destination`.

    Errors go to `options.reporter` (stderr by default). When the parse fails and
    `options.display_usage_on_error` is set, a usage line is reported as well.

    Returns:
        bool: True if every token was consumed and every argument finalized.
    """
    options = options or ParserOptions()
    parser = ArgumentSetParser(schema, options)
    result = parser.parse_argument_list(tokens, destination)
    logger.debug("Parsed %d token(s): %s", len(tokens), result.state)
    if result.is_ready:
        return True
    if options.display_usage_on_error:
        options.reporter(format_usage(schema))
    return False


def parse(
    schema: ArgumentSchema,
    tokens: Sequence[str],
    destination: Any = None,
    options: ParserOptions | None = None,
) -> Any:
    """
    Parse `tokens` and return the populated destination.

    Args:
        schema (ArgumentSchema): The argument set to parse against.
        tokens (Sequence[str]): Command line tokens, without the program name.
        destination (Any): Object or mapping to fill; a new `Namespace` if omitted.
        options (ParserOptions | None): Parser options; quiet by default. Error
            lines are forwarded to `options.reporter` as they are found.

    Returns:
        Any: The destination.

    Raises:
        ArgumentParseError: If parsing failed. `errors` holds every message.
    """
    if destination is None:
        destination = Namespace()
    options = options or ParserOptions.quiet()
    errors: list[str] = []

    def collect(message: str) -> None:
        errors.append(message.strip())
        options.reporter(message)

    parser = ArgumentSetParser(schema, replace(options, reporter=collect))
    result = parser.parse_argument_list(tokens, destination)
    if not result.is_ready:
        raise ArgumentParseError(errors)
    return destination


def get_completions(
    schema: ArgumentSchema,
    tokens: Sequence[str],
    token_index: int,
    destination_factory: Callable[[], Any] | None = Namespace,
    options: ParserOptions | None = None,
) -> list[str]:
    """Return completions for `tokens[token_index]`. See `ArgumentSetParser`."""
    parser = ArgumentSetParser(schema, options or ParserOptions.quiet())
    return parser.get_completions(tokens, token_index, destination_factory)


def format_usage(schema: ArgumentSchema, program_name: str | None = None) -> str:
    """
    Build a compact usage line, e.g. `Usage: tool --value=<int> [--flag] <path>`.

    Hidden arguments are left out.
    """
    program = program_name or schema.name or get_program_invocation()
    prefix = schema.named_argument_prefixes[0] if schema.named_argument_prefixes else ""
    separator = (
        schema.argument_value_separators[0] if schema.argument_value_separators else " "
    )
    parts = [
        argument.get_syntax(prefix, separator)
        for argument in schema.all_arguments
        if not argument.hidden
    ]
    return " ".join(["Usage:", program, *parts])
