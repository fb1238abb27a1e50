# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Completion adapters between argument schemas, the line editor and Prompt Toolkit.

- `ArgumentSetCompleter`: A `TokenCompleter` that completes command lines against
  an `ArgumentSchema`, usable directly with `LineEditor`.
- `PromptToolkitCompleter`: Wraps any `TokenCompleter` as a Prompt Toolkit
  `Completer`, so the same completions drive a `PromptSession`.

Both work on whole tokens: the token under the cursor is located with the
Clapkit tokenizer, completions are requested for it, and values containing
whitespace come back quoted.
"""

from __future__ import annotations

from argparse import Namespace
from dataclasses import replace
from typing import Any, Callable, Iterable

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from clapkit.console_input.token_completion import TokenCompleter, TokenCompletionSet
from clapkit.logger import logger
from clapkit.parser.command_line_parser import get_completions
from clapkit.parser.parser_options import ParserOptions, quiet_reporter
from clapkit.parser.schema import ArgumentSchema


class ArgumentSetCompleter:
    """
    Completes tokens of a command line described by an `ArgumentSchema`.

    Args:
        schema (ArgumentSchema): The arguments being completed.
        options (ParserOptions | None): Parser options. Errors are never reported
            while completing, so the reporter is ignored.
        destination_factory (Callable[[], Any] | None): Creates the throwaway
            object the partial command line is parsed into.
    """

    def __init__(
        self,
        schema: ArgumentSchema,
        options: ParserOptions | None = None,
        destination_factory: Callable[[], Any] | None = Namespace,
    ) -> None:
        self.schema = schema
        self.options = options or ParserOptions.quiet()
        self.destination_factory = destination_factory

    def get_completions(self, tokens: list[str], token_index: int) -> list[str]:
        options = replace(self.options, reporter=quiet_reporter, display_usage_on_error=False)
        return get_completions(
            self.schema, tokens, token_index, self.destination_factory, options
        )


class PromptToolkitCompleter(Completer):
    """
    Prompt Toolkit completer backed by a `TokenCompleter`.

    The token containing the cursor is replaced as a whole, from its first
    character (including any opening quote) up to the cursor.

    Args:
        token_completer (TokenCompleter): Source of completions, such as an
            `ArgumentSetCompleter`.
    """

    def __init__(self, token_completer: TokenCompleter):
        self.token_completer = token_completer

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        cursor_position = document.cursor_position
        try:
            completions = TokenCompletionSet.create(
                document.text, cursor_position, self.token_completer
            )
        except ValueError as error:
            logger.debug("Cannot complete %r: %s", document.text, error)
            return

        token_start = min(completions.original_token.outer_start, cursor_position)
        for completion in completions.completions:
            yield Completion(completion, start_position=token_start - cursor_position)
