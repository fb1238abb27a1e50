# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Implements `ArgumentSetParser`, the token consumption engine behind Clapkit.

The parser walks a token list once, classifying each token as a named argument
(`--value=10`, `-v`, `-abc`), an answer file reference (`@args.txt`) or a positional
value, and hands every value to the matching `ArgumentBindingState`. Problems are
reported through the configured reporter and parsing continues, so a single pass
surfaces every error; the overall result is the last result that was not `READY`.

Key Features:
- Long and short names, inline values after a separator, `+`/`-` switch terminators.
- Bundled short names (`-abc`) and elided short values (`-ofile`) when enabled.
- Values in the following token (`--value 10`) when enabled.
- Rest-of-line arguments that swallow every remaining token verbatim.
- Answer files: one token per line, blank lines and `#` comments ignored.
- Nested argument providers: binding a `CommandGroup` (or any `ArgumentProvider`)
  pushes the provider's schema as a new frame; later lookups search frames from
  the innermost outward, and the shared schemas are never mutated.
- "Did you mean" suggestions for unknown names.
- Completion of partially typed tokens, driven by a re-parse of the tokens before
  the one being completed.

A parser instance holds the state of one parse. Create a fresh instance for each
token list; `get_completions` resets the instance before it starts.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Sequence

from clapkit.logger import logger
from clapkit.parser.argument_flags import ArgumentNameType
from clapkit.parser.argument_types import (
    ArgumentCompletionContext,
    ArgumentParseContext,
    complete_file_system_path,
)
from clapkit.parser.binding import ArgumentBindingState
from clapkit.parser.command_group import ArgumentProvider
from clapkit.parser.descriptor import ArgumentDescriptor
from clapkit.parser.parse_result import ParseResult, ParseResultType
from clapkit.parser.parser_options import ParserOptions, quiet_reporter
from clapkit.parser.schema import ArgumentSchema
from clapkit.parser.utils import filter_by_prefix
from clapkit.utils import damerau_levenshtein_distance

ANSWER_FILE_COMMENT_PREFIX = "#"
ARGUMENT_NAME_TERMINATORS = ("+", "-")


@dataclass
class ParserFrame:
    """One schema on the parser's stack together with the object it fills in."""

    schema: ArgumentSchema
    destination: Any = None
    containing_argument: ArgumentDescriptor | None = None
    positional_base: int = 0


@dataclass
class _ArgumentAndValue:
    frame_index: int
    argument: ArgumentDescriptor
    value: str | None = None


class ArgumentSetParser:
    """
    Parses token lists against an `ArgumentSchema`.

    Args:
        schema (ArgumentSchema): The root argument set.
        options (ParserOptions | None): Reporter, file system and command factory.
            Defaults to quiet options.
    """

    def __init__(self, schema: ArgumentSchema, options: ParserOptions | None = None):
        self.schema = schema
        self.options = options or ParserOptions.quiet()
        self._reporter: Callable[[str], None] = self.options.reporter
        self.frames: list[ParserFrame] = [ParserFrame(schema)]
        self._bindings: dict[tuple[int, int], ArgumentBindingState] = {}
        self.next_positional_index = 0
        self._open_answer_files: set[str] = set()

    def _reset(self) -> None:
        self.frames = [ParserFrame(self.schema)]
        self._bindings = {}
        self.next_positional_index = 0
        self._open_answer_files = set()

    def _report(self, message: str) -> None:
        self._reporter(message)

    def _starts_with(self, token: str, prefix: str) -> bool:
        if self.schema.case_sensitive:
            return token.startswith(prefix)
        return token.lower().startswith(prefix.lower())

    def _get_prefix(
        self, token: str, prefixes: Sequence[str] | None, allow_bare: bool = False
    ) -> str | None:
        for prefix in prefixes or ():
            if not prefix or not self._starts_with(token, prefix):
                continue
            if allow_bare or len(token) > len(prefix):
                return prefix
        return None

    def _get_long_prefix(self, token: str, allow_bare: bool = False) -> str | None:
        return self._get_prefix(token, self.schema.named_argument_prefixes, allow_bare)

    def _get_short_prefix(self, token: str, allow_bare: bool = False) -> str | None:
        return self._get_prefix(
            token, self.schema.short_name_argument_prefixes, allow_bare
        )

    def _get_answer_file_prefix(self, token: str) -> str | None:
        prefix = self.schema.answer_file_argument_prefix
        return self._get_prefix(token, [prefix] if prefix else None, allow_bare=True)

    def _find_named_argument(
        self, name_type: ArgumentNameType, name: str
    ) -> tuple[int, ArgumentDescriptor] | None:
        for frame_index in reversed(range(len(self.frames))):
            argument = self.frames[frame_index].schema.try_get_named_argument(
                name_type, name
            )
            if argument is not None:
                return frame_index, argument
        return None

    def _find_positional(self, index: int) -> tuple[int, ArgumentDescriptor] | None:
        for frame_index in reversed(range(len(self.frames))):
            frame = self.frames[frame_index]
            relative = index - frame.positional_base
            if 0 <= relative < frame.schema.positional_count:
                argument = frame.schema.get_positional(relative)
                if argument is not None:
                    return frame_index, argument
        return None

    def _get_state(
        self, frame_index: int, argument: ArgumentDescriptor
    ) -> ArgumentBindingState:
        key = (frame_index, argument.id)
        state = self._bindings.get(key)
        if state is None:
            frame = self.frames[frame_index]
            prefixes = frame.schema.named_argument_prefixes
            state = ArgumentBindingState(
                argument,
                frame.destination,
                self._create_parse_context(frame.destination, frame.schema),
                self._report,
                named_argument_prefix=prefixes[0] if prefixes else "",
            )
            self._bindings[key] = state
        return state

    def _create_parse_context(
        self, destination: Any, schema: ArgumentSchema | None = None
    ) -> ArgumentParseContext:
        return ArgumentParseContext(
            file_system_reader=self.options.file_system_reader,
            containing_object=destination,
            case_sensitive=(schema or self.schema).case_sensitive,
            command_factory=self.options.command_factory,
        )

    def has_seen_value_for(self, argument: ArgumentDescriptor, frame_index: int = 0) -> bool:
        state = self._bindings.get((frame_index, argument.id))
        return state is not None and state.seen_value

    def parse_argument_list(self, tokens: Sequence[str], destination: Any) -> ParseResult:
        """Parse every token and, if that succeeded, finalize all arguments."""
        result = self.parse_tokens(tokens, destination)
        if not result.is_ready:
            return result
        return self.finalize()

    def parse_tokens(self, tokens: Sequence[str], destination: Any = None) -> ParseResult:
        """
        Parse a token list into `destination` without finalizing.

        Args:
            tokens (Sequence[str]): Tokens to consume.
            destination (Any): Object or mapping receiving the root frame's values.

        Returns:
            ParseResult: `READY`, or the last failure seen.
        """
        if destination is not None:
            self.frames[0].destination = destination
        return self._parse_tokens(list(tokens))

    def _parse_tokens(self, tokens: list[str]) -> ParseResult:
        result = ParseResult.ready()
        index = 0
        while index < len(tokens):
            current, consumed = self._parse_next_token(tokens, index)
            if not current.is_ready:
                result = current
            index += consumed
        return result

    def _parse_next_token(self, tokens: list[str], index: int) -> tuple[ParseResult, int]:
        token = tokens[index]

        long_prefix = self._get_long_prefix(token)
        short_prefix = self._get_short_prefix(token)
        if long_prefix is not None or short_prefix is not None:
            logger.debug("Token '%s' is a named argument", token)
            return self._parse_named_argument(tokens, index, long_prefix, short_prefix)

        answer_file_prefix = self._get_answer_file_prefix(token)
        if answer_file_prefix is not None:
            logger.debug("Token '%s' is an answer file", token)
            return self._parse_answer_file(token, answer_file_prefix), 1

        logger.debug("Token '%s' is a positional argument", token)
        return self._parse_positional_argument(tokens, index)

    def _parse_named_argument(
        self,
        tokens: list[str],
        index: int,
        long_prefix: str | None,
        short_prefix: str | None,
    ) -> tuple[ParseResult, int]:
        token = tokens[index]
        start_index = index
        consumed = 1
        result = ParseResult.unknown_named_argument()
        parsed: list[_ArgumentAndValue] = []
        long_result: ParseResult | None = None

        if long_prefix is not None:
            result, parsed = self._try_parse_named_argument(
                token, long_prefix, ArgumentNameType.LONG_NAME
            )
            long_result = result
        if result.is_unknown and short_prefix is not None:
            result, parsed = self._try_parse_named_argument(
                token, short_prefix, ArgumentNameType.SHORT_NAME
            )
            if result.is_unknown and long_result is not None:
                result = long_result

        if (
            result.state == ParseResultType.REQUIRES_OPTION_ARGUMENT
            and self.schema.allow_named_argument_value_as_succeeding_token
            and index + 1 < len(tokens)
        ):
            index += 1
            consumed += 1
            parsed[-1].value = tokens[index]
            result = ParseResult.ready()

        if not result.is_ready:
            self._report_unrecognized_argument(result, token)
            return result, consumed

        for item in parsed:
            state = self._get_state(item.frame_index, item.argument)
            if item.argument.takes_rest_of_line:
                rest = [] if item.value is None else [item.value]
                rest.extend(tokens[index + 1 :])
                consumed = len(tokens) - start_index
                if not state.set_rest_of_line(rest):
                    result = ParseResult.failed_parsing()
            elif not self._try_parse_and_store(
                item.frame_index, state, item.value if item.value is not None else ""
            ):
                result = ParseResult.failed_parsing()

        return result, consumed

    def _try_parse_named_argument(
        self, token: str, prefix: str, name_type: ArgumentNameType
    ) -> tuple[ParseResult, list[_ArgumentAndValue]]:
        schema = self.schema
        separators = schema.argument_value_separators
        prefix_length = len(prefix)

        end_index = next(
            (i for i in range(prefix_length, len(token)) if token[i] in separators), -1
        )
        if end_index < 0 and len(token) >= 2 and token[-1] in ARGUMENT_NAME_TERMINATORS:
            end_index = len(token) - 1
        if end_index < 0:
            end_index = len(token)

        options = token[prefix_length:end_index]
        option_argument: str | None = None
        value_index = prefix_length + len(options)
        if len(token) > value_index:
            if token[value_index] in separators:
                option_argument = token[value_index + 1 :]
            else:
                option_argument = token[value_index:]

        if not options:
            return ParseResult.unknown_named_argument(name_type, token[prefix_length:]), []

        parsed: list[_ArgumentAndValue] = []
        if (
            name_type == ArgumentNameType.SHORT_NAME
            and schema.short_names_are_one_character_long
        ):
            index = 0
            while index < len(options):
                short_name = options[index]
                found = self._find_named_argument(ArgumentNameType.SHORT_NAME, short_name)
                if found is None:
                    return ParseResult.unknown_named_argument(name_type, short_name), []
                frame_index, argument = found

                last_char = index == len(options) - 1
                if (
                    argument.requires_option_argument
                    and schema.allow_eliding_separator_after_short_name
                    and option_argument is None
                    and not last_char
                ):
                    option_argument = options[index + 1 :]
                    last_char = True

                if not schema.allow_multiple_short_names_in_one_token and parsed:
                    return ParseResult.unknown_named_argument(), []

                parsed.append(
                    _ArgumentAndValue(
                        frame_index, argument, option_argument if last_char else None
                    )
                )
                if last_char:
                    break
                index += 1
        else:
            found = self._find_named_argument(name_type, options)
            if found is None:
                return ParseResult.unknown_named_argument(name_type, options), []
            frame_index, argument = found
            parsed.append(_ArgumentAndValue(frame_index, argument, option_argument))

        last = parsed[-1]
        if last.argument.requires_option_argument and not last.value:
            return ParseResult.requires_option_argument(last.argument), parsed
        return ParseResult.ready(), parsed

    def _parse_answer_file(self, token: str, prefix: str) -> ParseResult:
        file_path = token[len(prefix) :]
        resolved = str(Path(file_path).resolve())
        if resolved in self._open_answer_files:
            self._report(
                f"Unable to read or parse argument answer file '{file_path}': "
                "it includes itself"
            )
            return ParseResult.invalid_answer_file()
        try:
            lines = self.options.file_system_reader.get_lines(file_path)
        except OSError as error:
            self._report(
                f"Unable to read or parse argument answer file '{file_path}': {error}"
            )
            return ParseResult.invalid_answer_file()

        nested = [line.strip() for line in lines]
        nested = [
            line
            for line in nested
            if line and not line.startswith(ANSWER_FILE_COMMENT_PREFIX)
        ]
        logger.debug("Read %d token(s) from answer file '%s'", len(nested), file_path)
        self._open_answer_files.add(resolved)
        try:
            return self._parse_tokens(nested)
        finally:
            self._open_answer_files.discard(resolved)

    def _parse_positional_argument(
        self, tokens: list[str], index: int
    ) -> tuple[ParseResult, int]:
        token = tokens[index]
        found = self._find_positional(self.next_positional_index)
        if found is None:
            result = ParseResult.unknown_positional_argument()
            self._report_unrecognized_argument(result, token)
            return result, 1

        frame_index, argument = found
        if not argument.allow_multiple:
            self.next_positional_index += 1

        state = self._get_state(frame_index, argument)
        if argument.takes_rest_of_line:
            consumed = len(tokens) - index
            if not state.set_rest_of_line(tokens[index:]):
                return ParseResult.failed_parsing(), consumed
            return ParseResult.ready(), consumed

        if not self._try_parse_and_store(frame_index, state, token):
            return ParseResult.failed_parsing(), 1
        return ParseResult.ready(), 1

    def _try_parse_and_store(
        self, frame_index: int, state: ArgumentBindingState, value: str
    ) -> bool:
        schema = self.frames[frame_index].schema
        seen_conflicts = [
            other
            for other in schema.get_conflicts(state.argument)
            if self.has_seen_value_for(other, frame_index)
        ]
        result = state.parse_and_store(value, seen_conflicts)
        if not result.success:
            return False

        provider = result.value
        if not isinstance(provider, ArgumentProvider):
            provider = state.destination
        if isinstance(provider, ArgumentProvider):
            self._push_provider(provider, state.argument)
        return True

    def _push_provider(
        self, provider: ArgumentProvider, argument: ArgumentDescriptor
    ) -> None:
        schema = provider.get_argument_schema()
        if schema is None:
            return
        destination = provider.get_destination()
        for frame in self.frames:
            if frame.schema is schema and frame.destination is destination:
                return
        base = sum(frame.schema.positional_count for frame in self.frames)
        self.frames.append(ParserFrame(schema, destination, argument, base))
        logger.debug(
            "Pushed frame %d for '%s' (positional base %d)",
            len(self.frames) - 1,
            argument.long_name,
            base,
        )

    def finalize(self) -> ParseResult:
        """
        Apply defaults, build collections and check required arguments.

        Named arguments of every frame are finalized first, then positional ones.
        Every argument is processed even after a failure.
        """
        result = ParseResult.ready()
        ordered: list[tuple[int, ArgumentDescriptor]] = []
        for frame_index, frame in enumerate(self.frames):
            ordered.extend((frame_index, arg) for arg in frame.schema.named_arguments)
        for frame_index, frame in enumerate(self.frames):
            ordered.extend(
                (frame_index, arg) for arg in frame.schema.positional_arguments
            )

        for frame_index, argument in ordered:
            if not self._get_state(frame_index, argument).finalize():
                logger.debug("Failed to finalize '%s'", argument.long_name)
                result = ParseResult.failed_finalizing()
        return result

    def _report_unrecognized_argument(self, result: ParseResult, token: str) -> None:
        if result.state == ParseResultType.UNKNOWN_NAMED_ARGUMENT:
            self._report(f"Unrecognized command line argument '{token}'.")
            if result.name:
                possible = self.get_similar_named_arguments(result.name_type, result.name)
                if possible:
                    joined = ", ".join(f"'{name}'" for name in possible)
                    self._report(f"  Did you mean one of: {joined}?")
        elif result.state == ParseResultType.UNKNOWN_POSITIONAL_ARGUMENT:
            self._report(f"Unrecognized command line argument '{token}'.")
        elif result.state == ParseResultType.REQUIRES_OPTION_ARGUMENT:
            self._report(f"Missing required argument to command line option: '{token}'.")

    def _get_all_argument_names(self, name_type: ArgumentNameType) -> list[str]:
        names: list[str] = []
        for frame in self.frames:
            for name in frame.schema.get_argument_names(name_type):
                if name not in names:
                    names.append(name)
        return names

    def get_similar_named_arguments(
        self, name_type: ArgumentNameType | None, name: str
    ) -> list[str]:
        """
        Suggest known names close to `name`, each with its preferred prefix.

        A candidate is similar when one is a prefix of the other (ignoring case)
        or when their edit distance is at most half the length of `name`.
        """
        name_types = [name_type] if name_type else list(ArgumentNameType)
        suggestions = []
        for current_type in name_types:
            if current_type == ArgumentNameType.LONG_NAME:
                prefixes = self.schema.named_argument_prefixes
            else:
                prefixes = self.schema.short_name_argument_prefixes
            prefix = prefixes[0] if prefixes else ""
            for candidate in self._get_all_argument_names(current_type):
                if is_similar(name, candidate):
                    suggestions.append(f"{prefix}{candidate}")
        return suggestions

    def get_completions(
        self,
        tokens: Sequence[str],
        token_index: int,
        destination_factory: Callable[[], Any] | None = None,
    ) -> list[str]:
        """
        Generate completions for `tokens[token_index]`.

        Args:
            tokens (Sequence[str]): The tokens typed so far.
            token_index (int): Index of the token to complete; may equal
                `len(tokens)` to complete a new, empty token.
            destination_factory (Callable[[], Any] | None): Builds a scratch
                destination for the re-parse of the preceding tokens.

        Returns:
            list[str]: Candidate replacements for the token.

        Raises:
            IndexError: If `token_index` is beyond the end of `tokens`.
        """
        token_list = list(tokens)
        if token_index > len(token_list):
            raise IndexError(
                f"Token index {token_index} is out of range for {len(token_list)} tokens"
            )
        if token_index == len(token_list):
            token_list.append("")
        token_to_complete = token_list[token_index]

        self._reset()
        destination = destination_factory() if destination_factory else None
        self._reporter = quiet_reporter
        try:
            result = self.parse_argument_list(token_list[:token_index], destination)
        finally:
            self._reporter = self.options.reporter

        context = ArgumentCompletionContext(
            parse_context=self._create_parse_context(destination),
            tokens=token_list,
            token_index=token_index,
            in_progress_destination=destination,
        )

        if (
            result.state == ParseResultType.REQUIRES_OPTION_ARGUMENT
            and self.schema.allow_named_argument_value_as_succeeding_token
            and result.argument is not None
        ):
            return result.argument.argument_type.get_completions(
                context, token_to_complete
            )

        long_prefix = self._get_long_prefix(token_to_complete, allow_bare=True)
        short_prefix = self._get_short_prefix(token_to_complete, allow_bare=True)
        if long_prefix is not None or short_prefix is not None:
            completions: list[str] = []
            if long_prefix is not None:
                completions.extend(
                    long_prefix + completion
                    for completion in self._get_named_argument_completions(
                        ArgumentNameType.LONG_NAME,
                        token_to_complete[len(long_prefix) :],
                        context,
                    )
                )
            if short_prefix is not None:
                completions.extend(
                    short_prefix + completion
                    for completion in self._get_named_argument_completions(
                        ArgumentNameType.SHORT_NAME,
                        token_to_complete[len(short_prefix) :],
                        context,
                    )
                )
            return completions

        answer_file_prefix = self._get_answer_file_prefix(token_to_complete)
        if answer_file_prefix is not None:
            file_path = token_to_complete[len(answer_file_prefix) :]
            return [
                answer_file_prefix + completion
                for completion in complete_file_system_path(
                    self.options.file_system_reader, file_path
                )
            ]

        found = self._find_positional(self.next_positional_index)
        if found is None:
            return []
        return found[1].argument_type.get_completions(context, token_to_complete)

    def _get_named_argument_completions(
        self,
        name_type: ArgumentNameType,
        text: str,
        context: ArgumentCompletionContext,
    ) -> list[str]:
        separators = self.schema.argument_value_separators
        separator_index = next(
            (i for i, char in enumerate(text) if char in separators), -1
        )
        case_sensitive = self.schema.case_sensitive

        if separator_index < 0:
            names = sorted(
                self._get_all_argument_names(name_type),
                key=None if case_sensitive else str.lower,
            )
            return filter_by_prefix(names, text, case_sensitive)

        name = text[:separator_index]
        separator = text[separator_index]
        value = text[separator_index + 1 :]
        found = self._find_named_argument(name_type, name)
        if found is None:
            return []
        return [
            f"{name}{separator}{completion}"
            for completion in found[1].argument_type.get_completions(context, value)
        ]


def is_similar(user_value: str, candidate: str) -> bool:
    """Return True if `candidate` is a plausible intended spelling of `user_value`."""
    user_upper = user_value.upper()
    candidate_upper = candidate.upper()
    if user_upper.startswith(candidate_upper) or candidate_upper.startswith(user_upper):
        return True
    distance = damerau_levenshtein_distance(candidate_upper, user_upper)
    return distance <= len(user_value) // 2
