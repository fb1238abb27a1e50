# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Result values returned by the argument set parser's internal steps.

`ParseResult` is a small tagged value: a `ParseResultType` plus the payload that
only some states carry (the unknown name and its kind, or the argument still
waiting for its option value).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from clapkit.parser.argument_flags import ArgumentNameType
from clapkit.parser.descriptor import ArgumentDescriptor


class ParseResultType(Enum):
    """States a parse step can end in."""

    READY = "ready"
    UNKNOWN_NAMED_ARGUMENT = "unknown_named_argument"
    UNKNOWN_POSITIONAL_ARGUMENT = "unknown_positional_argument"
    FAILED_PARSING = "failed_parsing"
    FAILED_FINALIZING = "failed_finalizing"
    INVALID_ANSWER_FILE = "invalid_answer_file"
    REQUIRES_OPTION_ARGUMENT = "requires_option_argument"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of parsing one or more tokens.

    Attributes:
        state (ParseResultType): What happened.
        name_type (ArgumentNameType | None): For unknown named arguments, the kind
            of name that failed to resolve.
        name (str | None): For unknown named arguments, the name that failed.
        argument (ArgumentDescriptor | None): For `REQUIRES_OPTION_ARGUMENT`, the
            argument still waiting for a value.
    """

    state: ParseResultType
    name_type: ArgumentNameType | None = None
    name: str | None = None
    argument: ArgumentDescriptor | None = None

    @classmethod
    def ready(cls) -> ParseResult:
        return cls(ParseResultType.READY)

    @classmethod
    def unknown_named_argument(
        cls, name_type: ArgumentNameType | None = None, name: str | None = None
    ) -> ParseResult:
        return cls(ParseResultType.UNKNOWN_NAMED_ARGUMENT, name_type, name)

    @classmethod
    def unknown_positional_argument(cls) -> ParseResult:
        return cls(ParseResultType.UNKNOWN_POSITIONAL_ARGUMENT)

    @classmethod
    def failed_parsing(cls) -> ParseResult:
        return cls(ParseResultType.FAILED_PARSING)

    @classmethod
    def failed_finalizing(cls) -> ParseResult:
        return cls(ParseResultType.FAILED_FINALIZING)

    @classmethod
    def invalid_answer_file(cls) -> ParseResult:
        return cls(ParseResultType.INVALID_ANSWER_FILE)

    @classmethod
    def requires_option_argument(cls, argument: ArgumentDescriptor) -> ParseResult:
        return cls(ParseResultType.REQUIRES_OPTION_ARGUMENT, argument=argument)

    @property
    def is_ready(self) -> bool:
        return self.state == ParseResultType.READY

    @property
    def is_unknown(self) -> bool:
        return self.state == ParseResultType.UNKNOWN_NAMED_ARGUMENT
