# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Pluggable value coercion strategies for arguments.

Every argument refers to an `ArgumentType` that knows how to parse, format,
validate and complete values of one Python type. Built-in strategies cover `str`,
`int`, `float`, `bool`, `datetime`, `Path`, `Enum` and `Literal`; anything else falls
back to `CoercedArgumentType`, which uses `coerce_value` and therefore understands
unions and plain converter callables.

Parsing never raises for bad user input: `try_parse` returns a `CoercionResult`
that carries either the value or the reason it was rejected.

Public Interface:
- `ArgumentType`: Base strategy class.
- `get_argument_type(value_type)`: Resolve a Python type to a strategy.
- `ArgumentParseContext` / `ArgumentCompletionContext`: Context passed to strategies.
"""
from __future__ import annotations

import os
import types
from dataclasses import dataclass, field
from datetime import datetime
from enum import EnumMeta
from pathlib import Path
from typing import Any, Callable, Literal, Union, get_args, get_origin

from dateutil import parser as date_parser

from clapkit.parser.file_system import FileSystemReader, FileSystemReaderProtocol
from clapkit.parser.utils import (
    coerce_bool,
    coerce_enum,
    coerce_value,
    filter_by_prefix,
    format_enum_member,
)


@dataclass
class ArgumentParseContext:
    """Ambient information available while parsing a value."""

    file_system_reader: FileSystemReaderProtocol = field(
        default_factory=FileSystemReader
    )
    containing_object: Any = None
    case_sensitive: bool = False
    command_factory: Callable[[Any, Any], Any] | None = None


@dataclass
class ArgumentCompletionContext:
    """Ambient information available while generating completions."""

    parse_context: ArgumentParseContext = field(default_factory=ArgumentParseContext)
    tokens: list[str] = field(default_factory=list)
    token_index: int = 0
    in_progress_destination: Any = None


@dataclass(frozen=True)
class CoercionResult:
    """Outcome of parsing one value: either `value` or an `error` message."""

    success: bool
    value: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, value: Any) -> CoercionResult:
        return cls(True, value)

    @classmethod
    def fail(cls, error: str) -> CoercionResult:
        return cls(False, None, error)


class ArgumentType:
    """
    Base class for value coercion strategies.

    Subclasses implement `parse`, raising `ValueError` for text that does not fit,
    and may override `format`, `get_completions` and `validate`.
    """

    type: Any = object

    @property
    def display_name(self) -> str:
        return getattr(self.type, "__name__", str(self.type))

    def parse(self, context: ArgumentParseContext, text: str) -> Any:
        raise NotImplementedError

    def try_parse(self, context: ArgumentParseContext, text: str) -> CoercionResult:
        try:
            return CoercionResult.ok(self.parse(context, text))
        except (ValueError, TypeError, OverflowError) as error:
            return CoercionResult.fail(str(error) or f"'{text}' is not valid")

    def format(self, value: Any) -> str:
        return str(value)

    def get_completions(
        self, context: ArgumentCompletionContext | None, prefix: str
    ) -> list[str]:
        return []

    def validate(self, context: ArgumentParseContext, value: Any) -> str | None:
        """Return a reason the value is unacceptable, or None."""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.display_name})"


class StringArgumentType(ArgumentType):
    """Strings. Empty strings are rejected unless `allow_empty` is set."""

    type = str

    def __init__(self, allow_empty: bool = False):
        self.allow_empty = allow_empty

    def parse(self, context: ArgumentParseContext, text: str) -> str:
        if not text and not self.allow_empty:
            raise ValueError("The provided string is empty")
        return text


class IntegerArgumentType(ArgumentType):
    """Integers, accepting `0x`, `0o` and `0b` prefixes as well as plain decimal."""

    type = int

    def parse(self, context: ArgumentParseContext, text: str) -> int:
        stripped = text.strip()
        if not stripped:
            raise ValueError("an integer value is required")
        try:
            return int(stripped)
        except ValueError:
            pass
        try:
            return int(stripped, 0)
        except ValueError:
            raise ValueError(f"'{text}' is not a valid integer") from None


class FloatArgumentType(ArgumentType):
    type = float

    def parse(self, context: ArgumentParseContext, text: str) -> float:
        try:
            return float(text)
        except ValueError:
            raise ValueError(f"'{text}' is not a valid number") from None


class BoolArgumentType(ArgumentType):
    """
    Booleans. An empty value means True so `--flag` works as a switch, and
    `--flag+` / `--flag-` turn it on or off.
    """

    type = bool

    def parse(self, context: ArgumentParseContext, text: str) -> bool:
        if text in ("", "+"):
            return True
        if text == "-":
            return False
        return coerce_bool(text)

    def format(self, value: Any) -> str:
        return "true" if value else "false"

    def get_completions(
        self, context: ArgumentCompletionContext | None, prefix: str
    ) -> list[str]:
        return filter_by_prefix(["false", "true"], prefix)


class EnumArgumentType(ArgumentType):
    """Enum members, matched by name (case-insensitive) or by value."""

    def __init__(self, enum_type: EnumMeta):
        self.type = enum_type

    def parse(self, context: ArgumentParseContext, text: str) -> Any:
        return coerce_enum(text, self.type, case_sensitive=context.case_sensitive)

    def format(self, value: Any) -> str:
        return format_enum_member(value)

    def get_completions(
        self, context: ArgumentCompletionContext | None, prefix: str
    ) -> list[str]:
        names = sorted(format_enum_member(member) for member in self.type)
        return filter_by_prefix(names, prefix)


class LiteralArgumentType(ArgumentType):
    """A fixed set of choices taken from a `typing.Literal`."""

    def __init__(self, literal_type: Any):
        self.type = literal_type
        self.choices: tuple[Any, ...] = get_args(literal_type)

    @property
    def display_name(self) -> str:
        return "{" + ",".join(str(choice) for choice in self.choices) + "}"

    def parse(self, context: ArgumentParseContext, text: str) -> Any:
        return coerce_value(text, self.type)

    def get_completions(
        self, context: ArgumentCompletionContext | None, prefix: str
    ) -> list[str]:
        return filter_by_prefix([str(choice) for choice in self.choices], prefix)


class DateTimeArgumentType(ArgumentType):
    type = datetime

    def parse(self, context: ArgumentParseContext, text: str) -> datetime:
        try:
            return date_parser.parse(text)
        except (ValueError, OverflowError) as error:
            raise ValueError(f"Value '{text}' could not be parsed as a datetime") from error

    def format(self, value: Any) -> str:
        return value.isoformat()


class PathArgumentType(ArgumentType):
    """File system paths, completed from the entries on disk."""

    type = Path

    def parse(self, context: ArgumentParseContext, text: str) -> Path:
        if not text:
            raise ValueError("a path is required")
        return Path(text)

    def get_completions(
        self, context: ArgumentCompletionContext | None, prefix: str
    ) -> list[str]:
        reader = (
            context.parse_context.file_system_reader if context else FileSystemReader()
        )
        return complete_file_system_path(reader, prefix)


class CoercedArgumentType(ArgumentType):
    """Fallback strategy built on `coerce_value` for unions and converter callables."""

    def __init__(self, target_type: Any):
        self.type = target_type

    @property
    def display_name(self) -> str:
        if get_args(self.type):
            return str(self.type).replace("typing.", "")
        return getattr(self.type, "__name__", str(self.type))

    def parse(self, context: ArgumentParseContext, text: str) -> Any:
        return coerce_value(text, self.type)


def complete_file_system_path(reader: FileSystemReaderProtocol, prefix: str) -> list[str]:
    """Complete a partial path against the entries in its directory."""
    separator_index = max(prefix.rfind("/"), prefix.rfind(os.sep))
    if separator_index >= 0:
        directory = prefix[: separator_index + 1]
        partial = prefix[separator_index + 1 :]
    else:
        directory = ""
        partial = prefix
    search_directory = directory or "."
    entries = reader.enumerate_entries(search_directory, f"{partial}*")
    return [f"{directory}{entry}" for entry in entries]


_BUILTIN_TYPES: dict[Any, Callable[[], ArgumentType]] = {
    str: StringArgumentType,
    int: IntegerArgumentType,
    float: FloatArgumentType,
    bool: BoolArgumentType,
    datetime: DateTimeArgumentType,
    Path: PathArgumentType,
}


def get_argument_type(value_type: Any) -> ArgumentType:
    """
    Resolve a Python type (or an existing strategy) to an `ArgumentType`.

    Args:
        value_type (Any): A type such as `int`, an Enum class, a `Literal[...]`,
            a union, a converter callable, or an `ArgumentType` instance.

    Returns:
        ArgumentType: The coercion strategy to use.
    """
    if isinstance(value_type, ArgumentType):
        return value_type
    if value_type in _BUILTIN_TYPES:
        return _BUILTIN_TYPES[value_type]()
    if isinstance(value_type, EnumMeta):
        return EnumArgumentType(value_type)
    if get_origin(value_type) is Literal:
        return LiteralArgumentType(value_type)
    if isinstance(value_type, types.UnionType) or get_origin(value_type) is Union:
        return CoercedArgumentType(value_type)
    if callable(value_type):
        return CoercedArgumentType(value_type)
    raise TypeError(f"Unsupported argument value type: {value_type!r}")
