# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Value validators that can be attached to arguments.

A validator checks a successfully parsed value and returns a reason string when the
value is unacceptable. Each validator also declares which argument types it makes
sense for; attaching one to an incompatible argument is a schema construction error.

Included Validators:
- MustNotBeEmpty: Rejects empty strings and paths.
- MustBeInRange: Rejects numbers or datetimes outside `[minimum, maximum]`.
- MustMatchRegex / MustNotMatchRegex: Constrain string values by pattern.
- MustExist / MustNotExist: Check paths against the file system.
"""
from __future__ import annotations

import re
from typing import Any

from clapkit.parser.argument_types import (
    ArgumentParseContext,
    ArgumentType,
    DateTimeArgumentType,
    FloatArgumentType,
    IntegerArgumentType,
    PathArgumentType,
    StringArgumentType,
)


class ArgumentValidator:
    """Base class for argument value validators."""

    accepted_types: tuple[type[ArgumentType], ...] = (ArgumentType,)

    def accepts(self, argument_type: ArgumentType) -> bool:
        return isinstance(argument_type, self.accepted_types)

    def validate(self, context: ArgumentParseContext, value: Any) -> str | None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class MustNotBeEmpty(ArgumentValidator):
    accepted_types = (StringArgumentType, PathArgumentType)

    def validate(self, context: ArgumentParseContext, value: Any) -> str | None:
        if not str(value):
            return "Value must not be empty"
        return None


class MustBeInRange(ArgumentValidator):
    """Inclusive range check; either bound may be omitted."""

    accepted_types = (IntegerArgumentType, FloatArgumentType, DateTimeArgumentType)

    def __init__(self, minimum: Any = None, maximum: Any = None):
        if minimum is None and maximum is None:
            raise ValueError("MustBeInRange needs a minimum, a maximum, or both")
        self.minimum = minimum
        self.maximum = maximum

    def validate(self, context: ArgumentParseContext, value: Any) -> str | None:
        if self.minimum is not None and value < self.minimum:
            return f"Value {value} must be greater than or equal to {self.minimum}"
        if self.maximum is not None and value > self.maximum:
            return f"Value {value} must be less than or equal to {self.maximum}"
        return None

    def __repr__(self) -> str:
        return f"MustBeInRange(minimum={self.minimum!r}, maximum={self.maximum!r})"


class MustMatchRegex(ArgumentValidator):
    accepted_types = (StringArgumentType,)

    def __init__(self, pattern: str, flags: int = 0):
        self.pattern = re.compile(pattern, flags)

    def validate(self, context: ArgumentParseContext, value: Any) -> str | None:
        if not self.pattern.search(value):
            return f"Value '{value}' does not match pattern '{self.pattern.pattern}'"
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.pattern.pattern!r})"


class MustNotMatchRegex(MustMatchRegex):
    def validate(self, context: ArgumentParseContext, value: Any) -> str | None:
        if self.pattern.search(value):
            return f"Value '{value}' must not match pattern '{self.pattern.pattern}'"
        return None


class MustExist(ArgumentValidator):
    """
    Requires the path to exist.

    Args:
        kind (str): "file", "directory" or "any".
    """

    accepted_types = (PathArgumentType,)

    def __init__(self, kind: str = "any"):
        if kind not in ("file", "directory", "any"):
            raise ValueError(f"Invalid path kind: '{kind}'")
        self.kind = kind

    def _exists(self, context: ArgumentParseContext, value: Any) -> bool:
        reader = context.file_system_reader
        path = str(value)
        if self.kind == "file":
            return reader.file_exists(path)
        if self.kind == "directory":
            return reader.directory_exists(path)
        return reader.file_exists(path) or reader.directory_exists(path)

    def validate(self, context: ArgumentParseContext, value: Any) -> str | None:
        if not self._exists(context, value):
            noun = "path" if self.kind == "any" else self.kind
            return f"The {noun} '{value}' does not exist"
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r})"


class MustNotExist(MustExist):
    def validate(self, context: ArgumentParseContext, value: Any) -> str | None:
        if self._exists(context, value):
            noun = "path" if self.kind == "any" else self.kind
            return f"The {noun} '{value}' already exists"
        return None
