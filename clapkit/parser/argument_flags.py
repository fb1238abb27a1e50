# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Flag enums describing argument multiplicity, name kinds and name generation.

Contents:
- `ArgumentFlags`: How often an argument may or must appear, and how it consumes input.
- `ArgumentNameType`: Distinguishes long names (`--value`) from short names (`-v`).
- `ArgumentNameGeneration`: How an argument set derives names it was not given.
"""
from __future__ import annotations

from enum import Enum, IntFlag


class ArgumentFlags(IntFlag):
    """
    Multiplicity and consumption flags for a single argument.

    Members:
        AT_MOST_ONCE: The argument may appear zero or one times (default).
        REQUIRED: The argument must appear at least once.
        MULTIPLE: The argument may appear more than once.
        UNIQUE: Each collected value must be distinct. Only valid on collections.
        REST_OF_LINE: Once seen, the argument consumes every remaining token.
        MULTIPLE_UNIQUE: `MULTIPLE | UNIQUE`.
        AT_LEAST_ONCE: `MULTIPLE | REQUIRED`.
    """

    AT_MOST_ONCE = 0
    REQUIRED = 1
    MULTIPLE = 2
    UNIQUE = 4
    REST_OF_LINE = 8
    MULTIPLE_UNIQUE = MULTIPLE | UNIQUE
    AT_LEAST_ONCE = MULTIPLE | REQUIRED

    @classmethod
    def from_names(cls, names: list[str] | str) -> ArgumentFlags:
        """Combine flags given by name, e.g. `["required", "multiple"]`."""
        if isinstance(names, str):
            names = [names]
        flags = cls.AT_MOST_ONCE
        for name in names:
            normalized = name.strip().upper().replace("-", "_")
            try:
                flags |= cls[normalized]
            except KeyError:
                valid = ", ".join(member.name.lower() for member in cls)
                raise ValueError(
                    f"Invalid {cls.__name__}: '{name}'. Must be one of: {valid}"
                ) from None
        return flags


class ArgumentNameType(Enum):
    """The kind of name used to refer to a named argument."""

    SHORT_NAME = "short"
    LONG_NAME = "long"

    def __str__(self) -> str:
        return self.value


class ArgumentNameGeneration(IntFlag):
    """Controls how long and short names are derived for an argument set."""

    NONE = 0
    GENERATE_HYPHENATED_LOWER_CASE_LONG_NAMES = 1
    PREFER_LOWER_CASE_FOR_SHORT_NAMES = 2
