# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines the `ArgumentDescriptor` dataclass, the static description of one argument.

A descriptor records everything the parser needs to know about an argument: where
its value is stored, how the value is coerced, how often it may appear, its names,
its default and the validators it must pass. Descriptors are immutable; when an
`ArgumentSchema` registers one it stores a resolved copy carrying the generated
names and a stable integer `id` used to key per-parse binding state.

Key Attributes:
- `name`: Attribute (or mapping key) the parsed value is stored under.
- `value_type`: Python type, converter callable or `ArgumentType` for the value
  (the element type for collections).
- `flags`: `ArgumentFlags` multiplicity and consumption rules.
- `long_name` / `short_name`: Names used on the command line. A `short_name` of
  `None` asks the schema to derive one; `""` means no short name.
- `positional` / `position`: Whether the argument is matched by position.
- `collection`: `list`, `tuple`, `set` or `frozenset` for multi-valued arguments.
- `default`: Value applied when the argument is absent (`NO_DEFAULT` if none).
- `conflicts_with`: Names of arguments that may not be combined with this one.
- `validators`: `ArgumentValidator` rules the parsed value must satisfy.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from clapkit.exceptions import InvalidArgumentSetError
from clapkit.parser.argument_flags import ArgumentFlags, ArgumentNameType
from clapkit.parser.argument_types import (
    ArgumentParseContext,
    ArgumentType,
    get_argument_type,
)
from clapkit.parser.validators import ArgumentValidator

COLLECTION_TYPES = (list, tuple, set, frozenset)


class _NoDefault:
    """Sentinel type marking an argument without a default value."""

    def __repr__(self) -> str:
        return "NO_DEFAULT"

    def __bool__(self) -> bool:
        return False


NO_DEFAULT: Any = _NoDefault()


@dataclass(frozen=True, eq=False)
class ArgumentDescriptor:
    """
    Describes a single named or positional argument.

    Attributes:
        name (str): Destination attribute or key for the parsed value.
        value_type (Any): Type, converter or `ArgumentType` used to coerce values.
        flags (ArgumentFlags): Multiplicity and consumption flags.
        long_name (str | None): Long name; generated from `name` when omitted.
        short_name (str | None): Short name; `None` derives one, `""` disables it.
        positional (bool): True if the argument is matched by position.
        position (int | None): Position within its batch; assigned in order if omitted.
        collection (type | None): Collection type for multi-valued arguments.
        default (Any): Default value, or `NO_DEFAULT`.
        conflicts_with (tuple[str, ...]): Names of conflicting arguments.
        validators (tuple[ArgumentValidator, ...]): Rules the parsed value must pass.
        hidden (bool): Omit the argument from usage and name completion.
        description (str): Help text.
        id (int): Identity assigned by the schema; -1 until registered.
        short_name_explicit (bool | None): Whether the short name was given by the
            caller rather than derived. Computed when not supplied.
    """

    name: str
    value_type: Any = str
    flags: ArgumentFlags = ArgumentFlags.AT_MOST_ONCE
    long_name: str | None = None
    short_name: str | None = None
    positional: bool = False
    position: int | None = None
    collection: type | None = None
    default: Any = NO_DEFAULT
    conflicts_with: tuple[str, ...] = ()
    validators: tuple[ArgumentValidator, ...] = ()
    hidden: bool = False
    description: str = ""
    id: int = -1
    short_name_explicit: bool | None = None
    _argument_type: ArgumentType = field(init=False, repr=False)

    def __post_init__(self):
        if not self.name:
            raise InvalidArgumentSetError("Argument name must be a non-empty string.")
        object.__setattr__(self, "flags", ArgumentFlags(self.flags))
        object.__setattr__(self, "conflicts_with", tuple(self.conflicts_with))
        object.__setattr__(self, "validators", tuple(self.validators))
        if self.short_name_explicit is None:
            object.__setattr__(self, "short_name_explicit", self.short_name is not None)

        try:
            argument_type = get_argument_type(self.value_type)
        except TypeError as error:
            raise InvalidArgumentSetError(
                f"Type '{self.value_type}' is not supported for argument '{self.name}'."
            ) from error
        object.__setattr__(self, "_argument_type", argument_type)

        if self.collection is not None and self.collection not in COLLECTION_TYPES:
            raise InvalidArgumentSetError(
                f"Unsupported collection type for argument '{self.name}': "
                f"{self.collection!r}"
            )
        if self.flags & ArgumentFlags.UNIQUE and not self.is_collection:
            raise InvalidArgumentSetError(
                f"Unique is only applicable to collection arguments ('{self.name}')."
            )
        if self.is_required and self.has_default:
            raise InvalidArgumentSetError(
                f"Required argument '{self.name}' cannot have a default value."
            )
        if self.takes_rest_of_line and self.flags & ArgumentFlags.MULTIPLE:
            raise InvalidArgumentSetError(
                f"Argument '{self.name}' cannot both take the rest of the line and "
                "allow multiple occurrences."
            )
        if not self.positional and self.position is not None:
            raise InvalidArgumentSetError(
                f"Named argument '{self.name}' cannot have a position."
            )
        for validator in self.validators:
            if not validator.accepts(argument_type):
                raise InvalidArgumentSetError(
                    f"A '{type(validator).__name__}' validator may not be applied to "
                    f"argument '{self.name}' of type '{argument_type.display_name}'."
                )

    @property
    def argument_type(self) -> ArgumentType:
        return self._argument_type

    @property
    def is_collection(self) -> bool:
        return self.collection is not None

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    @property
    def is_required(self) -> bool:
        return bool(self.flags & ArgumentFlags.REQUIRED)

    @property
    def allow_multiple(self) -> bool:
        if self.flags & ArgumentFlags.MULTIPLE:
            return True
        return self.is_collection and not self.takes_rest_of_line

    @property
    def unique(self) -> bool:
        return bool(self.flags & ArgumentFlags.UNIQUE)

    @property
    def takes_rest_of_line(self) -> bool:
        return bool(self.flags & ArgumentFlags.REST_OF_LINE)

    @property
    def requires_option_argument(self) -> bool:
        """True if an empty string is not an acceptable value for this argument."""
        context = ArgumentParseContext()
        result = self.argument_type.try_parse(context, "")
        if not result.success:
            return True
        return any(
            validator.validate(context, result.value) is not None
            for validator in self.validators
        )

    def get_name(self, name_type: ArgumentNameType) -> str | None:
        """Return the long or short name, or None if the argument has no such name."""
        if name_type == ArgumentNameType.LONG_NAME:
            return self.long_name
        return self.short_name or None

    def get_syntax(self, long_prefix: str = "--", separator: str = "=") -> str:
        """Return a compact usage fragment such as `--value=<int>` or `<path>`."""
        type_name = self.argument_type.display_name
        if self.positional:
            text = f"<{self.long_name or self.name}>"
        elif type_name == "bool":
            text = f"{long_prefix}{self.long_name}"
        else:
            text = f"{long_prefix}{self.long_name}{separator}<{type_name}>"
        if self.allow_multiple or self.takes_rest_of_line:
            text += "..."
        if not self.is_required:
            text = f"[{text}]"
        return text

    def __str__(self) -> str:
        return f"ArgumentDescriptor({self.long_name or self.name})"
