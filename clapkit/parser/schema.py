# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `ArgumentSchema`, the declarative description of one argument set.

An `ArgumentSchema` owns the named and positional `ArgumentDescriptor`s of a
command together with the syntax used to address them: long and short name
prefixes, value separators, the answer-file prefix, case sensitivity and the
parsing switches that govern short-name bundling and value placement.

Registering arguments resolves everything the parser needs up front:

- Long names are generated from the destination name when omitted.
- Short names are derived from the long name unless given. A derived short name
  silently loses to an explicit one; two explicit short names collide loudly.
- `conflicts_with` references are resolved within the batch into symmetric edges.
- Positional arguments must form a contiguous run from zero, with at most one
  absorbing argument (rest-of-line or allow-multiple) and only in last place.

All construction problems raise `InvalidArgumentSetError` subclasses immediately.
Once built, a schema is never mutated by parsing; nested command groups push their
own schemas onto the parser's frame stack instead.

Example:
    schema = ArgumentSchema(style="getopt")
    schema.add_arguments([
        ArgumentDescriptor("value", int, ArgumentFlags.REQUIRED),
        ArgumentDescriptor("verbose", bool),
        ArgumentDescriptor("files", Path, positional=True, collection=list),
    ])
"""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Sequence

from clapkit.exceptions import (
    ConflictingMemberNotFoundError,
    DuplicateArgumentLongNameError,
    DuplicateArgumentShortNameError,
    InvalidArgumentSetError,
    NonConsecutivePositionalParametersError,
)
from clapkit.logger import logger
from clapkit.parser.argument_flags import ArgumentNameGeneration, ArgumentNameType
from clapkit.parser.argument_set_style import ArgumentSetStyle
from clapkit.parser.descriptor import ArgumentDescriptor
from clapkit.utils import CaseInsensitiveDict, to_hyphenated_lower_case


class ArgumentSchema:
    """
    A set of named and positional arguments plus the syntax used to parse them.

    Args:
        arguments (Iterable[ArgumentDescriptor] | None): Initial batch of arguments.
        style (ArgumentSetStyle | str | None): Syntax preset applied before the
            explicit settings below are considered.
        named_argument_prefixes (Sequence[str]): Prefixes introducing long names.
        short_name_argument_prefixes (Sequence[str]): Prefixes introducing short names.
        argument_value_separators (Sequence[str]): Single characters separating a
            name from its inline value.
        answer_file_argument_prefix (str | None): Prefix marking an answer file token.
        allow_named_argument_value_as_succeeding_token (bool): Allow `--name value`.
        allow_multiple_short_names_in_one_token (bool): Allow bundled `-abc`.
        allow_eliding_separator_after_short_name (bool): Allow `-ofile`.
        case_sensitive (bool): Whether names are matched case-sensitively.
        name_generation (ArgumentNameGeneration): How missing names are derived.
        name (str): Display name used in usage text.
        description (str): Help text for the argument set.
    """

    def __init__(
        self,
        arguments: Iterable[ArgumentDescriptor] | None = None,
        *,
        style: ArgumentSetStyle | str | None = None,
        named_argument_prefixes: Sequence[str] = ("--",),
        short_name_argument_prefixes: Sequence[str] = ("-",),
        argument_value_separators: Sequence[str] = ("=", ":"),
        answer_file_argument_prefix: str | None = "@",
        allow_named_argument_value_as_succeeding_token: bool = False,
        allow_multiple_short_names_in_one_token: bool = False,
        allow_eliding_separator_after_short_name: bool = False,
        case_sensitive: bool = False,
        name_generation: ArgumentNameGeneration = ArgumentNameGeneration.NONE,
        name: str = "",
        description: str = "",
    ) -> None:
        self.named_argument_prefixes: list[str] = list(named_argument_prefixes)
        self.short_name_argument_prefixes: list[str] = list(short_name_argument_prefixes)
        self.argument_value_separators: list[str] = list(argument_value_separators)
        self.answer_file_argument_prefix = answer_file_argument_prefix
        self.allow_named_argument_value_as_succeeding_token = (
            allow_named_argument_value_as_succeeding_token
        )
        self.allow_multiple_short_names_in_one_token = (
            allow_multiple_short_names_in_one_token
        )
        self.allow_eliding_separator_after_short_name = (
            allow_eliding_separator_after_short_name
        )
        self.case_sensitive = case_sensitive
        self.name_generation = ArgumentNameGeneration(name_generation)
        self.name = name
        self.description = description

        self._named_arguments: list[ArgumentDescriptor] = []
        self._positional_arguments: dict[int, ArgumentDescriptor] = {}
        self._long_names: dict[str, ArgumentDescriptor] = self._new_name_map()
        self._short_names: dict[str, ArgumentDescriptor] = self._new_name_map()
        self._conflicts: dict[int, set[int]] = {}
        self._by_id: dict[int, ArgumentDescriptor] = {}
        self._next_id = 0
        self._next_positional_index_to_define = 0

        if style is not None:
            self.style = style
        else:
            self.validate_settings()

        if arguments is not None:
            self.add_arguments(arguments)

    def _new_name_map(self) -> dict[str, ArgumentDescriptor]:
        return {} if self.case_sensitive else CaseInsensitiveDict()

    @property
    def style(self) -> ArgumentSetStyle:
        raise NotImplementedError("The style of an argument set cannot be read back.")

    @style.setter
    def style(self, value: ArgumentSetStyle | str) -> None:
        style = ArgumentSetStyle(value)
        if style == ArgumentSetStyle.WINDOWS_COMMAND_LINE:
            self.named_argument_prefixes = ["/", "-"]
            self.short_name_argument_prefixes = ["/", "-"]
            self.argument_value_separators = [":", "="]
            self.allow_named_argument_value_as_succeeding_token = False
            self.allow_multiple_short_names_in_one_token = False
            self.allow_eliding_separator_after_short_name = False
        elif style == ArgumentSetStyle.POWERSHELL:
            self.named_argument_prefixes = ["-"]
            self.short_name_argument_prefixes = ["-"]
            self.argument_value_separators = [":"]
            self.allow_named_argument_value_as_succeeding_token = True
            self.allow_multiple_short_names_in_one_token = False
            self.allow_eliding_separator_after_short_name = False
            self.name_generation |= ArgumentNameGeneration.PREFER_LOWER_CASE_FOR_SHORT_NAMES
        elif style == ArgumentSetStyle.GETOPT:
            self.named_argument_prefixes = ["--"]
            self.short_name_argument_prefixes = ["-"]
            self.argument_value_separators = ["="]
            self.allow_named_argument_value_as_succeeding_token = True
            self.allow_multiple_short_names_in_one_token = True
            self.allow_eliding_separator_after_short_name = True
            self.name_generation = (
                ArgumentNameGeneration.GENERATE_HYPHENATED_LOWER_CASE_LONG_NAMES
                | ArgumentNameGeneration.PREFER_LOWER_CASE_FOR_SHORT_NAMES
            )
        logger.debug("Applied argument set style '%s'", style)
        self.validate_settings()

    @property
    def short_names_are_one_character_long(self) -> bool:
        return (
            self.allow_multiple_short_names_in_one_token
            or self.allow_eliding_separator_after_short_name
        )

    def validate_settings(self) -> None:
        """Check separators, prefixes and short-name lengths for consistency."""
        for separator in self.argument_value_separators:
            if len(separator) != 1:
                raise InvalidArgumentSetError(
                    f"Argument value separators must be single characters: '{separator}'"
                )
        if self.short_names_are_one_character_long:
            overlap = set(self.named_argument_prefixes) & set(
                self.short_name_argument_prefixes
            )
            if overlap:
                raise InvalidArgumentSetError(
                    "Long and short name prefixes must differ when short names can be "
                    f"combined or followed by a value: {sorted(overlap)}"
                )
            for descriptor in self._named_arguments:
                self._check_short_name_length(descriptor.short_name)

    def _check_short_name_length(self, short_name: str | None) -> None:
        if short_name and self.short_names_are_one_character_long and len(short_name) > 1:
            raise InvalidArgumentSetError(f"Short name is too long: {short_name}")

    @property
    def named_arguments(self) -> list[ArgumentDescriptor]:
        return list(self._named_arguments)

    @property
    def positional_arguments(self) -> list[ArgumentDescriptor]:
        return [
            self._positional_arguments[index]
            for index in sorted(self._positional_arguments)
        ]

    @property
    def all_arguments(self) -> list[ArgumentDescriptor]:
        return self.named_arguments + self.positional_arguments

    @property
    def positional_count(self) -> int:
        return len(self._positional_arguments)

    def _generate_long_name(self, descriptor: ArgumentDescriptor) -> str:
        if descriptor.long_name:
            return descriptor.long_name
        if (
            self.name_generation
            & ArgumentNameGeneration.GENERATE_HYPHENATED_LOWER_CASE_LONG_NAMES
        ):
            return to_hyphenated_lower_case(descriptor.name)
        return descriptor.name

    def _generate_short_name(self, long_name: str) -> str:
        short_name = long_name[0]
        if self.name_generation & ArgumentNameGeneration.PREFER_LOWER_CASE_FOR_SHORT_NAMES:
            short_name = short_name.lower()
        return short_name

    def _resolve(
        self, descriptor: ArgumentDescriptor, position: int | None
    ) -> ArgumentDescriptor:
        long_name = self._generate_long_name(descriptor)
        if descriptor.positional:
            short_name = ""
        elif descriptor.short_name is None:
            short_name = self._generate_short_name(long_name)
        else:
            short_name = descriptor.short_name
        resolved = replace(
            descriptor,
            id=self._next_id,
            long_name=long_name,
            short_name=short_name,
            position=position,
        )
        self._next_id += 1
        return resolved

    def add_arguments(self, descriptors: Iterable[ArgumentDescriptor]) -> None:
        """
        Register a batch of arguments.

        Positions within the batch are relative: they are shifted by the number of
        positional arguments already defined. Conflicts may only refer to arguments
        in the same batch.

        Raises:
            InvalidArgumentSetError: If any argument or the resulting set is invalid.
        """
        batch = list(descriptors)
        bias = self._next_positional_index_to_define
        resolved: list[ArgumentDescriptor] = []
        next_relative = 0
        for descriptor in batch:
            position = None
            if descriptor.positional:
                relative = (
                    descriptor.position if descriptor.position is not None else next_relative
                )
                position = bias + relative
                next_relative = relative + 1
            resolved.append(self._resolve(descriptor, position))

        conflicts = self._resolve_conflicts(resolved)

        for descriptor in resolved:
            if descriptor.positional:
                self._add_positional(descriptor)
            else:
                self._add_named(descriptor)

        for source, targets in conflicts.items():
            self._conflicts.setdefault(source, set()).update(targets)

        self._validate_positional_arguments()
        logger.debug(
            "Registered %d argument(s) in '%s'", len(resolved), self.name or "<root>"
        )

    def _resolve_conflicts(
        self, batch: list[ArgumentDescriptor]
    ) -> dict[int, set[int]]:
        conflicts: dict[int, set[int]] = {}
        for descriptor in batch:
            for member_name in descriptor.conflicts_with:
                matches = [other for other in batch if other.name == member_name]
                if len(matches) != 1:
                    raise ConflictingMemberNotFoundError(
                        f"Can't find argument member '{member_name}' referenced as a "
                        f"conflict of '{descriptor.name}'."
                    )
                other = matches[0]
                conflicts.setdefault(descriptor.id, set()).add(other.id)
                conflicts.setdefault(other.id, set()).add(descriptor.id)
        return conflicts

    def _add_positional(self, descriptor: ArgumentDescriptor) -> None:
        assert descriptor.position is not None
        existing = self._positional_arguments.get(descriptor.position)
        if existing is not None:
            raise InvalidArgumentSetError(
                f"Multiple positional arguments with position index "
                f"{descriptor.position} were seen: '{existing.name}' and "
                f"'{descriptor.name}'."
            )
        self._positional_arguments[descriptor.position] = descriptor
        self._by_id[descriptor.id] = descriptor
        self._next_positional_index_to_define = descriptor.position + 1

    def _add_named(self, descriptor: ArgumentDescriptor) -> None:
        assert descriptor.long_name
        if descriptor.long_name in self._long_names:
            raise DuplicateArgumentLongNameError(
                f"Duplicate argument long name specification: {descriptor.long_name}"
            )

        short_name = descriptor.short_name
        if short_name:
            existing = self._short_names.get(short_name)
            if existing is not None:
                if descriptor.short_name_explicit and existing.short_name_explicit:
                    raise DuplicateArgumentShortNameError(
                        f"Duplicate argument short name specification: {short_name}"
                    )
                if descriptor.short_name_explicit:
                    logger.debug(
                        "Clearing derived short name '%s' from '%s'",
                        short_name,
                        existing.long_name,
                    )
                    del self._short_names[short_name]
                    self._replace_descriptor(existing, replace(existing, short_name=""))
                else:
                    descriptor = replace(descriptor, short_name="")
                    short_name = ""

        self._check_short_name_length(short_name)

        self._long_names[descriptor.long_name] = descriptor
        if short_name:
            self._short_names[short_name] = descriptor
        self._named_arguments.append(descriptor)
        self._by_id[descriptor.id] = descriptor

    def _replace_descriptor(
        self, old: ArgumentDescriptor, new: ArgumentDescriptor
    ) -> None:
        index = self._named_arguments.index(old)
        self._named_arguments[index] = new
        self._long_names[new.long_name] = new
        self._by_id[new.id] = new

    def _validate_positional_arguments(self) -> None:
        all_consumed = any(arg.takes_rest_of_line for arg in self._named_arguments)
        last_index = -1
        for index in sorted(self._positional_arguments):
            descriptor = self._positional_arguments[index]
            if all_consumed or index != last_index + 1:
                raise NonConsecutivePositionalParametersError(
                    "The positional arguments are not consecutively indexed."
                )
            last_index = index
            all_consumed = descriptor.takes_rest_of_line or descriptor.allow_multiple

    def try_get_named_argument(
        self, name_type: ArgumentNameType, name: str
    ) -> ArgumentDescriptor | None:
        """Look up a named argument by its long or short name."""
        if not name:
            return None
        if name_type == ArgumentNameType.LONG_NAME:
            return self._long_names.get(name)
        return self._short_names.get(name)

    def get_positional(self, index: int) -> ArgumentDescriptor | None:
        return self._positional_arguments.get(index)

    def get_argument(self, argument_id: int) -> ArgumentDescriptor | None:
        """Return the registered descriptor with the given id."""
        return self._by_id.get(argument_id)

    def get_conflicts(self, descriptor: ArgumentDescriptor) -> list[ArgumentDescriptor]:
        return [
            self._by_id[conflict_id]
            for conflict_id in sorted(self._conflicts.get(descriptor.id, ()))
        ]

    def get_argument_names(
        self, name_type: ArgumentNameType, include_hidden: bool = False
    ) -> list[str]:
        """Return the long or short names of the named arguments, in order."""
        names = []
        for descriptor in self._named_arguments:
            if descriptor.hidden and not include_hidden:
                continue
            name = descriptor.get_name(name_type)
            if name:
                names.append(name)
        return names

    def __iter__(self):
        return iter(self.all_arguments)

    def __len__(self) -> int:
        return len(self._named_arguments) + len(self._positional_arguments)

    def __repr__(self) -> str:
        return (
            f"ArgumentSchema(name={self.name!r}, named={len(self._named_arguments)}, "
            f"positional={len(self._positional_arguments)})"
        )
