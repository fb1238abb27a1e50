# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Per-parse mutable state for a single argument.

`ArgumentBindingState` sits between the `ArgumentSetParser` and a destination
object. It tracks whether the argument has been seen, collects values for
collection arguments, coerces and validates each raw token through the argument's
`ArgumentType`, and writes the result to the destination.

Destinations may be plain objects (values are set with `setattr`) or mutable
mappings (values are stored by key). A destination of `None` is allowed; the
parser uses that during completion passes where nothing should be written.

Errors are never raised for bad input. They are sent to the reporter callback and
signalled by a failed `CoercionResult` or a `False` return value, so the parser can
keep going and surface every problem in one pass.
"""
from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any, Callable

from clapkit.logger import logger
from clapkit.parser.argument_types import (
    ArgumentCompletionContext,
    ArgumentParseContext,
    CoercionResult,
    PathArgumentType,
)
from clapkit.parser.descriptor import ArgumentDescriptor
from clapkit.tokenizer import quote_if_needed

Reporter = Callable[[str], None]


def get_destination_value(destination: Any, name: str, default: Any = None) -> Any:
    if isinstance(destination, MutableMapping):
        return destination.get(name, default)
    return getattr(destination, name, default)


def has_destination_value(destination: Any, name: str) -> bool:
    if isinstance(destination, MutableMapping):
        return name in destination
    return hasattr(destination, name)


def set_destination_value(destination: Any, name: str, value: Any) -> None:
    if isinstance(destination, MutableMapping):
        destination[name] = value
    else:
        setattr(destination, name, value)


class ArgumentBindingState:
    """
    Tracks one argument while a token list is parsed.

    Args:
        argument (ArgumentDescriptor): The argument being bound.
        destination (Any): Object or mapping that receives the value, or None.
        context (ArgumentParseContext): Context handed to the argument type.
        reporter (Reporter): Receives one line per user-facing error.
        named_argument_prefix (str): Preferred long-name prefix, for messages.
    """

    def __init__(
        self,
        argument: ArgumentDescriptor,
        destination: Any,
        context: ArgumentParseContext,
        reporter: Reporter,
        named_argument_prefix: str = "",
    ) -> None:
        self.argument = argument
        self.destination = destination
        self.context = context
        self.reporter = reporter
        self.named_argument_prefix = named_argument_prefix
        self.seen_value: bool = False
        self.collected_values: list[Any] = []

    def parse_and_store(
        self, value: str, seen_conflicts: list[ArgumentDescriptor] | None = None
    ) -> CoercionResult:
        """
        Parse `value`, validate it and store it.

        Args:
            value (str): Raw token text for this argument.
            seen_conflicts (list[ArgumentDescriptor] | None): Conflicting arguments
                that have already received a value.

        Returns:
            CoercionResult: The parsed value on success.
        """
        if self.seen_value and not self.argument.allow_multiple:
            self._report_duplicate(value)
            return CoercionResult.fail("duplicate")

        if seen_conflicts:
            for other in seen_conflicts:
                self.reporter(
                    f"The specified value of '{value}' for argument "
                    f"'{self.argument.long_name}' conflicts with the use of argument "
                    f"'{other.long_name}'. These arguments may not both be specified."
                )
            return CoercionResult.fail("conflict")

        self.seen_value = True

        result = self.argument.argument_type.try_parse(self.context, value)
        if not result.success:
            self._report_bad_value(value)
            return result

        reason = self.validate(result.value)
        if reason is not None:
            return CoercionResult.fail(reason)

        if self.argument.is_collection:
            if self.argument.unique and result.value in self.collected_values:
                self._report_duplicate(value)
                return CoercionResult.fail("duplicate")
            self.collected_values.append(result.value)
        elif self.destination is not None:
            if not self._try_set_value(result.value, value):
                return CoercionResult.fail("rejected by destination")

        return result

    def set_rest_of_line(self, tokens: list[str]) -> bool:
        """Store every remaining token as this argument's value."""
        self.seen_value = True
        argument_type = self.argument.argument_type

        if self.argument.is_collection:
            for token in tokens:
                result = argument_type.try_parse(self.context, token)
                if not result.success:
                    self._report_bad_value(token)
                    return False
                self.collected_values.append(result.value)
            return True

        if self.destination is None:
            return True

        command_line = " ".join(quote_if_needed(token) for token in tokens)
        result = argument_type.try_parse(self.context, command_line)
        if not result.success:
            self._report_bad_value(command_line)
            return False
        return self._try_set_value(result.value, command_line)

    def validate(self, value: Any, report: bool = True) -> str | None:
        """Run the type's own check and every validator against a parsed value."""
        argument_type = self.argument.argument_type
        reasons = [argument_type.validate(self.context, value)]
        reasons.extend(
            validator.validate(self.context, value)
            for validator in self.argument.validators
        )
        for reason in reasons:
            if reason is not None:
                if report:
                    self._report_bad_value(argument_type.format(value), reason)
                return reason
        return None

    def finalize(self) -> bool:
        """
        Apply defaults, build collections and check required arguments.

        Returns:
            bool: False if any check failed; every failure has been reported.
        """
        argument = self.argument
        default_applied = False

        if not self.seen_value and argument.has_default:
            default = argument.default
            values = list(default) if argument.is_collection and default is not None else [default]
            if any(
                value is not None and self.validate(value) is not None for value in values
            ):
                logger.debug("Default for '%s' failed validation", argument.long_name)
                return False
            if self.destination is not None:
                if not self._try_set_value(argument.default):
                    return False
            default_applied = True

        if (
            argument.is_collection
            and not default_applied
            and (self.seen_value or not argument.takes_rest_of_line)
            and self.destination is not None
        ):
            try:
                collection = argument.collection(self.collected_values)
            except TypeError as error:
                self._report_bad_value(
                    ", ".join(str(value) for value in self.collected_values), str(error)
                )
                return False
            if not self._try_set_value(collection):
                return False

        if argument.is_required and not self.seen_value:
            self._report_missing_required()
            return False

        if (
            self.destination is not None
            and not self.seen_value
            and not default_applied
            and not has_destination_value(self.destination, argument.name)
        ):
            set_destination_value(self.destination, argument.name, None)

        return True

    def get_completions(
        self, context: ArgumentCompletionContext, prefix: str
    ) -> list[str]:
        return self.argument.argument_type.get_completions(context, prefix)

    def _try_set_value(self, value: Any, text: str | None = None) -> bool:
        try:
            set_destination_value(self.destination, self.argument.name, value)
        except ValueError as error:
            self._report_bad_value(text if text is not None else str(value), str(error))
            return False
        return True

    def _report_duplicate(self, value: str) -> None:
        self.reporter(f"Duplicate '{self.argument.long_name}' argument '{value}'.")

    def _report_bad_value(self, value: str, reason: str | None = None) -> None:
        message = (
            f"'{value}' is not a valid value for the '{self.argument.long_name}' "
            "command line option"
        )
        self.reporter(f"{message}: {reason}" if reason else f"{message}.")
        if isinstance(self.argument.argument_type, PathArgumentType):
            return
        possible = self.argument.argument_type.get_completions(
            ArgumentCompletionContext(parse_context=self.context), ""
        )
        if possible:
            joined = ", ".join(f"'{item}'" for item in possible)
            self.reporter(f"  Possible argument values include: {joined}.")

    def _report_missing_required(self) -> None:
        if self.argument.positional:
            self.reporter(
                f"Missing required positional argument '<{self.argument.long_name}>'."
            )
        else:
            self.reporter(
                "Missing required named argument "
                f"'{self.named_argument_prefix}{self.argument.long_name}'."
            )

    def __repr__(self) -> str:
        return (
            f"ArgumentBindingState({self.argument.long_name!r}, "
            f"seen_value={self.seen_value})"
        )
