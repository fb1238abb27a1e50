# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Contains value coercion helpers shared by the built-in argument types.

These functions convert raw token text into Python values and raise `ValueError`
when the text does not fit. `ArgumentType.try_parse` turns those errors into
`CoercionResult` values so the parser never uses exceptions for expected failures.

Functions:
- coerce_bool: Convert a string to a boolean, rejecting unknown words.
- coerce_enum: Convert a string or raw value to an Enum instance.
- coerce_value: General-purpose coercion to a target type (unions, literals, enums).
- filter_by_prefix: Select completion candidates that start with a prefix.
"""
import types
from datetime import datetime
from enum import Enum, EnumMeta
from typing import Any, Iterable, Literal, Union, get_args, get_origin

from dateutil import parser as date_parser

TRUE_WORDS = frozenset({"true", "t", "1", "yes", "y", "on"})
FALSE_WORDS = frozenset({"false", "f", "0", "no", "n", "off"})


def coerce_bool(value: str | bool) -> bool:
    """
    Convert a string to a boolean.

    Accepts truthy and falsy words such as 'true', 'yes', '0' or 'off'.

    Args:
        value (str | bool): The input string or boolean.

    Returns:
        bool: Parsed boolean result.

    Raises:
        ValueError: If the word is not a recognized boolean.
    """
    if isinstance(value, bool):
        return value
    normalized = value.strip().lower()
    if normalized in TRUE_WORDS:
        return True
    if normalized in FALSE_WORDS:
        return False
    raise ValueError(f"'{value}' is not a valid boolean")


def coerce_enum(value: Any, enum_type: EnumMeta, case_sensitive: bool = False) -> Any:
    """
    Convert a raw value or string to an Enum instance.

    Tries to resolve by member name (case-insensitively unless asked otherwise),
    then by value, then by coercing to the type of the members' values.

    Args:
        value (Any): The input value to convert.
        enum_type (EnumMeta): The target Enum class.
        case_sensitive (bool): Whether member names must match exactly.

    Returns:
        Enum: The corresponding Enum instance.

    Raises:
        ValueError: If the value cannot be resolved to a valid Enum member.
    """
    if isinstance(value, enum_type):
        return value

    if isinstance(value, str):
        for member in enum_type:  # type: ignore[var-annotated]
            name = member.name
            if name == value or (not case_sensitive and name.lower() == value.lower()):
                return member

    base_type = type(next(iter(enum_type)).value)
    try:
        coerced_value = base_type(value)
        return enum_type(coerced_value)
    except (ValueError, TypeError):
        names = [member.name.lower() for member in enum_type]  # type: ignore[var-annotated]
        raise ValueError(f"'{value}' should be one of {{{', '.join(names)}}}") from None


def coerce_value(value: str, target_type: Any) -> Any:
    """
    Attempt to convert a string to the given target type.

    Handles typing constructs such as Union, Literal, Enum and datetime, and falls
    back to calling the target type (or converter callable) with the string.

    Args:
        value (str): The input string to convert.
        target_type (type): The desired type.

    Returns:
        Any: The coerced value.

    Raises:
        ValueError: If conversion fails or the value is invalid.
    """
    origin = get_origin(target_type)
    args = get_args(target_type)

    if origin is Literal:
        for choice in args:
            if value == choice or (not isinstance(choice, str) and value == str(choice)):
                return choice
        raise ValueError(f"Value '{value}' is not a valid literal for type {target_type}")

    if isinstance(target_type, types.UnionType) or origin is Union:
        for arg in args:
            if arg is type(None):
                continue
            try:
                return coerce_value(value, arg)
            except (ValueError, TypeError):
                continue
        raise ValueError(f"Value '{value}' could not be coerced to any of {args}")

    if isinstance(target_type, EnumMeta):
        return coerce_enum(value, target_type)

    if target_type is bool:
        return coerce_bool(value)

    if target_type is datetime:
        try:
            return date_parser.parse(value)
        except (ValueError, OverflowError) as error:
            raise ValueError(
                f"Value '{value}' could not be parsed as a datetime"
            ) from error

    try:
        return target_type(value)
    except TypeError as error:
        raise ValueError(str(error)) from error


def format_enum_member(member: Enum) -> str:
    """Format an Enum member the way users type it."""
    return member.name.lower()


def filter_by_prefix(
    candidates: Iterable[str], prefix: str, case_sensitive: bool = False
) -> list[str]:
    """Return the candidates that start with `prefix`, preserving order."""
    if case_sensitive:
        return [candidate for candidate in candidates if candidate.startswith(prefix)]
    lowered = prefix.lower()
    return [
        candidate for candidate in candidates if candidate.lower().startswith(lowered)
    ]
