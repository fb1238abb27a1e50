# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""config.py
Configuration loader for Clapkit argument schemas.

An argument set can be described in YAML or TOML instead of code:

```yaml
name: deploy
style: getopt
arguments:
  - name: target
    positional: true
    flags: required
  - name: replicas
    type: int
    default: 1
    validators:
      - must_be_in_range: {minimum: 1, maximum: 10}
  - name: tags
    collection: list
    flags: [multiple, unique]
```

Each entry is validated with pydantic (`RawArgument`, `RawArgumentSet`) and turned
into an `ArgumentDescriptor`. Value types are built-in names (`str`, `int`,
`float`, `bool`, `datetime`, `path`) or a dotted import path such as
`my_package.models.Color`.
"""
from __future__ import annotations

import importlib
from datetime import datetime
from pathlib import Path
from typing import Any

import toml
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from clapkit.exceptions import ClapkitError, InvalidConfigError
from clapkit.logger import logger
from clapkit.parser.argument_flags import ArgumentFlags, ArgumentNameGeneration
from clapkit.parser.argument_set_style import ArgumentSetStyle
from clapkit.parser.argument_types import ArgumentParseContext, get_argument_type
from clapkit.parser.descriptor import NO_DEFAULT, ArgumentDescriptor
from clapkit.parser.schema import ArgumentSchema
from clapkit.parser.validators import (
    ArgumentValidator,
    MustBeInRange,
    MustExist,
    MustMatchRegex,
    MustNotBeEmpty,
    MustNotExist,
    MustNotMatchRegex,
)

BUILTIN_TYPES: dict[str, Any] = {
    "str": str,
    "string": str,
    "int": int,
    "integer": int,
    "float": float,
    "bool": bool,
    "boolean": bool,
    "datetime": datetime,
    "path": Path,
}

COLLECTION_TYPES: dict[str, type] = {
    "list": list,
    "tuple": tuple,
    "set": set,
    "frozenset": frozenset,
}

VALIDATORS: dict[str, type[ArgumentValidator]] = {
    "must_not_be_empty": MustNotBeEmpty,
    "must_be_in_range": MustBeInRange,
    "must_match_regex": MustMatchRegex,
    "must_not_match_regex": MustNotMatchRegex,
    "must_exist": MustExist,
    "must_not_exist": MustNotExist,
}


def import_object(dotted_path: str) -> Any:
    """Dynamically imports an object from a dotted path like 'my.module.Color'."""
    module_path, _, attr = dotted_path.rpartition(".")
    if not module_path:
        raise InvalidConfigError(f"Invalid import path: '{dotted_path}'")
    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as error:
        logger.error("Failed to import module '%s': %s", module_path, error)
        raise InvalidConfigError(
            f"Could not import '{dotted_path}': {error}. Ensure the module is "
            "installed and discoverable via PYTHONPATH."
        ) from error
    try:
        return getattr(module, attr)
    except AttributeError as error:
        logger.error(
            "Module '%s' does not have attribute '%s': %s", module_path, attr, error
        )
        raise InvalidConfigError(
            f"Module '{module_path}' has no attribute '{attr}'"
        ) from error


def resolve_type(type_name: str) -> Any:
    return BUILTIN_TYPES.get(type_name.strip().lower()) or import_object(type_name)


def build_validator(spec: str | dict[str, Any]) -> ArgumentValidator:
    """
    Build a validator from `"must_not_be_empty"` or `{"must_be_in_range": {...}}`.

    Raises:
        InvalidConfigError: If the validator is unknown or its options are invalid.
    """
    if isinstance(spec, str):
        name, options = spec, {}
    elif len(spec) == 1:
        name, options = next(iter(spec.items()))
        options = options or {}
    else:
        raise InvalidConfigError(
            f"Validator entries must have exactly one key, got: {sorted(spec)}"
        )

    normalized = name.strip().lower().replace("-", "_")
    if normalized not in VALIDATORS:
        valid = ", ".join(VALIDATORS)
        raise InvalidConfigError(f"Unknown validator '{name}'. Must be one of: {valid}")
    if not isinstance(options, dict):
        raise InvalidConfigError(f"Options for validator '{name}' must be a mapping")
    try:
        return VALIDATORS[normalized](**options)
    except (TypeError, ValueError) as error:
        raise InvalidConfigError(f"Invalid options for validator '{name}': {error}") from error


class RawArgument(BaseModel):
    """Raw argument model for Clapkit configuration."""

    name: str
    type: str = "str"
    flags: list[str] = Field(default_factory=list)
    long_name: str | None = None
    short_name: str | None = None
    positional: bool = False
    position: int | None = None
    collection: str | None = None
    default: Any = None
    conflicts_with: list[str] = Field(default_factory=list)
    hidden: bool = False
    description: str = ""
    validators: list[str | dict[str, Any]] = Field(default_factory=list)

    @field_validator("flags", mode="before")
    @classmethod
    def validate_flags(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("collection")
    @classmethod
    def validate_collection(cls, value: str | None) -> str | None:
        if value is not None and value not in COLLECTION_TYPES:
            raise ValueError(
                f"collection must be one of: {', '.join(COLLECTION_TYPES)}"
            )
        return value

    def to_descriptor(self) -> ArgumentDescriptor:
        value_type = resolve_type(self.type)
        try:
            flags = ArgumentFlags.from_names(self.flags)
        except ValueError as error:
            raise InvalidConfigError(str(error)) from error

        kwargs: dict[str, Any] = {}
        if "default" in self.model_fields_set:
            kwargs["default"] = self._coerce_default(value_type, self.default)

        return ArgumentDescriptor(
            name=self.name,
            value_type=value_type,
            flags=flags,
            long_name=self.long_name,
            short_name=self.short_name,
            positional=self.positional,
            position=self.position,
            collection=COLLECTION_TYPES[self.collection] if self.collection else None,
            conflicts_with=tuple(self.conflicts_with),
            validators=tuple(build_validator(spec) for spec in self.validators),
            hidden=self.hidden,
            description=self.description,
            **kwargs,
        )

    def _coerce_default(self, value_type: Any, default: Any) -> Any:
        """Parse string defaults for non-string types, e.g. `"2024-01-01"` for datetime."""
        if not isinstance(default, str) or value_type is str:
            return default
        result = get_argument_type(value_type).try_parse(ArgumentParseContext(), default)
        if not result.success:
            raise InvalidConfigError(
                f"Invalid default for argument '{self.name}': {result.error}"
            )
        return result.value


class RawArgumentSet(BaseModel):
    """Argument set model for Clapkit configuration."""

    name: str = ""
    description: str = ""
    style: str | None = None
    named_argument_prefixes: list[str] | None = None
    short_name_argument_prefixes: list[str] | None = None
    argument_value_separators: list[str] | None = None
    answer_file_argument_prefix: str | None = "@"
    allow_named_argument_value_as_succeeding_token: bool | None = None
    allow_multiple_short_names_in_one_token: bool | None = None
    allow_eliding_separator_after_short_name: bool | None = None
    case_sensitive: bool = False
    generate_long_names: bool = False
    prefer_lower_case_short_names: bool = False
    arguments: list[RawArgument] = Field(default_factory=list)

    @field_validator("style")
    @classmethod
    def validate_style(cls, value: str | None) -> str | None:
        if value is not None:
            ArgumentSetStyle(value)
        return value

    def to_schema(self) -> ArgumentSchema:
        name_generation = ArgumentNameGeneration.NONE
        if self.generate_long_names:
            name_generation |= ArgumentNameGeneration.GENERATE_HYPHENATED_LOWER_CASE_LONG_NAMES
        if self.prefer_lower_case_short_names:
            name_generation |= ArgumentNameGeneration.PREFER_LOWER_CASE_FOR_SHORT_NAMES

        schema = ArgumentSchema(
            style=self.style,
            answer_file_argument_prefix=self.answer_file_argument_prefix,
            case_sensitive=self.case_sensitive,
            name_generation=name_generation,
            name=self.name,
            description=self.description,
        )
        overrides = {
            setting: getattr(self, setting)
            for setting in (
                "named_argument_prefixes",
                "short_name_argument_prefixes",
                "argument_value_separators",
                "allow_named_argument_value_as_succeeding_token",
                "allow_multiple_short_names_in_one_token",
                "allow_eliding_separator_after_short_name",
            )
            if getattr(self, setting) is not None
        }
        for setting, value in overrides.items():
            setattr(schema, setting, value)
        if overrides:
            schema.validate_settings()

        schema.add_arguments(raw.to_descriptor() for raw in self.arguments)
        return schema


def loader(file_path: Path | str) -> ArgumentSchema:
    """
    Load an argument schema from a YAML or TOML file.

    The file should contain a dictionary with an `arguments` list. Each argument
    needs at least a `name`; everything else is optional.

    Args:
        file_path (Path | str): Path to the config file (YAML or TOML).

    Returns:
        ArgumentSchema: The schema described by the file.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidConfigError: If the file format is unsupported, the file cannot be
            parsed, or it does not describe a valid argument set.
    """
    if isinstance(file_path, (str, Path)):
        path = Path(file_path)
    else:
        raise TypeError("file_path must be a string or Path object.")

    if not path.is_file():
        raise FileNotFoundError(f"No such config file: {file_path}")

    suffix = path.suffix
    try:
        with path.open("r", encoding="UTF-8") as config_file:
            if suffix in (".yaml", ".yml"):
                raw_config = yaml.safe_load(config_file)
            elif suffix == ".toml":
                raw_config = toml.load(config_file)
            else:
                raise InvalidConfigError(f"Unsupported config format: {suffix}")
    except (yaml.YAMLError, toml.TomlDecodeError) as error:
        raise InvalidConfigError(f"Could not parse config file '{path}': {error}") from error

    if not isinstance(raw_config, dict):
        raise InvalidConfigError(
            "Configuration file must contain a dictionary with a list of arguments.\n"
            "Example:\n"
            "name: 'tool'\n"
            "arguments:\n"
            "  - name: 'value'\n"
            "    type: 'int'\n"
            "    flags: 'required'"
        )

    try:
        raw_set = RawArgumentSet.model_validate(raw_config)
    except ValidationError as error:
        raise InvalidConfigError(f"Invalid argument set in '{path}':\n{error}") from error

    try:
        schema = raw_set.to_schema()
    except InvalidConfigError:
        raise
    except ClapkitError as error:
        raise InvalidConfigError(f"Invalid argument set in '{path}': {error}") from error
    logger.debug("Loaded %d argument(s) from '%s'", len(schema), path)
    return schema
