# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Command groups: arguments whose value selects a sub-command with its own arguments.

A `CommandGroupArgumentType` maps command keys (e.g. "add", "remove") to
`CommandDefinition`s. When the parser binds a key, the argument type instantiates
the selected command and wraps it in a `CommandGroup`. Because `CommandGroup`
implements the `ArgumentProvider` protocol, the parser then pushes the command's
schema as a new frame, and the tokens that follow are parsed into the command
instance.

Command instantiation goes through `ParserOptions.command_factory` when one is
configured, so applications can inject dependencies into their commands; otherwise
the command type is simply called with no arguments.

Example:
    commands = {
        "add": CommandDefinition(AddCommand, add_schema, "Add an item."),
        "list": CommandDefinition(ListCommand, None, "List items."),
    }
    schema.add_arguments([
        ArgumentDescriptor(
            "command",
            CommandGroupArgumentType(commands),
            ArgumentFlags.REQUIRED,
            positional=True,
        ),
    ])
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

from clapkit.exceptions import ClapkitError
from clapkit.logger import logger
from clapkit.parser.argument_types import (
    ArgumentCompletionContext,
    ArgumentParseContext,
    ArgumentType,
)
from clapkit.parser.utils import filter_by_prefix

if TYPE_CHECKING:
    from clapkit.parser.schema import ArgumentSchema


@runtime_checkable
class ArgumentProvider(Protocol):
    """An object that contributes further arguments once it has been bound."""

    def get_argument_schema(self) -> ArgumentSchema | None: ...

    def get_destination(self) -> Any: ...


@dataclass(frozen=True)
class CommandDefinition:
    """
    A selectable command.

    Attributes:
        command_type (Callable[..., Any]): Class or factory for the command object.
        schema (ArgumentSchema | None): Arguments parsed into the command object.
        description (str): One-line help for completion and usage listings.
    """

    command_type: Callable[..., Any]
    schema: ArgumentSchema | None = None
    description: str = ""


class CommandGroup:
    """
    The bound value of a command group argument: a selected, instantiated command.

    Args:
        key (str): The selected command key.
        definition (CommandDefinition): The selected command's definition.
        parent (Any): The object containing the command group argument.
        command_factory (Callable[[Any, Any], Any] | None): Optional factory
            called as `command_factory(command_type, parent)`.
    """

    def __init__(
        self,
        key: str,
        definition: CommandDefinition,
        parent: Any = None,
        command_factory: Callable[[Any, Any], Any] | None = None,
    ) -> None:
        self.key = key
        self.definition = definition
        self.parent = parent
        if command_factory is not None:
            self.instance = command_factory(definition.command_type, parent)
        else:
            self.instance = definition.command_type()
        logger.debug("Instantiated command '%s' (%r)", key, self.instance)

    def get_argument_schema(self) -> ArgumentSchema | None:
        return self.definition.schema

    def get_destination(self) -> Any:
        return self.instance

    def execute(self) -> Any:
        """Run the selected command's `execute` method and return its result."""
        execute = getattr(self.instance, "execute", None)
        if not callable(execute):
            raise ClapkitError(f"Command '{self.key}' cannot be executed.")
        return execute()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommandGroup):
            return NotImplemented
        return self.key == other.key and self.definition is other.definition

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.key

    def __repr__(self) -> str:
        return f"CommandGroup(key={self.key!r}, instance={self.instance!r})"


class CommandGroupArgumentType(ArgumentType):
    """Parses a command key into a `CommandGroup`."""

    type = CommandGroup

    def __init__(self, commands: dict[str, CommandDefinition]):
        if not commands:
            raise ValueError("A command group needs at least one command.")
        self.commands = dict(commands)

    @property
    def display_name(self) -> str:
        return "command"

    def _find_key(self, text: str, case_sensitive: bool) -> str | None:
        for key in self.commands:
            if key == text or (not case_sensitive and key.lower() == text.lower()):
                return key
        return None

    def parse(self, context: ArgumentParseContext, text: str) -> CommandGroup:
        key = self._find_key(text, context.case_sensitive)
        if key is None:
            raise ValueError(f"'{text}' is not a known command")
        return CommandGroup(
            key,
            self.commands[key],
            parent=context.containing_object,
            command_factory=context.command_factory,
        )

    def format(self, value: Any) -> str:
        return str(value)

    def get_completions(
        self, context: ArgumentCompletionContext | None, prefix: str
    ) -> list[str]:
        return filter_by_prefix(sorted(self.commands), prefix)
