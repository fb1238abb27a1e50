# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `ParserOptions`, the explicit configuration passed to the parsing entry points.

Instead of process-wide defaults, every call to `try_parse`, `parse` or
`get_completions` receives (or builds) a `ParserOptions`. It decides where error
messages go, how the file system is accessed for answer files and paths, whether
usage is printed after a failed parse, and how sub-commands are instantiated.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from clapkit.console import error_console
from clapkit.parser.file_system import FileSystemReader, FileSystemReaderProtocol


def default_reporter(message: str) -> None:
    """Print a parse error to stderr using the `error` style."""
    error_console.print(message, style="error", markup=False, highlight=False)


def quiet_reporter(message: str) -> None:
    """Discard parse errors."""


@dataclass
class ParserOptions:
    """
    Options for one parse or completion request.

    Attributes:
        reporter (Callable[[str], None]): Receives each user-facing error line.
        file_system_reader (FileSystemReaderProtocol): Used for answer files and
            path completion or validation.
        display_usage_on_error (bool): Print a usage line after a failed parse.
        command_factory (Callable[[Any, Any], Any] | None): Builds command objects
            for command groups, called as `command_factory(command_type, parent)`.
    """

    reporter: Callable[[str], None] = default_reporter
    file_system_reader: FileSystemReaderProtocol = field(
        default_factory=FileSystemReader
    )
    display_usage_on_error: bool = True
    command_factory: Callable[[Any, Any], Any] | None = None

    @classmethod
    def quiet(cls) -> ParserOptions:
        """Options that report nothing and print no usage."""
        return cls(reporter=quiet_reporter, display_usage_on_error=False)
