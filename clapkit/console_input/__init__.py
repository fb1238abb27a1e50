"""
Clapkit CLI Toolkit

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .console_io import ConsoleInput, ConsoleOutput, TerminalConsole, VirtualConsole
from .history import History
from .key_bindings import ConsoleKeyBindingSet, ReadOnlyKeyBindingSet
from .keys import ConsoleKey, ConsoleKeyInfo, ConsoleModifiers
from .line_buffer import LineBuffer, SeekOrigin
from .line_editor import LineEditor
from .operations import ConsoleInputOperation, ConsoleInputOperationResult
from .token_completion import CircularEnumerator, TokenCompleter, TokenCompletionSet

__all__ = [
    "CircularEnumerator",
    "ConsoleInput",
    "ConsoleInputOperation",
    "ConsoleInputOperationResult",
    "ConsoleKey",
    "ConsoleKeyBindingSet",
    "ConsoleKeyInfo",
    "ConsoleModifiers",
    "ConsoleOutput",
    "History",
    "LineBuffer",
    "LineEditor",
    "ReadOnlyKeyBindingSet",
    "SeekOrigin",
    "TerminalConsole",
    "TokenCompleter",
    "TokenCompletionSet",
    "VirtualConsole",
]
