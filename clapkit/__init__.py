"""
Clapkit CLI Toolkit

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import logging

from .completer import ArgumentSetCompleter, PromptToolkitCompleter
from .console_input import LineEditor, TerminalConsole, VirtualConsole
from .exceptions import ArgumentParseError, ClapkitError, InvalidArgumentSetError
from .parser import (
    ArgumentDescriptor,
    ArgumentFlags,
    ArgumentSchema,
    ArgumentSetStyle,
    ParserOptions,
    format_usage,
    get_completions,
    parse,
    try_parse,
)

logger = logging.getLogger("clapkit")


__all__ = [
    "ArgumentDescriptor",
    "ArgumentFlags",
    "ArgumentParseError",
    "ArgumentSchema",
    "ArgumentSetCompleter",
    "ArgumentSetStyle",
    "ClapkitError",
    "InvalidArgumentSetError",
    "LineEditor",
    "ParserOptions",
    "PromptToolkitCompleter",
    "TerminalConsole",
    "VirtualConsole",
    "format_usage",
    "get_completions",
    "parse",
    "try_parse",
]
