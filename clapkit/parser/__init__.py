"""
Clapkit CLI Toolkit

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .argument_flags import ArgumentFlags, ArgumentNameGeneration, ArgumentNameType
from .argument_set_parser import ArgumentSetParser
from .argument_set_style import ArgumentSetStyle
from .argument_types import ArgumentType, CoercionResult, get_argument_type
from .command_group import (
    ArgumentProvider,
    CommandDefinition,
    CommandGroup,
    CommandGroupArgumentType,
)
from .command_line_parser import format_usage, get_completions, parse, try_parse
from .descriptor import NO_DEFAULT, ArgumentDescriptor
from .file_system import FileSystemReader, FileSystemReaderProtocol
from .parse_result import ParseResult, ParseResultType
from .parser_options import ParserOptions
from .schema import ArgumentSchema

__all__ = [
    "ArgumentDescriptor",
    "ArgumentFlags",
    "ArgumentNameGeneration",
    "ArgumentNameType",
    "ArgumentProvider",
    "ArgumentSchema",
    "ArgumentSetParser",
    "ArgumentSetStyle",
    "ArgumentType",
    "CoercionResult",
    "CommandDefinition",
    "CommandGroup",
    "CommandGroupArgumentType",
    "FileSystemReader",
    "FileSystemReaderProtocol",
    "NO_DEFAULT",
    "ParseResult",
    "ParseResultType",
    "ParserOptions",
    "format_usage",
    "get_argument_type",
    "get_completions",
    "parse",
    "try_parse",
]
