# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `ArgumentSetStyle`, named presets for an argument set's syntax.

Assigning a style to an `ArgumentSchema` rewrites its prefixes, value separators
and parsing flags in one step. The style itself is not remembered.

Example:
    ArgumentSetStyle("getopt")   → ArgumentSetStyle.GETOPT
    ArgumentSetStyle("posix")    → ArgumentSetStyle.GETOPT (via alias)
    ArgumentSetStyle("windows")  → ArgumentSetStyle.WINDOWS_COMMAND_LINE (via alias)
"""
from __future__ import annotations

from enum import Enum


class ArgumentSetStyle(Enum):
    """
    Named syntax presets for argument sets.

    Members:
        UNSPECIFIED: Leave the current settings alone.
        WINDOWS_COMMAND_LINE: `/name:value` or `-name=value`, case-insensitive names.
        POWERSHELL: `-Name value` or `-Name:value`.
        GETOPT: `--name=value`, `--name value`, bundled short flags `-abc`, and
            elided short values `-ofile`.

    Aliases:
        - "windows" → "windows_command_line"
        - "posix", "gnu" → "getopt"
        - "pwsh" → "powershell"
    """

    UNSPECIFIED = "unspecified"
    WINDOWS_COMMAND_LINE = "windows_command_line"
    POWERSHELL = "powershell"
    GETOPT = "getopt"

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "windows": "windows_command_line",
            "posix": "getopt",
            "gnu": "getopt",
            "pwsh": "powershell",
        }
        return aliases.get(value, value)

    @classmethod
    def _missing_(cls, value: object) -> ArgumentSetStyle:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower().replace("-", "_")
        alias = cls._get_alias(normalized)
        for member in cls:
            if member.value == alias:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value
