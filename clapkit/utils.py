# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""utils.py"""
from __future__ import annotations

import logging
import os
import shutil
import sys
from typing import Sequence

import pythonjsonlogger.json
from rich.logging import RichHandler


def get_program_invocation() -> str:
    """Returns the recommended program invocation prefix."""
    script = sys.argv[0]
    program = shutil.which(script)
    if program:
        return os.path.basename(program)

    executable = sys.executable
    if "python" in executable:
        return f"python {script}"
    return script


class CaseInsensitiveDict(dict):
    """A case-insensitive dictionary that treats all keys as uppercase."""

    def _normalize_key(self, key):
        return key.upper() if isinstance(key, str) else key

    def __setitem__(self, key, value):
        super().__setitem__(self._normalize_key(key), value)

    def __getitem__(self, key):
        return super().__getitem__(self._normalize_key(key))

    def __delitem__(self, key):
        super().__delitem__(self._normalize_key(key))

    def __contains__(self, key):
        return super().__contains__(self._normalize_key(key))

    def get(self, key, default=None):
        return super().get(self._normalize_key(key), default)

    def pop(self, key, default=None):
        return super().pop(self._normalize_key(key), default)


def to_hyphenated_lower_case(value: str) -> str:
    """
    Convert a camel, Pascal or snake cased name to hyphenated lower case.

    `MaxRetryCount` and `max_retry_count` both become `max-retry-count`. A run of
    upper-case letters is only split where it follows a lower-case letter, so
    `HTTPPort` becomes `httpport`.
    """
    result: list[str] = []
    last_char_was_lower = False
    for index, char in enumerate(value):
        if index == 0:
            last_char_was_lower = char.islower()
            char = char.lower()
        elif char in ("_", "-"):
            char = "-"
            last_char_was_lower = False
        elif char.isupper():
            if last_char_was_lower:
                result.append("-")
            char = char.lower()
            last_char_was_lower = False
        else:
            last_char_was_lower = True
        result.append(char)
    return "".join(result)


def damerau_levenshtein_distance(original: str, modified: str) -> int:
    """
    Compute the optimal string alignment (restricted Damerau–Levenshtein) distance.

    Insertions, deletions, substitutions and transpositions of adjacent characters
    each cost one edit.
    """
    rows = len(original) + 1
    cols = len(modified) + 1
    matrix = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        matrix[i][0] = i
    for j in range(cols):
        matrix[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if original[i - 1] == modified[j - 1] else 1
            matrix[i][j] = min(
                matrix[i - 1][j] + 1,
                matrix[i][j - 1] + 1,
                matrix[i - 1][j - 1] + cost,
            )
            if (
                i > 1
                and j > 1
                and original[i - 1] == modified[j - 2]
                and original[i - 2] == modified[j - 1]
            ):
                matrix[i][j] = min(matrix[i][j], matrix[i - 2][j - 2] + cost)
    return matrix[rows - 1][cols - 1]


def format_in_columns(values: Sequence[str], width: int) -> str:
    """
    Lay out values in column-major order to fit the given screen width.

    Each row ends with a newline unless it exactly fills the width, in which case
    the terminal's own wrapping moves to the next line.
    """
    space_between_columns = 2
    if not values:
        return ""

    max_length = max(len(value) for value in values)
    column_width = min(max_length + space_between_columns, width)
    columns = max(1, width // column_width)
    last_column_width = width - column_width * (columns - 1)
    rows = -(-len(values) // columns)

    lines: list[str] = []
    for row in range(rows):
        chars_in_row = 0
        for column in range(columns):
            index = column * rows + row
            if index >= len(values):
                lines.append("\n")
                break
            this_width = last_column_width if column == columns - 1 else column_width
            lines.append(values[index].ljust(this_width))
            chars_in_row += len(values[index])
        if chars_in_row > width:
            lines.append("\n")
    return "".join(lines)


def running_in_container() -> bool:
    try:
        with open("/proc/1/cgroup", "r", encoding="UTF-8") as f:
            content = f.read()
            return (
                "docker" in content
                or "kubepods" in content
                or "containerd" in content
                or "podman" in content
            )
    except OSError:
        return False


def setup_logging(
    mode: str | None = None,
    log_filename: str = "clapkit.log",
    json_log_to_file: bool = False,
    file_log_level: int = logging.DEBUG,
    console_log_level: int = logging.WARNING,
):
    """
    Configure logging for Clapkit with support for both CLI-friendly and structured
    JSON output.

    Console and file output get separate handlers. Inside a container the console
    defaults to machine-readable JSON logs.

    Args:
        mode (str | None):
            Logging output mode. Can be:
                - "cli": human-readable Rich console logs (default outside containers)
                - "json": machine-readable JSON logs (default inside containers)
            If not provided, it will use the `CLAPKIT_LOG_MODE` environment variable
            or fallback based on container detection.
        log_filename (str):
            Path to the log file. Defaults to "clapkit.log".
        json_log_to_file (bool):
            Whether to format file logs as JSON instead of plain text.
        file_log_level (int):
            Logging level for file output. Defaults to `logging.DEBUG`.
        console_log_level (int):
            Logging level for console output. Defaults to `logging.WARNING`.

    Raises:
        ValueError: If an invalid logging `mode` is passed.

    Environment Variables:
        CLAPKIT_LOG_MODE: Can override `mode` to enforce "cli" or "json" logging.
    """
    if not mode:
        mode = os.getenv("CLAPKIT_LOG_MODE") or (
            "json" if running_in_container() else "cli"
        )

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    if root.hasHandlers():
        root.handlers.clear()

    if mode == "cli":
        console_handler: RichHandler | logging.StreamHandler = RichHandler(
            rich_tracebacks=True,
            show_time=True,
            show_level=True,
            show_path=False,
            markup=True,
            log_time_format="[%Y-%m-%d %H:%M:%S]",
        )
    elif mode == "json":
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            pythonjsonlogger.json.JsonFormatter(
                "%(asctime)s %(name)s %(levelname)s %(message)s"
            )
        )
    else:
        raise ValueError(f"Invalid log mode: {mode}")

    console_handler.setLevel(console_log_level)
    root.addHandler(console_handler)

    file_handler = logging.FileHandler(log_filename, "a", "UTF-8")
    file_handler.setLevel(file_log_level)
    if json_log_to_file:
        file_handler.setFormatter(
            pythonjsonlogger.json.JsonFormatter(
                "%(asctime)s %(name)s %(levelname)s %(message)s"
            )
        )
    else:
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(name)s] [%(levelname)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    root.addHandler(file_handler)

    logging.getLogger("markdown_it").setLevel(logging.WARNING)

    logger = logging.getLogger("clapkit")
    logger.propagate = True
    logger.debug("Logging initialized in '%s' mode.", mode)
