# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
File system access used by answer files, path completion and path validation.

The parser never touches the file system directly; it goes through a
`FileSystemReaderProtocol` so tests and embedding applications can supply their own.
"""
from __future__ import annotations

import fnmatch
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class FileSystemReaderProtocol(Protocol):
    def file_exists(self, path: str) -> bool: ...

    def directory_exists(self, path: str) -> bool: ...

    def get_lines(self, path: str) -> list[str]: ...

    def enumerate_entries(self, directory: str, pattern: str = "*") -> list[str]: ...


class FileSystemReader:
    """Reads from the real file system using `pathlib`."""

    def file_exists(self, path: str) -> bool:
        return Path(path).is_file()

    def directory_exists(self, path: str) -> bool:
        return Path(path).is_dir()

    def get_lines(self, path: str) -> list[str]:
        """Read all lines of a UTF-8 text file. Raises `OSError` on failure."""
        with Path(path).open("r", encoding="UTF-8") as file:
            return file.read().splitlines()

    def enumerate_entries(self, directory: str, pattern: str = "*") -> list[str]:
        """Return the sorted names of entries in `directory` matching `pattern`."""
        root = Path(directory)
        if not root.is_dir():
            return []
        return sorted(
            entry.name for entry in root.iterdir() if fnmatch.fnmatch(entry.name, pattern)
        )
