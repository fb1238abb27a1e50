# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `LineBuffer`, the editable text of the line being read plus its cursor.

The cursor is an index between characters and always satisfies
`0 <= cursor_index <= len(buffer)`. Inserting text does not move the cursor;
callers advance it explicitly so that the buffer and the console cursor can be
kept in step.
"""
from __future__ import annotations

from enum import Enum


class SeekOrigin(Enum):
    BEGIN = "begin"
    CURRENT = "current"
    END = "end"


class LineBuffer:
    """A mutable character buffer with a cursor."""

    def __init__(self, contents: str = "") -> None:
        self._chars: list[str] = list(contents)
        self._cursor_index = 0

    @property
    def contents(self) -> str:
        return "".join(self._chars)

    @property
    def cursor_index(self) -> int:
        return self._cursor_index

    @property
    def cursor_is_at_end(self) -> bool:
        return self._cursor_index >= len(self._chars)

    def __len__(self) -> int:
        return len(self._chars)

    def __getitem__(self, index: int) -> str:
        return self._chars[index]

    def __str__(self) -> str:
        return self.contents

    def __repr__(self) -> str:
        return f"LineBuffer({self.contents!r}, cursor_index={self._cursor_index})"

    def move_cursor(self, origin: SeekOrigin, offset: int) -> tuple[bool, int]:
        """
        Move the cursor relative to an origin.

        Returns:
            tuple[bool, int]: Whether the move happened and how far the cursor
            moved from its previous position. Out-of-range moves change nothing.
        """
        if origin == SeekOrigin.BEGIN:
            start = 0
        elif origin == SeekOrigin.CURRENT:
            start = self._cursor_index
        else:
            start = len(self._chars)

        new_index = start + offset
        if new_index < 0 or new_index > len(self._chars):
            return False, 0
        delta = new_index - self._cursor_index
        self._cursor_index = new_index
        return True, delta

    def read(self, count: int) -> str:
        return self.read_at(self._cursor_index, count)

    def read_at(self, index: int, count: int) -> str:
        """Return `count` characters starting at `index`. Raises `IndexError`."""
        if index < 0 or count < 0 or index + count > len(self._chars):
            raise IndexError(
                f"Cannot read {count} character(s) at {index} from a buffer of "
                f"length {len(self._chars)}"
            )
        return "".join(self._chars[index : index + count])

    def insert(self, value: str) -> None:
        self._chars[self._cursor_index : self._cursor_index] = list(value)

    def replace(self, value: str) -> None:
        """Overwrite characters from the cursor. Raises `IndexError` on overflow."""
        if self._cursor_index + len(value) > len(self._chars):
            raise IndexError(
                f"Replacing {len(value)} character(s) at {self._cursor_index} would "
                f"overflow a buffer of length {len(self._chars)}"
            )
        end = self._cursor_index + len(value)
        self._chars[self._cursor_index : end] = list(value)

    def remove(self, count: int = 1) -> bool:
        if self._cursor_index + count > len(self._chars):
            return False
        del self._chars[self._cursor_index : self._cursor_index + count]
        return True

    def remove_char_before_cursor(self) -> bool:
        if self._cursor_index == 0:
            return False
        self._cursor_index -= 1
        return self.remove()

    def truncate(self) -> None:
        del self._chars[self._cursor_index :]

    def clear(self) -> None:
        self._chars.clear()
        self._cursor_index = 0
