# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `History`, the list of previously accepted lines and a navigation cursor.

The cursor ranges over `[0, entry_count]`; `entry_count` means "past the newest
entry", i.e. a fresh line with no current entry. Adding a line always returns the
cursor to that position. When a maximum is set, the oldest entries are evicted to
make room.
"""
from __future__ import annotations

from clapkit.console_input.line_buffer import SeekOrigin


class History:
    """
    Accepted input lines, oldest first.

    Args:
        max_entry_count (int | None): Maximum number of entries kept, or None for
            no limit.

    Raises:
        ValueError: If `max_entry_count` is not positive.
    """

    def __init__(self, max_entry_count: int | None = None) -> None:
        if max_entry_count is not None and max_entry_count <= 0:
            raise ValueError(
                f"max_entry_count must be greater than zero, got {max_entry_count}"
            )
        self.max_entry_count = max_entry_count
        self._entries: list[str] = []
        self._cursor_index = 0

    @property
    def entry_count(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def cursor_index(self) -> int:
        return self._cursor_index

    @property
    def current_entry(self) -> str | None:
        if self._cursor_index < len(self._entries):
            return self._entries[self._cursor_index]
        return None

    def add(self, entry: str) -> None:
        """Append `entry` unless it is blank, evicting the oldest entries if full."""
        if not entry or entry.isspace():
            return
        if self.max_entry_count is not None and len(self._entries) >= self.max_entry_count:
            excess = len(self._entries) - (self.max_entry_count - 1)
            del self._entries[:excess]
        self._entries.append(entry)
        self._cursor_index = len(self._entries)

    def move_cursor(self, origin: SeekOrigin, offset: int) -> bool:
        """Move the cursor; returns False and changes nothing if out of range."""
        if origin == SeekOrigin.BEGIN:
            base = 0
        elif origin == SeekOrigin.CURRENT:
            base = self._cursor_index
        else:
            base = len(self._entries)
        new_index = base + offset
        if new_index < 0 or new_index > len(self._entries):
            return False
        self._cursor_index = new_index
        return True

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))
