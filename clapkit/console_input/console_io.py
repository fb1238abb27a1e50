# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Console input and output abstractions used by the line editor.

The editor never talks to a terminal directly. It reads key presses from a
`ConsoleInput` and draws through a `ConsoleOutput`, both of which are Protocols so
that any object with the right shape can be used.

Two implementations ship with Clapkit:

- `VirtualConsole`: An in-memory character grid fed with scripted key presses.
  Writes wrap at the grid width and scroll the grid when they run off the bottom.
  Used for tests and for driving the editor without a terminal.
- `TerminalConsole`: A real terminal. Output goes through a `rich.console.Console`
  and key presses are read in raw mode through `prompt_toolkit`'s input layer and
  translated into `ConsoleKeyInfo` values.

Coordinates are zero-based, with `(0, 0)` at the top-left of the visible screen.
"""
from __future__ import annotations

import re
import select
from collections import deque
from typing import Iterable, Protocol, runtime_checkable

from prompt_toolkit.input import Input, create_input
from prompt_toolkit.key_binding.key_processor import KeyPress
from prompt_toolkit.keys import Keys
from rich.console import Console
from rich.control import Control

from clapkit.console import console as default_console
from clapkit.console_input.keys import ConsoleKey, ConsoleKeyInfo, ConsoleModifiers
from clapkit.logger import logger


@runtime_checkable
class ConsoleInput(Protocol):
    def read_key(self, suppress_echo: bool = True) -> ConsoleKeyInfo: ...


@runtime_checkable
class ConsoleOutput(Protocol):
    cursor_visible: bool
    cursor_size: int

    @property
    def cursor_left(self) -> int: ...

    @property
    def cursor_top(self) -> int: ...

    @property
    def buffer_width(self) -> int: ...

    @property
    def buffer_height(self) -> int: ...

    def set_cursor_position(self, left: int, top: int) -> bool: ...

    def scroll_contents(self, line_count: int) -> None: ...

    def write(self, text: str) -> None: ...

    def write_line(self, text: str = "") -> None: ...

    def clear(self) -> None: ...


class VirtualConsole:
    """
    A fixed-size in-memory console.

    Args:
        keys (Iterable[ConsoleKeyInfo | str]): Scripted key presses returned by
            `read_key`, in order. Strings are expanded into one key press per
            character.
        width (int): Number of columns.
        height (int): Number of rows.
    """

    def __init__(
        self,
        keys: Iterable[ConsoleKeyInfo | str] = (),
        width: int = 80,
        height: int = 24,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Console dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self._rows: list[list[str]] = [[" "] * width for _ in range(height)]
        self._cursor_left = 0
        self._cursor_top = 0
        self._keys: deque[ConsoleKeyInfo] = deque()
        self.cursor_visible = True
        self.cursor_size = 25
        self.feed(*keys)

    def feed(self, *keys: ConsoleKeyInfo | str) -> None:
        """Queue more key presses."""
        for key in keys:
            if isinstance(key, str):
                self._keys.extend(ConsoleKeyInfo.from_char(char) for char in key)
            else:
                self._keys.append(key)

    @property
    def pending_key_count(self) -> int:
        return len(self._keys)

    def read_key(self, suppress_echo: bool = True) -> ConsoleKeyInfo:
        if not self._keys:
            raise EOFError("There are no more key events to read.")
        return self._keys.popleft()

    @property
    def cursor_left(self) -> int:
        return self._cursor_left

    @property
    def cursor_top(self) -> int:
        return self._cursor_top

    @property
    def buffer_width(self) -> int:
        return self._width

    @property
    def buffer_height(self) -> int:
        return self._height

    def set_cursor_position(self, left: int, top: int) -> bool:
        if not (0 <= left < self._width and 0 <= top < self._height):
            return False
        self._cursor_left = left
        self._cursor_top = top
        return True

    def scroll_contents(self, line_count: int) -> None:
        """Shift every row up by `line_count`, blanking the rows uncovered below."""
        if line_count < 0 or line_count > self._height:
            raise ValueError(f"Cannot scroll by {line_count} line(s)")
        if line_count == 0:
            return
        del self._rows[:line_count]
        self._rows.extend([" "] * self._width for _ in range(line_count))
        self._cursor_top = max(0, self._cursor_top - line_count)

    def _write_char(self, char: str) -> None:
        offset = self._cursor_top * self._width + self._cursor_left
        if char == "\n":
            offset += self._width - self._cursor_left
        elif char == "\r":
            offset -= self._cursor_left
        else:
            self._rows[self._cursor_top][self._cursor_left] = char
            offset += 1

        row, column = divmod(offset, self._width)
        if row >= self._height:
            self.scroll_contents(row - self._height + 1)
            row = self._height - 1
        self._cursor_left = column
        self._cursor_top = row

    def write(self, text: str) -> None:
        for char in text:
            self._write_char(char)

    def write_line(self, text: str = "") -> None:
        self.write(text)
        self._write_char("\n")

    def clear(self) -> None:
        """Blank the grid without moving the cursor."""
        for row in self._rows:
            row[:] = [" "] * self._width

    def get_line(self, top: int) -> str:
        """Return row `top` with trailing spaces removed."""
        return "".join(self._rows[top]).rstrip()

    @property
    def lines(self) -> list[str]:
        return [self.get_line(top) for top in range(self._height)]

    @property
    def text(self) -> str:
        """The whole grid as text, with trailing blank rows dropped."""
        return "\n".join(self.lines).rstrip("\n")


_SPECIAL_KEYS: dict[str, tuple[ConsoleKey, ConsoleModifiers]] = {
    Keys.Escape: (ConsoleKey.ESCAPE, ConsoleModifiers.NONE),
    Keys.Enter: (ConsoleKey.ENTER, ConsoleModifiers.NONE),
    Keys.ControlJ: (ConsoleKey.ENTER, ConsoleModifiers.NONE),
    Keys.Tab: (ConsoleKey.TAB, ConsoleModifiers.NONE),
    Keys.BackTab: (ConsoleKey.TAB, ConsoleModifiers.SHIFT),
    Keys.Backspace: (ConsoleKey.BACKSPACE, ConsoleModifiers.NONE),
    Keys.Left: (ConsoleKey.LEFT_ARROW, ConsoleModifiers.NONE),
    Keys.Right: (ConsoleKey.RIGHT_ARROW, ConsoleModifiers.NONE),
    Keys.Up: (ConsoleKey.UP_ARROW, ConsoleModifiers.NONE),
    Keys.Down: (ConsoleKey.DOWN_ARROW, ConsoleModifiers.NONE),
    Keys.Home: (ConsoleKey.HOME, ConsoleModifiers.NONE),
    Keys.End: (ConsoleKey.END, ConsoleModifiers.NONE),
    Keys.Insert: (ConsoleKey.INSERT, ConsoleModifiers.NONE),
    Keys.Delete: (ConsoleKey.DELETE, ConsoleModifiers.NONE),
    Keys.PageUp: (ConsoleKey.PAGE_UP, ConsoleModifiers.NONE),
    Keys.PageDown: (ConsoleKey.PAGE_DOWN, ConsoleModifiers.NONE),
    Keys.ControlLeft: (ConsoleKey.LEFT_ARROW, ConsoleModifiers.CONTROL),
    Keys.ControlRight: (ConsoleKey.RIGHT_ARROW, ConsoleModifiers.CONTROL),
    Keys.ControlUp: (ConsoleKey.UP_ARROW, ConsoleModifiers.CONTROL),
    Keys.ControlDown: (ConsoleKey.DOWN_ARROW, ConsoleModifiers.CONTROL),
    Keys.ControlHome: (ConsoleKey.HOME, ConsoleModifiers.CONTROL),
    Keys.ControlEnd: (ConsoleKey.END, ConsoleModifiers.CONTROL),
    Keys.ControlDelete: (ConsoleKey.DELETE, ConsoleModifiers.CONTROL),
    Keys.ShiftLeft: (ConsoleKey.LEFT_ARROW, ConsoleModifiers.SHIFT),
    Keys.ShiftRight: (ConsoleKey.RIGHT_ARROW, ConsoleModifiers.SHIFT),
    Keys.ShiftUp: (ConsoleKey.UP_ARROW, ConsoleModifiers.SHIFT),
    Keys.ShiftDown: (ConsoleKey.DOWN_ARROW, ConsoleModifiers.SHIFT),
    Keys.ShiftDelete: (ConsoleKey.DELETE, ConsoleModifiers.SHIFT),
}
_SPECIAL_KEYS.update(
    {getattr(Keys, f"F{n}"): (ConsoleKey[f"F{n}"], ConsoleModifiers.NONE) for n in range(1, 13)}
)

_CONTROL_PUNCTUATION: dict[str, str] = {
    Keys.ControlAt: "@",
    Keys.ControlBackslash: "\\",
    Keys.ControlSquareClose: "]",
    Keys.ControlCircumflex: "^",
    Keys.ControlUnderscore: "_",
}

_CPR_PATTERN = re.compile(r"\x1b\[(\d+);(\d+)R")


def key_press_to_key_info(
    key_press: KeyPress, modifiers: ConsoleModifiers = ConsoleModifiers.NONE
) -> ConsoleKeyInfo | None:
    """
    Translate a prompt_toolkit key press into a `ConsoleKeyInfo`.

    Returns None for key presses with no console equivalent (e.g. mouse events).
    """
    key = key_press.key
    if isinstance(key, Keys):
        if key in _SPECIAL_KEYS:
            console_key, extra = _SPECIAL_KEYS[key]
            return ConsoleKeyInfo.from_key(console_key, modifiers | extra)
        if key in _CONTROL_PUNCTUATION:
            return ConsoleKeyInfo(
                _CONTROL_PUNCTUATION[key], ConsoleKey.NONE, modifiers | ConsoleModifiers.CONTROL
            )
        match = re.fullmatch(r"c-([a-z])", key.value)
        if match:
            letter = match.group(1)
            return ConsoleKeyInfo(
                key_press.data or letter,
                ConsoleKey(ord(letter.upper())),
                modifiers | ConsoleModifiers.CONTROL,
            )
        logger.debug("Ignoring key press without a console equivalent: %s", key)
        return None
    if len(key) != 1:
        return None
    return ConsoleKeyInfo.from_char(key, modifiers)


class TerminalConsole:
    """
    A `ConsoleInput` and `ConsoleOutput` backed by the process's terminal.

    Output is written through a rich `Console`, whose terminal size and cursor
    control sequences are used for positioning. Input is read in raw mode through
    prompt_toolkit, with an Escape followed by a character in the same read
    treated as an Alt chord.

    The cursor position is queried from the terminal when the console is created
    and tracked from then on. Key reading waits on the input with `select`, so
    this console needs a POSIX terminal.

    Args:
        console (Console | None): Rich console to draw on. Defaults to Clapkit's
            shared stdout console.
        input_ (Input | None): prompt_toolkit input to read from. Defaults to
            `create_input()`.
    """

    def __init__(self, console: Console | None = None, input_: Input | None = None) -> None:
        self.console = console or default_console
        self.input = input_ or create_input()
        self._pending: deque[KeyPress] = deque()
        self._cursor_visible = True
        self.cursor_size = 25
        self._cursor_left = 0
        self._cursor_top = 0
        self.sync_cursor_position()

    def _read_key_presses(self) -> None:
        with self.input.raw_mode():
            select.select([self.input.fileno()], [], [])
            self._pending.extend(self.input.read_keys())
            self._pending.extend(self.input.flush_keys())

    def read_key(self, suppress_echo: bool = True) -> ConsoleKeyInfo:
        while True:
            while not self._pending:
                self._read_key_presses()
            key_press = self._pending.popleft()
            modifiers = ConsoleModifiers.NONE
            if key_press.key == Keys.Escape and self._pending:
                modifiers = ConsoleModifiers.ALT
                key_press = self._pending.popleft()
            key_info = key_press_to_key_info(key_press, modifiers)
            if key_info is not None:
                return key_info

    def sync_cursor_position(self) -> None:
        """Ask the terminal where the cursor is and adopt that position."""
        if not self.console.is_terminal:
            return
        self.console.file.write("\x1b[6n")
        self.console.file.flush()
        while True:
            self._read_key_presses()
            for key_press in list(self._pending):
                if key_press.key == Keys.CPRResponse:
                    self._pending.remove(key_press)
                    match = _CPR_PATTERN.search(key_press.data)
                    if match:
                        self._cursor_top = int(match.group(1)) - 1
                        self._cursor_left = int(match.group(2)) - 1
                    return

    @property
    def cursor_left(self) -> int:
        return self._cursor_left

    @property
    def cursor_top(self) -> int:
        return self._cursor_top

    @property
    def buffer_width(self) -> int:
        return self.console.size.width

    @property
    def buffer_height(self) -> int:
        return self.console.size.height

    @property
    def cursor_visible(self) -> bool:
        return self._cursor_visible

    @cursor_visible.setter
    def cursor_visible(self, visible: bool) -> None:
        self._cursor_visible = visible
        self.console.show_cursor(visible)

    def set_cursor_position(self, left: int, top: int) -> bool:
        if not (0 <= left < self.buffer_width and 0 <= top < self.buffer_height):
            return False
        self._cursor_left = left
        self._cursor_top = top
        self.console.control(Control.move_to(left, top))
        return True

    def scroll_contents(self, line_count: int) -> None:
        if line_count <= 0:
            return
        self.console.file.write(f"\x1b[{line_count}S")
        self.console.file.flush()
        self.set_cursor_position(self._cursor_left, max(0, self._cursor_top - line_count))

    def write(self, text: str) -> None:
        width = self.buffer_width
        height = self.buffer_height
        left, top = self._cursor_left, self._cursor_top
        for char in text:
            if char == "\n":
                left, top = 0, top + 1
            elif char == "\r":
                left = 0
            else:
                left += 1
                if left >= width:
                    left, top = 0, top + 1
            top = min(top, height - 1)
        self.console.file.write(text.replace("\n", "\r\n"))
        self.console.file.flush()
        self.set_cursor_position(left, top)

    def write_line(self, text: str = "") -> None:
        self.write(text + "\n")

    def clear(self) -> None:
        self.console.clear(home=False)
