# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Maps key presses to line editor operations.

`ConsoleKeyBindingSet` keeps separate tables for character bindings (plain, Ctrl,
Alt and Ctrl+Alt) and key bindings (plain, Shift, Ctrl, Alt and Ctrl+Alt).
Lookup picks the table family from the modifiers, tries the character tables first
using the key's base character in lower case, then the Shift key table (plain
family only, and only when Shift is held), then the key table.

`ConsoleKeyBindingSet.default()` returns a copy of the readline-style defaults,
which callers may rebind freely without affecting other editors.
"""
from __future__ import annotations

from typing import Iterator, Protocol

from clapkit.console_input.keys import ConsoleKey, ConsoleKeyInfo, ConsoleModifiers
from clapkit.console_input.operations import ConsoleInputOperation as Op

DEFAULT_CONTROL_CHAR_BINDINGS: dict[str, Op] = {
    "a": Op.BEGINNING_OF_LINE,
    "b": Op.BACKWARD_CHAR,
    "c": Op.END_OF_FILE,
    "d": Op.END_OF_FILE,
    "e": Op.END_OF_LINE,
    "f": Op.FORWARD_CHAR,
    "g": Op.ABORT,
    "k": Op.KILL_LINE,
    "l": Op.CLEAR_SCREEN,
    "p": Op.PREVIOUS_HISTORY,
    "n": Op.NEXT_HISTORY,
    "q": Op.QUOTED_INSERT,
    "r": Op.REVERSE_SEARCH_HISTORY,
    "s": Op.FORWARD_SEARCH_HISTORY,
    "t": Op.TRANSPOSE_CHARS,
    "u": Op.UNIX_LINE_DISCARD,
    "v": Op.QUOTED_INSERT,
    "w": Op.UNIX_WORD_RUBOUT,
    "y": Op.YANK,
    "_": Op.UNDO,
    "@": Op.SET_MARK,
    "]": Op.CHARACTER_SEARCH,
    " ": Op.POSSIBLE_COMPLETIONS,
}

DEFAULT_CONTROL_KEY_BINDINGS: dict[ConsoleKey, Op] = {
    ConsoleKey.BACKSPACE: Op.BACKWARD_KILL_WORD,
    ConsoleKey.DELETE: Op.KILL_WORD,
    ConsoleKey.LEFT_ARROW: Op.BACKWARD_WORD,
    ConsoleKey.RIGHT_ARROW: Op.FORWARD_WORD,
}

DEFAULT_ALT_CHAR_BINDINGS: dict[str, Op] = {
    "b": Op.BACKWARD_WORD,
    "c": Op.CAPITALIZE_WORD,
    "d": Op.KILL_WORD,
    "f": Op.FORWARD_WORD,
    "l": Op.DOWNCASE_WORD,
    "n": Op.NON_INCREMENTAL_FORWARD_SEARCH_HISTORY,
    "p": Op.NON_INCREMENTAL_REVERSE_SEARCH_HISTORY,
    "r": Op.REVERT_LINE,
    "u": Op.UPCASE_WORD,
    "y": Op.YANK_POP,
    "<": Op.BEGINNING_OF_HISTORY,
    ">": Op.END_OF_HISTORY,
    ".": Op.YANK_LAST_ARG,
    "?": Op.POSSIBLE_COMPLETIONS,
    "*": Op.INSERT_COMPLETIONS,
    "~": Op.TILDE_EXPAND,
    "#": Op.INSERT_COMMENT,
}

DEFAULT_ALT_KEY_BINDINGS: dict[ConsoleKey, Op] = {
    ConsoleKey.DELETE: Op.BACKWARD_KILL_WORD,
    ConsoleKey.TAB: Op.TAB_INSERT,
}

DEFAULT_CONTROL_ALT_CHAR_BINDINGS: dict[str, Op] = {
    "y": Op.YANK_NTH_ARG,
    "]": Op.CHARACTER_SEARCH_BACKWARD,
}

DEFAULT_PLAIN_CHAR_BINDINGS: dict[str, Op] = {
    "\0": Op.END_OF_FILE,
}

DEFAULT_PLAIN_KEY_BINDINGS: dict[ConsoleKey, Op] = {
    ConsoleKey.BACKSPACE: Op.DELETE_PREVIOUS_CHAR,
    ConsoleKey.DELETE: Op.DELETE_CHAR,
    ConsoleKey.DOWN_ARROW: Op.NEXT_HISTORY,
    ConsoleKey.END: Op.END_OF_LINE,
    ConsoleKey.ENTER: Op.ACCEPT_LINE,
    ConsoleKey.ESCAPE: Op.REVERT_LINE,
    ConsoleKey.HOME: Op.BEGINNING_OF_LINE,
    ConsoleKey.INSERT: Op.TOGGLE_INSERT_MODE,
    ConsoleKey.LEFT_ARROW: Op.BACKWARD_CHAR,
    ConsoleKey.RIGHT_ARROW: Op.FORWARD_CHAR,
    ConsoleKey.TAB: Op.COMPLETE_TOKEN_NEXT,
    ConsoleKey.UP_ARROW: Op.PREVIOUS_HISTORY,
}

DEFAULT_SHIFT_KEY_BINDINGS: dict[ConsoleKey, Op] = {
    ConsoleKey.TAB: Op.COMPLETE_TOKEN_PREVIOUS,
}


class ReadOnlyKeyBindingSet(Protocol):
    def try_get_value(self, key: ConsoleKeyInfo) -> Op | None: ...


class ConsoleKeyBindingSet:
    """A mutable set of key and character bindings."""

    def __init__(self) -> None:
        self.control_alt_key_bindings: dict[ConsoleKey, Op] = {}
        self.alt_key_bindings: dict[ConsoleKey, Op] = {}
        self.control_key_bindings: dict[ConsoleKey, Op] = {}
        self.shift_key_bindings: dict[ConsoleKey, Op] = {}
        self.plain_key_bindings: dict[ConsoleKey, Op] = {}
        self.control_alt_char_bindings: dict[str, Op] = {}
        self.alt_char_bindings: dict[str, Op] = {}
        self.control_char_bindings: dict[str, Op] = {}
        self.plain_char_bindings: dict[str, Op] = {}

    @classmethod
    def default(cls) -> ConsoleKeyBindingSet:
        """Return a fresh copy of the readline-style default bindings."""
        bindings = cls()
        bindings.alt_key_bindings.update(DEFAULT_ALT_KEY_BINDINGS)
        bindings.control_key_bindings.update(DEFAULT_CONTROL_KEY_BINDINGS)
        bindings.shift_key_bindings.update(DEFAULT_SHIFT_KEY_BINDINGS)
        bindings.plain_key_bindings.update(DEFAULT_PLAIN_KEY_BINDINGS)
        bindings.control_alt_char_bindings.update(DEFAULT_CONTROL_ALT_CHAR_BINDINGS)
        bindings.alt_char_bindings.update(DEFAULT_ALT_CHAR_BINDINGS)
        bindings.control_char_bindings.update(DEFAULT_CONTROL_CHAR_BINDINGS)
        bindings.plain_char_bindings.update(DEFAULT_PLAIN_CHAR_BINDINGS)
        return bindings

    def _char_table(self, modifiers: ConsoleModifiers) -> dict[str, Op]:
        if modifiers & ConsoleModifiers.CONTROL and modifiers & ConsoleModifiers.ALT:
            return self.control_alt_char_bindings
        if modifiers & ConsoleModifiers.ALT:
            return self.alt_char_bindings
        if modifiers & ConsoleModifiers.CONTROL:
            return self.control_char_bindings
        return self.plain_char_bindings

    def _key_table(self, modifiers: ConsoleModifiers) -> dict[ConsoleKey, Op]:
        if modifiers & ConsoleModifiers.CONTROL and modifiers & ConsoleModifiers.ALT:
            return self.control_alt_key_bindings
        if modifiers & ConsoleModifiers.ALT:
            return self.alt_key_bindings
        if modifiers & ConsoleModifiers.CONTROL:
            return self.control_key_bindings
        if modifiers & ConsoleModifiers.SHIFT:
            return self.shift_key_bindings
        return self.plain_key_bindings

    def try_get_value(self, key: ConsoleKeyInfo) -> Op | None:
        """Return the operation bound to `key`, or None."""
        char_table = self._char_table(key.modifiers)
        base_char = key.base_char
        if base_char is not None:
            operation = char_table.get(base_char.lower())
            if operation is not None:
                return operation

        is_plain_family = not (key.control or key.alt)
        if is_plain_family:
            if key.shift:
                operation = self.shift_key_bindings.get(key.key)
                if operation is not None:
                    return operation
            return self.plain_key_bindings.get(key.key)

        return self._key_table(key.modifiers).get(key.key)

    def bind(
        self,
        char_or_key: str | ConsoleKey,
        modifiers: ConsoleModifiers,
        operation: Op | None,
    ) -> None:
        """
        Bind a character or key with modifiers to an operation.

        Passing `operation=None` removes the binding. Shift only selects a separate
        table for keys; character bindings are matched in lower case.
        """
        table: dict
        if isinstance(char_or_key, ConsoleKey):
            table = self._key_table(modifiers)
        else:
            if len(char_or_key) != 1:
                raise ValueError(f"Expected a single character, got {char_or_key!r}")
            table = self._char_table(modifiers)
        if operation is None:
            table.pop(char_or_key, None)
        else:
            table[char_or_key] = operation

    def _tables(self) -> Iterator[tuple[ConsoleModifiers, dict]]:
        control_alt = ConsoleModifiers.CONTROL | ConsoleModifiers.ALT
        yield control_alt, self.control_alt_key_bindings
        yield ConsoleModifiers.ALT, self.alt_key_bindings
        yield ConsoleModifiers.CONTROL, self.control_key_bindings
        yield ConsoleModifiers.SHIFT, self.shift_key_bindings
        yield ConsoleModifiers.NONE, self.plain_key_bindings
        yield control_alt, self.control_alt_char_bindings
        yield ConsoleModifiers.ALT, self.alt_char_bindings
        yield ConsoleModifiers.CONTROL, self.control_char_bindings
        yield ConsoleModifiers.NONE, self.plain_char_bindings

    def items(self) -> Iterator[tuple[ConsoleKeyInfo, Op]]:
        """Yield every binding as a synthesized key press and its operation."""
        for modifiers, table in self._tables():
            for binding, operation in table.items():
                if isinstance(binding, ConsoleKey):
                    yield ConsoleKeyInfo.from_key(binding, modifiers), operation
                else:
                    yield ConsoleKeyInfo.from_char(binding, modifiers), operation

    def __contains__(self, key: ConsoleKeyInfo) -> bool:
        return self.try_get_value(key) is not None

    def __getitem__(self, key: ConsoleKeyInfo) -> Op:
        operation = self.try_get_value(key)
        if operation is None:
            raise KeyError(key)
        return operation

    def __len__(self) -> int:
        return sum(len(table) for _, table in self._tables())
