# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Key press model used by the line editor.

A `ConsoleKeyInfo` combines the character a key produced, the physical key and the
modifier keys held. Key values follow the common virtual-key numbering so that key
codes coming from other terminal libraries map onto them directly.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntFlag


class ConsoleModifiers(IntFlag):
    NONE = 0
    ALT = 1
    SHIFT = 2
    CONTROL = 4


class ConsoleKey(Enum):
    """Physical keys. `NONE` stands for keys only known by their character."""

    NONE = 0
    BACKSPACE = 8
    TAB = 9
    ENTER = 13
    ESCAPE = 27
    SPACEBAR = 32
    PAGE_UP = 33
    PAGE_DOWN = 34
    END = 35
    HOME = 36
    LEFT_ARROW = 37
    UP_ARROW = 38
    RIGHT_ARROW = 39
    DOWN_ARROW = 40
    INSERT = 45
    DELETE = 46
    D0 = 48
    D1 = 49
    D2 = 50
    D3 = 51
    D4 = 52
    D5 = 53
    D6 = 54
    D7 = 55
    D8 = 56
    D9 = 57
    A = 65
    B = 66
    C = 67
    D = 68
    E = 69
    F = 70
    G = 71
    H = 72
    I = 73
    J = 74
    K = 75
    L = 76
    M = 77
    N = 78
    O = 79
    P = 80
    Q = 81
    R = 82
    S = 83
    T = 84
    U = 85
    V = 86
    W = 87
    X = 88
    Y = 89
    Z = 90
    F1 = 112
    F2 = 113
    F3 = 114
    F4 = 115
    F5 = 116
    F6 = 117
    F7 = 118
    F8 = 119
    F9 = 120
    F10 = 121
    F11 = 122
    F12 = 123

    @property
    def is_letter(self) -> bool:
        return ConsoleKey.A.value <= self.value <= ConsoleKey.Z.value

    @property
    def is_digit(self) -> bool:
        return ConsoleKey.D0.value <= self.value <= ConsoleKey.D9.value


@dataclass(frozen=True)
class ConsoleKeyInfo:
    """
    A single key press.

    Attributes:
        char (str): The character produced, or `"\\0"` if none.
        key (ConsoleKey): The physical key.
        modifiers (ConsoleModifiers): Modifier keys held during the press.
    """

    char: str = "\0"
    key: ConsoleKey = ConsoleKey.NONE
    modifiers: ConsoleModifiers = ConsoleModifiers.NONE

    @property
    def shift(self) -> bool:
        return bool(self.modifiers & ConsoleModifiers.SHIFT)

    @property
    def alt(self) -> bool:
        return bool(self.modifiers & ConsoleModifiers.ALT)

    @property
    def control(self) -> bool:
        return bool(self.modifiers & ConsoleModifiers.CONTROL)

    @property
    def base_char(self) -> str | None:
        """
        The character the key produces without Ctrl or Alt, if there is one.

        Letter, digit and space keys map to their character; keys without a
        physical identity fall back to `char`. Other special keys have none.
        """
        if self.key.is_letter:
            letter = chr(self.key.value)
            return letter if self.shift else letter.lower()
        if self.key.is_digit:
            return chr(self.key.value)
        if self.key == ConsoleKey.SPACEBAR:
            return " "
        if self.key == ConsoleKey.NONE:
            return self.char
        return None

    @classmethod
    def from_char(
        cls, char: str, modifiers: ConsoleModifiers = ConsoleModifiers.NONE
    ) -> ConsoleKeyInfo:
        """Build the key press that types `char`, inferring the key where possible."""
        key = ConsoleKey.NONE
        if char.isascii() and char.isalpha():
            key = ConsoleKey(ord(char.upper()))
            if char.isupper():
                modifiers |= ConsoleModifiers.SHIFT
        elif char.isascii() and char.isdigit():
            key = ConsoleKey(ord(char))
        elif char == " ":
            key = ConsoleKey.SPACEBAR
        return cls(char, key, modifiers)

    @classmethod
    def from_key(
        cls, key: ConsoleKey, modifiers: ConsoleModifiers = ConsoleModifiers.NONE
    ) -> ConsoleKeyInfo:
        """Build a key press for a special key."""
        chars = {
            ConsoleKey.BACKSPACE: "\b",
            ConsoleKey.TAB: "\t",
            ConsoleKey.ENTER: "\r",
            ConsoleKey.ESCAPE: "\x1b",
        }
        return cls(chars.get(key, "\0"), key, modifiers)
