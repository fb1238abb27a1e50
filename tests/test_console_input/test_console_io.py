import pytest
from prompt_toolkit.key_binding.key_processor import KeyPress
from prompt_toolkit.keys import Keys

from clapkit.console_input import (
    ConsoleInput,
    ConsoleKey,
    ConsoleKeyInfo,
    ConsoleModifiers,
    ConsoleOutput,
    VirtualConsole,
)
from clapkit.console_input.console_io import key_press_to_key_info


def test_virtual_console_satisfies_both_protocols():
    console = VirtualConsole()
    assert isinstance(console, ConsoleInput)
    assert isinstance(console, ConsoleOutput)
    assert (console.buffer_width, console.buffer_height) == (80, 24)
    assert console.cursor_size == 25


def test_scripted_keys():
    console = VirtualConsole(["ab", ConsoleKeyInfo.from_key(ConsoleKey.ENTER)])
    assert console.pending_key_count == 3
    assert console.read_key() == ConsoleKeyInfo.from_char("a")
    assert console.read_key() == ConsoleKeyInfo.from_char("b")
    console.feed("c")
    assert console.read_key().key == ConsoleKey.ENTER
    assert console.read_key().char == "c"
    with pytest.raises(EOFError):
        console.read_key()


def test_write_wraps_at_the_width():
    console = VirtualConsole(width=5, height=3)
    console.write("abcdefg")
    assert console.lines == ["abcde", "fg", ""]
    assert (console.cursor_left, console.cursor_top) == (2, 1)


def test_write_scrolls_at_the_bottom():
    console = VirtualConsole(width=5, height=2)
    console.write("abcdefghijk")
    assert console.lines == ["fghij", "k"]
    assert (console.cursor_left, console.cursor_top) == (1, 1)


def test_write_line_and_carriage_return():
    console = VirtualConsole(width=10, height=3)
    console.write_line("first")
    console.write("xyz\rA")
    assert console.text == "first\nAyz"
    assert (console.cursor_left, console.cursor_top) == (1, 1)


def test_cursor_positioning():
    console = VirtualConsole(width=10, height=3)
    assert console.set_cursor_position(9, 2)
    assert not console.set_cursor_position(10, 0)
    assert not console.set_cursor_position(0, -1)
    assert (console.cursor_left, console.cursor_top) == (9, 2)


def test_scroll_contents():
    console = VirtualConsole(width=4, height=3)
    console.write("aaaabbbbcc")
    console.scroll_contents(1)
    assert console.lines == ["bbbb", "cc", ""]
    assert console.cursor_top == 1
    console.scroll_contents(0)
    with pytest.raises(ValueError):
        console.scroll_contents(-1)
    with pytest.raises(ValueError):
        console.scroll_contents(4)


def test_clear_keeps_the_cursor():
    console = VirtualConsole(width=4, height=2)
    console.write("abc")
    console.clear()
    assert console.text == ""
    assert console.cursor_left == 3


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        VirtualConsole(width=0)


@pytest.mark.parametrize(
    "key_press, expected",
    [
        (
            KeyPress(Keys.ControlA, "\x01"),
            ConsoleKeyInfo("\x01", ConsoleKey.A, ConsoleModifiers.CONTROL),
        ),
        (KeyPress(Keys.Enter), ConsoleKeyInfo.from_key(ConsoleKey.ENTER)),
        (KeyPress(Keys.Tab), ConsoleKeyInfo.from_key(ConsoleKey.TAB)),
        (
            KeyPress(Keys.BackTab),
            ConsoleKeyInfo.from_key(ConsoleKey.TAB, ConsoleModifiers.SHIFT),
        ),
        (KeyPress(Keys.Backspace), ConsoleKeyInfo.from_key(ConsoleKey.BACKSPACE)),
        (
            KeyPress(Keys.ControlLeft),
            ConsoleKeyInfo.from_key(ConsoleKey.LEFT_ARROW, ConsoleModifiers.CONTROL),
        ),
        (KeyPress(Keys.F5), ConsoleKeyInfo.from_key(ConsoleKey.F5)),
        (
            KeyPress(Keys.ControlUnderscore),
            ConsoleKeyInfo("_", ConsoleKey.NONE, ConsoleModifiers.CONTROL),
        ),
        (KeyPress(Keys.ScrollUp), None),
        (KeyPress("x"), ConsoleKeyInfo.from_char("x")),
        (KeyPress("X"), ConsoleKeyInfo.from_char("X")),
    ],
)
def test_key_press_translation(key_press, expected):
    assert key_press_to_key_info(key_press) == expected


def test_key_press_translation_keeps_modifiers():
    assert key_press_to_key_info(KeyPress("b"), ConsoleModifiers.ALT) == (
        ConsoleKeyInfo.from_char("b", ConsoleModifiers.ALT)
    )
