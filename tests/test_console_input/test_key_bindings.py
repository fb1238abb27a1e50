import pytest

from clapkit.console_input import (
    ConsoleInputOperation,
    ConsoleKey,
    ConsoleKeyBindingSet,
    ConsoleKeyInfo,
    ConsoleModifiers,
)

ALT = ConsoleModifiers.ALT
CONTROL = ConsoleModifiers.CONTROL
SHIFT = ConsoleModifiers.SHIFT


@pytest.mark.parametrize(
    "key, expected",
    [
        (ConsoleKeyInfo.from_char("a", CONTROL), ConsoleInputOperation.BEGINNING_OF_LINE),
        (ConsoleKeyInfo.from_key(ConsoleKey.ENTER), ConsoleInputOperation.ACCEPT_LINE),
        (
            ConsoleKeyInfo.from_key(ConsoleKey.TAB, SHIFT),
            ConsoleInputOperation.COMPLETE_TOKEN_PREVIOUS,
        ),
        (ConsoleKeyInfo.from_key(ConsoleKey.TAB), ConsoleInputOperation.COMPLETE_TOKEN_NEXT),
        (ConsoleKeyInfo.from_char("b", ALT), ConsoleInputOperation.BACKWARD_WORD),
        (ConsoleKeyInfo.from_char("B", ALT), ConsoleInputOperation.BACKWARD_WORD),
        (ConsoleKeyInfo.from_char("y", CONTROL | ALT), ConsoleInputOperation.YANK_NTH_ARG),
        (
            ConsoleKeyInfo.from_key(ConsoleKey.BACKSPACE, CONTROL),
            ConsoleInputOperation.BACKWARD_KILL_WORD,
        ),
        (ConsoleKeyInfo.from_char("#", ALT), ConsoleInputOperation.INSERT_COMMENT),
        (ConsoleKeyInfo.from_char(" ", CONTROL), ConsoleInputOperation.POSSIBLE_COMPLETIONS),
        (ConsoleKeyInfo(), ConsoleInputOperation.END_OF_FILE),
        (ConsoleKeyInfo.from_char("a"), None),
        (ConsoleKeyInfo.from_char("A"), None),
        (ConsoleKeyInfo.from_key(ConsoleKey.F5), None),
    ],
)
def test_default_bindings(key, expected):
    assert ConsoleKeyBindingSet.default().try_get_value(key) == expected


def test_default_copies_are_independent():
    first = ConsoleKeyBindingSet.default()
    second = ConsoleKeyBindingSet.default()
    first.bind("a", CONTROL, ConsoleInputOperation.ABORT)
    assert first[ConsoleKeyInfo.from_char("a", CONTROL)] == ConsoleInputOperation.ABORT
    assert (
        second[ConsoleKeyInfo.from_char("a", CONTROL)]
        == ConsoleInputOperation.BEGINNING_OF_LINE
    )


def test_bind_and_unbind():
    bindings = ConsoleKeyBindingSet()
    assert len(bindings) == 0
    bindings.bind(ConsoleKey.F1, ConsoleModifiers.NONE, ConsoleInputOperation.CLEAR_SCREEN)
    bindings.bind("x", CONTROL, ConsoleInputOperation.ACCEPT_LINE)
    assert ConsoleKeyInfo.from_key(ConsoleKey.F1) in bindings
    assert bindings[ConsoleKeyInfo.from_char("x", CONTROL)] == ConsoleInputOperation.ACCEPT_LINE
    assert len(bindings) == 2

    bindings.bind("x", CONTROL, None)
    assert ConsoleKeyInfo.from_char("x", CONTROL) not in bindings
    with pytest.raises(KeyError):
        bindings[ConsoleKeyInfo.from_char("x", CONTROL)]


def test_bind_requires_a_single_character():
    with pytest.raises(ValueError):
        ConsoleKeyBindingSet().bind("ab", CONTROL, ConsoleInputOperation.ABORT)


def test_items_cover_every_binding():
    bindings = ConsoleKeyBindingSet.default()
    items = list(bindings.items())
    assert len(items) == len(bindings)
    for key, operation in items:
        assert bindings[key] == operation


def test_key_info_from_char():
    assert ConsoleKeyInfo.from_char("q") == ConsoleKeyInfo("q", ConsoleKey.Q)
    assert ConsoleKeyInfo.from_char("Q") == ConsoleKeyInfo("Q", ConsoleKey.Q, SHIFT)
    assert ConsoleKeyInfo.from_char("7").key == ConsoleKey.D7
    assert ConsoleKeyInfo.from_char(" ").key == ConsoleKey.SPACEBAR
    assert ConsoleKeyInfo.from_char("-").key == ConsoleKey.NONE
    assert ConsoleKeyInfo.from_char("é").key == ConsoleKey.NONE


def test_key_info_from_key():
    key = ConsoleKeyInfo.from_key(ConsoleKey.ENTER, CONTROL)
    assert key.char == "\r"
    assert key.control
    assert not key.alt
    assert ConsoleKeyInfo.from_key(ConsoleKey.HOME).char == "\0"


@pytest.mark.parametrize(
    "key, expected",
    [
        (ConsoleKeyInfo.from_char("Q"), "Q"),
        (ConsoleKeyInfo("\x11", ConsoleKey.Q, CONTROL), "q"),
        (ConsoleKeyInfo.from_char("3"), "3"),
        (ConsoleKeyInfo.from_char("?"), "?"),
        (ConsoleKeyInfo.from_key(ConsoleKey.LEFT_ARROW), None),
    ],
)
def test_base_char(key, expected):
    assert key.base_char == expected


@pytest.mark.parametrize(
    "value", ["backward-kill-word", "BACKWARD_KILL_WORD", " backward_kill-word "]
)
def test_operation_spellings(value):
    assert ConsoleInputOperation(value) is ConsoleInputOperation.BACKWARD_KILL_WORD


def test_unknown_operation():
    with pytest.raises(ValueError):
        ConsoleInputOperation("launch-rockets")
