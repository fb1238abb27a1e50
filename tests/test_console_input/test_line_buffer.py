import pytest

from clapkit.console_input import History, LineBuffer, SeekOrigin


def test_insert_does_not_move_the_cursor():
    buffer = LineBuffer()
    buffer.insert("abc")
    assert buffer.contents == "abc"
    assert buffer.cursor_index == 0


@pytest.mark.parametrize(
    "origin, offset, moved, index",
    [
        (SeekOrigin.BEGIN, 2, True, 2),
        (SeekOrigin.END, 0, True, 3),
        (SeekOrigin.END, -1, True, 2),
        (SeekOrigin.CURRENT, 1, True, 2),
        (SeekOrigin.CURRENT, -2, False, 1),
        (SeekOrigin.BEGIN, 4, False, 1),
        (SeekOrigin.END, 1, False, 1),
    ],
)
def test_move_cursor_stays_in_bounds(origin, offset, moved, index):
    buffer = LineBuffer("abc")
    buffer.move_cursor(SeekOrigin.BEGIN, 1)
    assert buffer.move_cursor(origin, offset)[0] is moved
    assert buffer.cursor_index == index


def test_move_cursor_reports_the_delta():
    buffer = LineBuffer("abcdef")
    buffer.move_cursor(SeekOrigin.BEGIN, 4)
    assert buffer.move_cursor(SeekOrigin.BEGIN, 1) == (True, -3)
    assert buffer.move_cursor(SeekOrigin.BEGIN, 10) == (False, 0)


def test_read():
    buffer = LineBuffer("hello")
    buffer.move_cursor(SeekOrigin.BEGIN, 1)
    assert buffer.read(3) == "ell"
    assert buffer.read_at(0, 5) == "hello"
    with pytest.raises(IndexError):
        buffer.read(5)
    with pytest.raises(IndexError):
        buffer.read_at(-1, 1)


def test_replace():
    buffer = LineBuffer("hello")
    buffer.move_cursor(SeekOrigin.BEGIN, 3)
    buffer.replace("LO")
    assert buffer.contents == "helLO"
    with pytest.raises(IndexError):
        buffer.replace("abc")
    assert buffer.contents == "helLO"


def test_remove():
    buffer = LineBuffer("hello")
    buffer.move_cursor(SeekOrigin.BEGIN, 1)
    assert buffer.remove(2)
    assert buffer.contents == "hlo"
    assert not buffer.remove(3)
    assert buffer.contents == "hlo"


def test_remove_char_before_cursor():
    buffer = LineBuffer("ab")
    assert not buffer.remove_char_before_cursor()
    buffer.move_cursor(SeekOrigin.END, 0)
    assert buffer.remove_char_before_cursor()
    assert buffer.contents == "a"
    assert buffer.cursor_index == 1


def test_truncate_and_clear():
    buffer = LineBuffer("hello")
    buffer.move_cursor(SeekOrigin.BEGIN, 2)
    buffer.truncate()
    assert buffer.contents == "he"
    assert buffer.cursor_is_at_end
    buffer.clear()
    assert len(buffer) == 0
    assert buffer.cursor_index == 0


def test_history_bounds():
    history = History(2)
    for entry in ["one", "two", "three"]:
        history.add(entry)
    assert history.entries == ["two", "three"]
    assert history.cursor_index == 2
    assert history.current_entry is None


def test_history_ignores_blank_entries():
    history = History()
    history.add("")
    history.add("   ")
    assert history.entry_count == 0


def test_history_navigation():
    history = History()
    history.add("one")
    history.add("two")
    assert history.move_cursor(SeekOrigin.CURRENT, -1)
    assert history.current_entry == "two"
    assert history.move_cursor(SeekOrigin.BEGIN, 0)
    assert history.current_entry == "one"
    assert not history.move_cursor(SeekOrigin.CURRENT, -1)
    assert history.cursor_index == 0
    assert not history.move_cursor(SeekOrigin.END, 1)
    assert history.move_cursor(SeekOrigin.END, 0)
    assert history.current_entry is None
    history.move_cursor(SeekOrigin.BEGIN, 0)
    history.add("three")
    assert history.cursor_index == 3
    assert list(history) == ["one", "two", "three"]


@pytest.mark.parametrize("max_entry_count", [0, -1])
def test_history_requires_a_positive_maximum(max_entry_count):
    with pytest.raises(ValueError):
        History(max_entry_count)
