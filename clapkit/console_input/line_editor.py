# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `LineEditor`, a readline-style single line editor.

The editor reads key presses from a `ConsoleInput`, maps each one to a
`ConsoleInputOperation` through a key binding set, and applies the operation to
its `LineBuffer` while keeping a `ConsoleOutput` in step with the buffer.

Key Features:
- Insert and overwrite modes, with the mode kept in an `OptionsManager` "editor"
  namespace so it can be shared with or observed by the host application.
- Character, word and line motion that wraps across screen rows.
- Kill and yank through a single paste buffer.
- History navigation with stale screen characters blanked out.
- Tab completion that cycles through the completions of the token under the
  cursor, listing them in columns or inserting them all at once.
- Comment insertion that accepts the line as a comment.

The logical cursor (in the buffer) and the console cursor always move together.
When the console refuses a move (e.g. it would leave the screen), the buffer move
is undone so the two never disagree.

Operations from readline that the editor does not implement are accepted and
treated as no-ops.
"""
from __future__ import annotations

from typing import Callable

from clapkit.console_input.console_io import ConsoleInput, ConsoleOutput
from clapkit.console_input.history import History
from clapkit.console_input.key_bindings import ConsoleKeyBindingSet, ReadOnlyKeyBindingSet
from clapkit.console_input.keys import ConsoleKeyInfo
from clapkit.console_input.line_buffer import LineBuffer, SeekOrigin
from clapkit.console_input.operations import ConsoleInputOperation as Op
from clapkit.console_input.operations import ConsoleInputOperationResult as Result
from clapkit.console_input.token_completion import (
    CircularEnumerator,
    TokenCompleter,
    TokenCompletionSet,
)
from clapkit.logger import logger
from clapkit.options_manager import OptionsManager
from clapkit.utils import format_in_columns

EDITOR_NAMESPACE = "editor"
OVERWRITE_CURSOR_SIZE = 100

COMPLETION_OPERATIONS = frozenset({Op.COMPLETE_TOKEN_NEXT, Op.COMPLETE_TOKEN_PREVIOUS})


def capitalize(value: str) -> str:
    """Upper-case the first non-whitespace character and lower-case the rest."""
    stripped = value.lstrip()
    if not stripped:
        return value
    leading = value[: len(value) - len(stripped)]
    return leading + stripped[0].upper() + stripped[1:].lower()


class LineEditor:
    """
    Reads one line at a time from a console, with editing, history and completion.

    Args:
        console_input (ConsoleInput): Source of key presses.
        console_output (ConsoleOutput | None): Where the line is drawn. Defaults to
            `console_input`, for consoles that implement both protocols.
        buffer (LineBuffer | None): The buffer to edit. A new one by default.
        history (History | None): Accepted lines. A new unbounded one by default.
        key_bindings (ReadOnlyKeyBindingSet | None): Key to operation mapping.
            Defaults to `ConsoleKeyBindingSet.default()`.
        completer (TokenCompleter | None): Supplies completions for the token under
            the cursor. Completion operations do nothing without one.
        options (OptionsManager | None): Holds `insert_mode` in the "editor"
            namespace. A private manager is created when not given.
        prompt (str): Text written before the line.
        comment_character (str | None): Character inserted by `insert-comment`.

    Raises:
        TypeError: If no `console_output` is given and `console_input` cannot
            act as one.
    """

    def __init__(
        self,
        console_input: ConsoleInput,
        console_output: ConsoleOutput | None = None,
        *,
        buffer: LineBuffer | None = None,
        history: History | None = None,
        key_bindings: ReadOnlyKeyBindingSet | None = None,
        completer: TokenCompleter | None = None,
        options: OptionsManager | None = None,
        prompt: str = "",
        comment_character: str | None = None,
    ) -> None:
        if console_output is None:
            if not isinstance(console_input, ConsoleOutput):
                raise TypeError(
                    "console_output is required when console_input cannot write output"
                )
            console_output = console_input
        self.console_input = console_input
        self.console_output = console_output
        self.buffer = buffer if buffer is not None else LineBuffer()
        self.history = history if history is not None else History()
        self.key_bindings = (
            key_bindings if key_bindings is not None else ConsoleKeyBindingSet.default()
        )
        self.completer = completer
        self.options = options if options is not None else OptionsManager()
        if not self.options.has_option("insert_mode", EDITOR_NAMESPACE):
            self.options.set("insert_mode", True, EDITOR_NAMESPACE)
        self.prompt = prompt
        self.comment_character = comment_character
        self.last_operation: Op | None = None
        self.paste_buffer: str | None = None

        self._last_completions: TokenCompletionSet | None = None
        self._completion_enumerator: CircularEnumerator[str] | None = None
        self._default_cursor_size = self.console_output.cursor_size

        self._handlers: dict[Op, Callable[[ConsoleKeyInfo], Result | None]] = {
            Op.NO_OP: lambda key: None,
            Op.PROCESS_CHARACTER: lambda key: self.process_character(key.char),
            Op.ACCEPT_LINE: lambda key: Result.END_OF_INPUT_LINE,
            Op.END_OF_FILE: self._end_of_file,
            Op.BEGINNING_OF_LINE: lambda key: self.move_cursor_to_start(),
            Op.END_OF_LINE: lambda key: self.move_cursor_to_end(),
            Op.FORWARD_CHAR: lambda key: self.move_cursor_forward(1),
            Op.BACKWARD_CHAR: lambda key: self.move_cursor_backward(1),
            Op.CLEAR_SCREEN: lambda key: self.clear_screen(),
            Op.PREVIOUS_HISTORY: lambda key: self.replace_with_previous_line_in_history(),
            Op.NEXT_HISTORY: lambda key: self.replace_with_next_line_in_history(),
            Op.BEGINNING_OF_HISTORY: lambda key: self.replace_with_oldest_line_in_history(),
            Op.END_OF_HISTORY: lambda key: self.replace_with_youngest_line_in_history(),
            Op.KILL_LINE: lambda key: self.cut_to_end(),
            Op.UNIX_LINE_DISCARD: lambda key: self.cut_to_start(),
            Op.UNIX_WORD_RUBOUT: lambda key: self.delete_backward_through_last_word(),
            Op.BACKWARD_KILL_WORD: lambda key: self.delete_backward_through_last_word(),
            Op.KILL_WORD: lambda key: self.delete_forward_to_next_word(),
            Op.YANK: lambda key: self.paste(),
            Op.TRANSPOSE_CHARS: lambda key: self.transpose_chars(),
            Op.ABORT: self._abort,
            Op.FORWARD_WORD: lambda key: self.move_cursor_forward_one_word(),
            Op.BACKWARD_WORD: lambda key: self.move_cursor_backward_one_word(),
            Op.UPCASE_WORD: lambda key: self.transform_current_word(str.upper),
            Op.DOWNCASE_WORD: lambda key: self.transform_current_word(str.lower),
            Op.CAPITALIZE_WORD: lambda key: self.transform_current_word(capitalize),
            Op.POSSIBLE_COMPLETIONS: lambda key: self.display_all_completions(),
            Op.INSERT_COMPLETIONS: lambda key: self.replace_current_token_with_all_completions(),
            Op.COMPLETE_TOKEN_NEXT: lambda key: self.replace_current_token_with_next_completion(
                self.last_operation in COMPLETION_OPERATIONS
            ),
            Op.COMPLETE_TOKEN_PREVIOUS: lambda key: self.replace_current_token_with_previous_completion(
                self.last_operation in COMPLETION_OPERATIONS
            ),
            Op.REVERT_LINE: lambda key: self.clear_line(clear_buffer_only=False),
            Op.INSERT_COMMENT: self._insert_comment,
            Op.TAB_INSERT: lambda key: self.process_character("\t"),
            Op.DELETE_PREVIOUS_CHAR: lambda key: self.delete_preceding_char(),
            Op.DELETE_CHAR: lambda key: self.delete(),
            Op.TOGGLE_INSERT_MODE: self._toggle_insert_mode,
        }

    @property
    def insert_mode(self) -> bool:
        return bool(self.options.get("insert_mode", True, EDITOR_NAMESPACE))

    @insert_mode.setter
    def insert_mode(self, value: bool) -> None:
        self.options.set("insert_mode", value, EDITOR_NAMESPACE)

    @property
    def contents(self) -> str:
        return self.buffer.contents

    @property
    def at_end(self) -> bool:
        return self.buffer.cursor_is_at_end

    def read_line(self) -> str | None:
        """
        Display the prompt and process key presses until the line is finished.

        Returns:
            str | None: The accepted line, or None at the end of the input stream.
            Accepted lines are added to the history.
        """
        output = self.console_output
        cursor_was_visible = output.cursor_visible
        try:
            output.cursor_visible = True
            self._update_cursor_size()
            self.display_prompt()

            result = Result.NORMAL
            while result == Result.NORMAL:
                key = self.console_input.read_key(suppress_echo=True)
                try:
                    result = self.process_key(key)
                except NotImplementedError as error:
                    logger.debug("Ignoring key %r: %s", key, error)
                    result = Result.NORMAL

            if result == Result.END_OF_INPUT_STREAM:
                return None

            output.write_line("")
            line = self.contents
            self.save_to_history()
            self.clear_line(clear_buffer_only=True)
            return line
        finally:
            output.cursor_visible = cursor_was_visible
            output.cursor_size = self._default_cursor_size

    def process_key(self, key: ConsoleKeyInfo) -> Result:
        """Resolve `key` through the key bindings and process the operation."""
        operation = self.key_bindings.try_get_value(key)
        if operation is None:
            operation = Op.PROCESS_CHARACTER
        result = self.process(operation, key)
        self.last_operation = operation
        return result

    def process(self, operation: Op, key: ConsoleKeyInfo) -> Result:
        """Apply a single operation. `key` supplies the character where one is needed."""
        handler = self._handlers.get(operation)
        if handler is None:
            logger.debug("Operation '%s' is not implemented; ignoring it.", operation)
            return Result.NORMAL
        logger.debug("Processing '%s' for %r", operation, key)
        result = handler(key)
        return result if isinstance(result, Result) else Result.NORMAL

    def _end_of_file(self, key: ConsoleKeyInfo) -> Result | None:
        if self.contents:
            return None
        self.console_output.write_line("")
        return Result.END_OF_INPUT_STREAM

    def _abort(self, key: ConsoleKeyInfo) -> Result:
        self.clear_line(clear_buffer_only=True)
        return Result.END_OF_INPUT_LINE

    def _insert_comment(self, key: ConsoleKeyInfo) -> Result | None:
        if not self.comment_character:
            return None
        self.move_cursor_to_start()
        self.insert(self.comment_character)
        return Result.END_OF_INPUT_LINE

    def _toggle_insert_mode(self, key: ConsoleKeyInfo) -> None:
        self.options.toggle("insert_mode", namespace_name=EDITOR_NAMESPACE)
        self._update_cursor_size()

    def _update_cursor_size(self) -> None:
        self.console_output.cursor_size = (
            self._default_cursor_size if self.insert_mode else OVERWRITE_CURSOR_SIZE
        )

    def process_character(self, value: str) -> None:
        """Type one character: insert it, or overwrite in overwrite mode."""
        if self.insert_mode or self.at_end:
            self.insert(value)
        else:
            self.replace(value)
        self.move_cursor_forward(1)

    def move_cursor_backward(self, count: int = 1) -> bool:
        return self._move_console_and_buffer_cursors(SeekOrigin.CURRENT, -count)

    def move_cursor_forward(self, count: int = 1) -> bool:
        return self._move_console_and_buffer_cursors(SeekOrigin.CURRENT, count)

    def move_cursor_to_start(self) -> None:
        self._move_console_and_buffer_cursors(SeekOrigin.BEGIN, 0)

    def move_cursor_to_end(self) -> None:
        self._move_console_and_buffer_cursors(SeekOrigin.END, 0)

    def move_cursor_backward_one_word(self) -> None:
        self._move_console_and_buffer_cursors(SeekOrigin.BEGIN, self._find_index_of_last_word())

    def move_cursor_forward_one_word(self) -> None:
        self._move_console_and_buffer_cursors(SeekOrigin.BEGIN, self._find_index_of_next_word())

    def delete(self) -> None:
        """Delete the character under the cursor."""
        if self.buffer.remove():
            self._sync_to_end(extra_spaces=1)

    def delete_preceding_char(self) -> None:
        if not self.buffer.remove_char_before_cursor():
            return
        self._move_console_cursor_backward()
        self._sync_to_end(extra_spaces=1)

    def delete_backward_through_last_word(self) -> None:
        index = self._find_index_of_last_word()
        original_cursor_index = self.buffer.cursor_index
        self._move_console_and_buffer_cursors(SeekOrigin.BEGIN, index)
        remove_count = original_cursor_index - self.buffer.cursor_index
        self.buffer.remove(remove_count)
        self._sync_to_end(extra_spaces=remove_count)

    def delete_forward_to_next_word(self) -> None:
        remove_count = self._find_index_of_next_word() - self.buffer.cursor_index
        self.buffer.remove(remove_count)
        self._sync_to_end(extra_spaces=remove_count)

    def clear_line(self, clear_buffer_only: bool) -> None:
        """Empty the buffer, and unless `clear_buffer_only`, blank it on screen too."""
        if not clear_buffer_only:
            self._move_console_cursor_backward(self.buffer.cursor_index)
            self.sync_buffer_to_console(0, 0, len(self.buffer))
        self.buffer.clear()

    def clear_screen(self) -> None:
        self.console_output.clear()
        self.console_output.set_cursor_position(0, 0)
        self._display_input_line()

    def insert(self, value: str) -> None:
        """Insert text at the cursor without moving the cursor."""
        original_cursor_index = self.buffer.cursor_index
        self.buffer.insert(value)
        self.sync_buffer_to_console(
            original_cursor_index, len(self.buffer) - original_cursor_index
        )

    def replace(self, value: str) -> None:
        original_cursor_index = self.buffer.cursor_index
        self.buffer.replace(value)
        self.sync_buffer_to_console(original_cursor_index, len(value))

    def replace_with_previous_line_in_history(self) -> None:
        self._replace_with_line_in_history(SeekOrigin.CURRENT, -1)

    def replace_with_next_line_in_history(self) -> None:
        self._replace_with_line_in_history(SeekOrigin.CURRENT, 1)

    def replace_with_oldest_line_in_history(self) -> None:
        self._replace_with_line_in_history(SeekOrigin.BEGIN, 0)

    def replace_with_youngest_line_in_history(self) -> None:
        self._replace_with_line_in_history(SeekOrigin.END, -1)

    def save_to_history(self) -> None:
        self.history.add(self.contents)

    def cut_to_end(self) -> None:
        """Move the text from the cursor to the end of the line into the paste buffer."""
        chars_to_cut = len(self.buffer) - self.buffer.cursor_index
        self.paste_buffer = self.buffer.read(chars_to_cut)
        self.sync_buffer_to_console(0, 0, chars_to_cut)
        self.buffer.truncate()

    def cut_to_start(self) -> None:
        """Move the text before the cursor into the paste buffer."""
        chars_to_cut = self.buffer.cursor_index
        if chars_to_cut == 0:
            return
        self.paste_buffer = self.buffer.read_at(0, chars_to_cut)
        self.move_cursor_to_start()
        self.buffer.remove(chars_to_cut)
        self._sync_to_end(extra_spaces=chars_to_cut)

    def paste(self) -> None:
        if self.paste_buffer is None:
            return
        self.insert(self.paste_buffer)
        self._move_console_and_buffer_cursors(SeekOrigin.CURRENT, len(self.paste_buffer))

    def transpose_chars(self) -> None:
        """
        Swap the character before the cursor with the one under it, then move
        forward. At the end of the line the two characters before the cursor are
        swapped instead.
        """
        index = self.buffer.cursor_index
        if index == 0 or len(self.buffer) < 2:
            return
        if self.buffer.cursor_is_at_end:
            index -= 1
        swapped = self.buffer[index] + self.buffer[index - 1]
        self._move_console_and_buffer_cursors(SeekOrigin.BEGIN, index - 1)
        self.buffer.replace(swapped)
        self.sync_buffer_to_console(index - 1, 2)
        self._move_console_and_buffer_cursors(SeekOrigin.BEGIN, index + 1)

    def replace_current_token_with_previous_completion(
        self, last_operation_was_completion: bool
    ) -> None:
        self._replace_current_token_with_completion(True, last_operation_was_completion)

    def replace_current_token_with_next_completion(
        self, last_operation_was_completion: bool
    ) -> None:
        self._replace_current_token_with_completion(False, last_operation_was_completion)

    def replace_current_token_with_all_completions(self) -> None:
        """Replace the token under the cursor with every completion, space separated."""
        if self.completer is None:
            return
        completions = TokenCompletionSet.create(
            self.contents, self.buffer.cursor_index, self.completer
        )
        if completions.is_empty:
            return

        replacement = "".join(f"{completion} " for completion in completions.completions)
        token_start = completions.original_token.inner_start
        token_length = completions.original_token.inner_length

        self._move_console_and_buffer_cursors(SeekOrigin.BEGIN, token_start)
        self.buffer.remove(token_length)
        self.buffer.insert(replacement)
        self.sync_buffer_to_console(token_start, len(replacement))
        self._move_console_and_buffer_cursors(SeekOrigin.BEGIN, token_start + len(replacement))

    def display_all_completions(self) -> None:
        """List the completions of the current token below the line, then redraw it."""
        if self.completer is None:
            return
        completions = TokenCompletionSet.create(
            self.contents, self.buffer.cursor_index, self.completer
        )
        if completions.is_empty:
            return
        self.console_output.write_line("")
        self.console_output.write(
            format_in_columns(completions.completions, self.console_output.buffer_width)
        )
        self._display_input_line()

    def transform_current_word(self, transformation: Callable[[str], str]) -> None:
        """Apply `transformation` to the text from the cursor to the end of the next word."""
        word = self.buffer.read(self._find_index_of_next_word() - self.buffer.cursor_index)
        transformed = transformation(word)
        self.buffer.remove(len(word))
        self.buffer.insert(transformed)
        self._sync_to_end(extra_spaces=max(0, len(word) - len(transformed)))

    def display_prompt(self) -> None:
        if self.prompt:
            self.console_output.write(self.prompt)

    def _display_input_line(self) -> None:
        self.display_prompt()
        self.sync_buffer_to_console(0, len(self.buffer))
        self._move_console_cursor_forward(self.buffer.cursor_index)

    def _replace_current_token_with_completion(
        self, reverse_order: bool, last_operation_was_completion: bool
    ) -> None:
        if self.completer is None:
            return

        if (
            not last_operation_was_completion
            or self._last_completions is None
            or self._completion_enumerator is None
        ):
            self._last_completions = TokenCompletionSet.create(
                self.contents, self.buffer.cursor_index, self.completer
            )
            self._completion_enumerator = CircularEnumerator(self._last_completions.completions)
            logger.debug(
                "Computed %d completion(s) for %r",
                len(self._last_completions),
                self._last_completions.original_token.contents,
            )

        if self._last_completions.is_empty:
            return

        enumerator = self._completion_enumerator
        if enumerator.started:
            existing_token_length = len(enumerator.current_item)
        else:
            existing_token_length = self._last_completions.original_token.inner_length
        existing_token_start = self._last_completions.original_token.inner_start

        if reverse_order:
            enumerator.move_previous()
        else:
            enumerator.move_next()
        completion = enumerator.current_item

        self._move_console_and_buffer_cursors(SeekOrigin.BEGIN, existing_token_start)
        self.buffer.remove(existing_token_length)
        self.buffer.insert(completion)
        self.sync_buffer_to_console(
            existing_token_start,
            len(self.buffer) - existing_token_start,
            max(0, existing_token_length - len(completion)),
        )
        self._move_console_and_buffer_cursors(SeekOrigin.CURRENT, len(completion))

    def _find_index_of_last_word(self) -> int:
        index = self.buffer.cursor_index
        while index > 0 and self.buffer[index - 1].isspace():
            index -= 1
        while index > 0 and not self.buffer[index - 1].isspace():
            index -= 1
        return index

    def _find_index_of_next_word(self) -> int:
        index = self.buffer.cursor_index
        length = len(self.buffer)
        while index < length and self.buffer[index].isspace():
            index += 1
        while index < length and not self.buffer[index].isspace():
            index += 1
        return index

    def _move_console_and_buffer_cursors(self, origin: SeekOrigin, offset: int) -> bool:
        moved, delta = self.buffer.move_cursor(origin, offset)
        if not moved:
            return False
        if not self._move_console_cursor(delta):
            self.buffer.move_cursor(SeekOrigin.CURRENT, -delta)
            return False
        return True

    def _move_console_cursor(self, offset: int) -> bool:
        if offset < 0:
            return self._move_console_cursor_backward(-offset)
        return self._move_console_cursor_forward(offset)

    def _move_console_cursor_forward(self, count: int = 1) -> bool:
        output = self.console_output
        width = output.buffer_width
        top, left = divmod(output.cursor_top * width + output.cursor_left + count, width)
        if top >= output.buffer_height:
            return False
        return output.set_cursor_position(left, top)

    def _move_console_cursor_backward(self, count: int = 1) -> bool:
        output = self.console_output
        width = output.buffer_width
        offset = output.cursor_top * width + output.cursor_left - count
        if offset < 0:
            return False
        top, left = divmod(offset, width)
        return output.set_cursor_position(left, top)

    def _sync_to_end(self, extra_spaces: int = 0) -> None:
        cursor_index = self.buffer.cursor_index
        self.sync_buffer_to_console(cursor_index, len(self.buffer) - cursor_index, extra_spaces)

    def sync_buffer_to_console(self, start_index: int, length: int, extra_spaces: int = 0) -> None:
        """
        Redraw part of the buffer at the console cursor, leaving the cursor in place.

        Args:
            start_index (int): First buffer index to draw.
            length (int): Number of buffer characters to draw.
            extra_spaces (int): Spaces written after them to blank out characters
                left over from a longer previous line.

        Raises:
            NotImplementedError: If the text would not fit on one screen.
        """
        output = self.console_output
        width = output.buffer_width
        screen_size = width * output.buffer_height
        left, top = output.cursor_left, output.cursor_top
        cursor_offset = top * width + left

        if length + extra_spaces > screen_size:
            raise NotImplementedError("Redrawing more than one screen of input is not supported")

        if cursor_offset + length + extra_spaces >= screen_size:
            spill_over_length = cursor_offset + length + extra_spaces - (screen_size - 1)
            spill_over_lines = -(-spill_over_length // width)
            output.scroll_contents(spill_over_lines)
            left, top = output.cursor_left, output.cursor_top

        output.write(self.buffer.read_at(start_index, length) + " " * extra_spaces)
        output.set_cursor_position(left, top)

    def _replace_with_line_in_history(self, origin: SeekOrigin, offset: int) -> None:
        if not self.history.move_cursor(origin, offset):
            return
        historic_line = self.history.current_entry
        if historic_line is None:
            return

        extra_spaces = max(0, len(self.buffer) - len(historic_line))
        self._move_console_and_buffer_cursors(SeekOrigin.BEGIN, 0)
        self.buffer.truncate()
        self.buffer.insert(historic_line)
        self.sync_buffer_to_console(0, len(self.buffer), extra_spaces)
        self._move_console_and_buffer_cursors(SeekOrigin.END, 0)
