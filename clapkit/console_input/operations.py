# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Operations understood by the line editor and the results they produce.

`ConsoleInputOperation` names follow GNU readline's command names. Members can be
created from their readline-style spelling as well, e.g.
`ConsoleInputOperation("backward-kill-word")`.
"""
from __future__ import annotations

from enum import Enum


class ConsoleInputOperation(Enum):
    """
    Editing operations a key can be bound to.

    The operations after `TOGGLE_INSERT_MODE` are accepted by the editor but
    have no effect, except `TRANSPOSE_CHARS` and `UNIX_LINE_DISCARD`.
    """

    NO_OP = "no-op"
    PROCESS_CHARACTER = "process-character"

    ACCEPT_LINE = "accept-line"
    END_OF_FILE = "end-of-file"
    BEGINNING_OF_LINE = "beginning-of-line"
    END_OF_LINE = "end-of-line"
    FORWARD_CHAR = "forward-char"
    BACKWARD_CHAR = "backward-char"
    CLEAR_SCREEN = "clear-screen"
    PREVIOUS_HISTORY = "previous-history"
    NEXT_HISTORY = "next-history"
    KILL_LINE = "kill-line"
    UNIX_WORD_RUBOUT = "unix-word-rubout"
    YANK = "yank"
    ABORT = "abort"
    FORWARD_WORD = "forward-word"
    BACKWARD_WORD = "backward-word"
    BEGINNING_OF_HISTORY = "beginning-of-history"
    END_OF_HISTORY = "end-of-history"
    UPCASE_WORD = "upcase-word"
    DOWNCASE_WORD = "downcase-word"
    CAPITALIZE_WORD = "capitalize-word"
    KILL_WORD = "kill-word"
    POSSIBLE_COMPLETIONS = "possible-completions"
    INSERT_COMPLETIONS = "insert-completions"
    REVERT_LINE = "revert-line"
    INSERT_COMMENT = "insert-comment"
    TAB_INSERT = "tab-insert"
    BACKWARD_KILL_WORD = "backward-kill-word"

    COMPLETE_TOKEN_NEXT = "complete-token-next"
    COMPLETE_TOKEN_PREVIOUS = "complete-token-previous"
    DELETE_PREVIOUS_CHAR = "delete-previous-char"
    DELETE_CHAR = "delete-char"
    TOGGLE_INSERT_MODE = "toggle-insert-mode"

    REVERSE_SEARCH_HISTORY = "reverse-search-history"
    FORWARD_SEARCH_HISTORY = "forward-search-history"
    QUOTED_INSERT = "quoted-insert"
    TRANSPOSE_CHARS = "transpose-chars"
    UNIX_LINE_DISCARD = "unix-line-discard"
    UNDO = "undo"
    SET_MARK = "set-mark"
    CHARACTER_SEARCH = "character-search"
    YANK_LAST_ARG = "yank-last-arg"
    NON_INCREMENTAL_REVERSE_SEARCH_HISTORY = "non-incremental-reverse-search-history"
    NON_INCREMENTAL_FORWARD_SEARCH_HISTORY = "non-incremental-forward-search-history"
    YANK_POP = "yank-pop"
    TILDE_EXPAND = "tilde-expand"
    YANK_NTH_ARG = "yank-nth-arg"
    CHARACTER_SEARCH_BACKWARD = "character-search-backward"

    @classmethod
    def _missing_(cls, value: object) -> ConsoleInputOperation:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower().replace("_", "-")
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Invalid {cls.__name__}: '{value}'")

    def __str__(self) -> str:
        return self.value


class ConsoleInputOperationResult(Enum):
    """What the editor should do after processing an operation."""

    NORMAL = "normal"
    END_OF_INPUT_LINE = "end_of_input_line"
    END_OF_INPUT_STREAM = "end_of_input_stream"
