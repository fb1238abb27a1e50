# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Token completion support for the line editor.

- `TokenCompleter`: Protocol for anything that completes one token of a line.
- `TokenCompletionSet`: The completions for the token under the cursor, computed
  once and then cycled through by repeated completion key presses.
- `CircularEnumerator`: Wrap-around cursor over a fixed list.
"""
from __future__ import annotations

from typing import Generic, Protocol, Sequence, TypeVar

from clapkit.tokenizer import Token, TokenizerOptions, quote_if_needed, tokenize

T = TypeVar("T")


class TokenCompleter(Protocol):
    def get_completions(self, tokens: list[str], token_index: int) -> list[str]: ...


class CircularEnumerator(Generic[T]):
    """
    Walks a list forwards or backwards, wrapping at either end.

    The enumerator starts before the first item: the first `move_next` selects
    the first item and the first `move_previous` selects the last one.
    """

    def __init__(self, values: Sequence[T]) -> None:
        self.values = list(values)
        self.cursor_index: int | None = None

    @property
    def started(self) -> bool:
        return self.cursor_index is not None

    @property
    def current_item(self) -> T:
        if self.cursor_index is None:
            raise IndexError("The enumerator has not been started.")
        return self.values[self.cursor_index]

    def move_next(self) -> None:
        if self.cursor_index is None:
            if self.values:
                self.cursor_index = 0
            return
        self.cursor_index = (self.cursor_index + 1) % len(self.values)

    def move_previous(self) -> None:
        if self.cursor_index is None:
            if self.values:
                self.cursor_index = len(self.values) - 1
            return
        self.cursor_index = (self.cursor_index - 1) % len(self.values)


class TokenCompletionSet:
    """
    The completions available for the token containing a cursor position.

    Attributes:
        input_text (str): The line the completions were computed for.
        original_token (Token): The token being replaced, with its offsets.
        completions (list[str]): Candidate replacements, quoted where needed.
    """

    def __init__(self, input_text: str, original_token: Token, completions: list[str]):
        self.input_text = input_text
        self.original_token = original_token
        self.completions = completions

    @property
    def is_empty(self) -> bool:
        return not self.completions

    def __len__(self) -> int:
        return len(self.completions)

    def __getitem__(self, index: int) -> str:
        return self.completions[index]

    @classmethod
    def create(
        cls, input_text: str, cursor_index: int, completer: TokenCompleter
    ) -> TokenCompletionSet:
        """
        Tokenize `input_text` and ask `completer` about the token at the cursor.

        A cursor between tokens completes a new, empty token at that position.
        """
        tokens = tokenize(
            input_text,
            TokenizerOptions.ALLOW_PARTIAL_INPUT | TokenizerOptions.HANDLE_DOUBLE_QUOTES,
        )

        token_index = 0
        while token_index < len(tokens):
            token = tokens[token_index]
            if cursor_index > token.outer_end:
                token_index += 1
                continue
            if cursor_index < token.outer_start:
                tokens.insert(token_index, Token("", cursor_index))
            break

        if token_index < len(tokens):
            original_token = tokens[token_index]
        else:
            original_token = Token("", cursor_index)

        token_strings = [token.contents.replace('"', "") for token in tokens]
        completions = [
            completion if completion.startswith('"') else quote_if_needed(completion)
            for completion in completer.get_completions(token_strings, token_index)
        ]
        return cls(input_text, original_token, completions)
