# Clapkit CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Splits a command line into tokens, keeping track of where each token came from.

Unlike `shlex.split`, the tokenizer records the inner (unquoted) and outer (quoted)
offsets of every token so the line editor can replace exactly the token under the
cursor, and it can tolerate an unterminated trailing quote while the user is still
typing.

Functions:
- tokenize: Split a line into `Token` objects.
- quote_if_needed: Wrap a value in quotes if it would otherwise split.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Iterator


class TokenizerOptions(IntFlag):
    """Behavior switches for `tokenize`."""

    NONE = 0
    ALLOW_PARTIAL_INPUT = 1
    HANDLE_DOUBLE_QUOTES = 2
    HANDLE_SINGLE_QUOTES = 4
    DEFAULT = HANDLE_DOUBLE_QUOTES


@dataclass(frozen=True)
class Token:
    """
    A single token from a tokenized line.

    Attributes:
        contents (str): The token text, without any enclosing quotes.
        inner_start (int): Offset of `contents` within the line.
        starts_with_quote (bool): Whether the token opened with a quote character.
        ends_with_quote (bool): Whether a closing quote was present.
    """

    contents: str
    inner_start: int
    starts_with_quote: bool = False
    ends_with_quote: bool = False

    @property
    def inner_length(self) -> int:
        return len(self.contents)

    @property
    def inner_end(self) -> int:
        return self.inner_start + len(self.contents)

    @property
    def outer_start(self) -> int:
        return self.inner_start - (1 if self.starts_with_quote else 0)

    @property
    def outer_length(self) -> int:
        return (
            len(self.contents)
            + (1 if self.starts_with_quote else 0)
            + (1 if self.ends_with_quote else 0)
        )

    @property
    def outer_end(self) -> int:
        return self.outer_start + self.outer_length

    def __str__(self) -> str:
        return self.contents


def quote_if_needed(value: str, quote_char: str = '"') -> str:
    """Quote the value if it is empty or contains a space or tab."""
    if value and " " not in value and "\t" not in value:
        return value
    return f"{quote_char}{value}{quote_char}"


def tokenize(
    line: str, options: TokenizerOptions = TokenizerOptions.DEFAULT
) -> list[Token]:
    """
    Split a line into tokens on whitespace, honoring the requested quote characters.

    A quote only opens a token at the token's start; elsewhere it is an ordinary
    character. A closing quote must be followed by whitespace or the end of line.

    Args:
        line (str): The line to split.
        options (TokenizerOptions): Quote handling and partial-input tolerance.

    Returns:
        list[Token]: The tokens, in order.

    Raises:
        ValueError: If a quote is unterminated or a closing quote is not at the end
            of its token, unless `ALLOW_PARTIAL_INPUT` is set.
    """
    return list(_iter_tokens(line, options))


def _is_quote(char: str, options: TokenizerOptions) -> bool:
    return (char == '"' and bool(options & TokenizerOptions.HANDLE_DOUBLE_QUOTES)) or (
        char == "'" and bool(options & TokenizerOptions.HANDLE_SINGLE_QUOTES)
    )


def _iter_tokens(line: str, options: TokenizerOptions) -> Iterator[Token]:
    allow_partial = bool(options & TokenizerOptions.ALLOW_PARTIAL_INPUT)
    quoted = False
    in_quotes: str | None = None
    end_quote_present = False
    token_start: int | None = None
    token_end: int | None = None

    # One extra iteration past the end flushes the last token.
    for index in range(len(line) + 1):
        at_end = index == len(line)
        if at_end or line[index].isspace():
            complete = False
            if token_start is not None and in_quotes is None:
                complete = True
                end_quote_present = quoted
            elif at_end and in_quotes is not None and allow_partial:
                complete = True

            if complete:
                assert token_start is not None
                if token_end is None:
                    token_end = index
                yield Token(
                    contents=line[token_start:token_end],
                    inner_start=token_start,
                    starts_with_quote=quoted,
                    ends_with_quote=end_quote_present,
                )
                token_start = None
                token_end = None
                quoted = False
                in_quotes = None
                end_quote_present = False

        elif _is_quote(line[index], options):
            if token_start is None:
                in_quotes = line[index]
                quoted = True
                token_start = index + 1
            elif quoted and in_quotes == line[index]:
                if index + 1 != len(line) and not line[index + 1].isspace():
                    if not allow_partial:
                        raise ValueError(
                            f"Terminating quote at offset {index} is not at the end "
                            "of its token."
                        )
                else:
                    in_quotes = None
                    end_quote_present = True
                    token_end = index

        elif token_start is None:
            token_start = index

    if token_start is not None:
        raise ValueError("Unterminated quotes in input line.")
