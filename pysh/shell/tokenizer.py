"""
Tokenizer Module

Splits one input line into words, honouring shell quoting and escaping.
Knows nothing about redirections or commands; operators such as '>' come
out as ordinary words.

Rules:
- Unquoted spaces and tabs separate words; runs of them collapse.
- '...' and "..." group characters; the other quote character is literal
  inside them.
- Inside double quotes only \\", \\\\, \\$ and \\<newline> are escapes; any
  other backslash is kept as-is.
- Outside quotes a backslash makes the next character literal.
- A trailing backslash is dropped (no line continuation).

Author: YSNRFD
Version: 1.0.0
"""

from enum import Enum
from typing import List, Optional

from pysh.exceptions import (
    UnterminatedQuoteError,
    TooManyTokensError,
    TokenTooLongError,
)


DEFAULT_MAX_TOKENS = 16
DEFAULT_MAX_TOKEN_LENGTH = 127

WHITESPACE = (' ', '\t')
DOUBLE_QUOTE_ESCAPES = ('"', '\\', '$', '\n')


class QuoteState(Enum):
    """Quote mode of the scanner."""
    NONE = None
    SINGLE = "'"
    DOUBLE = '"'

    @classmethod
    def opened_by(cls, char: str) -> 'QuoteState':
        return cls.SINGLE if char == "'" else cls.DOUBLE


class _WordBuffer:
    """Accumulates the characters of the word being scanned."""

    def __init__(self, line: str, max_tokens: int, max_token_length: int):
        self._line = line
        self._max_tokens = max_tokens
        self._max_token_length = max_token_length
        self._chars: List[str] = []
        self.words: List[str] = []

    def add(self, char: str) -> None:
        if len(self._chars) >= self._max_token_length:
            raise TokenTooLongError(self._max_token_length, line=self._line)
        self._chars.append(char)

    def finish(self) -> None:
        """Emit the pending word, if there is one."""
        if not self._chars:
            return
        if len(self.words) >= self._max_tokens:
            raise TooManyTokensError(self._max_tokens, line=self._line)
        self.words.append(''.join(self._chars))
        self._chars = []


def tokenize(
    line: str,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    max_token_length: int = DEFAULT_MAX_TOKEN_LENGTH
) -> List[str]:
    """
    Split a line into words.

    Args:
        line: Input line, without its trailing newline
        max_tokens: Maximum number of words the line may produce
        max_token_length: Maximum length of a single word

    Returns:
        The words, in order

    Raises:
        UnterminatedQuoteError: If a quote is still open at end of input
        TooManyTokensError: If the line yields more than max_tokens words
        TokenTooLongError: If one word exceeds max_token_length characters

    Example:
        >>> tokenize("echo 'a b' c")
        ['echo', 'a b', 'c']
    """
    if max_tokens < 1:
        raise ValueError("max_tokens must be at least 1")

    buf = _WordBuffer(line, max_tokens, max_token_length)
    quote = QuoteState.NONE
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        nxt: Optional[str] = line[i + 1] if i + 1 < length else None

        if char in ("'", '"'):
            if quote is QuoteState.NONE:
                quote = QuoteState.opened_by(char)
            elif quote.value == char:
                quote = QuoteState.NONE
            else:
                buf.add(char)
            i += 1
            continue

        if char == '\\' and quote is not QuoteState.SINGLE:
            if nxt is None:
                # no continuation: drop it and end the word
                break

            if quote is QuoteState.NONE or nxt in DOUBLE_QUOTE_ESCAPES:
                buf.add(nxt)
                i += 2
                continue

        if quote is QuoteState.NONE and char in WHITESPACE:
            buf.finish()
            i += 1
            continue

        buf.add(char)
        i += 1

    if quote is not QuoteState.NONE:
        raise UnterminatedQuoteError(quote.value, line=line)

    buf.finish()
    return buf.words
