"""
Parse Exceptions

Errors raised while turning an input line into a command request. A parse
error abandons the current line; the read loop reports it and moves on.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any

from .shell_exceptions import ShellError


class ParseError(ShellError):
    """
    Base exception for tokenizer and redirection-syntax errors.

    Attributes:
        line: The input line being parsed (if known)
    """

    def __init__(
        self,
        message: str,
        line: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code or 3000,
            context=context
        )
        self.line = line


class UnterminatedQuoteError(ParseError):
    """
    A quote was opened and never closed.

    Example:
        >>> raise UnterminatedQuoteError('"', line='echo "abc')
    """

    def __init__(self, quote: str, line: Optional[str] = None) -> None:
        super().__init__(
            message=f"unterminated quote: expected closing {quote}",
            line=line,
            error_code=3001,
            context={"quote": quote}
        )
        self.quote = quote


class TooManyTokensError(ParseError):
    """The line splits into more words than the configured capacity."""

    def __init__(self, limit: int, line: Optional[str] = None) -> None:
        super().__init__(
            message=f"too many arguments (limit is {limit})",
            line=line,
            error_code=3002,
            context={"limit": limit}
        )
        self.limit = limit


class TokenTooLongError(ParseError):
    """A single word is longer than the configured maximum."""

    def __init__(self, limit: int, line: Optional[str] = None) -> None:
        super().__init__(
            message=f"argument too long (limit is {limit} characters)",
            line=line,
            error_code=3003,
            context={"limit": limit}
        )
        self.limit = limit


class DanglingRedirectionError(ParseError):
    """
    A redirection operator is the last token on the line.

    Example:
        >>> raise DanglingRedirectionError('>')
    """

    def __init__(self, operator: str, line: Optional[str] = None) -> None:
        super().__init__(
            message=f"syntax error: expected file after '{operator}'",
            line=line,
            error_code=3004,
            context={"operator": operator}
        )
        self.operator = operator


class InputTooLongError(ParseError):
    """The raw input line exceeds the interpreter's read limit."""

    def __init__(self, length: int, limit: int) -> None:
        super().__init__(
            message=f"input line too long ({length} > {limit} characters)",
            error_code=3005,
            context={"length": length, "limit": limit}
        )
        self.length = length
        self.limit = limit
