"""
pysh Exception Hierarchy

All custom exceptions inherit from ShellError, with one family per
concern. The read loop relies on this split: parse errors abandon the line,
redirection errors skip a stream, process errors skip the command.

Architecture:
    ShellError (Base)
    ├── ParseError
    │   ├── UnterminatedQuoteError
    │   ├── TooManyTokensError
    │   ├── TokenTooLongError
    │   ├── DanglingRedirectionError
    │   └── InputTooLongError
    ├── RedirectionError
    │   ├── RedirectionOpenError
    │   ├── RedirectionDupError
    │   └── RedirectionOverlayError
    ├── ProcessException
    │   ├── CommandNotFoundError
    │   ├── ForkError
    │   └── ExecError
    └── ConfigError
        └── ConfigValidationError
"""

from .shell_exceptions import ShellError

from .parse_exceptions import (
    ParseError,
    UnterminatedQuoteError,
    TooManyTokensError,
    TokenTooLongError,
    DanglingRedirectionError,
    InputTooLongError,
)

from .redirection_exceptions import (
    RedirectionError,
    RedirectionOpenError,
    RedirectionDupError,
    RedirectionOverlayError,
)

from .process_exceptions import (
    ProcessException,
    CommandNotFoundError,
    ForkError,
    ExecError,
)

from .config_exceptions import (
    ConfigError,
    ConfigValidationError,
)

__all__ = [
    "ShellError",
    # Parse exceptions
    "ParseError",
    "UnterminatedQuoteError",
    "TooManyTokensError",
    "TokenTooLongError",
    "DanglingRedirectionError",
    "InputTooLongError",
    # Redirection exceptions
    "RedirectionError",
    "RedirectionOpenError",
    "RedirectionDupError",
    "RedirectionOverlayError",
    # Process exceptions
    "ProcessException",
    "CommandNotFoundError",
    "ForkError",
    "ExecError",
    # Config exceptions
    "ConfigError",
    "ConfigValidationError",
]
