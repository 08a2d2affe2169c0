"""
Command Parser Module

Turns one input line into a CommandRequest: tokenize, then pull the
redirections out of the words.

Author: YSNRFD
Version: 1.0.0
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Optional, List, Deque

from .tokenizer import tokenize, DEFAULT_MAX_TOKENS, DEFAULT_MAX_TOKEN_LENGTH
from .redirection import RedirectionSpec, RedirectionTarget, extract_redirections, new_specs
from pysh.exceptions import InputTooLongError
from pysh.logger import get_logger


DEFAULT_MAX_INPUT_LENGTH = 100


@dataclass
class CommandRequest:
    """
    A parsed command line.

    Built fresh for every line and discarded after dispatch.

    Attributes:
        argv: Command words with redirections removed; argv[0] is the command
        redirections: Specs for stdout, stderr and stdin, in that order
        line: The raw input line
    """
    argv: List[str] = field(default_factory=list)
    redirections: List[RedirectionSpec] = field(default_factory=new_specs)
    line: str = ""

    @property
    def command(self) -> Optional[str]:
        return self.argv[0] if self.argv else None

    @property
    def args(self) -> List[str]:
        return self.argv[1:]

    @property
    def has_redirections(self) -> bool:
        return any(spec.active for spec in self.redirections)

    def redirection_for(self, target: RedirectionTarget) -> RedirectionSpec:
        """Get the redirection for one stream."""
        for spec in self.redirections:
            if spec.target is target:
                return spec
        raise KeyError(target)


class CommandParser:
    """
    Parses shell command lines.

    Handles:
    - Command and arguments
    - Quoted strings and escape sequences
    - Redirections (>, 1>, >>, 2>, 2>>, <)

    Example:
        >>> parser = CommandParser()
        >>> req = parser.parse("ls -la > listing.txt")
        >>> req.argv
        ['ls', '-la']
    """

    def __init__(
        self,
        max_input_length: int = DEFAULT_MAX_INPUT_LENGTH,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        max_token_length: int = DEFAULT_MAX_TOKEN_LENGTH,
        history_size: int = 1000
    ):
        self.max_input_length = max_input_length
        self.max_tokens = max_tokens
        self.max_token_length = max_token_length
        self._history: Deque[str] = deque(maxlen=history_size)
        self._logger = get_logger('parser')

    def parse(self, line: str) -> Optional[CommandRequest]:
        """
        Parse a command line.

        Args:
            line: Command line string

        Returns:
            CommandRequest, or None if the line is blank or a comment

        Raises:
            ParseError: If the line cannot be parsed
        """
        if len(line) > self.max_input_length:
            raise InputTooLongError(len(line), self.max_input_length)

        stripped = line.strip()
        if not stripped or stripped.startswith('#'):
            return None

        self._history.append(stripped)

        tokens = tokenize(
            line,
            max_tokens=self.max_tokens,
            max_token_length=self.max_token_length
        )
        if not tokens:
            return None

        argv, redirections = extract_redirections(tokens)
        self._logger.debug(
            f"parsed {len(tokens)} tokens",
            context={'argv': argv}
        )

        return CommandRequest(argv=argv, redirections=redirections, line=line)

    def get_history(self) -> List[str]:
        """Get command history."""
        return list(self._history)

    def clear_history(self) -> None:
        """Clear command history."""
        self._history.clear()
