"""
Redirection Module

Pulls I/O redirection operators out of a token list and swaps the
process's standard descriptors for the lifetime of one command.

Operators:
    >  1>   stdout, truncate
    >>      stdout, append
    2>      stderr, truncate
    2>>     stderr, append
    <       stdin, read

Every command owns exactly three RedirectionSpecs (stdout, stderr, stdin).
A spec without a filename is inert. When the same stream is redirected
more than once, the last occurrence wins.

Author: YSNRFD
Version: 1.0.0
"""

import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Iterable

from pysh.exceptions import (
    DanglingRedirectionError,
    RedirectionError,
    RedirectionOpenError,
    RedirectionDupError,
    RedirectionOverlayError,
)
from pysh.logger import get_logger


CREATE_PERMISSIONS = 0o644

_logger = get_logger('redirect')


class RedirectionTarget(Enum):
    """The three redirectable streams; values are their descriptors."""
    STDOUT = 1
    STDERR = 2
    STDIN = 0

    @property
    def fd(self) -> int:
        return self.value


class OpenMode(Enum):
    """How a redirection target file is opened."""
    TRUNCATE = "truncate"
    APPEND = "append"
    READ = "read"

    @property
    def flags(self) -> int:
        """os.open() flags for this mode."""
        if self is OpenMode.TRUNCATE:
            return os.O_WRONLY | os.O_CREAT | os.O_TRUNC
        if self is OpenMode.APPEND:
            return os.O_WRONLY | os.O_CREAT | os.O_APPEND
        return os.O_RDONLY


OPERATORS: dict[str, Tuple[RedirectionTarget, OpenMode]] = {
    '>': (RedirectionTarget.STDOUT, OpenMode.TRUNCATE),
    '1>': (RedirectionTarget.STDOUT, OpenMode.TRUNCATE),
    '>>': (RedirectionTarget.STDOUT, OpenMode.APPEND),
    '2>': (RedirectionTarget.STDERR, OpenMode.TRUNCATE),
    '2>>': (RedirectionTarget.STDERR, OpenMode.APPEND),
    '<': (RedirectionTarget.STDIN, OpenMode.READ),
}

# Processing order for apply/restore.
TARGET_ORDER = (
    RedirectionTarget.STDOUT,
    RedirectionTarget.STDERR,
    RedirectionTarget.STDIN,
)


@dataclass
class RedirectionSpec:
    """
    Redirection intent for one stream.

    Attributes:
        target: Stream being redirected (fixed per spec)
        filename: File to redirect to, or None when the stream is untouched
        mode: How to open filename
        saved_fd: Duplicate of the original descriptor while applied
    """
    target: RedirectionTarget
    filename: Optional[str] = None
    mode: OpenMode = OpenMode.TRUNCATE
    saved_fd: Optional[int] = None

    @property
    def active(self) -> bool:
        """Whether this stream is redirected at all."""
        return self.filename is not None

    @property
    def applied(self) -> bool:
        """Whether the descriptor is currently overlaid."""
        return self.saved_fd is not None


def is_operator(token: str) -> bool:
    """Check if a token is a recognised redirection operator."""
    return token in OPERATORS


def new_specs() -> List[RedirectionSpec]:
    """Fresh, inert specs for stdout, stderr and stdin, in that order."""
    return [RedirectionSpec(target=target) for target in TARGET_ORDER]


def extract_redirections(tokens: Iterable[str]) -> Tuple[List[str], List[RedirectionSpec]]:
    """
    Separate redirections from the command's arguments.

    Args:
        tokens: Words produced by the tokenizer

    Returns:
        (remaining tokens, [stdout spec, stderr spec, stdin spec])

    Raises:
        DanglingRedirectionError: If an operator has no filename after it

    Example:
        >>> argv, specs = extract_redirections(['echo', 'hi', '>', 'out.txt'])
        >>> argv
        ['echo', 'hi']
        >>> specs[0].filename
        'out.txt'
    """
    words = list(tokens)
    specs = new_specs()
    by_target = {spec.target: spec for spec in specs}
    remaining: List[str] = []

    i = 0
    while i < len(words):
        token = words[i]

        if not is_operator(token):
            remaining.append(token)
            i += 1
            continue

        if i + 1 >= len(words):
            raise DanglingRedirectionError(token)

        target, mode = OPERATORS[token]
        spec = by_target[target]
        spec.filename = words[i + 1]
        spec.mode = mode
        i += 2

    return remaining, specs


def _flush_std_streams() -> None:
    """Push Python-level buffers out before the descriptors underneath change."""
    for stream in (sys.stdout, sys.stderr):
        if stream is not None:
            stream.flush()


def _report(error: RedirectionError) -> None:
    _logger.error(error.message, context={'fd': error.target_fd})
    print(f"pysh: {error.message}", file=sys.stderr, flush=True)


def _apply_one(spec: RedirectionSpec) -> None:
    """Overlay one stream; on failure every descriptor opened here is closed."""
    target_fd = spec.target.fd

    try:
        fd = os.open(spec.filename, spec.mode.flags, CREATE_PERMISSIONS)
    except OSError as e:
        raise RedirectionOpenError.from_os_error(spec.filename, target_fd, e) from e

    try:
        try:
            saved = os.dup(target_fd)
        except OSError as e:
            raise RedirectionDupError.from_os_error(spec.filename, target_fd, e) from e

        try:
            os.dup2(fd, target_fd)
        except OSError as e:
            os.close(saved)
            raise RedirectionOverlayError.from_os_error(spec.filename, target_fd, e) from e

        spec.saved_fd = saved
    finally:
        os.close(fd)


def apply_redirections(specs: Iterable[RedirectionSpec]) -> List[RedirectionError]:
    """
    Overlay every redirected stream onto its file.

    A failure on one stream is reported and that stream is skipped; the
    remaining streams are still processed.

    Args:
        specs: Specs from extract_redirections()

    Returns:
        The errors that occurred, one per skipped stream
    """
    errors: List[RedirectionError] = []

    for spec in specs:
        if not spec.active or spec.applied:
            continue

        _flush_std_streams()
        try:
            _apply_one(spec)
        except RedirectionError as e:
            _report(e)
            errors.append(e)
            continue

        _logger.debug(
            f"redirected fd {spec.target.fd} to {spec.filename}",
            context={'mode': spec.mode.value}
        )

    return errors


def restore_redirections(specs: Iterable[RedirectionSpec]) -> None:
    """
    Put the original descriptors back.

    Runs once per applied spec; the saved duplicate is always closed, even
    when putting it back fails.
    """
    for spec in specs:
        if not spec.applied:
            continue

        saved = spec.saved_fd
        spec.saved_fd = None
        target_fd = spec.target.fd

        _flush_std_streams()
        try:
            os.dup2(saved, target_fd)
        except OSError as e:
            _report(RedirectionOverlayError.from_os_error(spec.filename, target_fd, e))
        finally:
            os.close(saved)

        _logger.debug(f"restored fd {target_fd}")


class Redirector:
    """
    Context manager bracketing one command with apply/restore.

    Example:
        >>> with Redirector(specs) as errors:
        ...     builtins.execute(argv)
    """

    def __init__(self, specs: List[RedirectionSpec]):
        self._specs = specs
        self.errors: List[RedirectionError] = []

    def __enter__(self) -> List[RedirectionError]:
        self.errors = apply_redirections(self._specs)
        return self.errors

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        restore_redirections(self._specs)
