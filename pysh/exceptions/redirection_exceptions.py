"""
Redirection Exceptions

Errors raised while overlaying a standard stream onto a file. These are
per-stream: a failure skips that one redirection and leaves the others,
and the command itself, alone.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any

from .shell_exceptions import ShellError


class RedirectionError(ShellError):
    """
    Base exception for descriptor swap failures.

    Attributes:
        filename: File the stream was being redirected to
        target_fd: Descriptor being redirected
        step: Name of the failing system call
        errno: OS error number, when the failure came from the OS
    """

    step = "redirect"

    def __init__(
        self,
        filename: str,
        target_fd: int,
        reason: str,
        errno: Optional[int] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["fd"] = target_fd
        super().__init__(
            message=f"{self.step}: {filename}: {reason}",
            error_code=error_code or 4000,
            context=ctx
        )
        self.filename = filename
        self.target_fd = target_fd
        self.reason = reason
        self.errno = errno

    @classmethod
    def from_os_error(cls, filename: str, target_fd: int, exc: OSError) -> 'RedirectionError':
        """Build the error from the OSError a system call raised."""
        return cls(filename, target_fd, exc.strerror or str(exc), errno=exc.errno)


class RedirectionOpenError(RedirectionError):
    """The redirection target could not be opened."""

    step = "open"

    def __init__(self, filename: str, target_fd: int, reason: str, errno: Optional[int] = None) -> None:
        super().__init__(filename, target_fd, reason, errno=errno, error_code=4001)


class RedirectionDupError(RedirectionError):
    """The original descriptor could not be saved."""

    step = "dup"

    def __init__(self, filename: str, target_fd: int, reason: str, errno: Optional[int] = None) -> None:
        super().__init__(filename, target_fd, reason, errno=errno, error_code=4002)


class RedirectionOverlayError(RedirectionError):
    """The opened file could not be placed onto the target descriptor."""

    step = "dup2"

    def __init__(self, filename: str, target_fd: int, reason: str, errno: Optional[int] = None) -> None:
        super().__init__(filename, target_fd, reason, errno=errno, error_code=4003)
