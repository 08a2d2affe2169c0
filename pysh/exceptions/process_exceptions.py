"""
Process Exceptions

Exceptions related to launching external programs: resolving the
executable, forking and replacing the child image.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any

from .shell_exceptions import ShellError


class ProcessException(ShellError):
    """
    Base exception for all process-related errors.

    Attributes:
        message: Human-readable error description
        pid: Process ID associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        pid: Optional[int] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if pid is not None:
            ctx["pid"] = pid
        super().__init__(
            message=message,
            error_code=error_code or 5000,
            context=ctx
        )
        self.pid = pid


class CommandNotFoundError(ProcessException):
    """
    The program name did not resolve against PATH.

    Nothing is forked when this is raised.

    Example:
        >>> raise CommandNotFoundError("frobnicate")
    """

    def __init__(self, command: str) -> None:
        super().__init__(
            message=f"{command}: command not found",
            error_code=5001,
            context={"command": command}
        )
        self.command = command


class ForkError(ProcessException):
    """The interpreter could not create a child process."""

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(
            message=f"fork failed for {command}: {reason}",
            error_code=5002,
            context={"command": command}
        )
        self.command = command
        self.reason = reason


class ExecError(ProcessException):
    """
    The child could not replace its image with the resolved binary.

    Only ever raised inside the forked child, which reports it and
    terminates with a non-zero status.
    """

    def __init__(self, path: str, reason: str, pid: Optional[int] = None) -> None:
        super().__init__(
            message=f"execv failed: {path}: {reason}",
            pid=pid,
            error_code=5003,
            context={"path": path}
        )
        self.path = path
        self.reason = reason
