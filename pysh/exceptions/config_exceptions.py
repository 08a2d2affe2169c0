"""
Configuration Exceptions

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any

from .shell_exceptions import ShellError


class ConfigError(ShellError):
    """
    The configuration file could not be loaded.

    Attributes:
        path: Configuration file path (if known)
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if path is not None:
            ctx["path"] = path
        super().__init__(
            message=message,
            error_code=error_code or 6000,
            context=ctx
        )
        self.path = path


class ConfigValidationError(ConfigError):
    """Raised when a configuration key or value is invalid."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(
            message=message,
            error_code=6001,
            context={"key": key} if key else None
        )
        self.key = key
