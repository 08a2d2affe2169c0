"""
pysh Logger Module

Per-subsystem loggers for the interpreter. Each subsystem ('shell',
'parser', 'redirect', 'executor', 'builtins') gets one Logger wrapping a
child of the stdlib 'pysh' logger, so a single call to initialize()
controls all of them.

Nothing is written until initialize() installs handlers. Console output,
when enabled, goes to stderr: stdout belongs to the commands being run.

Author: YSNRFD
Version: 1.0.0
"""

import logging
import sys
import threading
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Optional, Any, List


ROOT_LOGGER = 'pysh'


class LogLevel(IntEnum):
    """Levels accepted in the logging.level setting."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    @classmethod
    def from_name(cls, name: str) -> 'LogLevel':
        """Look up a level by name, case-insensitively."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"unknown log level: {name}") from None


class LogFormatter(logging.Formatter):
    """
    One line per record, e.g.:

        2025-01-01 12:00:00.000 ERROR    redirect[42]: open: out.txt (fd=1)

    The bracketed number is the pid the record is about, when there is one.
    """

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
    }

    def __init__(self, use_colors: bool = False):
        super().__init__()
        self.use_colors = use_colors

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        return datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:8s}"
        color = self.LEVEL_COLORS.get(record.levelname) if self.use_colors else None
        if color:
            level = f"{color}{level}\033[0m"

        origin = getattr(record, 'subsystem', record.name)
        pid = getattr(record, 'pid', None)
        if pid is not None:
            origin = f"{origin}[{pid}]"

        line = f"{self.formatTime(record)} {level} {origin}: {record.getMessage()}"

        context = getattr(record, 'context', None)
        if context:
            line += " (" + ", ".join(f"{k}={v}" for k, v in context.items()) + ")"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class Logger:
    """
    Logger for one pysh subsystem; instances are shared per name.

    Example:
        >>> log = Logger('executor')
        >>> log.debug("child exited", pid=4242, context={'status': 0})
    """

    _instances: dict[str, 'Logger'] = {}
    _lock = threading.Lock()
    _handlers: List[logging.Handler] = []
    _initialized = False

    def __new__(cls, subsystem: str = 'shell') -> 'Logger':
        with cls._lock:
            instance = cls._instances.get(subsystem)
            if instance is None:
                instance = super().__new__(cls)
                instance._subsystem = subsystem
                instance._logger = logging.getLogger(f'{ROOT_LOGGER}.{subsystem}')
                cls._instances[subsystem] = instance
            return instance

    @property
    def subsystem(self) -> str:
        return self._subsystem

    @classmethod
    def initialize(
        cls,
        level: int = LogLevel.WARNING,
        log_file: Optional[str] = None,
        console_output: bool = False
    ) -> None:
        """
        Install handlers on the 'pysh' logger.

        Later calls are ignored until shutdown().

        Args:
            level: Minimum level written by any handler
            log_file: Append records to this file
            console_output: Also write records to stderr
        """
        with cls._lock:
            if cls._initialized:
                return

            root = logging.getLogger(ROOT_LOGGER)
            root.setLevel(level)
            root.propagate = False

            handlers: List[logging.Handler] = []
            if console_output:
                console = logging.StreamHandler(sys.stderr)
                console.setFormatter(LogFormatter(use_colors=sys.stderr.isatty()))
                handlers.append(console)

            if log_file:
                path = Path(log_file).expanduser()
                path.parent.mkdir(parents=True, exist_ok=True)
                # command words may carry undecodable bytes as surrogates
                file_handler = logging.FileHandler(
                    path, encoding='utf-8', errors='backslashreplace'
                )
                file_handler.setFormatter(LogFormatter())
                handlers.append(file_handler)

            for handler in handlers:
                root.addHandler(handler)

            cls._handlers = handlers
            cls._initialized = True

    @classmethod
    def shutdown(cls) -> None:
        """Detach and close every handler installed by initialize()."""
        with cls._lock:
            root = logging.getLogger(ROOT_LOGGER)
            for handler in cls._handlers:
                root.removeHandler(handler)
                handler.close()
            cls._handlers = []
            cls._initialized = False

    def _log(
        self,
        level: int,
        message: str,
        pid: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        extra = {
            'subsystem': self._subsystem,
            'pid': pid,
            'context': context or {},
        }
        self._logger.log(level, message, extra=extra)

    def debug(self, message: str, pid: Optional[int] = None,
              context: Optional[dict[str, Any]] = None) -> None:
        self._log(LogLevel.DEBUG, message, pid, context)

    def info(self, message: str, pid: Optional[int] = None,
             context: Optional[dict[str, Any]] = None) -> None:
        self._log(LogLevel.INFO, message, pid, context)

    def warning(self, message: str, pid: Optional[int] = None,
                context: Optional[dict[str, Any]] = None) -> None:
        self._log(LogLevel.WARNING, message, pid, context)

    def error(self, message: str, pid: Optional[int] = None,
              context: Optional[dict[str, Any]] = None) -> None:
        self._log(LogLevel.ERROR, message, pid, context)


def get_logger(subsystem: str) -> Logger:
    """Get the shared Logger for a subsystem such as 'redirect'."""
    return Logger(subsystem)
