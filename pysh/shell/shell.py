"""
pysh Shell Module

The interactive read-eval loop: read a line, parse it, dispatch it to a
builtin or an external program, repeat.

Author: YSNRFD
Version: 1.0.0
"""

import os
import sys
from typing import Optional

from .parser import CommandParser, CommandRequest
from .builtins import BuiltinCommands
from .executor import ProcessExecutor
from .redirection import Redirector
from .terminal import RawMode, LineEditor
from pysh.core.config_loader import Config, get_config
from pysh.exceptions import ParseError, CommandNotFoundError, ShellError
from pysh.logger import get_logger


STATUS_FAILURE = 1
STATUS_PARSE_ERROR = 2
STATUS_NOT_FOUND = 127


class Shell:
    """
    pysh interactive shell.

    Provides:
    - Command parsing (quotes, escapes, redirections)
    - Built-in commands (cd, echo, pwd, type, exit)
    - External commands via fork/exec
    - Optional raw-mode line editing

    Example:
        >>> shell = Shell()
        >>> shell.execute_line("echo hi > out.txt")
        0
    """

    def __init__(self, config: Optional[Config] = None):
        self._config = config or get_config()
        self._logger = get_logger('shell')

        shell_config = self._config.shell
        self._parser = CommandParser(
            max_input_length=shell_config.max_input_length,
            max_tokens=shell_config.max_tokens,
            max_token_length=shell_config.max_token_length,
            history_size=shell_config.history_size
        )
        self._builtins = BuiltinCommands(self)
        self._executor = ProcessExecutor()

        self._exiting = False
        self._exit_code = 0
        self._last_status = 0
        self._cwd = os.getcwd()
        self._prompt = shell_config.prompt

    @property
    def cwd(self) -> str:
        return self._cwd

    @cwd.setter
    def cwd(self, value: str):
        self._cwd = value

    @property
    def parser(self) -> CommandParser:
        return self._parser

    @property
    def builtins(self) -> BuiltinCommands:
        return self._builtins

    @property
    def last_status(self) -> int:
        """Exit status of the most recent command."""
        return self._last_status

    @property
    def exiting(self) -> bool:
        return self._exiting

    @property
    def exit_code(self) -> int:
        return self._exit_code

    def run(self, raw_mode: Optional[bool] = None) -> int:
        """
        Run the interactive shell.

        This is the main REPL loop. It stops at end of input or when the
        exit builtin runs.

        Args:
            raw_mode: Use the raw-mode line editor; defaults to the
                terminal.raw_mode setting, and is ignored when stdin is
                not a terminal

        Returns:
            Exit code for the process
        """
        if raw_mode is None:
            raw_mode = self._config.terminal.raw_mode
        raw_mode = raw_mode and sys.stdin.isatty()

        editor = None
        if raw_mode:
            editor = LineEditor.for_fds(
                sys.stdin.fileno(),
                sys.stdout.fileno(),
                max_length=self._config.shell.max_input_length
            )

        self._logger.info("shell started", context={'raw_mode': raw_mode})

        while not self._exiting:
            try:
                line = self._read_line(editor)
            except KeyboardInterrupt:
                print()
                continue

            if line is None:
                if sys.stdin.isatty():
                    print("\nexit")
                break

            self.execute_line(line)

        self._logger.info("shell stopped", context={'exit_code': self._exit_code})
        return self._exit_code

    def _read_line(self, editor: Optional[LineEditor]) -> Optional[str]:
        """Read one line; None means end of input."""
        if editor is not None:
            with RawMode(sys.stdin.fileno()):
                return editor.read_line(self._prompt)

        sys.stdout.write(self._prompt)
        sys.stdout.flush()

        # bytes that are not valid in the locale survive as surrogates
        data = sys.stdin.buffer.readline()
        if not data:
            return None
        return os.fsdecode(data.rstrip(b'\n'))

    def execute_line(self, line: str) -> int:
        """
        Execute a command line.

        Args:
            line: Command line string

        Returns:
            Exit status of the command
        """
        try:
            request = self._parser.parse(line)
        except ParseError as e:
            self._logger.warning(f"parse error: {e.message}", context={'line': line})
            print(f"pysh: {e.message}", file=sys.stderr)
            self._last_status = STATUS_PARSE_ERROR
            return self._last_status

        if request is None:
            return self._last_status

        try:
            self._last_status = self.dispatch(request)
        except ShellError as e:
            self._logger.error(f"{request.command}: {e}")
            print(f"pysh: {e.message}", file=sys.stderr)
            self._last_status = STATUS_FAILURE
        return self._last_status

    def dispatch(self, request: CommandRequest) -> int:
        """
        Run a parsed command.

        Builtins run in-process between apply and restore of the
        redirections; anything else goes to the process executor, which
        applies them in the child.

        Args:
            request: Parsed command

        Returns:
            Exit status
        """
        if request.command is None:
            # redirections alone still create or truncate their files
            with Redirector(request.redirections):
                pass
            return 0

        if self._builtins.is_builtin(request.command):
            return self._execute_builtin(request)

        return self._execute_external(request)

    def _execute_builtin(self, request: CommandRequest) -> int:
        """Execute a built-in command."""
        with Redirector(request.redirections):
            return self._builtins.execute(request.argv)

    def _execute_external(self, request: CommandRequest) -> int:
        """Execute an external command."""
        try:
            return self._executor.run(request.command, request.argv, request.redirections)
        except CommandNotFoundError as e:
            self._logger.info(e.message)
            self._builtins.out(e.message + '\n')
            return STATUS_NOT_FOUND

    def request_exit(self, code: int = 0) -> None:
        """Request the shell to exit."""
        self._exit_code = code
        self._exiting = True

    def run_script(self, script: str) -> int:
        """
        Run several lines in order.

        Stops early if one of them runs exit.

        Args:
            script: Lines separated by newlines

        Returns:
            Last exit status
        """
        status = 0

        for line in script.split('\n'):
            if self._exiting:
                break
            status = self.execute_line(line)

        return status

