"""
Shell Built-in Commands

Implements built-in shell commands.

Builtins run inside the interpreter process, so they write straight to
descriptors 1 and 2. Whatever those descriptors point at when the builtin
runs (a terminal, or a file overlaid by a redirection) gets the output.

Author: YSNRFD
Version: 1.0.0
"""

import os
from typing import Callable, List

from .path_utils import find_executable
from pysh.logger import get_logger


STDOUT_FILENO = 1
STDERR_FILENO = 2

BUILTIN_NAMES = ('echo', 'exit', 'type', 'pwd', 'cd')


def _write_fd(fd: int, text: str) -> None:
    data = os.fsencode(text)
    while data:
        written = os.write(fd, data)
        data = data[written:]


class BuiltinCommands:
    """
    Built-in shell commands.

    These commands are executed directly by the shell without
    creating a new process. Each receives the full argv, its own
    name included.
    """

    def __init__(self, shell):
        """
        Initialize built-in commands.

        Args:
            shell: The shell instance
        """
        self._shell = shell
        self._logger = get_logger('builtins')
        self._commands: dict[str, Callable[[List[str]], int]] = {
            'echo': self.cmd_echo,
            'exit': self.cmd_exit,
            'type': self.cmd_type,
            'pwd': self.cmd_pwd,
            'cd': self.cmd_cd,
        }

    def is_builtin(self, name: str) -> bool:
        """Check if a command is built-in."""
        return name in self._commands

    def execute(self, argv: List[str]) -> int:
        """
        Execute a built-in command.

        Args:
            argv: Command words, argv[0] being the builtin name

        Returns:
            Exit code
        """
        name = argv[0]
        cmd = self._commands.get(name)
        if cmd is None:
            return 127

        try:
            return cmd(argv)
        except Exception as e:
            self._logger.error(f"{name} failed: {e}")
            self.err(f"{name}: {e}\n")
            return 1

    def out(self, text: str) -> None:
        """Write to the current standard output."""
        _write_fd(STDOUT_FILENO, text)

    def err(self, text: str) -> None:
        """Write to the current standard error."""
        _write_fd(STDERR_FILENO, text)

    # Command implementations

    def cmd_echo(self, argv: List[str]) -> int:
        """Print arguments separated by single spaces."""
        self.out(' '.join(argv[1:]) + '\n')
        return 0

    def cmd_exit(self, argv: List[str]) -> int:
        """Exit the shell."""
        code = 0
        if len(argv) > 1:
            try:
                code = int(argv[1])
            except ValueError:
                self.err(f"exit: {argv[1]}: numeric argument required\n")
                code = 2

        self._shell.request_exit(code & 0xFF)
        return code & 0xFF

    def cmd_type(self, argv: List[str]) -> int:
        """Describe how a command name would be interpreted."""
        name = argv[1] if len(argv) > 1 else ''

        if not name:
            self.err("type: missing operand\n")
            return 1

        if name in BUILTIN_NAMES:
            self.out(f"{name} is a shell builtin\n")
            return 0

        path = find_executable(name)
        if path:
            self.out(f"{name} is {path}\n")
            return 0

        self.out(f"{name}: not found\n")
        return 1

    def cmd_pwd(self, argv: List[str]) -> int:
        """Print working directory."""
        try:
            cwd = os.getcwd()
        except OSError as e:
            self.err(f"pwd: {e.strerror}\n")
            return 1

        self.out(cwd + '\n')
        return 0

    def cmd_cd(self, argv: List[str]) -> int:
        """Change directory, expanding a leading '~' to $HOME."""
        arg = argv[1] if len(argv) > 1 else None

        target = arg
        if arg is None or arg == '~' or arg.startswith('~/'):
            home = os.environ.get('HOME')
            if home is None:
                self.err("cd: HOME variable not set\n")
                return 1
            target = home if arg in (None, '~') else home + arg[1:]

        try:
            os.chdir(target)
        except OSError as e:
            self.err(f"cd: {target}: {e.strerror}\n")
            return 1

        self._shell.cwd = os.getcwd()
        return 0
