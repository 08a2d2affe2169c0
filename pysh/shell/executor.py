"""
Process Executor Module

Runs external programs with the classic fork/exec/wait pattern. The
redirections are applied in the child only; the interpreter's own
descriptors are never touched for an external command.

Author: YSNRFD
Version: 1.0.0
"""

import os
import sys
from typing import List, Optional, Callable

from .path_utils import find_executable
from .redirection import RedirectionSpec, apply_redirections
from pysh.exceptions import CommandNotFoundError, ForkError, ExecError
from pysh.logger import get_logger


EXEC_FAILURE_STATUS = 1


class ProcessExecutor:
    """
    Launches one foreground child at a time and waits for it.

    Example:
        >>> executor = ProcessExecutor()
        >>> executor.run('ls', ['ls', '-l'], specs)
        0
    """

    def __init__(self, resolver: Optional[Callable[[str], Optional[str]]] = None):
        """
        Args:
            resolver: PATH lookup; defaults to find_executable
        """
        self._resolve = resolver or find_executable
        self._logger = get_logger('executor')

    def run(
        self,
        program_name: str,
        argv: List[str],
        specs: List[RedirectionSpec]
    ) -> int:
        """
        Run an external program and wait for it to finish.

        Args:
            program_name: Name to resolve against PATH
            argv: Full argument vector, argv[0] included
            specs: Redirections to apply in the child

        Returns:
            The child's exit code; negative if it was killed by a signal

        Raises:
            CommandNotFoundError: If program_name does not resolve
            ForkError: If the child could not be created
        """
        path = self._resolve(program_name)
        if path is None:
            raise CommandNotFoundError(program_name)

        for stream in (sys.stdout, sys.stderr):
            if stream is not None:
                stream.flush()

        try:
            pid = os.fork()
        except OSError as e:
            raise ForkError(program_name, e.strerror or str(e)) from e

        if pid == 0:
            self._exec_child(path, argv, specs)

        self._logger.debug(f"started {path}", pid=pid, context={'argv': argv})

        code = self._wait(pid)

        self._logger.debug(f"{program_name} exited", pid=pid, context={'status': code})
        return code

    @staticmethod
    def _wait(pid: int) -> int:
        """Block until the child terminates and decode its status."""
        while True:
            try:
                _, status = os.waitpid(pid, 0)
            except KeyboardInterrupt:
                # Ctrl-C also reached the child; keep waiting for it
                continue
            return os.waitstatus_to_exitcode(status)

    @staticmethod
    def _exec_child(path: str, argv: List[str], specs: List[RedirectionSpec]) -> None:
        """Child side of the fork; never returns."""
        try:
            apply_redirections(specs)
            os.execv(path, argv)
        except OSError as e:
            error = ExecError(path, e.strerror or str(e), pid=os.getpid())
            print(f"pysh: {error.message}", file=sys.stderr, flush=True)
        finally:
            os._exit(EXEC_FAILURE_STATUS)
