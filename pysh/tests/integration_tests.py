#!/usr/bin/env python3
"""
pysh Integration Tests

End-to-end tests that touch real descriptors, files and child processes:
redirection apply/restore, builtins, fork/exec, the read loop and the
command-line entry point.

Every test runs inside a scratch directory.

Run with: python -m pytest pysh/tests -v
Or: python -m pysh.tests.integration_tests

Author: YSNRFD
Version: 1.0.0
"""

import io
import os
import sys
import tempfile
import unittest
from unittest import mock


class FdCapture:
    """Temporarily point a raw descriptor at a scratch file."""

    def __init__(self, fd: int):
        self.fd = fd
        self._tmp = None
        self._saved = None

    def __enter__(self) -> 'FdCapture':
        sys.stdout.flush()
        sys.stderr.flush()
        self._tmp = tempfile.TemporaryFile()
        self._saved = os.dup(self.fd)
        os.dup2(self._tmp.fileno(), self.fd)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        os.dup2(self._saved, self.fd)
        os.close(self._saved)

    def read_bytes(self) -> bytes:
        self._tmp.seek(0)
        data = self._tmp.read()
        self._tmp.close()
        return data

    def read(self) -> str:
        return self.read_bytes().decode()


def _identity(fd: int) -> tuple:
    st = os.fstat(fd)
    return (st.st_dev, st.st_ino)


class ScratchDirTestCase(unittest.TestCase):
    """Runs each test with a temporary working directory."""

    def setUp(self):
        self._old_cwd = os.getcwd()
        self._tmp = tempfile.TemporaryDirectory()
        os.chdir(self._tmp.name)
        self.dir = os.getcwd()

    def tearDown(self):
        os.chdir(self._old_cwd)
        self._tmp.cleanup()

    def read(self, name: str) -> str:
        with open(name, encoding='utf-8') as f:
            return f.read()

    def write(self, name: str, text: str) -> None:
        with open(name, 'w', encoding='utf-8') as f:
            f.write(text)

    def make_shell(self):
        from pysh.core.config_loader import Config
        from pysh.shell.shell import Shell
        return Shell(Config())


class TestRedirectionApply(ScratchDirTestCase):
    """Test descriptor overlay and restore."""

    def _specs(self, **files):
        from pysh.shell.redirection import new_specs, OpenMode
        specs = new_specs()
        for index, key in enumerate(('stdout', 'stderr', 'stdin')):
            if key in files:
                specs[index].filename = files[key]
                if key == 'stdin':
                    specs[index].mode = OpenMode.READ
        return specs

    def test_apply_and_restore_stdout(self):
        """Writes to fd 1 land in the file only while applied."""
        from pysh.shell.redirection import apply_redirections, restore_redirections

        specs = self._specs(stdout='out.txt')
        before = _identity(1)

        with FdCapture(1) as cap:
            errors = apply_redirections(specs)
            os.write(1, b"inside\n")
            restore_redirections(specs)
            os.write(1, b"outside\n")

        self.assertEqual(errors, [])
        self.assertEqual(self.read('out.txt'), "inside\n")
        self.assertEqual(cap.read(), "outside\n")
        self.assertEqual(_identity(1), before)
        self.assertIsNone(specs[0].saved_fd)

    def test_created_file_mode(self):
        """New files are created with rw-r--r-- before the umask."""
        from pysh.shell.redirection import apply_redirections, restore_redirections

        specs = self._specs(stdout='perm.txt')
        old_umask = os.umask(0)
        try:
            apply_redirections(specs)
            restore_redirections(specs)
        finally:
            os.umask(old_umask)

        self.assertEqual(os.stat('perm.txt').st_mode & 0o777, 0o644)

    def test_stdin_redirect(self):
        """fd 0 reads from the file while applied."""
        from pysh.shell.redirection import apply_redirections, restore_redirections

        self.write('in.txt', "data\n")
        specs = self._specs(stdin='in.txt')
        before = _identity(0)

        apply_redirections(specs)
        try:
            self.assertEqual(os.read(0, 100), b"data\n")
        finally:
            restore_redirections(specs)

        self.assertEqual(_identity(0), before)

    def test_missing_input_file(self):
        """A missing input file is an open error and stdin is untouched."""
        from pysh.shell.redirection import apply_redirections
        from pysh.exceptions import RedirectionOpenError

        specs = self._specs(stdin='missing.txt')
        before = _identity(0)

        with mock.patch('sys.stderr', new_callable=io.StringIO) as err:
            errors = apply_redirections(specs)

        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], RedirectionOpenError)
        self.assertFalse(specs[2].applied)
        self.assertEqual(_identity(0), before)
        self.assertIn("pysh: open: missing.txt:", err.getvalue())

    def test_partial_failure(self):
        """One failing stream does not stop the others."""
        from pysh.shell.redirection import apply_redirections, restore_redirections

        specs = self._specs(stdout='no/such/dir/out.txt', stderr='err.txt')

        with mock.patch('sys.stderr', new_callable=io.StringIO):
            errors = apply_redirections(specs)
        try:
            self.assertEqual(len(errors), 1)
            self.assertEqual(errors[0].target_fd, 1)
            self.assertFalse(specs[0].applied)
            self.assertTrue(specs[1].applied)
            os.write(2, b"to file\n")
        finally:
            restore_redirections(specs)

        self.assertEqual(self.read('err.txt'), "to file\n")
        self.assertFalse(os.path.exists('no/such/dir/out.txt'))

    def test_no_descriptor_leak(self):
        """Apply plus restore leaves the descriptor table as it was."""
        from pysh.shell.redirection import apply_redirections, restore_redirections

        self.write('in.txt', "x")
        before = sorted(os.listdir('/proc/self/fd'))

        specs = self._specs(stdout='a.txt', stderr='b.txt', stdin='in.txt')
        apply_redirections(specs)
        restore_redirections(specs)

        self.assertEqual(sorted(os.listdir('/proc/self/fd')), before)

    def test_restore_twice_is_harmless(self):
        """Specs that are not applied are skipped on restore."""
        from pysh.shell.redirection import apply_redirections, restore_redirections

        specs = self._specs(stdout='out.txt')
        before = _identity(1)

        apply_redirections(specs)
        restore_redirections(specs)
        restore_redirections(specs)

        self.assertEqual(_identity(1), before)

    def test_redirector_restores_on_exception(self):
        """The context manager restores even if the body raises."""
        from pysh.shell.redirection import Redirector

        specs = self._specs(stdout='out.txt')
        before = _identity(1)

        with self.assertRaises(RuntimeError):
            with Redirector(specs) as errors:
                self.assertEqual(errors, [])
                os.write(1, b"partial\n")
                raise RuntimeError("boom")

        self.assertEqual(_identity(1), before)
        self.assertEqual(self.read('out.txt'), "partial\n")


class TestBuiltinsWithRedirection(ScratchDirTestCase):
    """Builtins run in-process between apply and restore."""

    def setUp(self):
        super().setUp()
        self.shell = self.make_shell()
        self.std_ids = [_identity(fd) for fd in (0, 1, 2)]

    def tearDown(self):
        self.assertEqual([_identity(fd) for fd in (0, 1, 2)], self.std_ids)
        super().tearDown()

    def test_echo_to_file(self):
        """Only the redirected text reaches the file; nothing reaches stdout."""
        with FdCapture(1) as cap:
            status = self.shell.execute_line("echo hi > out.txt")

        self.assertEqual(status, 0)
        self.assertEqual(self.read('out.txt'), "hi\n")
        self.assertEqual(cap.read(), "")

    def test_echo_without_redirection(self):
        """Plain echo writes to the current stdout."""
        with FdCapture(1) as cap:
            self.shell.execute_line("echo 'a  b' c")

        self.assertEqual(cap.read(), "a  b c\n")

    def test_truncate(self):
        """'>' replaces existing content."""
        self.write('out.txt', "old content that is long\n")

        self.shell.execute_line("echo new > out.txt")

        self.assertEqual(self.read('out.txt'), "new\n")

    def test_explicit_fd_one(self):
        """'1>' is the same as '>'."""
        self.shell.execute_line("echo one 1> out.txt")

        self.assertEqual(self.read('out.txt'), "one\n")

    def test_append(self):
        """'>>' appends."""
        self.shell.execute_line("echo a >> log.txt")
        self.shell.execute_line("echo b >> log.txt")

        self.assertEqual(self.read('log.txt'), "a\nb\n")

    def test_last_redirection_wins(self):
        """Only the final file for a stream is touched."""
        with FdCapture(1) as cap:
            self.shell.execute_line("echo hi > a.txt > b.txt")

        self.assertEqual(self.read('b.txt'), "hi\n")
        self.assertFalse(os.path.exists('a.txt'))
        self.assertEqual(cap.read(), "")

    def test_redirection_before_command(self):
        """Redirections may appear anywhere in the line."""
        self.shell.execute_line("> out.txt echo first second")

        self.assertEqual(self.read('out.txt'), "first second\n")

    def test_quoted_operator_is_argument(self):
        """A quoted '>' is still an operator once the quotes are gone."""
        self.shell.execute_line("echo x '>' out.txt")

        self.assertEqual(self.read('out.txt'), "x\n")

    def test_stderr_redirect(self):
        """'2>' captures builtin diagnostics."""
        status = self.shell.execute_line("cd missing-dir 2> err.txt")

        self.assertEqual(status, 1)
        self.assertEqual(self.read('err.txt'), "cd: missing-dir: No such file or directory\n")

    def test_stderr_append(self):
        """'2>>' appends diagnostics."""
        self.shell.execute_line("cd nope 2>> err.txt")
        self.shell.execute_line("cd nope 2>> err.txt")

        self.assertEqual(self.read('err.txt').count("cd: nope:"), 2)

    def test_redirections_only(self):
        """A line of redirections creates or truncates the files."""
        self.write('existing.txt', "content\n")

        status = self.shell.execute_line("> made.txt 2> existing.txt")

        self.assertEqual(status, 0)
        self.assertEqual(self.read('made.txt'), "")
        self.assertEqual(self.read('existing.txt'), "")

    def test_open_failure_skips_stream(self):
        """The command still runs; its output stays on the real stdout."""
        with FdCapture(1) as cap:
            with mock.patch('sys.stderr', new_callable=io.StringIO) as err:
                status = self.shell.execute_line("echo hi > no/such/dir/out.txt")

        self.assertEqual(status, 0)
        self.assertEqual(cap.read(), "hi\n")
        self.assertIn("no/such/dir/out.txt", err.getvalue())

    def test_pwd(self):
        """pwd prints the working directory."""
        self.shell.execute_line("pwd > p.txt")

        self.assertEqual(self.read('p.txt'), os.getcwd() + "\n")

    def test_cd(self):
        """cd changes the process directory and the shell's cwd."""
        os.mkdir('sub')

        status = self.shell.execute_line("cd sub")

        self.assertEqual(status, 0)
        self.assertEqual(os.getcwd(), os.path.join(self.dir, 'sub'))
        self.assertEqual(self.shell.cwd, os.getcwd())

    def test_cd_home(self):
        """cd with no argument or '~' goes to $HOME."""
        os.makedirs('home/inner')
        home = os.path.join(self.dir, 'home')

        with mock.patch.dict(os.environ, {'HOME': home}):
            self.shell.execute_line("cd")
            self.assertEqual(os.getcwd(), home)

            os.chdir(self.dir)
            self.shell.execute_line("cd ~")
            self.assertEqual(os.getcwd(), home)

            os.chdir(self.dir)
            self.shell.execute_line("cd ~/inner")
            self.assertEqual(os.getcwd(), os.path.join(home, 'inner'))

    def test_cd_without_home(self):
        """cd with no HOME set reports it."""
        with mock.patch.dict(os.environ):
            os.environ.pop('HOME', None)
            status = self.shell.execute_line("cd 2> err.txt")

        self.assertEqual(status, 1)
        self.assertEqual(self.read('err.txt'), "cd: HOME variable not set\n")
        self.assertEqual(os.getcwd(), self.dir)

    def test_type(self):
        """type distinguishes builtins, programs and unknown names."""
        self.shell.execute_line("type echo > t.txt")
        self.assertEqual(self.read('t.txt'), "echo is a shell builtin\n")

        self.shell.execute_line("type sh > t.txt")
        self.assertRegex(self.read('t.txt'), r"^sh is /.*sh\n$")

        status = self.shell.execute_line("type no-such-program-xyz > t.txt")
        self.assertEqual(status, 1)
        self.assertEqual(self.read('t.txt'), "no-such-program-xyz: not found\n")

    def test_exit(self):
        """exit records the requested code."""
        status = self.shell.execute_line("exit 3")

        self.assertEqual(status, 3)
        self.assertTrue(self.shell.exiting)
        self.assertEqual(self.shell.exit_code, 3)

    def test_exit_wraps_code(self):
        """Exit codes are reduced to one byte."""
        self.shell.execute_line("exit 259")

        self.assertEqual(self.shell.exit_code, 3)

    def test_exit_non_numeric(self):
        """A non-numeric argument still exits, with status 2."""
        self.shell.execute_line("exit abc 2> err.txt")

        self.assertTrue(self.shell.exiting)
        self.assertEqual(self.shell.exit_code, 2)
        self.assertEqual(self.read('err.txt'), "exit: abc: numeric argument required\n")


class TestProcessExecutor(ScratchDirTestCase):
    """Test fork/exec/wait."""

    def test_exit_status(self):
        """The child's exit code comes back."""
        from pysh.shell.executor import ProcessExecutor
        from pysh.shell.redirection import new_specs

        code = ProcessExecutor().run('sh', ['sh', '-c', 'exit 3'], new_specs())

        self.assertEqual(code, 3)

    def test_killed_by_signal(self):
        """A signal death is reported as a negative code."""
        from pysh.shell.executor import ProcessExecutor
        from pysh.shell.redirection import new_specs

        code = ProcessExecutor().run('sh', ['sh', '-c', 'kill -9 $$'], new_specs())

        self.assertEqual(code, -9)

    def test_command_not_found(self):
        """Nothing is forked for an unresolved name."""
        from pysh.shell.executor import ProcessExecutor
        from pysh.shell.redirection import new_specs
        from pysh.exceptions import CommandNotFoundError

        executor = ProcessExecutor(resolver=lambda name: None)

        with mock.patch('os.fork') as fork:
            with self.assertRaises(CommandNotFoundError):
                executor.run('ghost', ['ghost'], new_specs())
            fork.assert_not_called()

    def test_exec_failure(self):
        """A child whose exec fails exits with status 1."""
        from pysh.shell.executor import ProcessExecutor, EXEC_FAILURE_STATUS
        from pysh.shell.redirection import new_specs

        executor = ProcessExecutor(resolver=lambda name: '/nonexistent/pysh-prog')

        self.assertEqual(executor.run('prog', ['prog'], new_specs()), EXEC_FAILURE_STATUS)

    def test_fork_failure(self):
        """A failed fork is wrapped."""
        import errno
        from pysh.shell.executor import ProcessExecutor
        from pysh.shell.redirection import new_specs
        from pysh.exceptions import ForkError

        with mock.patch('os.fork', side_effect=OSError(errno.EAGAIN, "Resource temporarily unavailable")):
            with self.assertRaises(ForkError):
                ProcessExecutor().run('sh', ['sh'], new_specs())

    def test_wait_survives_interrupt(self):
        """A KeyboardInterrupt while waiting does not abandon the child."""
        from pysh.shell.executor import ProcessExecutor

        calls = iter([KeyboardInterrupt(), (42, 7 << 8)])

        def fake_waitpid(pid, options):
            result = next(calls)
            if isinstance(result, BaseException):
                raise result
            return result

        with mock.patch('os.waitpid', side_effect=fake_waitpid):
            self.assertEqual(ProcessExecutor._wait(42), 7)

    def test_redirection_applied_in_child_only(self):
        """The parent's descriptors are never touched for an external command."""
        from pysh.shell.executor import ProcessExecutor
        from pysh.shell.parser import CommandParser

        request = CommandParser().parse("sh -c 'echo out; echo err 1>&2' > o.txt 2> e.txt")
        before = [_identity(fd) for fd in (0, 1, 2)]

        code = ProcessExecutor().run(request.command, request.argv, request.redirections)

        self.assertEqual(code, 0)
        self.assertEqual([_identity(fd) for fd in (0, 1, 2)], before)
        self.assertEqual(self.read('o.txt'), "out\n")
        self.assertEqual(self.read('e.txt'), "err\n")
        self.assertTrue(all(spec.saved_fd is None for spec in request.redirections))


class TestShell(ScratchDirTestCase):
    """Test line execution and the read loop."""

    def setUp(self):
        super().setUp()
        self.shell = self.make_shell()

    def test_external_with_redirection(self):
        """External programs honour redirections."""
        self.write('in.txt', "one\ntwo\n")
        status = self.shell.execute_line("cat < in.txt > out.txt")

        self.assertEqual(status, 0)
        self.assertEqual(self.read('out.txt'), "one\ntwo\n")

    def test_external_exit_status(self):
        """last_status follows the child."""
        self.shell.execute_line("sh -c 'exit 4'")

        self.assertEqual(self.shell.last_status, 4)

    def test_command_not_found(self):
        """Unknown commands report on stdout with status 127."""
        with FdCapture(1) as cap:
            status = self.shell.execute_line("no-such-cmd-xyz arg")

        self.assertEqual(status, 127)
        self.assertEqual(cap.read(), "no-such-cmd-xyz: command not found\n")

    def test_undecodable_bytes_in_builtin(self):
        """Bytes that are not valid text pass through echo unchanged."""
        status = self.shell.execute_line(os.fsdecode(b"echo \xff\xfe > o.txt"))

        self.assertEqual(status, 0)
        with open('o.txt', 'rb') as f:
            self.assertEqual(f.read(), b"\xff\xfe\n")

    def test_undecodable_bytes_in_message(self):
        """Diagnostics about raw-byte names keep the original bytes."""
        with FdCapture(1) as cap:
            status = self.shell.execute_line(os.fsdecode(b"no-such-\xff"))

        self.assertEqual(status, 127)
        self.assertEqual(cap.read_bytes(), b"no-such-\xff: command not found\n")

    def test_fork_failure_keeps_shell_alive(self):
        """A failed fork is reported and the next line still runs."""
        import errno

        fail = OSError(errno.EAGAIN, "Resource temporarily unavailable")
        with mock.patch('os.fork', side_effect=fail), \
                mock.patch('sys.stderr', new_callable=io.StringIO) as err:
            status = self.shell.execute_line("sh -c true")

        self.assertEqual(status, 1)
        self.assertEqual(self.shell.last_status, 1)
        self.assertIn("pysh: fork failed for sh", err.getvalue())
        self.assertFalse(self.shell.exiting)

        self.assertEqual(self.shell.execute_line("echo next > n.txt"), 0)
        self.assertEqual(self.read('n.txt'), "next\n")

    def test_parse_errors(self):
        """Parse failures report and set status 2 without running anything."""
        cases = {
            'echo "abc > out.txt': "unterminated quote",
            'echo hi >': "expected file after '>'",
            'echo ' + 'x' * 100: "",
        }

        for line, expected in cases.items():
            with mock.patch('sys.stderr', new_callable=io.StringIO) as err:
                status = self.shell.execute_line(line)
            self.assertEqual(status, 2, line)
            self.assertTrue(err.getvalue().startswith("pysh: "), line)
            self.assertIn(expected, err.getvalue(), line)

        self.assertFalse(os.path.exists('out.txt'))

    def test_too_many_tokens(self):
        """More words than the limit is a parse error."""
        with mock.patch('sys.stderr', new_callable=io.StringIO):
            status = self.shell.execute_line(" ".join(["w"] * 17))

        self.assertEqual(status, 2)

    def test_blank_line_keeps_status(self):
        """Blank and comment lines do not change last_status."""
        self.shell.execute_line("sh -c 'exit 5'")
        self.shell.execute_line("   ")
        self.shell.execute_line("# comment")

        self.assertEqual(self.shell.last_status, 5)

    def test_run_script(self):
        """Lines run in order and exit stops the script."""
        status = self.shell.run_script("echo one > o.txt\nexit 7\necho two > o.txt")

        self.assertEqual(status, 7)
        self.assertEqual(self.shell.exit_code, 7)
        self.assertEqual(self.read('o.txt'), "one\n")

    def _run_with_input(self, data: bytes, **kwargs):
        """Run the read loop over piped bytes; returns (code, prompt output)."""
        stdin = io.TextIOWrapper(io.BytesIO(data))
        with mock.patch('sys.stdin', stdin), \
                mock.patch('sys.stdout', new_callable=io.StringIO) as out:
            code = self.shell.run(**kwargs)
        return code, out.getvalue()

    def test_read_loop_until_exit(self):
        """run() executes lines until exit."""
        code, _ = self._run_with_input(b"echo hi > out.txt\nexit 5\necho late > late.txt\n")

        self.assertEqual(code, 5)
        self.assertEqual(self.read('out.txt'), "hi\n")
        self.assertFalse(os.path.exists('late.txt'))

    def test_read_loop_until_eof(self):
        """End of input stops the loop with status 0."""
        code, _ = self._run_with_input(b"echo a > out.txt\n")

        self.assertEqual(code, 0)
        self.assertEqual(self.read('out.txt'), "a\n")

    def test_read_loop_last_line_without_newline(self):
        """A final unterminated line still runs."""
        self._run_with_input(b"echo tail > out.txt")

        self.assertEqual(self.read('out.txt'), "tail\n")

    def test_read_loop_undecodable_bytes(self):
        """Invalid bytes on stdin neither stop the loop nor get mangled."""
        with mock.patch('sys.stderr', new_callable=io.StringIO):
            code, _ = self._run_with_input(
                b"echo \xff > bad.txt\necho 'x\xc3' \"\xff\" >> bad.txt\necho after > ok.txt\n"
            )

        self.assertEqual(code, 0)
        with open('bad.txt', 'rb') as f:
            self.assertEqual(f.read(), b"\xff\nx\xc3 \xff\n")
        self.assertEqual(self.read('ok.txt'), "after\n")

    def test_read_loop_survives_errors(self):
        """Parse errors and failed commands do not end the loop."""
        with mock.patch('sys.stderr', new_callable=io.StringIO):
            code, _ = self._run_with_input(b'echo "open\nno-such-cmd-xyz > nf.txt\nexit 3\n')

        self.assertEqual(code, 3)

    def test_read_loop_survives_interrupt(self):
        """Ctrl-C at the prompt gives a fresh prompt."""
        lines = iter([KeyboardInterrupt, "exit 1"])

        def fake_read(editor):
            item = next(lines)
            if item is KeyboardInterrupt:
                raise KeyboardInterrupt
            return item

        with mock.patch.object(self.shell, '_read_line', side_effect=fake_read), \
                mock.patch('sys.stdout', new_callable=io.StringIO) as out:
            code = self.shell.run()

        self.assertEqual(code, 1)
        self.assertEqual(out.getvalue(), "\n")

    def test_raw_mode_ignored_without_tty(self):
        """The line editor is only used on a terminal."""
        code, prompts = self._run_with_input(b"exit 0\n", raw_mode=True)

        self.assertEqual(code, 0)
        self.assertEqual(prompts, "$ ")

    def test_history(self):
        """Executed lines are kept in the parser history."""
        self.shell.execute_line("echo a > a.txt")
        self.shell.execute_line("echo b > b.txt")

        self.assertEqual(
            self.shell.parser.get_history(),
            ["echo a > a.txt", "echo b > b.txt"]
        )


class TestMain(ScratchDirTestCase):
    """Test the command-line entry point."""

    def setUp(self):
        super().setUp()
        self._env = mock.patch.dict(os.environ)
        self._env.start()
        os.environ.pop('PYSH_CONFIG', None)

    def tearDown(self):
        from pysh.core.config_loader import ConfigLoader
        from pysh.logger import Logger

        self._env.stop()
        ConfigLoader().reset()
        Logger.shutdown()
        super().tearDown()

    def test_single_command(self):
        """-c runs one line and returns its status."""
        from pysh.main import main

        self.assertEqual(main(['-c', 'echo hi > out.txt']), 0)
        self.assertEqual(self.read('out.txt'), "hi\n")

    def test_single_command_exit(self):
        """exit inside -c sets the process code."""
        from pysh.main import main

        self.assertEqual(main(['-c', 'exit 4']), 4)

    def test_single_command_not_found(self):
        """-c with an unknown program returns 127."""
        from pysh.main import main

        with FdCapture(1) as cap:
            self.assertEqual(main(['-c', 'no-such-cmd-xyz']), 127)
        self.assertEqual(cap.read(), "no-such-cmd-xyz: command not found\n")

    def test_single_command_fork_failure(self):
        """A failed fork under -c is reported with a status, not raised."""
        import errno
        from pysh.main import main

        fail = OSError(errno.EAGAIN, "Resource temporarily unavailable")
        with mock.patch('os.fork', side_effect=fail), \
                mock.patch('sys.stderr', new_callable=io.StringIO) as err:
            status = main(['-c', 'true'])

        self.assertEqual(status, 1)
        self.assertIn("pysh: fork failed for true", err.getvalue())

    def test_negative_history_size(self):
        """An invalid history_size is a config error, not a crash."""
        from pysh.main import main

        self.write('cfg.json', '{"shell": {"history_size": -5}}')

        with mock.patch('sys.stderr', new_callable=io.StringIO) as err:
            self.assertEqual(main(['--config', 'cfg.json', '-c', 'exit 0']), 2)
        self.assertIn("history_size", err.getvalue())

    def test_bad_arguments(self):
        """Unknown options and missing values are usage errors."""
        from pysh.main import main

        for argv in (['--bogus'], ['-c'], ['--config']):
            with mock.patch('sys.stderr', new_callable=io.StringIO) as err:
                self.assertEqual(main(argv), 2, argv)
            self.assertIn("usage:", err.getvalue())

    def test_missing_config(self):
        """A named config file that does not exist is fatal."""
        from pysh.main import main

        with mock.patch('sys.stderr', new_callable=io.StringIO) as err:
            self.assertEqual(main(['--config', 'missing.json', '-c', 'exit 0']), 2)
        self.assertIn("missing.json", err.getvalue())

    def test_config_file(self):
        """Limits from the config file apply to the shell."""
        from pysh.main import main

        self.write('cfg.json', '{"shell": {"max_tokens": 2}}')

        with mock.patch('sys.stderr', new_callable=io.StringIO) as err:
            status = main(['--config', 'cfg.json', '-c', 'echo a b'])

        self.assertEqual(status, 2)
        self.assertIn("too many", err.getvalue())

    def test_bad_log_level(self):
        """An unknown log level in the config is fatal."""
        from pysh.main import main

        self.write('cfg.json', '{"logging": {"level": "LOUD"}}')

        with mock.patch('sys.stderr', new_callable=io.StringIO):
            self.assertEqual(main(['--config', 'cfg.json', '-c', 'exit 0']), 2)

    def test_log_file(self):
        """Logging configuration is honoured."""
        from pysh.main import main

        self.write('cfg.json', '{"logging": {"level": "DEBUG", "log_file": "pysh.log"}}')

        main(['--config', 'cfg.json', '-c', 'echo hi > out.txt'])

        log = self.read('pysh.log')
        self.assertIn("redirect: redirected fd 1 to out.txt", log)
        self.assertIn("shell: configuration loaded (path=", log)


def run_tests():
    """Run all tests."""
    loader = unittest.TestLoader()
    suite = loader.loadTestsFromModule(sys.modules[__name__])

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return 0 if result.wasSuccessful() else 1


if __name__ == '__main__':
    sys.exit(run_tests())
