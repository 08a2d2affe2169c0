"""
Terminal Module

Raw-mode line editing for interactive sessions:
- RawMode: scoped guard that switches a tty to raw input and always
  restores the saved attributes on the way out
- LineEditor: reads one line byte by byte, with backspace, cursor
  movement and redraw

Author: YSNRFD
Version: 1.0.0
"""

import os
import termios
from typing import Callable, List, Optional


KEY_CTRL_C = 0x03
KEY_CTRL_D = 0x04
KEY_BACKSPACE_CTRL_H = 0x08
KEY_BACKSPACE_DEL = 0x7f
KEY_ESCAPE = 0x1b

CLEAR_LINE = "\x1b[2K\r"


class RawMode:
    """
    Put a terminal into raw input mode for the duration of a with-block.

    Echo, canonical input, signal keys and extended input processing are
    disabled, as are XON/XOFF and CR-to-NL translation. Reads return after
    a single byte. Output processing is left alone.

    Example:
        >>> with RawMode(sys.stdin.fileno()):
        ...     line = editor.read_line("$ ")
    """

    def __init__(self, fd: int):
        self._fd = fd
        self._saved: Optional[List] = None

    @property
    def active(self) -> bool:
        return self._saved is not None

    def __enter__(self) -> 'RawMode':
        self._saved = termios.tcgetattr(self._fd)

        raw = termios.tcgetattr(self._fd)
        raw[0] &= ~(termios.IXON | termios.ICRNL)
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
        raw[6][termios.VMIN] = 1
        raw[6][termios.VTIME] = 0

        try:
            termios.tcsetattr(self._fd, termios.TCSAFLUSH, raw)
        except termios.error:
            self._saved = None
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._saved is None:
            return
        saved, self._saved = self._saved, None
        termios.tcsetattr(self._fd, termios.TCSAFLUSH, saved)


def _is_visible_ascii(byte: int) -> bool:
    return 32 <= byte <= 126


class LineEditor:
    """
    Minimal line editor for raw mode.

    Keys:
        Enter                 finish the line
        Backspace             delete before the cursor
        Left / Right          move the cursor
        Home / End            jump to either end
        Ctrl-D (empty line)   end of input
        Ctrl-C                KeyboardInterrupt
    """

    def __init__(
        self,
        read_byte: Callable[[], Optional[int]],
        write: Callable[[str], None],
        max_length: int = 100
    ):
        """
        Args:
            read_byte: Returns the next input byte, or None at end of input
            write: Sends text to the terminal
            max_length: Longest line the editor will accept
        """
        self._read_byte = read_byte
        self._write = write
        self._max_length = max_length
        self._buffer: List[str] = []
        self._cursor = 0
        self._prompt = ""

    @classmethod
    def for_fds(cls, in_fd: int, out_fd: int, max_length: int = 100) -> 'LineEditor':
        """Build an editor reading and writing raw descriptors."""
        def read_byte() -> Optional[int]:
            data = os.read(in_fd, 1)
            return data[0] if data else None

        def write(text: str) -> None:
            os.write(out_fd, text.encode())

        return cls(read_byte, write, max_length=max_length)

    def _redraw(self) -> None:
        column = len(self._prompt) + 1 + self._cursor
        self._write(f"{CLEAR_LINE}{self._prompt}{''.join(self._buffer)}\x1b[{column}G")

    def _handle_escape(self) -> None:
        first = self._read_byte()
        second = self._read_byte()
        if first != ord('[') or second is None:
            return

        key = chr(second)
        if key == 'D' and self._cursor > 0:
            self._cursor -= 1
        elif key == 'C' and self._cursor < len(self._buffer):
            self._cursor += 1
        elif key == 'H':
            self._cursor = 0
        elif key == 'F':
            self._cursor = len(self._buffer)
        else:
            return
        self._redraw()

    def read_line(self, prompt: str = "") -> Optional[str]:
        """
        Read one line.

        Returns:
            The line without its terminator, or None at end of input
        """
        self._prompt = prompt
        self._buffer = []
        self._cursor = 0
        self._redraw()

        while True:
            byte = self._read_byte()

            if byte is None:
                if not self._buffer:
                    return None
                break

            if byte in (ord('\r'), ord('\n')):
                break

            if byte == KEY_CTRL_C:
                self._write("^C\r\n")
                raise KeyboardInterrupt

            if byte == KEY_CTRL_D:
                if not self._buffer:
                    return None
                continue

            if byte == KEY_ESCAPE:
                self._handle_escape()
                continue

            if byte in (KEY_BACKSPACE_CTRL_H, KEY_BACKSPACE_DEL):
                if self._cursor > 0:
                    del self._buffer[self._cursor - 1]
                    self._cursor -= 1
                    self._redraw()
                continue

            if _is_visible_ascii(byte) and len(self._buffer) < self._max_length:
                self._buffer.insert(self._cursor, chr(byte))
                self._cursor += 1
                self._redraw()

        self._write("\r\n")
        return ''.join(self._buffer)
