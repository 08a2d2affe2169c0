"""
pysh Shell Module

Provides the command-line interpreter:
- Tokenizing with quotes and escapes
- I/O redirection
- Built-in commands
- External command execution
- Raw-mode line editing
"""

from .tokenizer import tokenize, QuoteState
from .redirection import (
    RedirectionTarget,
    OpenMode,
    RedirectionSpec,
    Redirector,
    extract_redirections,
    apply_redirections,
    restore_redirections,
)
from .parser import CommandParser, CommandRequest
from .builtins import BuiltinCommands
from .executor import ProcessExecutor
from .path_utils import find_executable
from .terminal import RawMode, LineEditor
from .shell import Shell

__all__ = [
    'tokenize',
    'QuoteState',
    'RedirectionTarget',
    'OpenMode',
    'RedirectionSpec',
    'Redirector',
    'extract_redirections',
    'apply_redirections',
    'restore_redirections',
    'CommandParser',
    'CommandRequest',
    'BuiltinCommands',
    'ProcessExecutor',
    'find_executable',
    'RawMode',
    'LineEditor',
    'Shell',
]
