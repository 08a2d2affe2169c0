"""
pysh - a small POSIX-style command interpreter

Reads a line, splits it into words with shell quoting rules, applies
I/O redirections and runs the command as a builtin or through
fork/exec.
"""

import logging

__version__ = "1.0.0"
__author__ = "YSNRFD"

logging.getLogger('pysh').addHandler(logging.NullHandler())

from .shell.shell import Shell
from .shell.tokenizer import tokenize

__all__ = [
    'Shell',
    'tokenize',
]
