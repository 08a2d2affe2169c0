"""
PATH lookup for external commands.

Author: YSNRFD
Version: 1.0.0
"""

import os
from typing import Optional


def _is_executable(candidate: str) -> bool:
    return os.path.isfile(candidate) and os.access(candidate, os.X_OK)


def find_executable(name: str, path: Optional[str] = None) -> Optional[str]:
    """
    Resolve a program name the way the shell does.

    Directories from PATH are searched in listed order and the first
    executable regular file wins. A name containing '/' is not searched
    for; it is checked as given.

    Args:
        name: Program name, e.g. 'ls'
        path: Colon-separated search path; defaults to $PATH

    Returns:
        Absolute path of the executable, or None if not found
    """
    if not name:
        return None

    if '/' in name:
        return os.path.abspath(name) if _is_executable(name) else None

    if path is None:
        path = os.environ.get('PATH')
    if not path:
        return None

    for directory in path.split(':'):
        if not directory:
            continue
        candidate = os.path.join(directory, name)
        if _is_executable(candidate):
            return os.path.abspath(candidate)

    return None
