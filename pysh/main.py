#!/usr/bin/env python3
"""
pysh - main entry point

Usage:
    pysh [--config PATH] [--raw] [-c LINE]

Startup sequence:
1. Load configuration
2. Initialize logging
3. Start the shell (or run a single line with -c)
4. Exit with the shell's status

Author: YSNRFD
Version: 1.0.0
"""

import sys
from typing import List, Optional

from pysh.core.config_loader import ConfigLoader
from pysh.exceptions import ConfigError
from pysh.logger import Logger, LogLevel, get_logger
from pysh.shell.shell import Shell


USAGE = "usage: pysh [--config PATH] [--raw] [-c LINE]"


def _parse_args(argv: List[str]) -> dict:
    """Parse the few command-line options pysh understands."""
    options: dict = {'config': None, 'raw': None, 'command': None}
    i = 0

    while i < len(argv):
        arg = argv[i]
        if arg == '--raw':
            options['raw'] = True
        elif arg in ('--config', '-c'):
            if i + 1 >= len(argv):
                raise ValueError(f"option {arg} requires an argument")
            options['config' if arg == '--config' else 'command'] = argv[i + 1]
            i += 1
        else:
            raise ValueError(f"unknown option: {arg}")
        i += 1

    return options


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for pysh.

    Returns:
        Process exit code
    """
    if argv is None:
        argv = sys.argv[1:]

    try:
        options = _parse_args(argv)
    except ValueError as e:
        print(f"pysh: {e}\n{USAGE}", file=sys.stderr)
        return 2

    loader = ConfigLoader()
    try:
        config = loader.load_default(options['config'])
    except ConfigError as e:
        print(f"pysh: {e.message}", file=sys.stderr)
        return 2

    try:
        level = LogLevel.from_name(config.logging.level)
    except ValueError as e:
        print(f"pysh: {e}", file=sys.stderr)
        return 2

    Logger.initialize(
        level=level,
        log_file=config.logging.log_file,
        console_output=config.logging.console_output
    )
    get_logger('shell').info("configuration loaded", context={'path': loader.path})

    shell = Shell(config)

    try:
        if options['command'] is not None:
            status = shell.execute_line(options['command'])
            return shell.exit_code if shell.exiting else status

        return shell.run(raw_mode=options['raw'])
    finally:
        Logger.shutdown()


if __name__ == '__main__':
    sys.exit(main())
