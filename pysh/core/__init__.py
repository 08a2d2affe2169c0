"""
pysh Core Module

Interpreter-wide services:
- Configuration Loader
"""

from .config_loader import (
    ConfigLoader,
    Config,
    ShellConfig,
    LoggingConfig,
    TerminalConfig,
    get_config,
)

__all__ = [
    'ConfigLoader',
    'Config',
    'ShellConfig',
    'LoggingConfig',
    'TerminalConfig',
    'get_config',
]
