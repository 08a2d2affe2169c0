"""
pysh Configuration Loader

Configuration management for the interpreter:
- JSON configuration file loading
- Default value handling
- Validation of section keys and limits
- Typed dataclass sections

Author: YSNRFD
Version: 1.0.0
"""

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional
import threading

from pysh.exceptions import ConfigError, ConfigValidationError


CONFIG_ENV_VAR = "PYSH_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"


@dataclass
class ShellConfig:
    """Read loop and parser limits."""
    prompt: str = "$ "
    max_input_length: int = 100
    max_tokens: int = 16
    max_token_length: int = 127
    history_size: int = 1000


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "WARNING"
    log_file: Optional[str] = None
    console_output: bool = False


@dataclass
class TerminalConfig:
    """Line editing settings."""
    raw_mode: bool = False


@dataclass
class Config:
    """
    Main configuration container.

    Holds all configuration settings for the interpreter.
    """
    shell: ShellConfig = field(default_factory=ShellConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    terminal: TerminalConfig = field(default_factory=TerminalConfig)


class ConfigLoader:
    """
    Configuration loader and manager.

    Handles loading configuration from JSON files and providing
    typed access to the loaded sections.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('config.json')
        >>> print(config.shell.prompt)
        $
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
                cls._instance._path = None
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigError: If the file cannot be read or parsed
            ConfigValidationError: If a section holds an unknown key
        """
        path = Path(config_path).expanduser()

        if not path.is_file():
            raise ConfigError(
                f"Configuration file not found: {config_path}",
                path=str(path)
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file: {e}",
                path=str(path)
            ) from e
        except OSError as e:
            raise ConfigError(
                f"Cannot read configuration file: {e}",
                path=str(path)
            ) from e

        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be an object", path=str(path))

        self._config = self._parse_config(data)
        self._path = str(path)
        return self._config

    def load_default(self, explicit_path: Optional[str] = None) -> Config:
        """
        Load the first available configuration.

        Order: explicit path, $PYSH_CONFIG, the packaged config.json.
        An explicit or environment path that does not exist is an error;
        the packaged file is optional.
        """
        if explicit_path:
            return self.load(explicit_path)

        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return self.load(env_path)

        if DEFAULT_CONFIG_PATH.is_file():
            return self.load(str(DEFAULT_CONFIG_PATH))

        self._config = Config()
        self._path = None
        return self._config

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into Config object."""
        config = Config()

        if 'shell' in data:
            shell_data = data['shell']
            self._check_keys('shell', shell_data, ShellConfig)
            config.shell = ShellConfig(
                prompt=shell_data.get('prompt', config.shell.prompt),
                max_input_length=shell_data.get('max_input_length', config.shell.max_input_length),
                max_tokens=shell_data.get('max_tokens', config.shell.max_tokens),
                max_token_length=shell_data.get('max_token_length', config.shell.max_token_length),
                history_size=shell_data.get('history_size', config.shell.history_size),
            )

        if 'logging' in data:
            log_data = data['logging']
            self._check_keys('logging', log_data, LoggingConfig)
            config.logging = LoggingConfig(
                level=log_data.get('level', config.logging.level),
                log_file=log_data.get('log_file', config.logging.log_file),
                console_output=log_data.get('console_output', config.logging.console_output),
            )

        if 'terminal' in data:
            term_data = data['terminal']
            self._check_keys('terminal', term_data, TerminalConfig)
            config.terminal = TerminalConfig(
                raw_mode=term_data.get('raw_mode', config.terminal.raw_mode),
            )

        for name in ('max_input_length', 'max_tokens', 'max_token_length'):
            value = getattr(config.shell, name)
            if not isinstance(value, int) or value < 1:
                raise ConfigValidationError(
                    f"shell.{name} must be a positive integer, got {value!r}",
                    key=f"shell.{name}"
                )

        history_size = config.shell.history_size
        if not isinstance(history_size, int) or history_size < 0:
            raise ConfigValidationError(
                f"shell.history_size must be a non-negative integer, got {history_size!r}",
                key="shell.history_size"
            )

        return config

    @staticmethod
    def _check_keys(section: str, data: Any, section_cls: type) -> None:
        """Reject unknown keys so typos do not pass silently."""
        if not isinstance(data, dict):
            raise ConfigValidationError(f"Section '{section}' must be an object", key=section)

        known = {f.name for f in fields(section_cls)}
        for key in data:
            if key not in known:
                raise ConfigValidationError(
                    f"Invalid configuration key: {section}.{key}",
                    key=f"{section}.{key}"
                )

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        return self._config

    @property
    def path(self) -> Optional[str]:
        """Path of the loaded configuration file, if any."""
        return self._path

    def reset(self) -> None:
        """Drop any loaded configuration and go back to defaults."""
        self._config = Config()
        self._path = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    loader = ConfigLoader()
    return loader.config
