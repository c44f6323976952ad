"""
assetfs Configuration Loader

Configuration for the generator:
- JSON configuration file loading
- Environment variable defaults (``ASSETFS_*``)
- Default value handling
- Dotted-key access and runtime overrides
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from assetfs.exceptions import ConfigValidationError
from assetfs.logger import LogLevel


MAX_FILE_SIZE = 10 << 20  # 10 MiB

OUTPUT_FORMATS = ('python', 'json')

ENV_OUTPUT = 'ASSETFS_OUTPUT'
ENV_DEV_OUTPUT = 'ASSETFS_DEV_OUTPUT'
ENV_LOG_LEVEL = 'ASSETFS_LOG_LEVEL'


@dataclass
class BuilderConfig:
    """Tree walk settings."""
    max_file_size: int = MAX_FILE_SIZE


@dataclass
class OutputConfig:
    """Generated output settings."""
    output: str = ""
    dev_output: str = ""
    format: str = "python"


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    log_file: str = ""
    use_colors: bool = True


@dataclass
class Config:
    """
    Main configuration container.

    Holds all settings for one generator run.
    """
    builder: BuilderConfig = field(default_factory=BuilderConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """
    Configuration loader.

    Settings are layered: defaults, then an optional JSON file, then
    ``ASSETFS_*`` environment variables; the CLI applies its flags last
    through ``set``.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('assetfs.json')
        >>> config.builder.max_file_size
        10485760
    """

    def __init__(self) -> None:
        self._config = Config()

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigValidationError: If the file cannot be loaded or parsed
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigValidationError(
                f"Configuration file not found: {config_path}",
                path=config_path
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(
                f"Invalid JSON in configuration file: {e}",
                path=config_path
            ) from e
        except OSError as e:
            raise ConfigValidationError(
                f"Cannot read configuration file: {e}",
                path=config_path
            ) from e

        if not isinstance(data, dict):
            raise ConfigValidationError(
                "Configuration file must contain an object",
                path=config_path
            )

        self._config = self._parse_config(data)
        self.validate()
        return self._config

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into Config object."""
        config = Config()

        builder_data = self._section(data, 'builder')
        config.builder = BuilderConfig(
            max_file_size=builder_data.get('max_file_size', config.builder.max_file_size),
        )

        out_data = self._section(data, 'output')
        config.output = OutputConfig(
            output=out_data.get('output', config.output.output),
            dev_output=out_data.get('dev_output', config.output.dev_output),
            format=out_data.get('format', config.output.format),
        )

        log_data = self._section(data, 'logging')
        config.logging = LoggingConfig(
            level=log_data.get('level', config.logging.level),
            log_file=log_data.get('log_file', config.logging.log_file),
            use_colors=log_data.get('use_colors', config.logging.use_colors),
        )

        return config

    @staticmethod
    def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
        """A top-level section, ``{}`` when absent."""
        section = data.get(name, {})
        if not isinstance(section, dict):
            raise ConfigValidationError(
                f"Configuration section '{name}' must be an object, "
                f"got {type(section).__name__}"
            )
        return section

    def apply_environment(self, environ: Optional[Mapping[str, str]] = None) -> Config:
        """Override settings from ``ASSETFS_*`` environment variables."""
        env = os.environ if environ is None else environ

        if env.get(ENV_OUTPUT):
            self._config.output.output = env[ENV_OUTPUT]
        if env.get(ENV_DEV_OUTPUT):
            self._config.output.dev_output = env[ENV_DEV_OUTPUT]
        if env.get(ENV_LOG_LEVEL):
            self._config.logging.level = env[ENV_LOG_LEVEL]

        return self._config

    def validate(self) -> None:
        """
        Check the current settings.

        Raises:
            ConfigValidationError: On the first invalid setting
        """
        size = self._config.builder.max_file_size
        if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
            raise ConfigValidationError(
                f"builder.max_file_size must be a positive integer, got {size!r}"
            )
        if self._config.output.format not in OUTPUT_FORMATS:
            raise ConfigValidationError(
                f"output.format must be one of {', '.join(OUTPUT_FORMATS)}, "
                f"got {self._config.output.format!r}"
            )
        for key in ('output.output', 'output.dev_output', 'logging.log_file', 'logging.level'):
            value = self.get(key)
            if not isinstance(value, str):
                raise ConfigValidationError(f"{key} must be a string, got {value!r}")
        try:
            LogLevel.from_name(self._config.logging.level)
        except ValueError as e:
            raise ConfigValidationError(f"logging.level: {e}") from e
        if not isinstance(self._config.logging.use_colors, bool):
            raise ConfigValidationError(
                f"logging.use_colors must be true or false, "
                f"got {self._config.logging.use_colors!r}"
            )

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'builder.max_file_size')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        parts = key.split('.')
        obj: Any = self._config

        for part in parts:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default

        return obj

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value at runtime.

        Args:
            key: Dot-notation key (e.g., 'output.format')
            value: Value to set
        """
        parts = key.split('.')
        obj: Any = self._config

        for part in parts[:-1]:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                raise ConfigValidationError(f"Invalid configuration key: {key}")

        final_key = parts[-1]
        if hasattr(obj, final_key):
            setattr(obj, final_key, value)
        else:
            raise ConfigValidationError(f"Invalid configuration key: {key}")

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        def dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, '__dataclass_fields__'):
                return {
                    k: dataclass_to_dict(v)
                    for k, v in obj.__dict__.items()
                }
            return obj

        return dataclass_to_dict(self._config)
