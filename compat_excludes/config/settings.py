"""Configuration for compat-excludes.

Settings are loaded from ``config/defaults.yaml`` and validated at startup.
The exclusion directory can be overridden with ``COMPAT_EXCLUDES_DIR``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from compat_excludes.loader import DEFAULT_PATTERN, ErrorPolicy
from compat_excludes.utils.logging import LEVELS
from compat_excludes.utils.result import ConfigError, Err, Ok, Result

ENV_EXCLUDES_DIR = "COMPAT_EXCLUDES_DIR"
LOG_FORMATS = ("json", "text")


@dataclass
class ExcludesConfig:
    """Where exclusion files live and how they are read."""

    directory: Path = Path("./excludes")
    pattern: str = DEFAULT_PATTERN
    on_parse_error: str = ErrorPolicy.ABORT.value


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "info"
    format: str = "json"


@dataclass
class ReportConfig:
    """Summary report settings."""

    templates_dir: Optional[Path] = None
    title: str = "Excluded tests"


@dataclass
class ExcludesSettings:
    """Complete configuration."""

    excludes: ExcludesConfig = field(default_factory=ExcludesConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> Result["ExcludesSettings", ConfigError]:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Result with loaded config or error
        """
        path = Path(path)

        if not path.exists():
            return Err(ConfigError(
                field="path",
                message=f"Configuration file not found: {path}",
            ))

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            return Err(ConfigError(
                field="yaml",
                message=f"Failed to parse YAML: {e}",
            ))
        except OSError as e:
            return Err(ConfigError(
                field="file",
                message=f"Failed to read config file: {e}",
            ))

        if not isinstance(data, dict):
            return Err(ConfigError(
                field="yaml",
                message="Top level of the configuration must be a mapping",
            ))

        return cls.from_dict(data, base_dir=path.parent)

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        base_dir: Optional[Path] = None,
    ) -> Result["ExcludesSettings", ConfigError]:
        """
        Create configuration from a dictionary.

        Relative paths are resolved against ``base_dir`` when given.
        """
        def resolve(value: Any) -> Path:
            path = Path(value)
            if base_dir is not None and not path.is_absolute():
                return base_dir / path
            return path

        try:
            excludes_data = data.get("excludes") or {}
            excludes = ExcludesConfig(
                directory=resolve(excludes_data.get("directory", "./excludes")),
                pattern=str(excludes_data.get("pattern", DEFAULT_PATTERN)),
                on_parse_error=str(
                    excludes_data.get("on_parse_error", ErrorPolicy.ABORT.value)
                ).lower(),
            )

            logging_data = data.get("logging") or {}
            logging_config = LoggingConfig(
                level=str(logging_data.get("level", "info")).lower(),
                format=str(logging_data.get("format", "json")).lower(),
            )

            report_data = data.get("report") or {}
            templates_dir = report_data.get("templates_dir")
            report = ReportConfig(
                templates_dir=resolve(templates_dir) if templates_dir else None,
                title=str(report_data.get("title", "Excluded tests")),
            )
        except (AttributeError, TypeError) as e:
            return Err(ConfigError(
                field="unknown",
                message=f"Failed to parse configuration: {e}",
            ))

        return Ok(cls(excludes=excludes, logging=logging_config, report=report))

    def validate(self) -> Result[None, ConfigError]:
        """Validate configuration values."""
        policies = [policy.value for policy in ErrorPolicy]
        if self.excludes.on_parse_error not in policies:
            return Err(ConfigError(
                field="excludes.on_parse_error",
                message=f"Must be one of {policies}, got '{self.excludes.on_parse_error}'",
            ))

        if not self.excludes.pattern.strip():
            return Err(ConfigError(
                field="excludes.pattern",
                message="Must not be empty",
            ))

        if self.logging.level not in LEVELS:
            return Err(ConfigError(
                field="logging.level",
                message=f"Must be one of {sorted(LEVELS)}, got '{self.logging.level}'",
            ))

        if self.logging.format not in LOG_FORMATS:
            return Err(ConfigError(
                field="logging.format",
                message=f"Must be one of {list(LOG_FORMATS)}, got '{self.logging.format}'",
            ))

        return Ok(None)

    def with_excludes_dir(self, directory: Path) -> "ExcludesSettings":
        """Return a copy pointing at another exclusion directory."""
        return replace(self, excludes=replace(self.excludes, directory=Path(directory)))


def load_config(config_dir: Optional[Path] = None) -> Result[ExcludesSettings, ConfigError]:
    """
    Load configuration from the standard location.

    Reads ``config/defaults.yaml`` when present, applies the
    ``COMPAT_EXCLUDES_DIR`` override, and validates the result.

    Args:
        config_dir: Configuration directory (defaults to ./config)

    Returns:
        Result with loaded config or error
    """
    config_dir = Path(config_dir or "./config")

    defaults_path = config_dir / "defaults.yaml"
    if defaults_path.exists():
        result = ExcludesSettings.from_yaml(defaults_path)
        if result.is_err():
            return result
        config = result.unwrap()
    else:
        config = ExcludesSettings()

    env_dir = get_env_excludes_dir()
    if env_dir:
        config = config.with_excludes_dir(Path(env_dir))

    validation_result = config.validate()
    if validation_result.is_err():
        return Err(validation_result.unwrap_err())

    return Ok(config)


def get_env_excludes_dir() -> Optional[str]:
    """Get the exclusion directory override from the environment."""
    return os.environ.get(ENV_EXCLUDES_DIR)
