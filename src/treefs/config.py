"""Configuration management for treefs."""

import logging
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Set by get_settings() so the YAML loader knows which file to read
_config_file: str | None = None


def _default_config_paths() -> list[Path]:
    return [
        Path("treefs.yaml"),
        Path("treefs.yml"),
        Path.home() / ".config" / "treefs" / "config.yaml",
        Path.home() / ".config" / "treefs" / "config.yml",
    ]


def _load_yaml_config(config_file: str | None = None) -> dict[str, Any]:
    """Load YAML config file if it exists.

    Args:
        config_file: Explicit config path; must exist when given

    Returns:
        Parsed config mapping (empty if no file was found)

    Raises:
        FileNotFoundError: If an explicit config file does not exist
    """
    if config_file:
        path = Path(config_file).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        logger.debug(f"Loading config from {path}")
        with open(path) as f:
            return yaml.safe_load(f) or {}

    for path in _default_config_paths():
        if path.exists():
            logger.debug(f"Loading config from {path}")
            with open(path) as f:
                return yaml.safe_load(f) or {}

    return {}


class Settings(BaseSettings):
    """Application settings loaded from YAML + environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TREEFS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shell
    prompt: str = "treefs> "
    echo_commands: bool = False
    stop_on_error: bool = False

    # Filesystem behaviour
    remove_policy: Literal["reposition", "reject"] = "reposition"
    tree_max_depth: int | None = Field(default=None, ge=0)

    # Logging
    log_level: str = "WARNING"
    log_show_time: bool = False

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Accept log level names in any case."""
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @model_validator(mode="before")
    @classmethod
    def load_yaml_config(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Load YAML config and merge with env vars.

        Priority: Environment Variables > YAML Config > Defaults
        """
        yaml_config = _load_yaml_config(_config_file)

        # Merge YAML config into values only if not already set (env vars take precedence)
        for key, val in yaml_config.items():
            if val is not None and key not in values:
                values[key] = val

        return values

    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


settings: Settings | None = None


def get_settings(config_file: str | None = None) -> Settings:
    """Get the current settings instance.

    Args:
        config_file: Path to a YAML config file; when given, settings are
            reloaded from it instead of the default locations

    Raises:
        FileNotFoundError: If config_file does not exist
    """
    global settings
    if settings is None or config_file:
        return reload_settings(config_file)
    return settings


def reload_settings(config_file: str | None = None) -> Settings:
    """Reload settings (useful after environment changes)."""
    global settings, _config_file
    _config_file = config_file or os.environ.get("TREEFS_CONFIG") or None
    settings = Settings()
    return settings
