"""
Configuration system using Pydantic for type-safe settings management.

Settings come from three places, later ones winning:
1. Field defaults
2. ``settings.yaml`` inside the configuration directory (optional)
3. ``REPO_BROKER_*`` environment variables
Explicit keyword overrides (CLI options) beat all of them.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from repo_broker.exceptions import ConfigurationError

ENV_PREFIX = "REPO_BROKER_"
SETTINGS_FILE = "settings.yaml"


def default_config_dir() -> Path:
    """Return the per-user configuration directory (``~/.repo-broker``)."""
    return Path.home() / ".repo-broker"


class BrokerSettings(BaseSettings):
    """Main repo-broker settings."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
    )

    config_dir: Path = Field(default_factory=default_config_dir, description="Directory holding the credential file")
    config_file: str = Field(default="config.json", description="Credential file name inside config_dir")
    keyring_service: str = Field(default="repo-broker", description="OS secret store service name")
    keyring_key_name: str = Field(default="encryption-key", description="OS secret store entry name")
    default_remote: str = Field(default="origin", description="Remote used by create-version")
    http_timeout: float = Field(default=30.0, gt=0, description="Provider API timeout in seconds")
    log_level: str = Field(default="WARNING", description="Minimum log level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def credential_path(self) -> Path:
        """Full path of the credential file."""
        return self.config_dir.expanduser() / self.config_file

    @classmethod
    def load(cls, config_dir: Path | str | None = None, **overrides: Any) -> BrokerSettings:
        """Load settings, merging ``settings.yaml`` under environment variables.

        Args:
            config_dir: Configuration directory override
            **overrides: Explicit field values (take precedence over everything)

        Returns:
            BrokerSettings instance

        Raises:
            ConfigurationError: If settings.yaml is unreadable or values are invalid
        """
        if config_dir is not None:
            overrides["config_dir"] = Path(config_dir)

        try:
            base = cls(**overrides)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e

        yaml_values = cls._read_yaml(base.config_dir.expanduser() / SETTINGS_FILE)
        if not yaml_values:
            return base

        # Environment variables beat the file, so drop file values the environment sets
        env_keys = {key.upper() for key in os.environ}
        merged = {
            key: value
            for key, value in yaml_values.items()
            if f"{ENV_PREFIX}{key}".upper() not in env_keys and key != "config_dir"
        }
        merged.update(overrides)

        try:
            return cls(**merged)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings in {SETTINGS_FILE}: {e}") from e

    @staticmethod
    def _read_yaml(path: Path) -> dict[str, Any]:
        """Read the optional settings file.

        Returns:
            Parsed mapping, empty when the file does not exist
        """
        if not path.exists():
            return {}

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read settings file: {path}") from e

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError("Settings must be a YAML object, not a list or scalar")
        return data
