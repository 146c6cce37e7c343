"""Configuration loader with Pydantic validation and environment variable interpolation."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables at module level
load_dotenv(find_dotenv(usecwd=True))

from caxfeed.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_PAIR,
    DEFAULT_TIMEOUT_SECONDS,
    LogLevel,
)

PAIR_PATTERN = re.compile(r"^[A-Za-z0-9]+-[A-Za-z0-9]+$")


def interpolate_env_vars(value: Any) -> Any:
    """
    Interpolate environment variables in string values.

    Supports formats:
    - ${VAR_NAME} - resolves to an empty string if not set
    - ${VAR_NAME:default} - optional with default value
    """
    if not isinstance(value, str):
        return value

    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)

        env_value = os.environ.get(var_name)

        if env_value is not None:
            return env_value
        elif default is not None:
            return default
        else:
            return ""

    return re.sub(pattern, replacer, value)


def process_config_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively process config dict to interpolate env vars."""
    result = {}
    for key, value in data.items():
        if isinstance(value, dict):
            result[key] = process_config_dict(value)
        elif isinstance(value, list):
            result[key] = [
                process_config_dict(item) if isinstance(item, dict) else interpolate_env_vars(item)
                for item in value
            ]
        else:
            result[key] = interpolate_env_vars(value)
    return result


# ============================================
# Pydantic Configuration Models
# ============================================


class EnvironmentConfig(BaseModel):
    """Environment and runtime settings."""

    log_level: LogLevel = LogLevel.INFO

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v


class ApiConfig(BaseModel):
    """CAX REST API settings."""

    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and strip the trailing slash."""
        if not re.match(r"^https?://\S+$", v):
            raise ValueError(f"base_url must be an http(s) URL, got: {v!r}")
        return v.rstrip("/")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_seconds must be positive, got: {v}")
        return v


class PollerConfig(BaseModel):
    """Quote polling settings."""

    pair: str = DEFAULT_PAIR
    interval_seconds: int = Field(default=DEFAULT_INTERVAL_SECONDS, ge=1)

    @field_validator("pair")
    @classmethod
    def validate_pair(cls, v: str) -> str:
        """Validate pair is in BASE-QUOTE format."""
        if not PAIR_PATTERN.match(v):
            raise ValueError(f"Pair must be in BASE-QUOTE format, got: {v!r}")
        return v.upper()


class AppConfig(BaseModel):
    """Root application configuration."""

    environment: EnvironmentConfig = Field(default_factory=EnvironmentConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    poller: PollerConfig = Field(default_factory=PollerConfig)


# ============================================
# Configuration Loader
# ============================================


class ConfigLoader:
    """Load and validate configuration from YAML files with env var interpolation."""

    def __init__(self, config_path: str | Path) -> None:
        """
        Initialize config loader.

        Args:
            config_path: Path to the YAML configuration file.
        """
        self.config_path = Path(config_path)
        self._config: AppConfig | None = None

    def load(self) -> AppConfig:
        """
        Load and validate configuration.

        Returns:
            Validated AppConfig instance.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            yaml.YAMLError: If YAML is invalid.
            pydantic.ValidationError: If config validation fails.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            raw_config = {}

        processed_config = process_config_dict(raw_config)

        self._config = AppConfig.model_validate(processed_config)

        return self._config

    @property
    def config(self) -> AppConfig:
        """Get loaded config, loading if necessary."""
        if self._config is None:
            return self.load()
        return self._config

    def reload(self) -> AppConfig:
        """Force reload configuration from disk."""
        self._config = None
        return self.load()


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to the YAML configuration file. ``None`` returns defaults.

    Returns:
        Validated AppConfig instance.
    """
    if config_path is None:
        return AppConfig()
    loader = ConfigLoader(config_path)
    return loader.load()


def load_config_with_overrides(
    config_path: str | Path | None = None,
    *,
    pair: str | None = None,
    interval_seconds: int | None = None,
    base_url: str | None = None,
    log_level: str | None = None,
) -> AppConfig:
    """
    Load configuration with CLI overrides.

    Overrides are re-validated, so an invalid pair or interval raises
    ``pydantic.ValidationError`` just as it would from the file.
    """
    config = load_config(config_path)

    updates: dict[str, Any] = {}

    poller_updates: dict[str, Any] = {}
    if pair is not None:
        poller_updates["pair"] = pair
    if interval_seconds is not None:
        poller_updates["interval_seconds"] = interval_seconds
    if poller_updates:
        updates["poller"] = PollerConfig.model_validate(
            {**config.poller.model_dump(), **poller_updates}
        )

    if base_url is not None:
        updates["api"] = ApiConfig.model_validate({**config.api.model_dump(), "base_url": base_url})

    if log_level is not None:
        updates["environment"] = EnvironmentConfig.model_validate(
            {**config.environment.model_dump(), "log_level": log_level}
        )

    if updates:
        return config.model_copy(update=updates)

    return config
