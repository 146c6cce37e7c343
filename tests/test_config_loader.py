"""Tests for configuration loading and validation."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from caxfeed.config_loader import (
    AppConfig,
    ConfigLoader,
    PollerConfig,
    interpolate_env_vars,
    load_config,
    load_config_with_overrides,
    process_config_dict,
)
from caxfeed.constants import DEFAULT_BASE_URL, LogLevel


class TestEnvVarInterpolation:
    """Tests for environment variable interpolation."""

    def test_no_interpolation_needed(self) -> None:
        """Test that plain strings pass through unchanged."""
        assert interpolate_env_vars("hello") == "hello"
        assert interpolate_env_vars(123) == 123
        assert interpolate_env_vars(None) is None

    def test_simple_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEST_VAR", "test_value")
        assert interpolate_env_vars("${TEST_VAR}") == "test_value"

    def test_env_var_with_default(self) -> None:
        """Test ${VAR:default} interpolation with missing var."""
        os.environ.pop("MISSING_VAR", None)
        assert interpolate_env_vars("${MISSING_VAR:default_value}") == "default_value"

    def test_env_var_with_default_when_set(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SET_VAR", "actual_value")
        assert interpolate_env_vars("${SET_VAR:default_value}") == "actual_value"

    def test_default_containing_url(self) -> None:
        """Defaults may contain colons and slashes after the first separator."""
        os.environ.pop("CAXFEED_TEST_URL", None)
        result = interpolate_env_vars("${CAXFEED_TEST_URL:https://example.com/api}")
        assert result == "https://example.com/api"

    def test_missing_var_no_default(self) -> None:
        """Test ${VAR} with missing var returns empty string."""
        os.environ.pop("TOTALLY_MISSING", None)
        assert interpolate_env_vars("${TOTALLY_MISSING}") == ""


class TestProcessConfigDict:
    """Tests for recursive config dict processing."""

    def test_nested_dict(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NESTED_VAR", "nested_value")
        data = {"level1": {"level2": {"value": "${NESTED_VAR}"}}}
        result = process_config_dict(data)
        assert result["level1"]["level2"]["value"] == "nested_value"

    def test_list_processing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LIST_VAR", "list_value")
        data = {"items": ["static", "${LIST_VAR}"]}
        result = process_config_dict(data)
        assert result["items"] == ["static", "list_value"]


class TestConfigLoader:
    """Tests for ConfigLoader class."""

    def test_load_valid_config(self, tmp_path: Path) -> None:
        config_content = """
environment:
  log_level: debug

api:
  base_url: https://example.com/api/
  timeout_seconds: 2.5

poller:
  pair: ntn-usd
  interval_seconds: 10
"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(config_content)

        config = ConfigLoader(config_file).load()

        assert config.environment.log_level == LogLevel.DEBUG
        assert config.api.base_url == "https://example.com/api"
        assert config.api.timeout_seconds == 2.5
        assert config.poller.pair == "NTN-USD"
        assert config.poller.interval_seconds == 10

    def test_file_not_found(self) -> None:
        loader = ConfigLoader(Path("/nonexistent/path/config.yaml"))
        with pytest.raises(FileNotFoundError):
            loader.load()

    def test_empty_config_uses_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        config = load_config(config_file)

        assert config.api.base_url == DEFAULT_BASE_URL
        assert config.poller.pair == "ATN-USD"
        assert config.poller.interval_seconds == 5

    def test_no_path_uses_defaults(self) -> None:
        assert load_config(None) == AppConfig()

    def test_env_interpolated_base_url(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CAX_URL", "http://localhost:8080/api")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("api:\n  base_url: ${CAX_URL}")

        config = load_config(config_file)
        assert config.api.base_url == "http://localhost:8080/api"

    def test_reload_config(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("poller:\n  interval_seconds: 3")

        loader = ConfigLoader(config_file)
        assert loader.load().poller.interval_seconds == 3

        config_file.write_text("poller:\n  interval_seconds: 7")

        assert loader.reload().poller.interval_seconds == 7


class TestValidation:
    """Tests for field validation."""

    @pytest.mark.parametrize("interval", [0, -5])
    def test_interval_must_be_at_least_one(self, interval: int) -> None:
        with pytest.raises(ValidationError):
            PollerConfig(interval_seconds=interval)

    @pytest.mark.parametrize("pair", ["ATNUSD", "ATN/USD", "", "ATN-USD-X"])
    def test_bad_pair_format(self, pair: str) -> None:
        with pytest.raises(ValidationError):
            PollerConfig(pair=pair)

    def test_bad_base_url(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("api:\n  base_url: ftp://example.com")
        with pytest.raises(ValidationError):
            load_config(config_file)

    def test_non_positive_timeout(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("api:\n  timeout_seconds: 0")
        with pytest.raises(ValidationError):
            load_config(config_file)


class TestConfigWithOverrides:
    """Tests for CLI override functionality."""

    def test_pair_and_interval_override(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("poller:\n  pair: ATN-USD\n  interval_seconds: 5")

        config = load_config_with_overrides(config_file, pair="ntn-atn", interval_seconds=2)
        assert config.poller.pair == "NTN-ATN"
        assert config.poller.interval_seconds == 2

    def test_base_url_and_log_level_override(self) -> None:
        config = load_config_with_overrides(
            None, base_url="http://localhost:9000/", log_level="warning"
        )
        assert config.api.base_url == "http://localhost:9000"
        assert config.environment.log_level == LogLevel.WARNING

    def test_invalid_override_rejected(self) -> None:
        with pytest.raises(ValidationError):
            load_config_with_overrides(None, interval_seconds=0)

    def test_no_overrides_returns_loaded(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("poller:\n  pair: NTN-USD")

        config = load_config_with_overrides(config_file)
        assert config.poller.pair == "NTN-USD"
