"""Tests for environment settings and logging setup."""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError
from rich.logging import RichHandler

from makr.config import Settings, get_logger, get_settings, setup_logging


class TestSettings:
    """Tests for MAKR_* settings."""

    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("MAKR_CONFIG_DIR")
        settings = Settings(_env_file=None)

        assert settings.config_path == Path.home() / ".config" / "makr" / "config.json"
        assert settings.log_level == "WARNING"
        assert settings.http_timeout == 30.0
        assert settings.github_token is None

    def test_config_dir_from_env(self, tmp_path: Path) -> None:
        assert get_settings().config_path == tmp_path / "makr-config" / "config.json"

    def test_config_dir_expands_tilde(self, monkeypatch) -> None:
        monkeypatch.setenv("MAKR_CONFIG_DIR", "~/makr-test")
        assert Settings(_env_file=None).config_dir == Path.home() / "makr-test"

    def test_log_level_is_uppercased(self, monkeypatch) -> None:
        monkeypatch.setenv("MAKR_LOG_LEVEL", "debug")
        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_invalid_log_level(self, monkeypatch) -> None:
        monkeypatch.setenv("MAKR_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()


class TestLogging:
    """Tests for setup_logging and get_logger."""

    def test_single_rich_handler(self) -> None:
        setup_logging("INFO")
        logger = setup_logging("DEBUG")

        assert logger.name == "makr"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)

    def test_get_logger_namespaces(self) -> None:
        assert get_logger("storage").name == "makr.storage"
        assert get_logger("makr.git").name == "makr.git"
        assert get_logger("makr").name == "makr"
