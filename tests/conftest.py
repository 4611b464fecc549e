"""Shared fixtures for makr tests."""

from pathlib import Path

import pytest

from makr.config.settings import clear_settings_cache
from makr.storage import ConfigStore


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    """A fake home directory for path defaults."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def store(tmp_path: Path, home_dir: Path) -> ConfigStore:
    """A store backed by a config file in a temp directory."""
    return ConfigStore(tmp_path / "config" / "config.json", home=home_dir)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch):
    """Point MAKR_* settings at a temp directory for every test."""
    monkeypatch.setenv("MAKR_CONFIG_DIR", str(tmp_path / "makr-config"))
    monkeypatch.delenv("MAKR_GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("MAKR_LOG_LEVEL", raising=False)
    # Keep rich output on one line per message
    monkeypatch.setenv("COLUMNS", "200")
    clear_settings_cache()
    yield
    clear_settings_cache()
