"""
Tests for configuration management module.

Tests cover:
- Default settings initialization
- Custom field overrides
- Settings loading from YAML
- Environment variable overrides
- Settings reload functionality
"""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from mylib.config import (
    CacheSettings,
    LoggingSettings,
    OpenLibrarySettings,
    Settings,
    get_settings,
    reload_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host environment variables out of the settings under test."""
    for name in [
        "OPENLIBRARY_BASE_URL",
        "OPENLIBRARY_COVERS_BASE_URL",
        "OPENLIBRARY_TIMEOUT",
        "OPENLIBRARY_USER_AGENT",
        "CACHE_ENABLED",
        "CACHE_TTL_MS",
        "CACHE_CLEANUP_INTERVAL_MS",
        "CACHE_SHARE_BOOK_CACHE",
        "LOG_LEVEL",
        "LOG_FILE_PATH",
        "LOG_USE_RICH",
        "DEBUG",
    ]:
        monkeypatch.delenv(name, raising=False)


class TestOpenLibrarySettings:
    """Test OpenLibrarySettings class."""

    def test_default_values(self):
        settings = OpenLibrarySettings()
        assert settings.base_url == "https://openlibrary.org"
        assert settings.covers_base_url == "https://covers.openlibrary.org"
        assert settings.timeout == 30.0
        assert settings.user_agent

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("OPENLIBRARY_BASE_URL", "http://localhost:8080")
        monkeypatch.setenv("OPENLIBRARY_TIMEOUT", "5")

        settings = OpenLibrarySettings()
        assert settings.base_url == "http://localhost:8080"
        assert settings.timeout == 5.0


class TestCacheSettings:
    """Test CacheSettings class."""

    def test_default_values(self):
        settings = CacheSettings()
        assert settings.enabled is True
        assert settings.ttl_ms == 3_600_000
        assert settings.cleanup_interval_ms == 600_000
        assert settings.share_book_cache is False

    def test_seconds_properties(self):
        settings = CacheSettings(ttl_ms=90_000, cleanup_interval_ms=1_500)
        assert settings.ttl_seconds == 90.0
        assert settings.cleanup_interval_seconds == 1.5

    def test_default_seconds(self):
        settings = CacheSettings()
        assert settings.ttl_seconds == 3600
        assert settings.cleanup_interval_seconds == 600

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CACHE_TTL_MS", "1000")
        monkeypatch.setenv("CACHE_SHARE_BOOK_CACHE", "true")

        settings = CacheSettings()
        assert settings.ttl_ms == 1000
        assert settings.share_book_cache is True

    def test_zero_interval_rejected(self):
        with pytest.raises(ValidationError):
            CacheSettings(cleanup_interval_ms=0)

    def test_negative_ttl_rejected(self):
        with pytest.raises(ValidationError):
            CacheSettings(ttl_ms=-1)


class TestLoggingSettings:
    """Test LoggingSettings class."""

    def test_default_values(self):
        settings = LoggingSettings()
        assert settings.level == "warning"
        assert settings.file_path is None
        assert settings.use_rich is True


class TestSettingsLoad:
    """Test loading settings from YAML."""

    def test_load_without_file(self, tmp_path: Path):
        settings = Settings.load(tmp_path / "missing.yaml")
        assert settings.openlibrary.base_url == "https://openlibrary.org"
        assert settings.cache.ttl_ms == 3_600_000
        assert settings.debug is False

    def test_load_from_yaml(self, tmp_path: Path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            yaml.safe_dump(
                {
                    "openlibrary": {"base_url": "http://stub.local", "timeout": 2.5},
                    "cache": {"ttl_ms": 60_000, "share_book_cache": True},
                    "logging": {"level": "debug"},
                    "debug": True,
                }
            ),
            encoding="utf-8",
        )

        settings = Settings.load(config_path)

        assert settings.openlibrary.base_url == "http://stub.local"
        assert settings.openlibrary.timeout == 2.5
        assert settings.cache.ttl_seconds == 60.0
        assert settings.cache.share_book_cache is True
        assert settings.cache.cleanup_interval_ms == 600_000
        assert settings.logging.level == "debug"
        assert settings.debug is True

    def test_load_empty_yaml(self, tmp_path: Path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("", encoding="utf-8")

        settings = Settings.load(config_path)
        assert settings.cache.enabled is True


class TestGlobalSettings:
    """Test module-level accessors."""

    def test_reload_settings_replaces_global(self, tmp_path: Path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.safe_dump({"cache": {"enabled": False}}), encoding="utf-8")

        settings = reload_settings(config_path)

        assert settings.cache.enabled is False
        assert get_settings() is settings

        reload_settings(tmp_path / "missing.yaml")
        assert get_settings().cache.enabled is True
