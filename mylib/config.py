"""
Configuration management using pydantic-settings.
Loads from config.yaml, .env, and environment variables.
"""

from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file at module import
load_dotenv()


class OpenLibrarySettings(BaseSettings):
    """OpenLibrary API settings."""

    model_config = SettingsConfigDict(
        env_prefix="OPENLIBRARY_",
        extra="ignore",
    )

    base_url: str = Field(default="https://openlibrary.org", description="OpenLibrary API base URL")
    covers_base_url: str = Field(
        default="https://covers.openlibrary.org",
        description="Base URL used to build cover image links",
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    user_agent: str = Field(
        default="mylib/1.0 (+https://github.com/mylib/mylib)",
        description="User-Agent sent with every request",
    )


class CacheSettings(BaseSettings):
    """In-process TTL cache settings (shared by the book and search caches)."""

    model_config = SettingsConfigDict(
        env_prefix="CACHE_",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Enable caching globally")
    ttl_ms: int = Field(default=3_600_000, ge=0, description="Entry time-to-live in milliseconds (60 minutes)")
    cleanup_interval_ms: int = Field(
        default=600_000,
        gt=0,
        description="Background sweep period in milliseconds (10 minutes)",
    )
    share_book_cache: bool = Field(
        default=False,
        description="Resolve search hits through the book cache instead of the client",
    )

    @property
    def ttl_seconds(self) -> float:
        return self.ttl_ms / 1000

    @property
    def cleanup_interval_seconds(self) -> float:
        return self.cleanup_interval_ms / 1000


class LoggingSettings(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        extra="ignore",
    )

    level: str = Field(default="warning", description="Console log level")
    file_path: Path | None = Field(default=None, description="Optional log file")
    use_rich: bool = Field(default=True, description="Use Rich for console logging")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    openlibrary: OpenLibrarySettings = Field(default_factory=OpenLibrarySettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    debug: bool = Field(default=False)

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Settings":
        """Load settings from config.yaml and environment."""
        config_data: dict[str, Any] = {}

        if config_path is None:
            config_path = Path("config.yaml")

        if config_path.exists():
            with open(config_path, encoding="utf-8") as f:
                yaml_content: Any = yaml.safe_load(f)
                yaml_config: dict[str, Any] = yaml_content or {}

            # Map yaml structure to settings
            if "openlibrary" in yaml_config:
                config_data["openlibrary"] = OpenLibrarySettings(**yaml_config["openlibrary"])  # type: ignore
            if "cache" in yaml_config:
                config_data["cache"] = CacheSettings(**yaml_config["cache"])  # type: ignore
            if "logging" in yaml_config:
                config_data["logging"] = LoggingSettings(**yaml_config["logging"])  # type: ignore
            if "debug" in yaml_config:
                config_data["debug"] = yaml_config["debug"]

        return cls(**config_data)  # type: ignore


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Path | None = None) -> Settings:
    """Reload settings from config."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
