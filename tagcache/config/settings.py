"""Configuration management using Pydantic Settings.

This module provides type-safe configuration with automatic environment
variable loading and validation.

The configuration is organized into logical groups:
- CacheConfig: Location of the cache file, TTL and write policy
- LoggingConfig: Logging levels and log file location
"""

import os
from pathlib import Path
import sys
from typing import Any

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_app_data_dir() -> Path:
    """Return the per-user application data directory for this platform."""
    if sys.platform == "win32":
        root = os.environ.get("LOCALAPPDATA") or Path.home() / "AppData" / "Local"
    elif sys.platform == "darwin":
        root = Path.home() / "Library" / "Application Support"
    else:
        root = os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share"
    return Path(root)


class CacheConfig(BaseModel):
    """Lookup cache location and expiry settings."""

    base_path: Path | None = None  # None -> <app-data>/<app_name>
    app_name: str = "MyriadMusicTagger"
    db_filename: str = "music_cache.sqlite"
    ttl_days: int = 30  # <= 0 disables expiry
    store_empty_fingerprint_results: bool = False
    busy_timeout_ms: int = 30000
    echo: bool = False

    def resolve_base_path(self) -> Path:
        """Directory holding the cache file."""
        if self.base_path is not None:
            return Path(self.base_path).expanduser()
        return default_app_data_dir() / self.app_name


class LoggingConfig(BaseModel):
    """Logging configuration for console and file output."""

    console_level: str = "INFO"
    file_level: str = "DEBUG"
    log_file: Path = Path("logs/tagcache.log")
    real_time_debug: bool = True


class Settings(BaseSettings):
    """Main application settings with environment variable support.

    Environment variables can be set using flat naming or nested naming:
    - Flat: CACHE_TTL_DAYS, CACHE_BASE_PATH, CONSOLE_LOG_LEVEL
    - Nested: CACHE__TTL_DAYS, LOGGING__CONSOLE_LEVEL

    The .env file is automatically loaded for development convenience.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    cache: CacheConfig = CacheConfig()
    logging: LoggingConfig = LoggingConfig()

    @model_validator(mode="before")
    @classmethod
    def transform_flat_env_vars(cls, data: Any) -> Any:
        """Transform flat environment variables to nested structure.

        Maps flat env vars (CACHE_TTL_DAYS) onto the nested structure
        expected by the models (cache.ttl_days).
        """
        if not isinstance(data, dict):
            return data

        transformed: dict[str, dict[str, Any]] = {}

        cache_mapping = {
            "cache_base_path": "base_path",
            "cache_app_name": "app_name",
            "cache_db_filename": "db_filename",
            "cache_ttl_days": "ttl_days",
            "cache_store_empty_fingerprint_results": "store_empty_fingerprint_results",
            "cache_busy_timeout_ms": "busy_timeout_ms",
            "cache_echo": "echo",
        }
        log_mapping = {
            "console_log_level": "console_level",
            "file_log_level": "file_level",
            "log_file": "log_file",
            "log_real_time_debug": "real_time_debug",
        }

        # Flat names are not declared fields, so the env source never passes them in
        for env_key in (*cache_mapping, *log_mapping):
            env_value = os.environ.get(env_key.upper())
            if env_value is not None and env_key not in data:
                data[env_key] = env_value

        for env_key, field_key in cache_mapping.items():
            if env_key in data:
                transformed.setdefault("cache", {})[field_key] = data.pop(env_key)

        for env_key, field_key in log_mapping.items():
            if env_key in data:
                transformed.setdefault("logging", {})[field_key] = data.pop(env_key)

        for section, values in transformed.items():
            existing = data.get(section)
            if isinstance(existing, dict):
                values = {**existing, **values}
            data[section] = values

        return data


# Singleton instance for application use
settings = Settings()


# =============================================================================
# FLAT KEY ACCESS
# =============================================================================

_LEGACY_KEY_MAP = {
    "CACHE_BASE_PATH": lambda: settings.cache.resolve_base_path(),
    "CACHE_DB_FILENAME": lambda: settings.cache.db_filename,
    "CACHE_TTL_DAYS": lambda: settings.cache.ttl_days,
    "CACHE_STORE_EMPTY_FINGERPRINT_RESULTS": lambda: settings.cache.store_empty_fingerprint_results,
    "CACHE_BUSY_TIMEOUT_MS": lambda: settings.cache.busy_timeout_ms,
    "CONSOLE_LOG_LEVEL": lambda: settings.logging.console_level,
    "FILE_LOG_LEVEL": lambda: settings.logging.file_level,
    "LOG_FILE": lambda: settings.logging.log_file,
    "LOG_REAL_TIME_DEBUG": lambda: settings.logging.real_time_debug,
}


def get_config(key: str, default=None):
    """Get configuration value by flat key with optional default.

    Args:
        key: Configuration key to retrieve
        default: Default value if key not found

    Returns:
        Configuration value or default

    Example:
        >>> ttl = get_config("CACHE_TTL_DAYS", 30)
    """
    if key in _LEGACY_KEY_MAP:
        return _LEGACY_KEY_MAP[key]()

    return default
