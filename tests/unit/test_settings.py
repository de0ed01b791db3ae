"""Tests for configuration loading and the operation error decorator."""

from pathlib import Path
import sys

import pytest

from tagcache.config import (
    CacheConfig,
    Settings,
    get_config,
    resilient_operation,
    settings,
)
from tagcache.config.settings import default_app_data_dir


class TestCacheConfig:
    def test_defaults(self):
        config = CacheConfig()
        assert config.app_name == "MyriadMusicTagger"
        assert config.db_filename == "music_cache.sqlite"
        assert config.ttl_days == 30
        assert config.store_empty_fingerprint_results is False

    def test_base_path_defaults_to_app_data_dir(self):
        assert CacheConfig().resolve_base_path() == default_app_data_dir() / "MyriadMusicTagger"

    def test_explicit_base_path_wins(self, tmp_path):
        assert CacheConfig(base_path=tmp_path).resolve_base_path() == tmp_path

    def test_xdg_data_home_is_honoured(self, monkeypatch, tmp_path):
        monkeypatch.setattr(sys, "platform", "linux")
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
        assert default_app_data_dir() == Path(tmp_path)


class TestSettings:
    def test_flat_environment_variables(self, monkeypatch):
        monkeypatch.setenv("CACHE_TTL_DAYS", "7")
        monkeypatch.setenv("CACHE_STORE_EMPTY_FINGERPRINT_RESULTS", "true")
        monkeypatch.setenv("CONSOLE_LOG_LEVEL", "WARNING")

        settings = Settings(_env_file=None)

        assert settings.cache.ttl_days == 7
        assert settings.cache.store_empty_fingerprint_results is True
        assert settings.logging.console_level == "WARNING"

    def test_nested_environment_variables(self, monkeypatch):
        monkeypatch.setenv("CACHE__TTL_DAYS", "0")
        monkeypatch.setenv("CACHE__DB_FILENAME", "other.sqlite")

        settings = Settings(_env_file=None)

        assert settings.cache.ttl_days == 0
        assert settings.cache.db_filename == "other.sqlite"

    def test_flat_keyword_arguments(self):
        settings = Settings(_env_file=None, cache_ttl_days=-1)
        assert settings.cache.ttl_days == -1

    def test_get_config_flat_keys(self):
        assert get_config("CACHE_TTL_DAYS") == settings.cache.ttl_days
        assert get_config("UNKNOWN_KEY", "fallback") == "fallback"


class TestResilientOperation:
    async def test_fallback_returned_on_error(self):
        @resilient_operation("failing_op", fallback="fallback")
        async def failing():
            raise RuntimeError("boom")

        assert await failing() == "fallback"

    async def test_reraises_without_fallback(self):
        @resilient_operation("failing_op")
        async def failing():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await failing()

    async def test_result_passes_through(self):
        @resilient_operation()
        async def ok(value):
            return value * 2

        assert await ok(21) == 42
