"""Tests for settings loaded from the environment."""

import pytest

from canpay_engine.config import Settings, get_settings

ENV_VARS = ("ENGINE_VERSION", "HOST", "PORT", "DEBUG", "LOG_LEVEL", "CORS_ORIGINS")


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


class TestSettings:
    """Test Settings.from_env."""

    def test_defaults(self, clean_env):
        settings = Settings.from_env()

        assert settings.host == "0.0.0.0"
        assert settings.port == 8000
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.cors_origins == ("*",)

    def test_overrides(self, clean_env):
        clean_env.setenv("PORT", "9100")
        clean_env.setenv("DEBUG", "TRUE")
        clean_env.setenv("LOG_LEVEL", "debug")
        clean_env.setenv("CORS_ORIGINS", "http://a.example, http://b.example,")

        settings = Settings.from_env()

        assert settings.PORT == 9100
        assert settings.DEBUG is True
        assert settings.log_level == "DEBUG"
        assert settings.cors_origins == ("http://a.example", "http://b.example")

    def test_get_settings_is_cached(self, clean_env):
        first = get_settings()
        clean_env.setenv("HOST", "127.0.0.1")

        assert get_settings() is first
        get_settings.cache_clear()
        assert get_settings().HOST == "127.0.0.1"

    def test_settings_are_frozen(self, clean_env):
        settings = Settings.from_env()
        with pytest.raises(AttributeError):
            settings.port = 1
