from __future__ import annotations

from pathlib import Path

import pytest

from ui_analytics.config import AnalyticsSettings, get_settings, load_dotenv_if_present


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("REDIS_URL", "ANALYTICS_STREAM_KEY", "ANALYTICS_STREAM_MAXLEN", "ANALYTICS_LOG_LEVEL", "ANALYTICS_PRODUCT"):
        monkeypatch.delenv(name, raising=False)

    settings = AnalyticsSettings.from_env()
    assert settings.redis_url == "redis://localhost:6379/0"
    assert settings.stream_key == "analytics:events"
    assert settings.stream_maxlen == 10_000
    assert settings.log_level == "INFO"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REDIS_URL", "redis://cache:6379/2")
    monkeypatch.setenv("ANALYTICS_STREAM_MAXLEN", "0")
    monkeypatch.setenv("ANALYTICS_LOG_LEVEL", "debug")
    monkeypatch.setenv("ANALYTICS_PRODUCT", "Fleet")
    get_settings.cache_clear()

    settings = get_settings()
    assert settings.redis_url == "redis://cache:6379/2"
    assert settings.stream_key == "test:analytics:events"
    assert settings.stream_maxlen == 0
    assert settings.log_level == "DEBUG"
    assert settings.default_product == "Fleet"


def test_dotenv_does_not_override_exported_vars(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env = tmp_path / ".env"
    env.write_text("ANALYTICS_STREAM_KEY=from-dotenv\nANALYTICS_PRODUCT=FromDotenv\n")
    # Registered with monkeypatch so the value loaded from .env is undone afterwards.
    monkeypatch.setenv("ANALYTICS_PRODUCT", "placeholder")
    monkeypatch.delenv("ANALYTICS_PRODUCT")

    assert load_dotenv_if_present(env) is True
    get_settings.cache_clear()

    settings = get_settings()
    assert settings.stream_key == "test:analytics:events"
    assert settings.default_product == "FromDotenv"


def test_missing_dotenv_is_ignored(tmp_path: Path) -> None:
    assert load_dotenv_if_present(tmp_path / "nope.env") is False


def test_app_environment_loads_dotenv_from_working_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from ui_analytics.main import load_environment

    (tmp_path / ".env").write_text("ANALYTICS_PRODUCT=FromDotenv\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ANALYTICS_PRODUCT", "placeholder")
    monkeypatch.delenv("ANALYTICS_PRODUCT")
    get_settings.cache_clear()
    assert get_settings().default_product != "FromDotenv"

    assert load_environment() is True
    assert get_settings().default_product == "FromDotenv"
