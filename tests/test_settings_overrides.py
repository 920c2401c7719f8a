from __future__ import annotations

from typing import Iterable

from datastore.history import build_default_history
from services.monitor import build_default_monitor
from services.summary import build_default_generator
from settings import get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


_CACHES = (
    get_settings,
    build_default_history,
    build_default_generator,
    build_default_monitor,
)


def test_defaults(monkeypatch) -> None:
    for name in (
        "SENSOR_HISTORY_CAPACITY",
        "ANALYSIS_WINDOW_SIZE",
        "SUMMARY_API_BASE_URL",
        "SUMMARY_API_KEY",
        "DEEPSEEK_API_KEY",
        "SUMMARY_MODEL",
        "SUMMARY_TEMPERATURE",
        "SUMMARY_API_TIMEOUT",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    _clear_caches(_CACHES)

    try:
        settings = get_settings()
        assert settings.history_capacity == 100
        assert settings.analysis_window_size == 10
        assert settings.summary_base_url == "https://api.deepseek.com/v1"
        assert settings.summary_api_key == ""
        assert settings.summary_model == "deepseek-chat"
        assert settings.summary_temperature == 0.3
        assert settings.summary_timeout == 30.0
        assert settings.log_level == "INFO"
    finally:
        _clear_caches(_CACHES)


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("SENSOR_HISTORY_CAPACITY", "25")
    monkeypatch.setenv("ANALYSIS_WINDOW_SIZE", "5")
    monkeypatch.setenv("SUMMARY_API_BASE_URL", "http://llm.local/v1/")
    monkeypatch.delenv("SUMMARY_API_KEY", raising=False)
    monkeypatch.setenv("DEEPSEEK_API_KEY", "legacy-key")
    monkeypatch.setenv("SUMMARY_TEMPERATURE", "0")
    monkeypatch.setenv("SUMMARY_API_TIMEOUT", "2.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    _clear_caches(_CACHES)

    monitor = build_default_monitor()
    try:
        settings = get_settings()
        assert settings.summary_base_url == "http://llm.local/v1"
        assert settings.summary_api_key == "legacy-key"
        assert settings.summary_temperature == 0.0
        assert settings.summary_timeout == 2.5
        assert settings.log_level == "DEBUG"
        assert monitor.history.capacity == 25
        assert monitor.default_window == 5
        assert monitor.generator.temperature == 0.0  # type: ignore[attr-defined]
    finally:
        monitor.shutdown()
        _clear_caches(_CACHES)


def test_invalid_numbers_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("SENSOR_HISTORY_CAPACITY", "-3")
    monkeypatch.setenv("ANALYSIS_WINDOW_SIZE", "ten")
    monkeypatch.setenv("SUMMARY_API_TIMEOUT", "0")
    _clear_caches(_CACHES)

    try:
        settings = get_settings()
        assert settings.history_capacity == 100
        assert settings.analysis_window_size == 10
        assert settings.summary_timeout == 30.0
    finally:
        _clear_caches(_CACHES)
