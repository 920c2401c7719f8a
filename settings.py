from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_HISTORY_CAPACITY_ENV = "SENSOR_HISTORY_CAPACITY"
_WINDOW_SIZE_ENV = "ANALYSIS_WINDOW_SIZE"
_SUMMARY_BASE_URL_ENV = "SUMMARY_API_BASE_URL"
_SUMMARY_API_KEY_ENV = "SUMMARY_API_KEY"
_LEGACY_API_KEY_ENV = "DEEPSEEK_API_KEY"
_SUMMARY_MODEL_ENV = "SUMMARY_MODEL"
_SUMMARY_TEMPERATURE_ENV = "SUMMARY_TEMPERATURE"
_SUMMARY_TIMEOUT_ENV = "SUMMARY_API_TIMEOUT"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    history_capacity: int
    analysis_window_size: int
    summary_base_url: str
    summary_api_key: str
    summary_model: str
    summary_temperature: float
    summary_timeout: float
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_float(name: str, default: float, allow_zero: bool = False) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    if parsed > 0 or (allow_zero and parsed == 0):
        return parsed
    return default


def _read_api_key() -> str:
    key = _read_str_env(_SUMMARY_API_KEY_ENV, "")
    if key:
        return key
    return _read_str_env(_LEGACY_API_KEY_ENV, "")


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        history_capacity=_read_positive_int(_HISTORY_CAPACITY_ENV, 100),
        analysis_window_size=_read_positive_int(_WINDOW_SIZE_ENV, 10),
        summary_base_url=_read_str_env(
            _SUMMARY_BASE_URL_ENV, "https://api.deepseek.com/v1"
        ).rstrip("/"),
        summary_api_key=_read_api_key(),
        summary_model=_read_str_env(_SUMMARY_MODEL_ENV, "deepseek-chat"),
        summary_temperature=_read_float(_SUMMARY_TEMPERATURE_ENV, 0.3, allow_zero=True),
        summary_timeout=_read_float(_SUMMARY_TIMEOUT_ENV, 30.0),
        log_level=_read_log_level("INFO"),
    )
