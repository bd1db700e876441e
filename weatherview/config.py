import os
from dataclasses import dataclass
from functools import lru_cache

_OPENWEATHER_KEY_ENV = "OPENWEATHER_API_KEY"
_VISUALCROSSING_KEY_ENV = "VISUALCROSSING_API_KEY"
_RATE_ENV = "WEATHERVIEW_MAX_REQUESTS_PER_SECOND"
_TIMEOUT_ENV = "WEATHERVIEW_REQUEST_TIMEOUT"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    openweather_api_key: str
    visualcrossing_api_key: str
    max_requests_per_second: float
    request_timeout: float
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_positive_float_env(name: str, default: float) -> float:
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
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    return _read_str_env(_LOG_LEVEL_ENV, default).upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        openweather_api_key=_read_str_env(_OPENWEATHER_KEY_ENV, ""),
        visualcrossing_api_key=_read_str_env(_VISUALCROSSING_KEY_ENV, ""),
        max_requests_per_second=_read_positive_float_env(_RATE_ENV, 2.0),
        request_timeout=_read_positive_float_env(_TIMEOUT_ENV, 30.0),
        log_level=_read_log_level("INFO"),
    )
