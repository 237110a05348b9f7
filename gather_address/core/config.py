"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "gather-app/1.0"


class ConfigError(RuntimeError):
    """Raised when an environment value cannot be parsed."""


@dataclass(frozen=True)
class Settings:
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    user_agent: str = DEFAULT_USER_AGENT
    country_codes: str = "us"
    result_limit: int = 12
    request_timeout: float = 10.0
    min_query_length: int = 4
    debounce_seconds: float = 0.25
    worker_port: int = 8080


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be numeric, got {raw!r}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    base_url = (os.getenv("NOMINATIM_BASE_URL") or "https://nominatim.openstreetmap.org").rstrip("/")
    user_agent = os.getenv("GEOCODER_USER_AGENT", "").strip()
    country_codes = (os.getenv("GEOCODER_COUNTRY_CODES") or "us").strip().lower()
    worker_port = _get_int_env("PORT", _get_int_env("WORKER_PORT", 8080))

    if not user_agent:
        logger.warning(
            "GEOCODER_USER_AGENT is not configured; falling back to %s for Nominatim requests.",
            DEFAULT_USER_AGENT,
        )
        user_agent = DEFAULT_USER_AGENT

    return Settings(
        nominatim_base_url=base_url,
        user_agent=user_agent,
        country_codes=country_codes,
        result_limit=_get_int_env("GEOCODER_RESULT_LIMIT", 12),
        request_timeout=_get_float_env("GEOCODER_TIMEOUT", 10.0),
        min_query_length=_get_int_env("ADDRESS_MIN_QUERY_LENGTH", 4),
        debounce_seconds=_get_int_env("ADDRESS_DEBOUNCE_MS", 250) / 1000.0,
        worker_port=worker_port,
    )
