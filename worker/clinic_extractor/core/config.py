"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    google_places_api_key: str
    worker_port: int = 9000
    rate_delay_seconds: float = 0.2
    next_page_delay_seconds: float = 2.0
    default_country: str = "United States"
    basic_auth: Optional[Tuple[str, str]] = None


def _parse_basic_auth() -> Optional[Tuple[str, str]]:
    combined = os.getenv("BASIC_AUTH_CREDENTIALS")
    if combined:
        user, _, password = combined.partition(":")
        if user and password:
            return user, password
        logger.warning("BASIC_AUTH_CREDENTIALS must look like 'user:password'; ignoring it.")

    user = os.getenv("BASIC_AUTH_USER")
    password = os.getenv("BASIC_AUTH_PASSWORD")
    if user and password:
        return user, password
    return None


def _millis_to_seconds(name: str, default_ms: int) -> float:
    raw = os.getenv(name)
    if not raw:
        return default_ms / 1000
    try:
        value = int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer; using %dms.", name, raw, default_ms)
        return default_ms / 1000
    return max(value, 0) / 1000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_places_api_key = os.getenv("GOOGLE_PLACES_API_KEY", "").strip()
    worker_port = int(os.getenv("WORKER_PORT", "9000"))
    rate_delay_seconds = _millis_to_seconds("RATE_DELAY_MS", 200)
    next_page_delay_seconds = _millis_to_seconds("NEXT_PAGE_DELAY_MS", 2000)
    default_country = os.getenv("DEFAULT_COUNTRY", "").strip() or "United States"
    basic_auth = _parse_basic_auth()

    if not google_places_api_key:
        logger.warning("GOOGLE_PLACES_API_KEY is not configured; extractions will return an error log.")
    if basic_auth is None:
        logger.warning("Basic auth credentials are not configured; the HTTP service is open.")

    return Settings(
        google_places_api_key=google_places_api_key,
        worker_port=worker_port,
        rate_delay_seconds=rate_delay_seconds,
        next_page_delay_seconds=next_page_delay_seconds,
        default_country=default_country,
        basic_auth=basic_auth,
    )
