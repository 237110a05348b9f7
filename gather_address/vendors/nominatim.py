"""Client utilities for the Nominatim search API."""

import logging
from typing import Any, Dict, List, Optional

import requests

from gather_address.core.config import Settings, get_settings

logger = logging.getLogger(__name__)
_SESSION = requests.Session()


class LookupFailed(RuntimeError):
    """Raised when Nominatim answers with a non-successful response."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message or f"address lookup failed ({status_code})")


def build_search_params(query: str, settings: Settings) -> Dict[str, Any]:
    return {
        "format": "json",
        "q": query,
        "limit": settings.result_limit,
        "addressdetails": 1,
        "countrycodes": settings.country_codes,
        "dedupe": 1,
        "extratags": 1,
    }


def search_us(query: str, settings: Optional[Settings] = None) -> List[Dict[str, Any]]:
    """Run one free-text search and return the raw candidate objects.

    No retries and no caching: every call is exactly one request. Callers are
    expected to skip queries below the minimum length.
    """
    settings = settings or get_settings()
    params = build_search_params(query, settings)
    headers = {"User-Agent": settings.user_agent}

    response = _SESSION.get(
        f"{settings.nominatim_base_url}/search",
        params=params,
        headers=headers,
        timeout=settings.request_timeout,
    )
    if not 200 <= response.status_code < 300:
        logger.error("search failed: status=%s, query=%s", response.status_code, query)
        raise LookupFailed(response.status_code)

    payload = response.json()
    if not isinstance(payload, list):
        logger.error("search returned a non-list payload: status=%s, type=%s", response.status_code, type(payload).__name__)
        raise LookupFailed(response.status_code, "address lookup returned an unexpected payload")

    logger.debug("search returned %d candidates for query=%s", len(payload), query)
    return payload
