"""Utilities for transforming Nominatim responses into candidate records."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from gather_address.models import AddressDetails, RawCandidate

logger = logging.getLogger(__name__)

_ADDRESS_FIELDS = (
    "house_number",
    "road",
    "city",
    "town",
    "village",
    "hamlet",
    "municipality",
    "state",
    "postcode",
    "name",
)

DEFAULT_IMPORTANCE = 0.0
DEFAULT_PLACE_RANK = 999


def to_address_details(raw: Any) -> Optional[AddressDetails]:
    if not isinstance(raw, dict):
        return None
    values = {name: _strip_or_none(raw.get(name)) for name in _ADDRESS_FIELDS}
    return AddressDetails(**values)


def to_candidate(raw: Dict[str, Any]) -> RawCandidate:
    """Apply every default once so the pipeline never checks for missing fields."""
    importance = _safe_float(raw.get("importance"))
    place_rank = _safe_int(raw.get("place_rank"))

    return RawCandidate(
        place_id=_safe_int(raw.get("place_id")),
        lat=_safe_float(raw.get("lat")),
        lon=_safe_float(raw.get("lon")),
        importance=DEFAULT_IMPORTANCE if importance is None else importance,
        place_rank=DEFAULT_PLACE_RANK if place_rank is None else place_rank,
        category=_to_text(raw.get("class")),
        type=_to_text(raw.get("type")),
        address=to_address_details(raw.get("address")),
        raw=raw,
    )


def to_candidates(payload: Optional[Iterable[Any]]) -> List[RawCandidate]:
    candidates: List[RawCandidate] = []
    for item in payload or []:
        if not isinstance(item, dict):
            logger.debug("Skipping non-object search result: %r", item)
            continue
        candidates.append(to_candidate(item))
    return candidates


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
