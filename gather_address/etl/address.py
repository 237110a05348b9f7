"""Filter, dedupe, rank and format geocoder candidates for the address picker."""

import logging
import re
from typing import Dict, Iterable, List, Optional

from gather_address.models import AddressDetails, RawCandidate, SelectedLocation

logger = logging.getLogger(__name__)

DISPLAY_LIMIT = 6

_REJECTED_CLASSES = {"boundary", "railway"}
_REJECTED_PLACE_TYPES = {"city", "county", "state"}
_ALLOWED_CLASSES = {"amenity", "building", "place", "shop"}
_WHITESPACE = re.compile(r"\s+")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _street(address: AddressDetails) -> str:
    return " ".join(part for part in (address.house_number, address.road) if part)


def is_address_like(candidate: RawCandidate) -> bool:
    """Keep POIs, buildings and shops; drop admin areas, roads and rail."""
    category = candidate.category
    if category in _REJECTED_CLASSES:
        return False
    if category == "highway" and candidate.type == "residential":
        return False
    if category == "place" and candidate.type in _REJECTED_PLACE_TYPES:
        return False
    return category in _ALLOWED_CLASSES


def canonical_key(address: Optional[AddressDetails]) -> str:
    """Return ``street|city|state|zip`` lowercased, or "" when nothing identifies the address."""
    if address is None:
        return ""
    parts = [_street(address), address.locality, address.state or "", address.postcode or ""]
    if not any(part.strip() for part in parts):
        return ""
    return _collapse("|".join(parts)).lower()


def dedupe_best(candidates: Iterable[RawCandidate]) -> Dict[str, RawCandidate]:
    """Keep the highest-importance candidate per canonical key; ties keep the first seen."""
    best_by_key: Dict[str, RawCandidate] = {}
    for candidate in candidates:
        key = canonical_key(candidate.address)
        if not key:
            continue
        existing = best_by_key.get(key)
        if existing is None or candidate.importance > existing.importance:
            best_by_key[key] = candidate
    return best_by_key


def rank_candidates(candidates: Iterable[RawCandidate], limit: int = DISPLAY_LIMIT) -> List[RawCandidate]:
    ranked = sorted(candidates, key=lambda c: (-c.importance, c.place_rank))
    return ranked[:limit]


def clean_address_results(raw: Optional[Iterable[RawCandidate]], limit: int = DISPLAY_LIMIT) -> List[RawCandidate]:
    filtered = [candidate for candidate in raw or [] if is_address_like(candidate)]
    best_by_key = dedupe_best(filtered)
    cleaned = rank_candidates(best_by_key.values(), limit=limit)
    logger.debug(
        "Cleaned address results: filtered=%d unique=%d returned=%d",
        len(filtered),
        len(best_by_key),
        len(cleaned),
    )
    return cleaned


def format_us_address(address: Optional[AddressDetails]) -> str:
    """Render ``street city, state zip`` as a single lowercase line."""
    if address is None:
        return ""
    street = (_street(address) or address.name or "").strip()
    city = address.locality.strip()
    state = (address.state or "").strip()
    postcode = (address.postcode or "").strip()

    city_state = ", ".join(part for part in (city, state) if part)
    return _collapse(" ".join(part for part in (street, city_state, postcode) if part)).lower()


def to_selected_location(candidate: RawCandidate, typed_text: str = "") -> SelectedLocation:
    """Coordinates are None when the candidate did not carry a usable lat/lon pair."""
    location = format_us_address(candidate.address) or typed_text
    if candidate.lat is None or candidate.lon is None:
        return SelectedLocation(location=location, latitude=None, longitude=None)
    return SelectedLocation(
        location=location,
        latitude=candidate.lat,
        longitude=candidate.lon,
    )
