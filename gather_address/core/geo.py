"""Distance helpers for "near you" event lists."""

import math
from typing import Any, List, Mapping, Optional, Sequence

EARTH_RADIUS_MILES = 3958.7613
DEFAULT_RADIUS_MILES = 25.0
DEFAULT_NEAR_LIMIT = 10


def miles_between(a_lat: float, a_lng: float, b_lat: float, b_lng: float) -> float:
    """Haversine distance in miles."""
    d_lat = math.radians(b_lat - a_lat)
    d_lng = math.radians(b_lng - a_lng)
    lat1 = math.radians(a_lat)
    lat2 = math.radians(b_lat)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def _has_coords(event: Mapping[str, Any]) -> bool:
    return all(
        isinstance(value, (int, float)) and not isinstance(value, bool)
        for value in (event.get("lat"), event.get("lng"))
    )


def events_near(
    events: Sequence[Mapping[str, Any]],
    lat: Optional[float],
    lng: Optional[float],
    radius_miles: float = DEFAULT_RADIUS_MILES,
    limit: int = DEFAULT_NEAR_LIMIT,
) -> List[Mapping[str, Any]]:
    with_coords = [event for event in events if _has_coords(event)]

    if lat is None or lng is None:
        return list(with_coords or events)[:limit]

    distances = []
    for event in with_coords:
        dist = miles_between(lat, lng, float(event["lat"]), float(event["lng"]))
        if dist <= radius_miles:
            distances.append((dist, event))
    distances.sort(key=lambda pair: pair[0])
    return [event for _, event in distances[:limit]]
