"""Core data models shared by the address lookup pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True, slots=True)
class AddressDetails:
    """Structured address block returned by Nominatim when addressdetails=1."""

    house_number: Optional[str] = None
    road: Optional[str] = None
    city: Optional[str] = None
    town: Optional[str] = None
    village: Optional[str] = None
    hamlet: Optional[str] = None
    municipality: Optional[str] = None
    state: Optional[str] = None
    postcode: Optional[str] = None
    name: Optional[str] = None

    @property
    def locality(self) -> str:
        """First non-empty of city, town, village, hamlet, municipality."""
        for value in (self.city, self.town, self.village, self.hamlet, self.municipality):
            if value:
                return value
        return ""


@dataclass(frozen=True, slots=True)
class RawCandidate:
    """One geocoder result with every optional field already defaulted."""

    lat: Optional[float] = None
    lon: Optional[float] = None
    place_id: Optional[int] = None
    importance: float = 0.0
    place_rank: int = 999
    category: str = ""
    type: str = ""
    address: Optional[AddressDetails] = None
    raw: Optional[Dict[str, Any]] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class SelectedLocation:
    """Location string and coordinates handed to the event-creation flow."""

    location: str
    latitude: Optional[float]
    longitude: Optional[float]


@dataclass(frozen=True, slots=True)
class Suggestion:
    """A home-screen search suggestion built from loaded events."""

    label: str
    kind: str
    event_id: Optional[str] = None
