"""Address search lifecycle used while a location field is being edited."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, List, Optional

import requests

from gather_address.core.config import Settings, get_settings
from gather_address.etl.address import DISPLAY_LIMIT, clean_address_results, to_selected_location
from gather_address.etl.transform import to_candidates
from gather_address.models import RawCandidate, SelectedLocation
from gather_address.vendors import nominatim

logger = logging.getLogger(__name__)

Fetch = Callable[[str], List[RawCandidate]]
ResultsCallback = Callable[[List[RawCandidate]], None]


class SearchState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    LOADING = "loading"
    RESULTS = "results"


def fetch_candidates(query: str, settings: Optional[Settings] = None) -> List[RawCandidate]:
    return to_candidates(nominatim.search_us(query, settings=settings))


def suggest_addresses(
    query: str,
    settings: Optional[Settings] = None,
    limit: int = DISPLAY_LIMIT,
) -> List[RawCandidate]:
    """One-shot lookup: fetch, filter, dedupe and rank.

    Queries shorter than the configured minimum return an empty list without
    touching the network. ``LookupFailed`` propagates to the caller.
    """
    settings = settings or get_settings()
    q = (query or "").strip()
    if len(q) < settings.min_query_length:
        return []
    return clean_address_results(fetch_candidates(q, settings), limit=limit)


class AddressSearchSession:
    """Debounced search state for one text field.

    Every keystroke, selection and dismissal bumps a generation counter. A
    search only writes its results if the generation it was scheduled at is
    still current, so a slow earlier response can never replace newer state.
    """

    def __init__(
        self,
        fetch: Optional[Fetch] = None,
        *,
        settings: Optional[Settings] = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
        on_results: Optional[ResultsCallback] = None,
    ):
        self.settings = settings or get_settings()
        self._fetch = fetch or (lambda q: fetch_candidates(q, self.settings))
        self._timer_factory = timer_factory
        self._on_results = on_results
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._closed = False

        self.state = SearchState.IDLE
        self.results: List[RawCandidate] = []
        self.location_text = ""
        self.picked: Optional[SelectedLocation] = None

    def __enter__(self) -> "AddressSearchSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def on_text_changed(self, text: str) -> None:
        text = text or ""
        query = text.strip()
        with self._lock:
            if self._closed:
                raise RuntimeError("AddressSearchSession is closed")
            self.location_text = text
            self.picked = None
            self._invalidate()

            if len(query) < self.settings.min_query_length:
                self.state = SearchState.IDLE
                self.results = []
            else:
                timer = self._timer_factory(
                    self.settings.debounce_seconds,
                    self._run_search,
                    args=(query, self._generation),
                )
                timer.daemon = True
                self._timer = timer
                self.state = SearchState.DEBOUNCING
                timer.start()
                return
        self._notify([])

    def select(self, candidate: RawCandidate) -> SelectedLocation:
        """Pin a ranked candidate: location text and coordinates come from it."""
        with self._lock:
            selected = to_selected_location(candidate, self.location_text)
            self._invalidate()
            self.location_text = selected.location
            self.picked = selected
            self.state = SearchState.IDLE
            self.results = []
        self._notify([])
        return selected

    def dismiss(self) -> None:
        with self._lock:
            self._invalidate()
            self.state = SearchState.IDLE
            self.results = []
        self._notify([])

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._invalidate()
            self._closed = True
            self.state = SearchState.IDLE
            self.results = []

    def _invalidate(self) -> None:
        # caller holds the lock
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._generation += 1

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _run_search(self, query: str, generation: int) -> None:
        with self._lock:
            if not self._is_current(generation):
                return
            self._timer = None
            self.state = SearchState.LOADING

        results: Optional[List[RawCandidate]]
        try:
            results = clean_address_results(self._fetch(query))
        except nominatim.LookupFailed as exc:
            logger.warning("[address search error] query=%s status=%s: %s", query, exc.status_code, exc)
            results = None
        except requests.RequestException as exc:
            logger.warning("[address search error] query=%s: %s", query, exc)
            results = None
        except Exception as exc:  # noqa: BLE001
            logger.exception("Address search failed for query=%s: %s", query, exc)
            results = None

        with self._lock:
            if not self._is_current(generation):
                logger.debug("Discarding stale address results for query=%s", query)
                return
            self.state = SearchState.IDLE if results is None else SearchState.RESULTS
            self.results = results or []
            current = list(self.results)
        self._notify(current)

    def _notify(self, results: List[RawCandidate]) -> None:
        if self._on_results is not None:
            self._on_results(results)
