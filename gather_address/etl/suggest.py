"""Home-screen search: fuzzy suggestion ranking and plain text filtering."""

import logging
import re
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from gather_address.models import Suggestion

logger = logging.getLogger(__name__)

SUGGESTION_LIMIT = 6

_WORD_SPLIT = re.compile(r"[\s\-_/]+")


def normalize(text: Optional[str]) -> str:
    return (text or "").strip().lower()


def score_match(query: str, candidate: str) -> Optional[float]:
    """Score how closely ``candidate`` matches ``query``; lower is better, None is no match.

    exact < prefix < word prefix < substring, with longer candidates scoring
    worse inside each tier.
    """
    q = normalize(query)
    c = normalize(candidate)
    if not q or not c:
        return None

    extra = len(c) - len(q)
    if c == q:
        return 0
    if c.startswith(q):
        return 10 + extra
    if any(word.startswith(q) for word in _WORD_SPLIT.split(c)):
        return 25 + extra

    idx = c.find(q)
    if idx >= 0:
        return 60 + idx + extra * 0.25
    return None


def _ministry_name(event: Mapping[str, Any]) -> Optional[str]:
    ministries = event.get("ministries")
    if isinstance(ministries, Mapping):
        name = ministries.get("name")
        return str(name) if name else None
    return None


def _suggestion_pool(events: Iterable[Mapping[str, Any]]) -> List[Suggestion]:
    pool: List[Suggestion] = []
    for event in events:
        event_id = event.get("id")
        if event.get("title"):
            pool.append(Suggestion(label=str(event["title"]), kind="event", event_id=None if event_id is None else str(event_id)))
        if event.get("location"):
            pool.append(Suggestion(label=str(event["location"]), kind="location"))
        for category in event.get("categories") or []:
            if category:
                pool.append(Suggestion(label=str(category), kind="category"))
        ministry = _ministry_name(event)
        if ministry:
            pool.append(Suggestion(label=ministry, kind="ministry"))
    return pool


def build_suggestions(
    query: str,
    events: Sequence[Mapping[str, Any]],
    limit: int = SUGGESTION_LIMIT,
) -> List[Suggestion]:
    if not (query or "").strip():
        return []

    # one entry per kind and label, so a popular category shows up once
    seen = set()
    deduped: List[Suggestion] = []
    for suggestion in _suggestion_pool(events):
        key = f"{suggestion.kind}:{normalize(suggestion.label)}"
        if key in seen:
            continue
        seen.add(key)
        deduped.append(suggestion)

    scored = []
    for suggestion in deduped:
        score = score_match(query, suggestion.label)
        if score is not None:
            scored.append((score, suggestion))
    scored.sort(key=lambda pair: pair[0])

    logger.debug("Suggestions for query=%s: pool=%d matched=%d", query, len(deduped), len(scored))
    return [suggestion for _, suggestion in scored[:limit]]


def filter_events(events: Sequence[Mapping[str, Any]], query: str) -> List[Mapping[str, Any]]:
    q = (query or "").strip().lower()
    if not q:
        return list(events)

    matched = []
    for event in events:
        parts = [
            event.get("title") or "",
            event.get("location") or "",
            event.get("description") or "",
            *[str(c) for c in event.get("categories") or []],
            _ministry_name(event) or "",
        ]
        if q in " ".join(str(p) for p in parts).lower():
            matched.append(event)
    return matched
