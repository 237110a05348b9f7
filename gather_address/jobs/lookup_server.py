"""HTTP entrypoint exposing address lookup and search suggestions (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

import requests
from flask import Flask, jsonify, request

from gather_address.core.config import get_settings
from gather_address.core.search import suggest_addresses
from gather_address.etl.address import format_us_address
from gather_address.etl.suggest import SUGGESTION_LIMIT, build_suggestions
from gather_address.vendors.nominatim import LookupFailed

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; reads settings only, never calls Nominatim."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "geocoder": settings.nominatim_base_url,
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.get("/addresses")
def lookup_addresses() -> Any:
    """
    Resolve ?q= into at most six ranked address suggestions.
    Failures upstream are logged and answered with an empty list.
    """
    query = (request.args.get("q") or "").strip()

    try:
        candidates = suggest_addresses(query)
    except (LookupFailed, requests.RequestException) as exc:
        logger.warning("[address search error] query=%s: %s", query, exc)
        candidates = []

    items = [
        {
            "location": format_us_address(c.address),
            "lat": c.lat,
            "lng": c.lon,
            "importance": c.importance,
            "place_rank": c.place_rank,
            "place_id": c.place_id,
        }
        for c in candidates
    ]
    return jsonify({"data": items}), 200


@app.post("/suggestions")
def search_suggestions() -> Any:
    """
    Rank home-screen suggestions for a query over already-loaded events.
    Required JSON fields: query, events (list)
    Optional: limit (positive int)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    events = payload.get("events")
    if not isinstance(events, list):
        return jsonify({"error": "events must be a list"}), 400
    events = [e for e in events if isinstance(e, dict)]

    limit_raw = payload.get("limit", SUGGESTION_LIMIT)
    try:
        limit = int(limit_raw)
    except (TypeError, ValueError):
        return jsonify({"error": "limit must be numeric"}), 400
    if limit <= 0:
        return jsonify({"error": "limit must be positive"}), 400

    query = str(payload.get("query") or "")
    suggestions = build_suggestions(query, events, limit=limit)
    data = [{"label": s.label, "kind": s.kind, "event_id": s.event_id} for s in suggestions]
    return jsonify({"data": data}), 200


def main() -> None:
    settings = get_settings()
    logger.info("[BOOT] Binding on 0.0.0.0:%d", settings.worker_port)
    app.run(host="0.0.0.0", port=settings.worker_port)


if __name__ == "__main__":
    main()
