"""CLI job to resolve a free-text US location into ranked addresses."""

import argparse
import logging
import sys
from typing import List, Optional

import requests

from gather_address.core.config import get_settings
from gather_address.core.search import suggest_addresses
from gather_address.etl.address import DISPLAY_LIMIT, format_us_address
from gather_address.vendors.nominatim import LookupFailed

logger = logging.getLogger(__name__)


def run_lookup(query: str, limit: int = DISPLAY_LIMIT) -> List[str]:
    """Return one ``address\\tlat\\tlon`` line per ranked candidate."""
    settings = get_settings()
    q = query.strip()
    if len(q) < settings.min_query_length:
        logger.info("Query %r is shorter than %d characters; skipping lookup", q, settings.min_query_length)
        return []

    logger.info("Running address lookup for query=%s", q)
    candidates = suggest_addresses(q, settings=settings, limit=limit)
    logger.info("Resolved %d address candidates", len(candidates))
    return [f"{format_us_address(c.address)}\t{_coord(c.lat)}\t{_coord(c.lon)}" for c in candidates]


def _coord(value: Optional[float]) -> str:
    return "" if value is None else str(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve a free-text US location with Nominatim")
    parser.add_argument("query", help="Free-text location, e.g. '123 main st springfield'")
    parser.add_argument(
        "--limit",
        dest="limit",
        type=int,
        default=DISPLAY_LIMIT,
        help="Maximum number of addresses to print",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        lines = run_lookup(args.query, limit=args.limit)
    except (LookupFailed, requests.RequestException) as exc:
        logger.error("Address lookup failed: %s", exc)
        return 1

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
