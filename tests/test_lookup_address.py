import argparse

import requests

from gather_address.core.config import Settings
from gather_address.jobs import lookup_address
from gather_address.models import AddressDetails, RawCandidate
from gather_address.vendors.nominatim import LookupFailed


def candidate():
    return RawCandidate(
        lat=39.78,
        lon=-89.65,
        importance=0.8,
        category="amenity",
        address=AddressDetails(house_number="123", road="Main St", city="Springfield", state="IL", postcode="62704"),
    )


def test_run_lookup_formats_lines(monkeypatch):
    calls = []

    def fake_suggest(query, settings=None, limit=6):
        calls.append((query, limit))
        return [candidate()]

    monkeypatch.setattr(lookup_address, "get_settings", lambda: Settings())
    monkeypatch.setattr(lookup_address, "suggest_addresses", fake_suggest)

    lines = lookup_address.run_lookup(" 123 main ", limit=3)

    assert lines == ["123 main st springfield, il 62704\t39.78\t-89.65"]
    assert calls == [("123 main", 3)]


def test_run_lookup_skips_short_queries(monkeypatch):
    monkeypatch.setattr(lookup_address, "get_settings", lambda: Settings())
    monkeypatch.setattr(lookup_address, "suggest_addresses", lambda *a, **k: [candidate()])

    assert lookup_address.run_lookup("abc") == []


def test_main_prints_results(monkeypatch, capsys):
    monkeypatch.setattr(lookup_address, "run_lookup", lambda query, limit: ["a\t1\t2"])

    assert lookup_address.main(["123 main"]) == 0
    assert capsys.readouterr().out == "a\t1\t2\n"


def test_main_reports_lookup_failure(monkeypatch):
    def failing(query, limit):
        raise LookupFailed(429)

    monkeypatch.setattr(lookup_address, "run_lookup", failing)
    assert lookup_address.main(["123 main"]) == 1

    def offline(query, limit):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(lookup_address, "run_lookup", offline)
    assert lookup_address.main(["123 main"]) == 1


def test_build_parser_defaults():
    parser = lookup_address.build_parser()
    args = parser.parse_args(["123 main st"])
    assert isinstance(parser, argparse.ArgumentParser)
    assert args.query == "123 main st"
    assert args.limit == 6


def test_run_lookup_leaves_missing_coordinates_blank(monkeypatch):
    bare = RawCandidate(category="amenity", address=AddressDetails(road="Elm St", city="Peoria"))
    monkeypatch.setattr(lookup_address, "get_settings", lambda: Settings())
    monkeypatch.setattr(lookup_address, "suggest_addresses", lambda *a, **k: [bare])

    assert lookup_address.run_lookup("elm st peoria") == ["elm st peoria\t\t"]
