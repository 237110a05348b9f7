import pytest

from gather_address.etl import address
from gather_address.etl.transform import to_candidates
from gather_address.models import AddressDetails, RawCandidate

MAIN_ST = AddressDetails(house_number="123", road="Main St", city="Springfield", state="IL", postcode="62704")


def make(category="amenity", type_="cafe", importance=0.0, place_rank=999, addr=MAIN_ST, lat=0.0, lon=0.0):
    return RawCandidate(
        lat=lat,
        lon=lon,
        importance=importance,
        place_rank=place_rank,
        category=category,
        type=type_,
        address=addr,
    )


@pytest.mark.parametrize(
    "category, type_",
    [
        ("boundary", "administrative"),
        ("railway", "station"),
        ("highway", "residential"),
        ("place", "city"),
        ("place", "county"),
        ("place", "state"),
        ("", ""),
        ("natural", "peak"),
    ],
)
def test_is_address_like_rejects_noise(category, type_):
    assert address.is_address_like(make(category=category, type_=type_, importance=1.0)) is False


@pytest.mark.parametrize(
    "category, type_",
    [("amenity", "place_of_worship"), ("building", "yes"), ("place", "house"), ("shop", "bakery")],
)
def test_is_address_like_keeps_allow_list(category, type_):
    assert address.is_address_like(make(category=category, type_=type_)) is True


def test_canonical_key_is_case_and_space_insensitive():
    a = AddressDetails(house_number="123", road="Main  St", city="SPRINGFIELD", state="IL", postcode="62704")
    b = AddressDetails(house_number="123", road="main st", town="Springfield", state="il", postcode="62704")

    assert address.canonical_key(a) == "123 main st|springfield|il|62704"
    assert address.canonical_key(a) == address.canonical_key(b)


def test_canonical_key_uses_first_locality():
    addr = AddressDetails(road="Route 9", village="Lenox", hamlet="New Lenox", state="MA")
    assert address.canonical_key(addr) == "route 9|lenox|ma|"


def test_canonical_key_empty_for_missing_address():
    assert address.canonical_key(None) == ""
    assert address.canonical_key(AddressDetails(name="Somewhere")) == ""


def test_dedupe_keeps_highest_importance_in_any_order():
    low = make(importance=0.3, lat=1.0)
    high = make(category="building", importance=0.7, lat=2.0)

    for ordering in ([low, high], [high, low]):
        best = address.dedupe_best(ordering)
        assert list(best.values()) == [high]


def test_dedupe_tie_keeps_first_seen():
    first = make(importance=0.5, lat=1.0)
    second = make(importance=0.5, lat=2.0)

    best = address.dedupe_best([first, second])

    assert list(best.values())[0].lat == 1.0


def test_dedupe_drops_candidates_without_key():
    assert address.dedupe_best([make(addr=None), make(addr=AddressDetails())]) == {}


def test_rank_orders_by_importance_then_place_rank():
    top = make(importance=0.9, place_rank=30)
    broad = make(importance=0.5, place_rank=10)
    specific = make(importance=0.5, place_rank=5)

    assert address.rank_candidates([broad, top, specific]) == [top, specific, broad]


def test_rank_truncates_to_display_limit():
    candidates = [make(importance=i / 10) for i in range(10)]

    ranked = address.rank_candidates(candidates)

    assert len(ranked) == 6
    assert ranked[0].importance == 0.9
    assert len(address.rank_candidates(candidates[:3])) == 3


def test_format_us_address_full_line():
    assert address.format_us_address(MAIN_ST) == "123 main st springfield, il 62704"
    assert address.format_us_address(MAIN_ST) == address.format_us_address(MAIN_ST)


def test_format_us_address_partial_parts():
    assert address.format_us_address(AddressDetails(name="First Baptist", state="TX")) == "first baptist tx"
    assert address.format_us_address(AddressDetails(road="Elm  St", town="Plano")) == "elm st plano"
    assert address.format_us_address(AddressDetails(postcode="75024")) == "75024"
    assert address.format_us_address(AddressDetails()) == ""


def test_format_us_address_none():
    assert address.format_us_address(None) == ""


def test_to_selected_location_falls_back_to_typed_text():
    candidate = make(addr=None, lat=39.5, lon=-89.1)

    selected = address.to_selected_location(candidate, typed_text="the old barn")

    assert selected.location == "the old barn"
    assert selected.latitude == 39.5
    assert selected.longitude == -89.1


def test_clean_results_end_to_end():
    raw = [
        {
            "lat": "39.70",
            "lon": "-89.60",
            "importance": 0.95,
            "class": "highway",
            "type": "residential",
            "address": {"road": "Main St", "city": "Springfield", "state": "IL", "postcode": "62704"},
        },
        {
            "lat": "39.78",
            "lon": "-89.65",
            "importance": 0.8,
            "class": "amenity",
            "type": "cafe",
            "address": {
                "house_number": "123",
                "road": "Main St",
                "city": "Springfield",
                "state": "IL",
                "postcode": "62704",
            },
        },
    ]

    cleaned = address.clean_address_results(to_candidates(raw))

    assert [address.format_us_address(c.address) for c in cleaned] == ["123 main st springfield, il 62704"]


def test_clean_results_collapses_duplicates_keeping_best_coordinates():
    addr = {"house_number": "123", "road": "Main St", "city": "Springfield", "state": "IL", "postcode": "62704"}
    raw = [
        {"lat": "1.0", "lon": "2.0", "importance": 0.4, "class": "building", "type": "yes", "address": addr},
        {"lat": "3.0", "lon": "4.0", "importance": 0.9, "class": "amenity", "type": "cafe", "address": addr},
    ]

    cleaned = address.clean_address_results(to_candidates(raw))

    assert len(cleaned) == 1
    assert address.canonical_key(cleaned[0].address) == "123 main st|springfield|il|62704"
    assert (cleaned[0].lat, cleaned[0].lon) == (3.0, 4.0)


def test_clean_results_handles_missing_input():
    assert address.clean_address_results(None) == []


def test_candidate_without_coordinates_selects_without_raising():
    raw = [
        {
            "importance": 0.8,
            "class": "amenity",
            "type": "cafe",
            "address": {"house_number": "123", "road": "Main St", "city": "Springfield", "state": "IL", "postcode": "62704"},
        },
        {"lat": "n/a", "lon": "-89.6", "class": "shop", "type": "bakery", "address": {"road": "Elm St", "city": "Peoria"}},
    ]

    cleaned = address.clean_address_results(to_candidates(raw))
    selected = [address.to_selected_location(c, typed_text="typed") for c in cleaned]

    assert [s.location for s in selected] == ["123 main st springfield, il 62704", "elm st peoria"]
    assert all(s.latitude is None and s.longitude is None for s in selected)
