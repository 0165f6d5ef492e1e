import pytest

from geocoding import (
    Candidate,
    Coordinate,
    build_queries,
    build_resolver_queries,
    corrected_name,
    normalize_stop_name,
    parse_candidates,
    pick_candidate,
)


def test_build_queries_goes_from_specific_to_general() -> None:
    assert build_queries("Tambaram", "Tamil Nadu") == [
        "Tambaram bus stand Tamil Nadu India",
        "Tambaram bus stand India",
        "Tambaram India",
    ]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Madurai  Old Bus Stand", "Madurai bus stand"),
        ("Trichy new bus stop", "Trichy bus stand"),
        ("Salem bus st", "Salem bus stand"),
        ("  Vellore   Fort ", "Vellore Fort"),
    ],
)
def test_normalize_stop_name(raw: str, expected: str) -> None:
    assert normalize_stop_name(raw) == expected


def test_build_resolver_queries_appends_raw_name() -> None:
    assert build_resolver_queries("Madurai Old Bus Stand", "Tamil Nadu") == [
        "Madurai bus stand bus stand Tamil Nadu India",
        "Madurai bus stand bus stand India",
        "Madurai bus stand India",
        "Madurai Old Bus Stand India",
    ]


def test_build_resolver_queries_drops_duplicates() -> None:
    queries = build_resolver_queries("Tambaram", "Tamil Nadu")
    assert queries == [
        "Tambaram bus stand Tamil Nadu India",
        "Tambaram bus stand India",
        "Tambaram India",
    ]


def test_parse_candidates_skips_entries_without_coordinates() -> None:
    candidates = parse_candidates(
        [
            {"lat": "13.0", "lon": "80.0", "display_name": "A, B"},
            {"lat": "not-a-number", "lon": "80.0"},
            {"display_name": "no coords"},
            "garbage",
        ]
    )
    assert candidates == [Candidate(lat=13.0, lon=80.0, display_name="A, B")]


def test_pick_candidate_prefers_nearest_to_anchor() -> None:
    far = Candidate(lat=13.5, lon=80.5)
    near = Candidate(lat=13.05, lon=80.02)
    assert pick_candidate([far, near], Coordinate(13.0, 80.0)) is near


def test_pick_candidate_without_anchor_takes_first() -> None:
    first = Candidate(lat=13.5, lon=80.5)
    second = Candidate(lat=13.05, lon=80.02)
    assert pick_candidate([first, second]) is first


def test_pick_candidate_rejects_empty_list() -> None:
    with pytest.raises(ValueError):
        pick_candidate([])


@pytest.mark.parametrize(
    ("namedetails", "display_name", "expected"),
    [
        ({"name": "Tambaram", "name:en": "Tambaram East"}, "x, y", "Tambaram"),
        ({"name:en": "Guindy"}, "x, y", "Guindy"),
        ({}, " Koyambedu CMBT , Chennai, India", "Koyambedu CMBT"),
    ],
)
def test_corrected_name_fallbacks(
    namedetails: dict[str, str], display_name: str, expected: str
) -> None:
    candidate = Candidate(
        lat=0.0, lon=0.0, display_name=display_name, namedetails=namedetails
    )
    assert corrected_name(candidate) == expected
