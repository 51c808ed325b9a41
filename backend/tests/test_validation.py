import os, sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from golfbets.services.validation import (
    ValidationError,
    normalize_hole_data,
    normalize_hole_key,
    validate_gross_score,
    validate_junk_types,
    validate_roster,
)


@pytest.mark.parametrize("raw", ["hole7", "7", 7, " Hole7 "])
def test_normalize_hole_key(raw) -> None:
    assert normalize_hole_key(raw) == "hole7"


@pytest.mark.parametrize("raw", [0, 19, "hole", True, "x"])
def test_rejects_bad_hole_keys(raw) -> None:
    with pytest.raises(ValidationError):
        normalize_hole_key(raw)


def test_hole_data_is_ordered_and_indices_cleaned() -> None:
    data = normalize_hole_data(
        {"2": {"par": 3, "index": 40}, "hole1": {"par": "4", "index": "7"}}
    )
    assert list(data) == ["hole1", "hole2"]
    assert data["hole1"] == {"par": 4, "index": 7}
    assert data["hole2"] == {"par": 3, "index": 0}


@pytest.mark.parametrize(
    "hole_data, msg",
    [
        (None, "required"),
        ({}, "required"),
        ({"hole1": {"par": 6, "index": 1}}, "par must be"),
        ({"hole1": 4}, "must be an object"),
    ],
    ids=["missing", "empty", "bad-par", "not-an-object"],
)
def test_rejects_invalid_hole_data(hole_data, msg) -> None:
    with pytest.raises(ValidationError) as exc:
        normalize_hole_data(hole_data)
    assert msg in str(exc.value)


def test_validate_roster() -> None:
    roster = validate_roster(
        [{"id": "p1", "name": " Ann ", "handicap": "12"}, {"name": "Bob"}]
    )
    assert roster == [
        {"playerId": "p1", "name": "Ann", "handicap": 12},
        {"playerId": "Bob", "name": "Bob", "handicap": 0},
    ]


@pytest.mark.parametrize(
    "players, msg",
    [
        ([], "at least one player"),
        ([{"name": ""}], "must have a name"),
        ([{"name": "Ann"}, {"name": "ann"}], "unique"),
    ],
)
def test_rejects_invalid_rosters(players, msg) -> None:
    with pytest.raises(ValidationError) as exc:
        validate_roster(players)
    assert msg in str(exc.value)


def test_validate_gross_score() -> None:
    assert validate_gross_score("5", player="Ann", hole="hole1") == 5
    assert validate_gross_score(None, player="Ann", hole="hole1") is None
    assert validate_gross_score(0, player="Ann", hole="hole1") is None
    for bad in (21, -1, "abc", True):
        with pytest.raises(ValidationError):
            validate_gross_score(bad, player="Ann", hole="hole1")


def test_validate_junk_types() -> None:
    assert validate_junk_types(["greenies", "greenies", "sandies"]) == ["greenies", "sandies"]
    with pytest.raises(ValidationError, match="birdies"):
        validate_junk_types(["birdies"])
