from golfbets.scoring.junk import JUNK_TYPES, junk_value, tally_junk


def test_losing_dots_are_negative():
    assert junk_value("losingDots", {"losingDots": 2}) == -2.0
    assert junk_value("losingDots", {"losingDots": -2}) == -2.0
    assert junk_value("greenies", {}, default=1.5) == 1.5


def test_tally_counts_selected_types_only():
    events = {
        "Ann": {"hole3": {"greenies": True, "sandies": True}, "hole7": {"greenies": True}},
        "Bob": {"hole4": {"losingDots": True, "poleys": False}},
        "Zed": {"hole1": {"greenies": True}},
    }
    junk = tally_junk(
        ["Ann", "Bob"],
        events,
        selected_types=["greenies", "losingDots"],
        point_values={"greenies": 2},
    )
    assert junk["types"] == ["greenies", "losingDots"]
    assert junk["counts"]["Ann"] == {"greenies": 2, "losingDots": 0}
    assert junk["totals"] == {"Ann": 4.0, "Bob": -1.0}
    assert "Zed" not in junk["totals"]


def test_all_types_when_none_selected():
    junk = tally_junk(["Ann"], None)
    assert junk["types"] == list(JUNK_TYPES)
    assert junk["totals"] == {"Ann": 0}
