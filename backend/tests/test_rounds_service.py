import os, sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from golfbets.exceptions import RoundAlreadyEnded, RoundNotActive, RoundStartError
from golfbets.services import rounds as svc
from golfbets.services.validation import ValidationError

PARS = [4, 3, 5, 4, 4, 3, 4, 5, 4, 4, 3, 5, 4, 4, 3, 4, 5, 4]
INDICES = [7, 15, 1, 11, 3, 17, 9, 5, 13, 8, 16, 2, 12, 4, 18, 10, 6, 14]
HOLE_DATA = {
    f"hole{n}": {"par": par, "index": index}
    for n, (par, index) in enumerate(zip(PARS, INDICES), start=1)
}
ANN = [5, 4, 6, 5, 5, 4, 5, 6, 5, 4, 4, 5, 5, 4, 3, 4, 6, 5]
BOB = [4, 3, 5, 5, 4, 3, 5, 6, 5, 5, 3, 6, 5, 5, 4, 5, 5, 5]
PLAYERS = [
    {"playerId": "p-ann", "name": "Ann", "handicap": 10},
    {"playerId": "p-bob", "name": "Bob", "handicap": 4},
]


def _card(gross):
    return {f"hole{n}": s for n, s in enumerate(gross, start=1)}


def _nassau_round(**kwargs):
    return svc.start_round(
        PLAYERS,
        HOLE_DATA,
        wagers=[{"id": "w1", "type": "Nassau", "amount": 5}],
        **kwargs,
    )


def test_start_round_snapshot():
    rnd = _nassau_round(course_name="Demo Links")
    assert rnd["status"] == svc.ACTIVE
    assert rnd["courseName"] == "Demo Links"
    assert rnd["scores"] == {"Ann": {}, "Bob": {}}
    assert rnd["wagers"] == [{"id": "w1", "name": "Nassau", "amount": 5.0, "type": "Nassau"}]
    assert rnd["handicapMode"] == "lowest"
    assert rnd["results"] is None and rnd["endedAt"] is None


@pytest.mark.parametrize(
    "players, hole_data, kwargs",
    [
        ([], HOLE_DATA, {}),
        ([{"name": "Ann"}, {"name": "ANN"}], HOLE_DATA, {}),
        (PLAYERS, {}, {}),
        (PLAYERS, HOLE_DATA, {"wagers": [{"type": "Wolf", "amount": 1}]}),
        (PLAYERS, HOLE_DATA, {"team_mode": "teams", "teams": [{"name": "Solo", "playerIds": ["p-ann"]}]}),
        (PLAYERS, HOLE_DATA, {"handicap_mode": "best-ball"}),
    ],
    ids=["no-players", "duplicate-names", "no-holes", "unknown-wager", "one-team", "bad-mode"],
)
def test_start_round_rejects_bad_setup(players, hole_data, kwargs):
    with pytest.raises(RoundStartError) as exc:
        svc.start_round(players, hole_data, **kwargs)
    assert exc.value.status_code == 400


def test_full_round_results_and_settlement():
    rnd = _nassau_round()
    rnd = svc.apply_scores(rnd, {"Ann": _card(ANN), "Bob": _card(BOB)})
    results = svc.compute_live_results(rnd)

    assert results["grossWinner"] == "Bob"
    assert results["netWinner"] == "Ann"
    assert results["finalScores"]["Ann"]["netTotal"] == 79
    assert results["finalScores"]["Bob"]["netTotal"] == 83
    nassau = results["wagers"][0]["result"]
    assert [s["winner"] for s in nassau["segments"]] == ["Bob", "Ann", "Ann"]
    assert results["winnings"]["totals"] == {"Ann": 10.0, "Bob": 5.0}
    assert results["settlement"] == [{"from": "Bob", "to": "Ann", "amount": 5.0}]
    assert results["netPositions"] == {"Bob": -5.0, "Ann": 5.0}


def test_live_results_do_not_change_the_round():
    rnd = _nassau_round()
    before = dict(rnd)
    svc.compute_live_results(rnd)
    assert rnd == before


def test_end_round_freezes_results():
    rnd = svc.apply_scores(_nassau_round(), {"Ann": _card(ANN), "Bob": _card(BOB)})
    ended = svc.end_round(rnd)
    assert ended["status"] == svc.ENDED
    assert ended["results"]["status"] == svc.ENDED
    assert ended["results"]["endedAt"] == ended["endedAt"]
    assert rnd["status"] == svc.ACTIVE

    with pytest.raises(RoundAlreadyEnded):
        svc.end_round(ended)

    # edits to the stored inputs never reach frozen results
    ended["scores"]["Ann"]["hole1"] = 1
    assert svc.round_results(ended)["settlement"] == ended["results"]["settlement"]


def test_ended_round_rejects_edits():
    ended = svc.end_round(_nassau_round())
    with pytest.raises(RoundNotActive):
        svc.apply_scores(ended, {"Ann": {"hole1": 4}})
    with pytest.raises(RoundNotActive):
        svc.set_teams(ended, "individual")


def test_apply_scores_validates_and_clears():
    rnd = svc.apply_scores(_nassau_round(), {"Ann": {"1": 5, "hole2": 4}})
    assert rnd["scores"]["Ann"] == {"hole1": 5, "hole2": 4}
    rnd = svc.apply_scores(rnd, {"Ann": {"hole2": None}})
    assert rnd["scores"]["Ann"] == {"hole1": 5}
    with pytest.raises(ValidationError):
        svc.apply_scores(rnd, {"Zed": {"hole1": 4}})
    with pytest.raises(ValidationError):
        svc.apply_scores(rnd, {"Ann": {"hole1": 25}})


def test_side_bet_selection_and_payout():
    rnd = svc.start_round(
        PLAYERS,
        HOLE_DATA,
        wagers=[{"id": "ctp", "type": "Side Bet", "name": "Closest to pin", "amount": 5}],
    )
    rnd = svc.apply_bet_selections(rnd, {"Closest to pin": "Bob"})
    results = svc.compute_live_results(rnd)
    assert results["sideBets"][0]["winner"] == "Bob"
    assert results["settlement"] == [{"from": "Ann", "to": "Bob", "amount": 5.0}]

    with pytest.raises(ValidationError):
        svc.apply_bet_selections(rnd, {"Long drive": "Bob"})
    rnd = svc.apply_bet_selections(rnd, {"Closest to pin": None})
    assert rnd["betSelections"] == {}


def test_junk_events_are_sparse():
    rnd = _nassau_round(selected_junk_types=["greenies"], junk_point_values={"greenies": 2})
    rnd = svc.apply_junk_events(rnd, [{"player": "Ann", "hole": 3, "type": "greenies"}])
    assert rnd["junkEvents"] == {"Ann": {"hole3": {"greenies": True}}}
    assert svc.compute_live_results(rnd)["junk"]["totals"] == {"Ann": 2.0, "Bob": 0}

    rnd = svc.apply_junk_events(
        rnd, [{"player": "Ann", "hole": "hole3", "type": "greenies", "value": False}]
    )
    assert rnd["junkEvents"] == {}
    with pytest.raises(ValidationError):
        svc.apply_junk_events(rnd, [{"player": "Ann", "hole": 3, "type": "sandies"}])


def test_round_bets():
    rnd = _nassau_round()
    rnd = svc.add_round_bet(
        rnd,
        {"id": "rb1", "name": "Par on 7", "betType": "twoPlayers", "amount": 10,
         "odds": "+150", "player1": "Ann", "player2": "Bob"},
    )
    rnd = svc.add_round_bet(rnd, {"id": "rb2", "name": "Longest putt", "amount": 4})
    with pytest.raises(ValidationError):
        svc.set_round_bet_winner(rnd, "rb1", "Zed")
    with pytest.raises(ValidationError):
        svc.set_round_bet_winner(rnd, "missing", "Ann")

    rnd = svc.set_round_bet_winner(rnd, "rb1", "Ann")
    rnd = svc.set_round_bet_winner(rnd, "rb2", "Bob")
    results = svc.compute_live_results(rnd)
    assert results["roundBetTransactions"] == [
        {"from": "Bob", "to": "Ann", "amount": 15.0, "betId": "rb1", "name": "Par on 7"}
    ]
    assert results["roundBets"][0]["payout"] == 4.0
    assert results["winnings"]["players"]["Bob"]["roundBets"] == 4.0


def test_rename_carries_round_data():
    rnd = _nassau_round(selected_junk_types=["sandies"])
    rnd = svc.apply_scores(rnd, {"Ann": {"hole1": 5}})
    rnd = svc.apply_junk_events(rnd, [{"player": "Ann", "hole": 1, "type": "sandies"}])
    rnd = svc.add_round_bet(rnd, {"id": "rb", "name": "Putts", "amount": 2})
    rnd = svc.set_round_bet_winner(rnd, "rb", "Ann")

    rnd = svc.edit_round_player(rnd, "p-ann", name="Annie", handicap=8)
    assert rnd["players"][0] == {"playerId": "p-ann", "name": "Annie", "handicap": 8}
    assert rnd["scores"]["Annie"] == {"hole1": 5}
    assert "Ann" not in rnd["scores"]
    assert "Annie" in rnd["junkEvents"]
    assert rnd["roundBets"][0]["winner"] == "Annie"

    with pytest.raises(ValidationError):
        svc.edit_round_player(rnd, "p-ann", name="bob")


def test_teams_settle_as_parties():
    players = PLAYERS + [
        {"playerId": "p-cal", "name": "Cal", "handicap": 10},
        {"playerId": "p-dee", "name": "Dee", "handicap": 4},
    ]
    rnd = svc.start_round(
        players,
        HOLE_DATA,
        wagers=[{"id": "m", "type": "Match Play", "amount": 10}],
    )
    rnd = svc.set_teams(
        rnd,
        "teams",
        [
            {"name": "Red", "playerIds": ["p-ann", "p-bob"]},
            {"name": "Blue", "playerIds": ["p-cal", "p-dee"]},
        ],
    )
    rnd = svc.apply_scores(
        rnd,
        {
            "Ann": {"hole1": 3, "hole2": 3},
            "Bob": {"hole1": 5, "hole2": 5},
            "Cal": {"hole1": 5, "hole2": 5},
            "Dee": {"hole1": 5, "hole2": 5},
        },
    )
    results = svc.compute_live_results(rnd)
    assert results["winnings"]["mode"] == "teams"
    assert results["winnings"]["totals"] == {"Red": 10.0, "Blue": 0.0}
    assert results["settlement"] == [{"from": "Blue", "to": "Red", "amount": 10.0}]

    with pytest.raises(ValidationError):
        svc.set_teams(rnd, "teams", [{"name": "Red", "playerIds": ["nobody"]}, {"name": "Blue"}])
    # a player on two teams would be credited twice
    with pytest.raises(ValidationError):
        svc.set_teams(
            rnd,
            "teams",
            [
                {"name": "Red", "playerIds": ["p-ann"]},
                {"name": "Blue", "playerIds": ["p-ann", "p-bob", "p-cal", "p-dee"]},
            ],
        )
    # a player left off every team would drop out of the totals
    with pytest.raises(ValidationError):
        svc.set_teams(
            rnd,
            "teams",
            [
                {"name": "Red", "playerIds": ["p-ann", "p-bob"]},
                {"name": "Blue", "playerIds": ["p-cal"]},
            ],
        )


SCRATCH = [
    {"playerId": "p-ann", "name": "Ann", "handicap": 0},
    {"playerId": "p-bob", "name": "Bob", "handicap": 0},
    {"playerId": "p-cal", "name": "Cal", "handicap": 0},
    {"playerId": "p-dee", "name": "Dee", "handicap": 0},
]


def _team_round(players, wager, teams, hole1):
    rnd = svc.start_round(
        players,
        HOLE_DATA,
        wagers=[wager],
        team_mode="teams",
        teams=teams,
    )
    return svc.apply_scores(rnd, {name: {"hole1": gross} for name, gross in hole1.items()})


def test_nine_point_one_against_two_settles_the_team_net():
    rnd = _team_round(
        SCRATCH[:3],
        {"id": "n", "type": "9 Point", "amount": 1},
        [
            {"name": "T1", "playerIds": ["p-ann"]},
            {"name": "T2", "playerIds": ["p-bob", "p-cal"]},
        ],
        {"Ann": 4, "Bob": 5, "Cal": 5},
    )
    results = svc.compute_live_results(rnd)
    nets = results["wagers"][0]["result"]["totalWinnings"]
    assert nets == {"Ann": 2.0, "Bob": -1.0, "Cal": -1.0}
    assert results["settlement"] == [{"from": "T2", "to": "T1", "amount": nets["Ann"]}]


def test_skins_two_against_two_settles_the_team_net():
    rnd = _team_round(
        SCRATCH,
        {"id": "s", "type": "Skins", "amount": 1},
        [
            {"name": "T1", "playerIds": ["p-ann", "p-bob"]},
            {"name": "T2", "playerIds": ["p-cal", "p-dee"]},
        ],
        {"Ann": 3, "Bob": 4, "Cal": 4, "Dee": 4},
    )
    results = svc.compute_live_results(rnd)
    nets = results["wagers"][0]["result"]["totalWinnings"]
    assert nets == pytest.approx({"Ann": 0.75, "Bob": -0.25, "Cal": -0.25, "Dee": -0.25})
    # Bob's share of Ann's skin stays inside T1
    assert results["teamWinnings"]["T1"]["skins"] == pytest.approx(0.5)
    assert results["settlement"] == [{"from": "T2", "to": "T1", "amount": 0.5}]


def test_input_fingerprint_tracks_inputs_only():
    rnd = _nassau_round()
    fingerprint = svc.input_fingerprint(rnd)
    assert svc.input_fingerprint({**rnd, "courseName": "Renamed"}) == fingerprint
    changed = svc.apply_scores(rnd, {"Ann": {"hole1": 4}})
    assert svc.input_fingerprint(changed) != fingerprint
