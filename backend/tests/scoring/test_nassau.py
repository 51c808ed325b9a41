from golfbets.scoring.nassau import resolve_nassau
from golfbets.scoring.wagers import Nassau

ANN = [5, 4, 6, 5, 5, 4, 5, 6, 5, 4, 4, 5, 5, 4, 3, 4, 6, 5]
BOB = [4, 3, 5, 5, 4, 3, 5, 6, 5, 5, 3, 6, 5, 5, 4, 5, 5, 5]


def _segment(result, name):
    return next(s for s in result["segments"] if s["segment"] == name)


def test_head_to_head_segments(make_net):
    net = make_net({"Ann": ANN, "Bob": BOB}, handicaps={"Ann": 10, "Bob": 4})
    result = resolve_nassau(net, Nassau(id="n", amount=5.0))

    front = _segment(result, "front9")
    assert front["winner"] == "Bob"
    assert front["upBy"] == 2
    back = _segment(result, "back9")
    assert (back["winner"], back["upBy"]) == ("Ann", 6)
    total = _segment(result, "total")
    assert (total["winner"], total["upBy"]) == ("Ann", 4)

    assert result["grossWinnings"] == {"Ann": 10.0, "Bob": 5.0}
    assert result["totalWinnings"] == {"Ann": 5.0, "Bob": -5.0}
    assert result["matchups"] == []


def test_halved_segment_pays_nothing(make_net):
    net = make_net({"Ann": [4] * 18, "Bob": [4] * 9 + [5] * 9})
    result = resolve_nassau(net, Nassau(id="n", amount=2.0))
    assert _segment(result, "front9")["winner"] is None
    assert _segment(result, "back9")["winner"] == "Ann"
    assert result["grossWinnings"] == {"Ann": 4.0, "Bob": 0.0}


def test_unfinished_segment_is_not_contested(make_net):
    net = make_net({"Ann": [4] * 9, "Bob": [5] * 9})
    result = resolve_nassau(net, Nassau(id="n", amount=1.0))
    back = _segment(result, "back9")
    assert back["scores"] is None
    assert back["winner"] is None
    # front and total are both decided on the holes played
    assert result["grossWinnings"] == {"Ann": 2.0, "Bob": 0.0}


def test_three_players_play_every_pairing(make_net):
    net = make_net(
        {"Ann": [4] * 9, "Bob": [5] * 9, "Cal": [4] * 8 + [5]},
    )
    result = resolve_nassau(net, Nassau(id="n", amount=1.0))
    assert len(result["matchups"]) == 6
    assert result["grossWinnings"] == {"Ann": 4.0, "Bob": 0.0, "Cal": 2.0}
    assert result["totalWinnings"] == {"Ann": 4.0, "Bob": -4.0, "Cal": 0.0}
    front = _segment(result, "front9")
    assert front["winnings"] == {"Ann": 2.0, "Bob": -2.0, "Cal": 0.0}


def test_needs_two_scoring_players(make_net):
    net = make_net({"Ann": [4] * 9, "Bob": []})
    assert resolve_nassau(net, Nassau(id="n", amount=1.0)) is None
