import os, sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))
from golfbets.scoring.net_scores import compute_net_scores

PARS = [4, 3, 5, 4, 4, 3, 4, 5, 4, 4, 3, 5, 4, 4, 3, 4, 5, 4]
INDICES = [7, 15, 1, 11, 3, 17, 9, 5, 13, 8, 16, 2, 12, 4, 18, 10, 6, 14]


@pytest.fixture
def hole_data():
    return {
        f"hole{n}": {"par": par, "index": index}
        for n, (par, index) in enumerate(zip(PARS, INDICES), start=1)
    }


@pytest.fixture
def make_net(hole_data):
    """Build net scores from ``{name: [gross per hole, ...]}`` lists.

    Handicaps default to 0 so gross and net agree unless a test says otherwise.
    """

    def _make(cards, handicaps=None, mode="lowest"):
        handicaps = handicaps or {}
        players = [{"name": name, "handicap": handicaps.get(name, 0)} for name in cards]
        scores = {
            name: {f"hole{n}": s for n, s in enumerate(gross, start=1) if s}
            for name, gross in cards.items()
        }
        return compute_net_scores(players, hole_data, scores, mode)

    return _make
