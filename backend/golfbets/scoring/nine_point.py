"""Nine point game for threesomes."""
from typing import Dict, Mapping, Optional

from .net_scores import HOLES, hole_net_scores
from .wagers import NinePoint

POINTS_PER_HOLE = 9
BLITZ_MARGIN = 2


def distribute_points(scores: Mapping[str, int]) -> Dict[str, int]:
    """Split the nine points on one hole between three players.

    A blitz is a unique low score at least two clear of the worst score on
    the hole; the blitzer takes all nine.
    """

    names = list(scores)
    low = min(scores.values())
    high = max(scores.values())
    low_count = sum(1 for value in scores.values() if value == low)

    if low_count == 1 and high - low >= BLITZ_MARGIN:
        return {name: (9 if scores[name] == low else 0) for name in names}
    if low_count == 3:
        return {name: 3 for name in names}
    if low_count == 1:
        losers = [scores[name] for name in names if scores[name] != low]
        if losers[0] == losers[1]:
            return {name: (5 if scores[name] == low else 2) for name in names}
    if low_count == 2:
        return {name: (4 if scores[name] == low else 1) for name in names}
    return {name: 3 for name in names}


def resolve_nine_point(net: Mapping, wager: NinePoint) -> Optional[Dict]:
    order = list(net["order"])
    if len(order) != 3:
        return None

    points = {name: 0 for name in order}
    holes = []
    for number in range(1, HOLES + 1):
        scores = hole_net_scores(net, number)
        if len(scores) != 3:
            continue
        awarded = distribute_points(scores)
        for name, value in awarded.items():
            points[name] += value
        holes.append({"hole": number, "points": awarded})

    total_value = len(holes) * POINTS_PER_HOLE * wager.amount
    liability = total_value / 3
    gross = {name: points[name] * wager.amount for name in order}
    return {
        "betId": wager.id,
        "name": wager.name,
        "type": wager.type,
        "amount": wager.amount,
        "holes": holes,
        "holesPlayed": len(holes),
        "points": points,
        "totalValue": total_value,
        "grossWinnings": gross,
        "totalWinnings": {name: gross[name] - liability for name in order},
    }
