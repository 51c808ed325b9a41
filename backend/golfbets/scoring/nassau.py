"""Nassau: front nine, back nine and overall, each a separate bet."""
from itertools import combinations
from typing import Dict, List, Mapping, Optional

from .net_scores import scoring_players
from .wagers import Nassau

SEGMENTS = (
    ("front9", "front9Net"),
    ("back9", "back9Net"),
    ("total", "netTotal"),
)


def _segment_scores(net: Mapping, field: str) -> Optional[Dict[str, int]]:
    scores = {name: net["players"][name][field] for name in net["order"]}
    if any(value <= 0 for value in scores.values()):
        return None
    return scores


def _head_to_head(net: Mapping, wager: Nassau) -> Dict:
    a, b = net["order"]
    gross = {a: 0.0, b: 0.0}
    total = {a: 0.0, b: 0.0}
    segments: List[Dict] = []
    for segment, field in SEGMENTS:
        scores = _segment_scores(net, field)
        winner = None
        up_by = 0
        if scores is not None:
            up_by = abs(scores[a] - scores[b])
            if scores[a] != scores[b]:
                winner = a if scores[a] < scores[b] else b
                loser = b if winner == a else a
                gross[winner] += wager.amount
                total[winner] += wager.amount
                total[loser] -= wager.amount
        segments.append(
            {"segment": segment, "scores": scores, "winner": winner, "upBy": up_by}
        )
    return {"segments": segments, "matchups": [], "grossWinnings": gross, "totalWinnings": total}


def _round_robin(net: Mapping, wager: Nassau) -> Dict:
    order = net["order"]
    gross = {name: 0.0 for name in order}
    total = {name: 0.0 for name in order}
    segments: List[Dict] = []
    matchups: List[Dict] = []
    for segment, field in SEGMENTS:
        scores = _segment_scores(net, field)
        segment_net = {name: 0.0 for name in order}
        if scores is not None:
            for a, b in combinations(order, 2):
                winner = None
                if scores[a] != scores[b]:
                    winner = a if scores[a] < scores[b] else b
                    loser = b if winner == a else a
                    gross[winner] += wager.amount
                    segment_net[winner] += wager.amount
                    segment_net[loser] -= wager.amount
                matchups.append(
                    {
                        "segment": segment,
                        "players": [a, b],
                        "winner": winner,
                        "upBy": abs(scores[a] - scores[b]),
                    }
                )
        for name, value in segment_net.items():
            total[name] += value
        segments.append(
            {"segment": segment, "scores": scores, "winnings": segment_net}
        )
    return {
        "segments": segments,
        "matchups": matchups,
        "grossWinnings": gross,
        "totalWinnings": total,
    }


def resolve_nassau(net: Mapping, wager: Nassau) -> Optional[Dict]:
    """Settle a Nassau; ``None`` until two players have scores.

    Two players play each segment head to head. Three or more play every
    pairing, each pairing paying ``amount`` per segment.
    """

    if len(scoring_players(net)) < 2:
        return None
    if len(net["order"]) == 2:
        outcome = _head_to_head(net, wager)
    else:
        outcome = _round_robin(net, wager)
    return {
        "betId": wager.id,
        "name": wager.name,
        "type": wager.type,
        "amount": wager.amount,
        **outcome,
    }
