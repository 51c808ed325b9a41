"""Per-hole net scores and round totals."""
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .handicap import adjusted_handicaps, coerce_int, strokes_for_hole

HOLES = 18
FRONT_NINE = range(1, 10)
BACK_NINE = range(10, 19)
TIE = "Tie"


def hole_key(number: int) -> str:
    return f"hole{number}"


def parse_gross(value: Any) -> int:
    """Return a gross score, or 0 when the hole has not been played."""
    score = coerce_int(value)
    return score if score >= 1 else 0


def net_score(gross: int, strokes: int) -> int:
    return max(1, gross - strokes)


def pick_leader(totals: Iterable[Tuple[str, int]]) -> Optional[str]:
    """Lowest positive total wins; an equal total turns the leader into a tie.

    Totals are visited in the order given. A strictly lower total replaces
    the current leader (clearing a tie); a total equal to the current best
    sets the leader to ``TIE``.
    """

    leader: Optional[str] = None
    best: Optional[int] = None
    for name, total in totals:
        if total <= 0:
            continue
        if best is None or total < best:
            best = total
            leader = name
        elif total == best:
            leader = TIE
    return leader


def _player_card(
    scores: Mapping[str, Any], hole_data: Mapping[str, Mapping], handicap: int
) -> Dict:
    holes: Dict[str, Dict] = {}
    gross_by_hole: Dict[int, int] = {}
    net_by_hole: Dict[int, int] = {}
    for number in range(1, HOLES + 1):
        key = hole_key(number)
        info = hole_data.get(key) or {}
        strokes = strokes_for_hole(handicap, info.get("index"))
        gross = parse_gross(scores.get(key))
        net = net_score(gross, strokes) if gross > 0 else None
        holes[key] = {"grossScore": gross, "strokes": strokes, "netScore": net}
        if net is not None:
            gross_by_hole[number] = gross
            net_by_hole[number] = net

    def _sum(values: Dict[int, int], numbers: Iterable[int]) -> int:
        return sum(values[n] for n in numbers if n in values)

    return {
        "handicap": handicap,
        "holes": holes,
        "holesPlayed": len(net_by_hole),
        "grossTotal": sum(gross_by_hole.values()),
        "netTotal": sum(net_by_hole.values()),
        "front9Gross": _sum(gross_by_hole, FRONT_NINE),
        "back9Gross": _sum(gross_by_hole, BACK_NINE),
        "front9Net": _sum(net_by_hole, FRONT_NINE),
        "back9Net": _sum(net_by_hole, BACK_NINE),
    }


def compute_net_scores(
    players: List[Mapping],
    hole_data: Optional[Mapping[str, Mapping]],
    raw_scores: Optional[Mapping[str, Mapping[str, Any]]],
    handicap_mode: str = "lowest",
) -> Dict:
    """Build every player's scorecard and the gross/net leaders.

    ``players`` is the round roster (``name``/``handicap`` dicts) in display
    order, ``raw_scores`` maps player name to ``{"hole1": 5, ...}``. Scores
    for names outside the roster are ignored.
    """

    hole_data = hole_data or {}
    raw_scores = raw_scores or {}
    handicaps = adjusted_handicaps(players, handicap_mode)
    order: List[str] = []
    cards: Dict[str, Dict] = {}
    for player in players:
        name = player.get("name")
        if not name or name in cards:
            continue
        order.append(name)
        cards[name] = _player_card(
            raw_scores.get(name) or {}, hole_data, handicaps.get(name, 0)
        )

    return {
        "handicapMode": handicap_mode,
        "order": order,
        "players": cards,
        "grossWinner": pick_leader((n, cards[n]["grossTotal"]) for n in order),
        "netWinner": pick_leader((n, cards[n]["netTotal"]) for n in order),
    }


def hole_net_scores(net: Mapping, number: int) -> Dict[str, int]:
    """Net scores recorded on hole ``number``, in roster order."""
    key = hole_key(number)
    scores: Dict[str, int] = {}
    for name in net.get("order", []):
        value = net["players"][name]["holes"][key]["netScore"]
        if value is not None:
            scores[name] = value
    return scores


def scoring_players(net: Mapping) -> List[str]:
    """Players with at least one recorded score."""
    return [n for n in net.get("order", []) if net["players"][n]["holesPlayed"] > 0]
