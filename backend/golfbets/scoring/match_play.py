"""Match play: holes won outright, with early finish for singles."""
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .net_scores import HOLES, TIE, hole_net_scores, scoring_players
from .skins import unique_low
from .wagers import MatchPlay


@dataclass(frozen=True)
class MatchState:
    hole_wins: Tuple[Tuple[str, int], ...] = ()
    differential: int = 0
    decided_on_hole: Optional[int] = None
    decided_result: Optional[str] = None
    holes: Tuple[Dict, ...] = ()


def advance(state: MatchState, number: int, scores: Mapping[str, int], order: Sequence[str]) -> MatchState:
    """Fold one hole into the match.

    ``differential`` is kept from the first player's point of view and only
    means anything for a two-player match; the match is closed out once the
    lead exceeds the holes left to play.
    """

    if len(scores) < len(order) or len(order) < 2:
        return state
    winner = unique_low(scores)
    wins = dict(state.hole_wins)
    differential = state.differential
    if winner is not None:
        wins[winner] = wins.get(winner, 0) + 1
        if len(order) == 2:
            differential += 1 if winner == order[0] else -1

    decided_on_hole = state.decided_on_hole
    decided_result = state.decided_result
    remaining = HOLES - number
    if (
        len(order) == 2
        and decided_on_hole is None
        and remaining > 0
        and abs(differential) > remaining
    ):
        decided_on_hole = number
        decided_result = f"{abs(differential)} & {remaining}"

    record = {"hole": number, "winner": winner, "differential": differential}
    return replace(
        state,
        hole_wins=tuple(wins.items()),
        differential=differential,
        decided_on_hole=decided_on_hole,
        decided_result=decided_result,
        holes=state.holes + (record,),
    )


def _strict_leader(counts: Mapping[str, int]) -> Optional[str]:
    if not counts:
        return None
    best = max(counts.values())
    leaders = [name for name, value in counts.items() if value == best]
    return leaders[0] if len(leaders) == 1 else TIE


def _singles_payouts(order: Sequence[str], winner: Optional[str], amount: float):
    gross = {name: 0.0 for name in order}
    total = {name: 0.0 for name in order}
    if winner and winner != TIE:
        gross[winner] = amount * (len(order) - 1)
        for name in order:
            total[name] = gross[winner] if name == winner else -amount
    return gross, total


def _team_payouts(
    order: Sequence[str],
    teams: Sequence[Mapping],
    hole_wins: Mapping[str, int],
    amount: float,
):
    gross = {name: 0.0 for name in order}
    total = {name: 0.0 for name in order}
    team_wins: Dict[str, int] = {}
    members_by_team: Dict[str, List[str]] = {}
    for team in teams:
        members = [m for m in team.get("members", []) if m in gross]
        if not members:
            continue
        members_by_team[team["name"]] = members
        team_wins[team["name"]] = sum(hole_wins.get(m, 0) for m in members)

    leader = _strict_leader(team_wins) if len(team_wins) >= 2 else None
    if leader and leader != TIE:
        others = len(team_wins) - 1
        winners = members_by_team[leader]
        share = amount * others / len(winners)
        for name in winners:
            gross[name] = share
            total[name] = share
        for team_name, members in members_by_team.items():
            if team_name == leader:
                continue
            for name in members:
                total[name] = -amount / len(members)
    return team_wins, leader, gross, total


def resolve_match_play(
    net: Mapping, wager: MatchPlay, teams: Optional[Sequence[Mapping]] = None
) -> Optional[Dict]:
    """Settle a match play bet.

    ``teams`` is a list of ``{"name", "members"}`` with members given as
    roster names; when provided the match is decided on team hole totals.
    """

    order = list(net["order"])
    if len(scoring_players(net)) < 2 or len(order) < 2:
        return None

    state = MatchState()
    for number in range(1, HOLES + 1):
        state = advance(state, number, hole_net_scores(net, number), order)
    wins = dict(state.hole_wins)
    hole_wins = {name: wins.get(name, 0) for name in order}

    result: Dict = {
        "betId": wager.id,
        "name": wager.name,
        "type": wager.type,
        "amount": wager.amount,
        "holes": list(state.holes),
        "holeWins": hole_wins,
        "holesPlayed": len(state.holes),
    }

    if len(order) == 2:
        diff = state.differential
        winner = None
        if diff != 0:
            winner = order[0] if diff > 0 else order[1]
        if state.decided_result:
            status = state.decided_result
        elif diff == 0:
            status = "All Square"
        else:
            status = f"{abs(diff)} up"
        result.update(
            {
                "differential": diff,
                "decidedOnHole": state.decided_on_hole,
                "result": status,
                "winner": winner,
            }
        )
    else:
        winner = _strict_leader(hole_wins)
        result.update(
            {
                "differential": None,
                "decidedOnHole": None,
                "result": None,
                "winner": winner,
            }
        )

    if teams:
        team_wins, team_winner, gross, total = _team_payouts(
            order, teams, hole_wins, wager.amount
        )
        result.update({"teamWins": team_wins, "teamWinner": team_winner})
    else:
        gross, total = _singles_payouts(order, result["winner"], wager.amount)
    result["grossWinnings"] = gross
    result["totalWinnings"] = total
    return result
