"""Skins: one prize per hole for the unique low net score."""
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional, Tuple

from .net_scores import HOLES, hole_net_scores, scoring_players
from .wagers import Skins


@dataclass(frozen=True)
class SkinsState:
    carry: int = 0
    skins_won: Tuple[Tuple[str, int], ...] = ()
    holes: Tuple[Dict, ...] = field(default_factory=tuple)


def unique_low(scores: Mapping[str, int]) -> Optional[str]:
    if not scores:
        return None
    low = min(scores.values())
    leaders = [name for name, value in scores.items() if value == low]
    return leaders[0] if len(leaders) == 1 else None


def advance(state: SkinsState, number: int, scores: Mapping[str, int], carry_over: bool) -> SkinsState:
    """Fold one hole into the running skins state."""

    if len(scores) < 2:
        return state
    winner = unique_low(scores)
    won = dict(state.skins_won)
    if winner is not None:
        awarded = 1 + state.carry
        won[winner] = won.get(winner, 0) + awarded
        carry = 0
    else:
        awarded = 0
        carry = state.carry + 1 if carry_over else 0
    record = {"hole": number, "winner": winner, "skins": awarded, "carry": carry}
    return replace(
        state,
        carry=carry,
        skins_won=tuple(won.items()),
        holes=state.holes + (record,),
    )


def _net_winnings(gross: Dict[str, float]) -> Dict[str, float]:
    players = list(gross)
    total = sum(gross.values())
    if len(players) == 2:
        winners = [p for p in players if gross[p] > 0]
        losers = [p for p in players if gross[p] <= 0]
        if not winners or not losers:
            return dict(gross)
        debt = total / len(losers)
        return {p: (gross[p] if p in winners else -debt) for p in players}
    share = total / len(players)
    return {p: gross[p] - share for p in players}


def resolve_skins(net: Mapping, wager: Skins) -> Optional[Dict]:
    if len(scoring_players(net)) < 2:
        return None
    state = SkinsState()
    for number in range(1, HOLES + 1):
        state = advance(state, number, hole_net_scores(net, number), wager.carry_over)

    won = dict(state.skins_won)
    skins_won = {name: won.get(name, 0) for name in net["order"]}
    gross = {name: count * wager.amount for name, count in skins_won.items()}
    return {
        "betId": wager.id,
        "name": wager.name,
        "type": wager.type,
        "amount": wager.amount,
        "carryOver": wager.carry_over,
        "holes": list(state.holes),
        "skinsWon": skins_won,
        "pendingCarry": state.carry,
        "totalSkinsValue": sum(gross.values()),
        "grossWinnings": gross,
        "totalWinnings": _net_winnings(gross),
    }
