"""Manually settled side bets and on-the-fly round bets."""
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .wagers import SideBet, money

EVERYONE = "everyone"
TWO_PLAYERS = "twoPlayers"

_FRACTION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*[/:\-]\s*(\d+(?:\.\d+)?)\s*$")


def odds_multiplier(odds: Any) -> float:
    """Profit per unit staked for the given odds.

    Accepts American odds (``+150``, ``-200``), fractional odds (``3/1``,
    ``5:2``, ``3-1``), plain numbers read as x-to-1 and ``even``/empty for
    even money. Anything unreadable is even money.
    """

    if odds is None or isinstance(odds, bool):
        return 1.0
    if isinstance(odds, (int, float)):
        return _from_number(float(odds), signed=False)
    text = str(odds).strip().lower()
    if not text or text in {"even", "evens", "ev"}:
        return 1.0
    fraction = _FRACTION_RE.match(text)
    if fraction:
        numerator, denominator = (float(g) for g in fraction.groups())
        return numerator / denominator if denominator > 0 else 1.0
    try:
        value = float(text)
    except ValueError:
        return 1.0
    return _from_number(value, signed=text[0] in "+-")


def _from_number(value: float, signed: bool) -> float:
    if value != value or value == 0:
        return 1.0
    if signed or abs(value) >= 100:
        if value >= 100:
            return value / 100
        if value <= -100:
            return 100 / abs(value)
        return 1.0
    return value if value > 0 else 1.0


def resolve_side_bets(
    wagers: Sequence[SideBet], selections: Mapping[str, Any]
) -> List[Dict]:
    """One entry per side bet, paying ``amount`` to the selected winner."""

    results = []
    for wager in wagers:
        winner = selections.get(wager.name) or selections.get(wager.id) or None
        results.append(
            {
                "betId": wager.id,
                "name": wager.name,
                "type": wager.type,
                "amount": wager.amount,
                "winner": winner,
            }
        )
    return results


def round_bet_payout(bet: Mapping[str, Any]) -> float:
    return money(bet.get("amount")) * odds_multiplier(bet.get("odds"))


def resolve_everyone_bets(round_bets: Sequence[Mapping[str, Any]]) -> List[Dict]:
    results = []
    for bet in round_bets:
        if bet.get("betType", EVERYONE) != EVERYONE:
            continue
        winner = bet.get("winner") or None
        results.append(
            {
                "betId": bet.get("id"),
                "name": bet.get("name"),
                "amount": money(bet.get("amount")),
                "odds": bet.get("odds"),
                "winner": winner,
                "payout": round_bet_payout(bet) if winner else 0.0,
            }
        )
    return results


def settle_round_bets(round_bets: Sequence[Mapping[str, Any]]) -> List[Dict]:
    """Individual transactions for decided two-player round bets.

    ``player1`` backs the proposition at ``odds``: if they win, ``player2``
    pays ``amount`` times the odds; if ``player2`` wins, ``player1`` pays
    the stake.
    """

    transactions = []
    for bet in round_bets:
        if bet.get("betType") != TWO_PLAYERS:
            continue
        player1, player2 = bet.get("player1"), bet.get("player2")
        winner = bet.get("winner")
        if not player1 or not player2 or player1 == player2:
            continue
        if winner == player1:
            payer, payee, amount = player2, player1, round_bet_payout(bet)
        elif winner == player2:
            payer, payee, amount = player1, player2, money(bet.get("amount"))
        else:
            continue
        amount = round(amount, 2)
        if amount < 0.01:
            continue
        transactions.append(
            {
                "from": payer,
                "to": payee,
                "amount": amount,
                "betId": bet.get("id"),
                "name": bet.get("name"),
            }
        )
    return transactions


def find_round_bet(round_bets: Sequence[Mapping], bet_id: str) -> Optional[Mapping]:
    return next((b for b in round_bets if b.get("id") == bet_id), None)
