"""Turn per-party winnings into who-pays-whom."""
from typing import Dict, List, Mapping, Tuple

TOLERANCE = 0.01


def _payment(payer: str, payee: str, amount: float) -> Dict:
    return {"from": payer, "to": payee, "amount": round(amount, 2)}


def compute_settlement(totals: Mapping[str, float]) -> List[Dict]:
    """Payments that square up ``totals`` (party -> cross-wager winnings).

    Two parties settle the difference directly. With three or more, anyone
    more than a cent above the group average is a winner and everyone else
    a loser; each loser owes an equal share of the winners' combined excess,
    split between winners in proportion to each winner's excess.
    """

    parties = list(totals)
    if len(parties) < 2:
        return []

    if len(parties) == 2:
        a, b = parties
        diff = totals[a] - totals[b]
        if abs(diff) <= TOLERANCE:
            return []
        payer, payee = (b, a) if diff > 0 else (a, b)
        return [_payment(payer, payee, abs(diff))]

    average = sum(totals.values()) / len(parties)
    excess = {
        name: totals[name] - average
        for name in parties
        if totals[name] > average + TOLERANCE
    }
    losers = [name for name in parties if name not in excess]
    if not excess or not losers:
        return []

    total_excess = sum(excess.values())
    per_loser = total_excess / len(losers)
    owed: Dict[Tuple[str, str], float] = {}
    for loser in losers:
        for winner, above in excess.items():
            key = (loser, winner)
            owed[key] = owed.get(key, 0.0) + per_loser * above / total_excess

    return [
        _payment(payer, payee, amount)
        for (payer, payee), amount in owed.items()
        if amount >= TOLERANCE
    ]


def net_positions(payments: List[Mapping]) -> Dict[str, float]:
    """Net cash movement per party implied by a list of payments."""
    positions: Dict[str, float] = {}
    for payment in payments:
        positions[payment["from"]] = positions.get(payment["from"], 0.0) - payment["amount"]
        positions[payment["to"]] = positions.get(payment["to"], 0.0) + payment["amount"]
    return positions
