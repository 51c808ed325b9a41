"""Wager definitions as a tagged union, one dataclass per wager kind."""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional, Union

SIDE_BET = "Side Bet"
NASSAU = "Nassau"
SKINS = "Skins"
MATCH_PLAY = "Match Play"
NINE_POINT = "9 Point"

WAGER_LABELS = (SIDE_BET, NASSAU, SKINS, MATCH_PLAY, NINE_POINT)


def money(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return amount if amount == amount else 0.0


@dataclass(frozen=True)
class SideBet:
    id: str
    name: str
    amount: float
    type: str = SIDE_BET


@dataclass(frozen=True)
class Nassau:
    id: str
    amount: float
    name: str = NASSAU
    type: str = NASSAU


@dataclass(frozen=True)
class Skins:
    id: str
    amount: float
    carry_over: bool = False
    name: str = SKINS
    type: str = SKINS


@dataclass(frozen=True)
class MatchPlay:
    id: str
    amount: float
    name: str = MATCH_PLAY
    type: str = MATCH_PLAY


@dataclass(frozen=True)
class NinePoint:
    id: str
    amount: float
    name: str = NINE_POINT
    type: str = NINE_POINT


Wager = Union[SideBet, Nassau, Skins, MatchPlay, NinePoint]

_CANONICAL = {
    "sidebet": SIDE_BET,
    "side": SIDE_BET,
    "nassau": NASSAU,
    "skins": SKINS,
    "skin": SKINS,
    "matchplay": MATCH_PLAY,
    "match": MATCH_PLAY,
    "9point": NINE_POINT,
    "ninepoint": NINE_POINT,
    "ninepoints": NINE_POINT,
    "9points": NINE_POINT,
}


def canonical_type(raw: Any) -> Optional[str]:
    """Map loose type spellings (``match_play``, ``NinePoint``) to a label."""
    if not isinstance(raw, str):
        return None
    key = re.sub(r"[^a-z0-9]", "", raw.lower())
    return _CANONICAL.get(key)


def parse_wager(raw: Mapping[str, Any]) -> Optional[Wager]:
    """Build the wager variant for a stored bet dict, or ``None`` if unknown."""

    kind = canonical_type(raw.get("type"))
    if kind is None:
        return None
    wager_id = str(raw.get("id") or "")
    amount = money(raw.get("amount"))
    name = (raw.get("name") or "").strip() if isinstance(raw.get("name"), str) else ""
    if kind == SIDE_BET:
        return SideBet(id=wager_id, name=name or SIDE_BET, amount=amount)
    if kind == NASSAU:
        return Nassau(id=wager_id, amount=amount, name=name or NASSAU)
    if kind == SKINS:
        carry = raw.get("carryOver", raw.get("carry_over", False))
        return Skins(id=wager_id, amount=amount, carry_over=bool(carry), name=name or SKINS)
    if kind == MATCH_PLAY:
        return MatchPlay(id=wager_id, amount=amount, name=name or MATCH_PLAY)
    return NinePoint(id=wager_id, amount=amount, name=name or NINE_POINT)


def wager_to_dict(wager: Wager) -> dict:
    data = asdict(wager)
    if isinstance(wager, Skins):
        data["carryOver"] = data.pop("carry_over")
    return data
