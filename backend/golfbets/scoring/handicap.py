"""Handicap stroke allocation."""
from typing import Any, Dict, List, Mapping

HOLES_PER_PASS = 18
HANDICAP_MODES = ("lowest", "gross")


def coerce_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, float):
        return int(value) if value == value else default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def strokes_for_hole(course_handicap: Any, hole_index: Any) -> int:
    """Return the strokes a player receives (or gives back) on a hole.

    Strokes are handed out in passes of 18: every pass gives one stroke to
    each hole whose index is within the remaining budget. A negative
    ("plus") handicap gives the same number of strokes back. An index of 0
    or anything unparseable means no strokes.
    """

    index = coerce_int(hole_index)
    if index <= 0:
        return 0
    handicap = coerce_int(course_handicap)
    remaining = abs(handicap)
    strokes = 0
    while remaining > 0:
        if index <= min(remaining, HOLES_PER_PASS):
            strokes += 1
        remaining -= HOLES_PER_PASS
    return strokes if handicap >= 0 else -strokes


def adjusted_handicaps(players: List[Mapping], mode: str = "lowest") -> Dict[str, int]:
    """Map player name to the handicap they play off under ``mode``."""

    raw = {p.get("name"): coerce_int(p.get("handicap")) for p in players if p.get("name")}
    if not raw or mode == "gross":
        return raw
    lowest = min(raw.values())
    return {name: value - lowest for name, value in raw.items()}
