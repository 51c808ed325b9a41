from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..scoring.handicap import coerce_int
from ..scoring.junk import JUNK_TYPES
from ..scoring.net_scores import HOLES, hole_key

MAX_GROSS_SCORE = 20
HOLE_KEYS = tuple(hole_key(n) for n in range(1, HOLES + 1))


class ValidationError(Exception):
    """Raised when submitted round data is invalid."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


def normalize_hole_key(raw: Any) -> str:
    """Accept ``"hole7"``, ``"7"`` or ``7`` and return ``"hole7"``."""

    if isinstance(raw, bool):
        raise ValidationError(f"Invalid hole {raw!r}.")
    text = str(raw).strip().lower()
    if text.startswith("hole"):
        text = text[4:]
    number = coerce_int(text)
    if not 1 <= number <= HOLES:
        raise ValidationError(f"Hole must be between 1 and {HOLES} (got {raw!r}).")
    return hole_key(number)


def normalize_hole_data(hole_data: Optional[Mapping[str, Any]]) -> Dict[str, Dict[str, int]]:
    """Validate course hole data.

    At least one hole must be present. Pars must be 3-5; indices are kept
    when they fall in 1-18 and zeroed otherwise so the hole simply gets no
    handicap strokes. Duplicate indices are allowed.
    """

    if not isinstance(hole_data, Mapping) or not hole_data:
        raise ValidationError("Hole data is required to start a round.")

    normalized: Dict[str, Dict[str, int]] = {}
    for raw_key, info in hole_data.items():
        key = normalize_hole_key(raw_key)
        if not isinstance(info, Mapping):
            raise ValidationError(f"{key} must be an object with par and index.")
        par = coerce_int(info.get("par"))
        if par not in (3, 4, 5):
            raise ValidationError(f"{key} par must be 3, 4 or 5.")
        index = coerce_int(info.get("index"))
        if not 1 <= index <= HOLES:
            index = 0
        normalized[key] = {"par": par, "index": index}
    return {key: normalized[key] for key in HOLE_KEYS if key in normalized}


def validate_roster(players: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Check the roster has players with unique, non-empty names."""

    if not players:
        raise ValidationError("A round needs at least one player.")
    seen = set()
    roster = []
    for i, player in enumerate(players, start=1):
        name = (player.get("name") or "").strip()
        if not name:
            raise ValidationError(f"Player #{i} must have a name.")
        if name.lower() in seen:
            raise ValidationError(f"Player names must be unique within a round ({name!r}).")
        seen.add(name.lower())
        roster.append(
            {
                "playerId": str(player.get("playerId") or player.get("id") or name),
                "name": name,
                "handicap": coerce_int(player.get("handicap")),
            }
        )
    return roster


def validate_gross_score(value: Any, *, player: str, hole: str) -> Optional[int]:
    """Return a gross score or ``None`` to clear the hole."""

    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Score for {player} on {hole} must be an integer.")
    score = coerce_int(value, default=-1)
    if score == 0:
        return None
    if score < 1 or score > MAX_GROSS_SCORE:
        raise ValidationError(
            f"Score for {player} on {hole} must be between 1 and {MAX_GROSS_SCORE}."
        )
    return score


def validate_junk_types(types: Optional[Sequence[str]]) -> List[str]:
    if types is None:
        return []
    unknown = [t for t in types if t not in JUNK_TYPES]
    if unknown:
        raise ValidationError(f"Unknown junk types: {', '.join(unknown)}.")
    return list(dict.fromkeys(types))
