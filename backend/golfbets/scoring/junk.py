"""Junk: per-hole bonus and penalty events tracked outside stroke play."""
from typing import Any, Dict, Iterable, Mapping, Optional

from .wagers import money

JUNK_TYPES = ("greenies", "sandies", "poleys", "gainingDots", "losingDots")
NEGATIVE_JUNK = {"losingDots"}
DEFAULT_POINT_VALUE = 1.0


def junk_value(junk_type: str, point_values: Mapping[str, Any], default: float = DEFAULT_POINT_VALUE) -> float:
    raw = point_values.get(junk_type)
    value = abs(money(raw)) if raw is not None else default
    return -value if junk_type in NEGATIVE_JUNK else value


def tally_junk(
    players: Iterable[str],
    junk_events: Optional[Mapping[str, Mapping[str, Mapping[str, Any]]]],
    selected_types: Optional[Iterable[str]] = None,
    point_values: Optional[Mapping[str, Any]] = None,
    default_value: float = DEFAULT_POINT_VALUE,
) -> Dict:
    """Count junk per player and type and price it.

    ``junk_events`` is the sparse ``player -> hole -> type -> True`` map;
    only truthy flags on selected types count. Events for players outside
    the roster are ignored.
    """

    junk_events = junk_events or {}
    point_values = point_values or {}
    active = list(selected_types) if selected_types is not None else list(JUNK_TYPES)
    values = {t: junk_value(t, point_values, default_value) for t in active}

    counts: Dict[str, Dict[str, int]] = {}
    totals: Dict[str, float] = {}
    for name in players:
        per_type = {t: 0 for t in active}
        for flags in (junk_events.get(name) or {}).values():
            if not isinstance(flags, Mapping):
                continue
            for junk_type, flagged in flags.items():
                if flagged and junk_type in per_type:
                    per_type[junk_type] += 1
        counts[name] = per_type
        totals[name] = sum(per_type[t] * values[t] for t in active)

    return {"types": active, "values": values, "counts": counts, "totals": totals}
