"""Round lifecycle: Active while scores come in, Ended once results are frozen.

Everything here works on plain round snapshots (dicts shaped like the stored
round) and returns new snapshots; nothing touches the database. Live results
are recomputed from scratch by :func:`compute_live_results`; ending a round
stores one copy of those results that is never recomputed.
"""

from __future__ import annotations

import copy
import functools
import hashlib
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from ..config import DEFAULT_HANDICAP_MODE, DEFAULT_JUNK_POINT_VALUE
from ..exceptions import RoundAlreadyEnded, RoundNotActive, RoundStartError
from ..scoring.junk import tally_junk
from ..scoring.match_play import resolve_match_play
from ..scoring.nassau import resolve_nassau
from ..scoring.net_scores import compute_net_scores
from ..scoring.nine_point import resolve_nine_point
from ..scoring.settlement import compute_settlement, net_positions
from ..scoring.side_bets import (
    EVERYONE,
    TWO_PLAYERS,
    find_round_bet,
    resolve_everyone_bets,
    resolve_side_bets,
    settle_round_bets,
)
from ..scoring.skins import resolve_skins
from ..scoring.wagers import (
    SKINS,
    MatchPlay,
    Nassau,
    NinePoint,
    SideBet,
    Skins,
    Wager,
    money,
    parse_wager,
    wager_to_dict,
)
from ..scoring.winnings import aggregate_winnings, resolve_team_members
from .validation import (
    ValidationError,
    normalize_hole_data,
    normalize_hole_key,
    validate_gross_score,
    validate_junk_types,
    validate_roster,
)

logger = logging.getLogger(__name__)

ACTIVE = "Active"
ENDED = "Ended"
TEAM_MODES = ("individual", "teams")

# Fields that feed the live computation; anything else is bookkeeping.
INPUT_FIELDS = (
    "players",
    "teamMode",
    "teams",
    "holeData",
    "scores",
    "wagers",
    "betSelections",
    "roundBets",
    "selectedJunkTypes",
    "junkPointValues",
    "junkEvents",
    "handicapMode",
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _resolve_wager(net: Mapping, wager: Wager, teams: Sequence[Mapping]) -> Optional[Dict]:
    if isinstance(wager, Skins):
        return resolve_skins(net, wager)
    if isinstance(wager, Nassau):
        return resolve_nassau(net, wager)
    if isinstance(wager, MatchPlay):
        return resolve_match_play(net, wager, teams or None)
    if isinstance(wager, NinePoint):
        return resolve_nine_point(net, wager)
    return None


def _normalize_teams(team_mode: str, teams: Optional[Sequence[Mapping]], roster: Sequence[Mapping]) -> List[Dict]:
    if team_mode not in TEAM_MODES:
        raise ValidationError(f"Unknown team mode {team_mode!r}.")
    if team_mode != "teams":
        return []
    known_ids = {p["playerId"] for p in roster}
    normalized = []
    names = set()
    team_of: Dict[str, str] = {}
    for i, team in enumerate(teams or [], start=1):
        name = (team.get("name") or "").strip() or f"Team {i}"
        if name in names:
            raise ValidationError(f"Team names must be unique ({name!r}).")
        names.add(name)
        player_ids = list(dict.fromkeys(str(pid) for pid in team.get("playerIds") or []))
        unknown = [pid for pid in player_ids if pid not in known_ids]
        if unknown:
            raise ValidationError(f"Team {name!r} references unknown players: {', '.join(unknown)}.")
        for pid in player_ids:
            if pid in team_of:
                raise ValidationError(
                    f"Player {pid!r} is on both {team_of[pid]!r} and {name!r}."
                )
            team_of[pid] = name
        normalized.append(
            {"id": str(team.get("id") or uuid.uuid4().hex), "name": name, "playerIds": player_ids}
        )
    if len(normalized) < 2:
        raise ValidationError("Team mode needs at least two teams.")
    unassigned = [p["name"] for p in roster if p["playerId"] not in team_of]
    if unassigned:
        raise ValidationError(f"Players without a team: {', '.join(unassigned)}.")
    return normalized


def start_round(
    players: Sequence[Mapping[str, Any]],
    hole_data: Optional[Mapping[str, Any]],
    *,
    round_id: Optional[str] = None,
    course_id: Optional[str] = None,
    course_name: Optional[str] = None,
    team_mode: str = "individual",
    teams: Optional[Sequence[Mapping]] = None,
    wagers: Sequence[Mapping[str, Any]] = (),
    selected_junk_types: Optional[Sequence[str]] = None,
    junk_point_values: Optional[Mapping[str, Any]] = None,
    handicap_mode: Optional[str] = None,
) -> Dict[str, Any]:
    """Create an Active round from a roster and course snapshot.

    Raises :class:`RoundStartError` when the round cannot start (no players,
    duplicate names, no usable hole data, bad teams or wagers).
    """

    try:
        roster = validate_roster(players)
        holes = normalize_hole_data(hole_data)
        team_list = _normalize_teams(team_mode, teams, roster)
        junk_types = validate_junk_types(selected_junk_types)
        mode = handicap_mode or DEFAULT_HANDICAP_MODE
        if mode not in ("lowest", "gross"):
            raise ValidationError(f"Unknown handicap mode {mode!r}.")
        parsed = []
        for raw in wagers:
            wager = parse_wager(raw)
            if wager is None:
                raise ValidationError(f"Unknown wager type {raw.get('type')!r}.")
            parsed.append(wager_to_dict(wager))
    except ValidationError as exc:
        raise RoundStartError(exc.detail) from exc

    snapshot = {
        "id": round_id or uuid.uuid4().hex,
        "status": ACTIVE,
        "courseId": course_id,
        "courseName": course_name,
        "players": roster,
        "teamMode": team_mode,
        "teams": team_list,
        "holeData": holes,
        "scores": {p["name"]: {} for p in roster},
        "wagers": parsed,
        "betSelections": {},
        "roundBets": [],
        "selectedJunkTypes": junk_types,
        "junkPointValues": {k: money(v) for k, v in (junk_point_values or {}).items()},
        "junkEvents": {},
        "handicapMode": mode,
        "results": None,
        "createdAt": _now(),
        "endedAt": None,
    }
    logger.info(
        "Started round %s with %d players and %d wagers",
        snapshot["id"],
        len(roster),
        len(parsed),
    )
    return snapshot


def input_fingerprint(rnd: Mapping[str, Any]) -> str:
    """Stable digest of everything the live computation reads."""

    payload = {field: rnd.get(field) for field in INPUT_FIELDS}
    encoded = json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def compute_live_results(rnd: Mapping[str, Any]) -> Dict[str, Any]:
    """Run the full scoring pipeline over the round's current inputs."""

    roster = rnd.get("players") or []
    net = compute_net_scores(
        roster,
        rnd.get("holeData"),
        rnd.get("scores"),
        rnd.get("handicapMode") or DEFAULT_HANDICAP_MODE,
    )
    order = net["order"]
    teams = (
        resolve_team_members(rnd.get("teams"), roster)
        if rnd.get("teamMode") == "teams"
        else []
    )

    parsed = [w for w in (parse_wager(raw) for raw in rnd.get("wagers") or []) if w]
    wager_results = []
    for wager in parsed:
        if isinstance(wager, SideBet):
            continue
        wager_results.append(
            {
                "betId": wager.id,
                "name": wager.name,
                "type": wager.type,
                "result": _resolve_wager(net, wager, teams),
            }
        )

    side_bets = resolve_side_bets(
        [w for w in parsed if isinstance(w, SideBet)], rnd.get("betSelections") or {}
    )
    round_bets = rnd.get("roundBets") or []
    everyone_bets = resolve_everyone_bets(round_bets)
    junk = tally_junk(
        order,
        rnd.get("junkEvents"),
        rnd.get("selectedJunkTypes"),
        rnd.get("junkPointValues"),
        DEFAULT_JUNK_POINT_VALUE,
    )
    winnings = aggregate_winnings(
        order,
        (entry["result"] for entry in wager_results),
        side_bets,
        everyone_bets,
        junk,
        teams,
    )
    settlement = compute_settlement(winnings["totals"])

    return {
        "status": rnd.get("status", ACTIVE),
        "grossWinner": net["grossWinner"],
        "netWinner": net["netWinner"],
        "handicapMode": net["handicapMode"],
        "finalScores": net["players"],
        "order": order,
        "wagers": wager_results,
        "skins": [e["result"] for e in wager_results if e["type"] == SKINS and e["result"]],
        "sideBets": side_bets,
        "roundBets": everyone_bets,
        "junk": junk,
        "winnings": winnings,
        "individualWinnings": winnings["players"],
        "teamWinnings": winnings["teams"],
        "settlement": settlement,
        "netPositions": net_positions(settlement),
        "roundBetTransactions": settle_round_bets(round_bets),
    }


def end_round(rnd: Mapping[str, Any]) -> Dict[str, Any]:
    """Freeze the round's results and move it to Ended.

    Ending is one way; a second call raises :class:`RoundAlreadyEnded` and
    leaves the stored results untouched.
    """

    if rnd.get("status") == ENDED:
        raise RoundAlreadyEnded(str(rnd.get("id")))

    ended = copy.deepcopy(dict(rnd))
    ended_at = _now()
    results = compute_live_results(ended)
    results["status"] = ENDED
    results["endedAt"] = ended_at
    ended["results"] = results
    ended["status"] = ENDED
    ended["endedAt"] = ended_at
    logger.info(
        "Ended round %s; %d settlement payments",
        ended.get("id"),
        len(results["settlement"]),
    )
    return ended


def round_results(rnd: Mapping[str, Any]) -> Dict[str, Any]:
    """Frozen results for an Ended round, live results otherwise."""

    if rnd.get("status") == ENDED and rnd.get("results") is not None:
        return copy.deepcopy(rnd["results"])
    return compute_live_results(rnd)


def _mutate(action: str) -> Callable:
    """Wrap an Active-only edit: copy the round, apply, return the copy."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(rnd: Mapping[str, Any], *args, **kwargs) -> Dict[str, Any]:
            if rnd.get("status") == ENDED:
                raise RoundNotActive(str(rnd.get("id")), action)
            updated = copy.deepcopy(dict(rnd))
            func(updated, *args, **kwargs)
            return updated

        return wrapper

    return decorator


def _roster_names(rnd: Mapping[str, Any]) -> List[str]:
    return [p["name"] for p in rnd.get("players") or []]


def _require_player(rnd: Mapping[str, Any], name: Any) -> str:
    if name not in _roster_names(rnd):
        raise ValidationError(f"Unknown player {name!r}.")
    return name


@_mutate("record scores")
def apply_scores(rnd: Dict[str, Any], updates: Mapping[str, Mapping[str, Any]]) -> None:
    """Merge ``{player: {hole: gross}}``; ``None`` or 0 clears a hole."""

    scores = rnd.setdefault("scores", {})
    for name, holes in updates.items():
        _require_player(rnd, name)
        card = dict(scores.get(name) or {})
        for raw_hole, value in (holes or {}).items():
            key = normalize_hole_key(raw_hole)
            gross = validate_gross_score(value, player=name, hole=key)
            if gross is None:
                card.pop(key, None)
            else:
                card[key] = gross
        scores[name] = card


@_mutate("change bet selections")
def apply_bet_selections(rnd: Dict[str, Any], selections: Mapping[str, Optional[str]]) -> None:
    side_bets = {
        w.name
        for w in (parse_wager(raw) for raw in rnd.get("wagers") or [])
        if isinstance(w, SideBet)
    }
    team_names = {t["name"] for t in rnd.get("teams") or []}
    current = rnd.setdefault("betSelections", {})
    for bet_name, winner in selections.items():
        if bet_name not in side_bets:
            raise ValidationError(f"No side bet named {bet_name!r} in this round.")
        if winner in (None, ""):
            current.pop(bet_name, None)
            continue
        if winner not in team_names:
            _require_player(rnd, winner)
        current[bet_name] = winner


@_mutate("record junk")
def apply_junk_events(rnd: Dict[str, Any], events: Sequence[Mapping[str, Any]]) -> None:
    """Set or clear junk flags; each event is ``{player, hole, type, value}``."""

    selected = rnd.get("selectedJunkTypes") or []
    junk = rnd.setdefault("junkEvents", {})
    for event in events:
        name = _require_player(rnd, event.get("player"))
        key = normalize_hole_key(event.get("hole"))
        junk_type = event.get("type")
        if junk_type not in selected:
            raise ValidationError(f"Junk type {junk_type!r} is not enabled for this round.")
        holes = junk.setdefault(name, {})
        flags = holes.setdefault(key, {})
        if event.get("value", True):
            flags[junk_type] = True
        else:
            flags.pop(junk_type, None)
        if not flags:
            holes.pop(key, None)
        if not holes:
            junk.pop(name, None)


@_mutate("add a round bet")
def add_round_bet(rnd: Dict[str, Any], bet: Mapping[str, Any]) -> None:
    bet_type = bet.get("betType") or EVERYONE
    if bet_type not in (EVERYONE, TWO_PLAYERS):
        raise ValidationError(f"Unknown round bet type {bet_type!r}.")
    name = (bet.get("name") or "").strip()
    if not name:
        raise ValidationError("Round bets need a name.")
    amount = money(bet.get("amount"))
    if amount <= 0:
        raise ValidationError("Round bet amount must be positive.")
    record = {
        "id": str(bet.get("id") or uuid.uuid4().hex),
        "name": name,
        "betType": bet_type,
        "amount": amount,
        "odds": bet.get("odds"),
        "player1": None,
        "player2": None,
        "winner": None,
    }
    if bet_type == TWO_PLAYERS:
        record["player1"] = _require_player(rnd, bet.get("player1"))
        record["player2"] = _require_player(rnd, bet.get("player2"))
        if record["player1"] == record["player2"]:
            raise ValidationError("A two-player bet needs two different players.")
    rnd.setdefault("roundBets", []).append(record)


@_mutate("settle a round bet")
def set_round_bet_winner(rnd: Dict[str, Any], bet_id: str, winner: Optional[str]) -> None:
    bet = find_round_bet(rnd.get("roundBets") or [], bet_id)
    if bet is None:
        raise ValidationError(f"Round bet {bet_id!r} not found.")
    if winner in (None, ""):
        bet["winner"] = None
        return
    if bet["betType"] == TWO_PLAYERS and winner not in (bet["player1"], bet["player2"]):
        raise ValidationError("The winner of a two-player bet must be one of its players.")
    team_names = {t["name"] for t in rnd.get("teams") or []}
    if winner not in team_names:
        _require_player(rnd, winner)
    bet["winner"] = winner


@_mutate("edit round players")
def edit_round_player(
    rnd: Dict[str, Any],
    player_id: str,
    *,
    name: Optional[str] = None,
    handicap: Optional[int] = None,
) -> None:
    """Change a roster snapshot entry; a rename carries the player's data."""

    player = next((p for p in rnd.get("players") or [] if p["playerId"] == player_id), None)
    if player is None:
        raise ValidationError(f"Player {player_id!r} is not in this round.")
    if handicap is not None:
        player["handicap"] = int(handicap)
    if name is None:
        return
    new_name = name.strip()
    old_name = player["name"]
    if not new_name:
        raise ValidationError("Player name must not be empty.")
    if new_name == old_name:
        return
    if new_name.lower() in {n.lower() for n in _roster_names(rnd) if n != old_name}:
        raise ValidationError(f"Player names must be unique within a round ({new_name!r}).")

    player["name"] = new_name
    for field in ("scores", "junkEvents"):
        data = rnd.get(field) or {}
        if old_name in data:
            data[new_name] = data.pop(old_name)
    selections = rnd.get("betSelections") or {}
    for bet_name, winner in selections.items():
        if winner == old_name:
            selections[bet_name] = new_name
    for bet in rnd.get("roundBets") or []:
        for key in ("player1", "player2", "winner"):
            if bet.get(key) == old_name:
                bet[key] = new_name


@_mutate("change teams")
def set_teams(rnd: Dict[str, Any], team_mode: str, teams: Optional[Sequence[Mapping]] = None) -> None:
    rnd["teams"] = _normalize_teams(team_mode, teams, rnd.get("players") or [])
    rnd["teamMode"] = team_mode
