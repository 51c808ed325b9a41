"""Combine every wager's payouts into one breakdown per player or team."""
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .wagers import MATCH_PLAY, NASSAU, NINE_POINT, SKINS

CATEGORIES = ("sideBets", "roundBets", "nassau", "skins", "matchPlay", "ninePoint", "junk")
CATEGORY_BY_TYPE = {
    NASSAU: "nassau",
    SKINS: "skins",
    MATCH_PLAY: "matchPlay",
    NINE_POINT: "ninePoint",
}
WAGER_CATEGORIES = tuple(CATEGORY_BY_TYPE.values())


def _empty_row() -> Dict[str, float]:
    row = {category: 0.0 for category in CATEGORIES}
    row["total"] = 0.0
    return row


def _one_sided_total(row: Mapping[str, float]) -> float:
    # zero-sum wager nets between two teams: only the winning side is owed
    wagers = sum(row[c] for c in WAGER_CATEGORIES)
    others = sum(row[c] for c in CATEGORIES if c not in WAGER_CATEGORIES)
    return max(0.0, wagers) + others


def resolve_team_members(
    teams: Optional[Sequence[Mapping]], roster: Sequence[Mapping]
) -> List[Dict]:
    """Turn stored teams (``playerIds``) into ``{"name", "members"}``.

    Ids are looked up in the round's roster snapshot; ids that do not
    resolve are dropped, so a team can end up with no members.
    """

    names_by_id = {
        str(p.get("playerId") or p.get("id")): p.get("name")
        for p in roster
        if p.get("name") and (p.get("playerId") or p.get("id"))
    }
    resolved = []
    for team in teams or []:
        members = []
        for pid in team.get("playerIds") or []:
            name = names_by_id.get(str(pid))
            if name and name not in members:
                members.append(name)
        resolved.append(
            {"id": team.get("id"), "name": team.get("name") or str(team.get("id")), "members": members}
        )
    return resolved


def party_count(players: Sequence[str], teams: Optional[Sequence[Mapping]] = None) -> int:
    if teams:
        return sum(1 for team in teams if team.get("members"))
    return len(players)


def aggregate_winnings(
    players: Sequence[str],
    resolver_results: Iterable[Optional[Mapping]],
    side_bets: Iterable[Mapping] = (),
    everyone_bets: Iterable[Mapping] = (),
    junk: Optional[Mapping] = None,
    teams: Optional[Sequence[Mapping]] = None,
) -> Dict:
    """Sum all wager outcomes per player, then per team in team mode.

    Two individual players read each resolver's one-sided ``grossWinnings``
    so the settlement difference is the real transfer. Everything else reads
    the zero-sum ``totalWinnings``. Team rows add up their members' nets; when
    exactly two teams play, a team's wager total counts only when positive,
    so the losing team pays the winning team's net rather than the gap
    between them. Results that are ``None`` (wager not applicable yet) are
    skipped.
    """

    teams = list(teams or [])
    basis = "gross" if not teams and len(players) == 2 else "net"
    field = "grossWinnings" if basis == "gross" else "totalWinnings"
    two_teams = bool(teams) and party_count(players, teams) == 2

    rows = {name: _empty_row() for name in players}
    team_rows = {team["name"]: _empty_row() for team in teams}

    def credit(winner, category: str, amount: float) -> None:
        if winner in rows:
            rows[winner][category] += amount
        elif winner in team_rows:
            team_rows[winner][category] += amount

    for result in resolver_results:
        if not result:
            continue
        category = CATEGORY_BY_TYPE.get(result.get("type"))
        if category is None:
            continue
        for name, amount in (result.get(field) or {}).items():
            if name in rows:
                rows[name][category] += amount

    for bet in side_bets:
        if bet.get("winner"):
            credit(bet["winner"], "sideBets", bet.get("amount") or 0.0)

    for bet in everyone_bets:
        if bet.get("winner"):
            credit(bet["winner"], "roundBets", bet.get("payout") or 0.0)

    for name, amount in ((junk or {}).get("totals") or {}).items():
        if name in rows:
            rows[name]["junk"] += amount

    for row in rows.values():
        row["total"] = sum(row[c] for c in CATEGORIES)

    team_breakdown: Dict[str, Dict] = {}
    for team in teams:
        row = team_rows[team["name"]]
        for member in team.get("members", []):
            if member not in rows:
                continue
            for category in CATEGORIES:
                row[category] += rows[member][category]
        row["total"] = sum(row[c] for c in CATEGORIES)
        team_breakdown[team["name"]] = {"members": list(team.get("members", [])), **row}

    if two_teams:
        totals = {
            name: _one_sided_total(data)
            for name, data in team_breakdown.items()
            if data["members"]
        }
    elif teams:
        totals = {
            name: data["total"] for name, data in team_breakdown.items() if data["members"]
        }
    else:
        totals = {name: rows[name]["total"] for name in players}

    return {
        "mode": "teams" if teams else "individual",
        "basis": basis,
        "players": rows,
        "teams": team_breakdown,
        "totals": totals,
    }
