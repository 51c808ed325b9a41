import logging
import secrets
import string
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..cache import live_results_cache
from ..config import SHARE_CODE_LENGTH
from ..db import get_session
from ..exceptions import (
    PlayerNotFound,
    ProblemDetail,
    RoundAlreadyEnded,
    RoundNotActive,
    RoundNotFound,
    WagerNotFound,
    http_problem,
)
from ..models import Player, Round, RoundShare, Wager
from ..schemas import (
    BetSelectionsUpdate,
    JunkEventsUpdate,
    RoundBetCreate,
    RoundBetWinnerUpdate,
    RoundCreate,
    RoundOut,
    RoundPlayerUpdate,
    RoundSummaryOut,
    ScoresUpdate,
    ShareOut,
    TeamsUpdate,
)
from ..services import rounds as round_service
from ..services.validation import ValidationError
from .courses import get_course_or_404
from .streams import broadcast
from .wagers import wager_out

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/rounds",
    tags=["rounds"],
    responses={
        400: {"model": ProblemDetail},
        404: {"model": ProblemDetail},
        409: {"model": ProblemDetail},
    },
)
shared_router = APIRouter(
    prefix="/shared",
    tags=["rounds"],
    responses={404: {"model": ProblemDetail}},
)

SHARE_ALPHABET = string.ascii_uppercase + string.digits

# snapshot key -> Round column
_COLUMNS = {
    "status": "status",
    "courseId": "course_id",
    "courseName": "course_name",
    "players": "players",
    "teamMode": "team_mode",
    "teams": "teams",
    "holeData": "hole_data",
    "scores": "scores",
    "wagers": "wagers",
    "betSelections": "bet_selections",
    "roundBets": "round_bets",
    "selectedJunkTypes": "selected_junk_types",
    "junkPointValues": "junk_point_values",
    "junkEvents": "junk_events",
    "handicapMode": "handicap_mode",
    "results": "results",
    "createdAt": "created_at",
    "endedAt": "ended_at",
}


def to_snapshot(r: Round) -> Dict[str, Any]:
    snapshot = {"id": r.id}
    for key, column in _COLUMNS.items():
        snapshot[key] = getattr(r, column)
    return snapshot


def _apply_snapshot(r: Round, snapshot: Dict[str, Any]) -> None:
    for key, column in _COLUMNS.items():
        setattr(r, column, snapshot.get(key))


async def _write_if_active(
    session: AsyncSession, round_id: str, snapshot: Dict[str, Any]
) -> bool:
    """Store ``snapshot`` only while the stored round is still Active."""

    values = {column: snapshot.get(key) for key, column in _COLUMNS.items()}
    result = await session.execute(
        update(Round)
        .where(Round.id == round_id)
        .where(Round.status == round_service.ACTIVE)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await session.rollback()
        return False
    await session.commit()
    return True


def _round_out(snapshot: Dict[str, Any]) -> RoundOut:
    return RoundOut(**snapshot)


async def _get_round_or_404(session: AsyncSession, round_id: str) -> Round:
    r = await session.get(Round, round_id)
    if not r:
        raise RoundNotFound(round_id)
    return r


async def live_results(snapshot: Dict[str, Any]) -> Dict[str, Any]:
    """Results for a round, reusing the last computation if inputs are unchanged."""

    if snapshot.get("status") == round_service.ENDED:
        return round_service.round_results(snapshot)
    key = (snapshot["id"], round_service.input_fingerprint(snapshot))
    cached = await live_results_cache.get(key)
    if cached is not None:
        logger.debug("Live results cache hit for round %s", snapshot["id"])
        return cached
    results = round_service.compute_live_results(snapshot)
    await live_results_cache.set(key, results)
    return results


async def _update_round(
    session: AsyncSession,
    round_id: str,
    change: Callable[[Dict[str, Any]], Dict[str, Any]],
) -> Dict[str, Any]:
    r = await _get_round_or_404(session, round_id)
    try:
        updated = change(to_snapshot(r))
    except ValidationError as exc:
        raise http_problem(400, exc.detail, "invalid_round_update") from exc
    if not await _write_if_active(session, round_id, updated):
        raise RoundNotActive(round_id, "update round")
    results = await live_results(updated)
    await broadcast(
        round_id,
        {"type": "round_updated", "roundId": round_id, "results": results},
    )
    return updated


@router.post("", response_model=RoundOut, status_code=201)
async def start_round(body: RoundCreate, session: AsyncSession = Depends(get_session)):
    players = []
    for pid in body.playerIds:
        p = await session.get(Player, pid)
        if not p:
            raise PlayerNotFound(pid)
        players.append({"playerId": p.id, "name": p.name, "handicap": p.handicap})

    course_name: Optional[str] = None
    if body.holeData:
        hole_data = {key: info.model_dump() for key, info in body.holeData.items()}
    else:
        course = await get_course_or_404(session, body.courseId)
        hole_data = course.hole_data
        course_name = course.name

    wagers = []
    for wid in body.wagerIds:
        w = await session.get(Wager, wid)
        if not w:
            raise WagerNotFound(wid)
        wagers.append(wager_out(w).model_dump())
    for i, inline in enumerate(body.wagers, start=1):
        data = inline.model_dump()
        data["id"] = f"inline-{i}"
        wagers.append(data)

    snapshot = round_service.start_round(
        players,
        hole_data,
        course_id=body.courseId,
        course_name=course_name,
        team_mode=body.teamMode,
        teams=[t.model_dump() for t in body.teams],
        wagers=wagers,
        selected_junk_types=body.selectedJunkTypes,
        junk_point_values=body.junkPointValues,
        handicap_mode=body.handicapMode,
    )
    r = Round(id=snapshot["id"])
    _apply_snapshot(r, snapshot)
    session.add(r)
    await session.commit()
    return _round_out(snapshot)


@router.get("", response_model=list[RoundSummaryOut])
async def list_rounds(
    status: Optional[str] = Query(None, pattern="^(Active|Ended)$"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    stmt = select(Round).order_by(Round.created_at.desc())
    if status:
        stmt = stmt.where(Round.status == status)
    rows = (await session.execute(stmt.limit(limit).offset(offset))).scalars().all()
    return [
        RoundSummaryOut(
            id=r.id,
            status=r.status,
            courseName=r.course_name,
            playerNames=[p["name"] for p in r.players or []],
            createdAt=r.created_at,
            endedAt=r.ended_at,
        )
        for r in rows
    ]


@router.get("/{round_id}", response_model=RoundOut)
async def get_round(round_id: str, session: AsyncSession = Depends(get_session)):
    return _round_out(to_snapshot(await _get_round_or_404(session, round_id)))


@router.delete("/{round_id}", status_code=204)
async def delete_round(round_id: str, session: AsyncSession = Depends(get_session)):
    r = await _get_round_or_404(session, round_id)
    share = (
        await session.execute(select(RoundShare).where(RoundShare.round_id == round_id))
    ).scalar_one_or_none()
    if share:
        await session.delete(share)
    await session.delete(r)
    await session.commit()
    await live_results_cache.invalidate_rounds([round_id])
    return Response(status_code=204)


@router.put("/{round_id}/scores", response_model=RoundOut)
async def update_scores(
    round_id: str, body: ScoresUpdate, session: AsyncSession = Depends(get_session)
):
    updated = await _update_round(
        session, round_id, lambda rnd: round_service.apply_scores(rnd, body.scores)
    )
    return _round_out(updated)


@router.put("/{round_id}/selections", response_model=RoundOut)
async def update_bet_selections(
    round_id: str, body: BetSelectionsUpdate, session: AsyncSession = Depends(get_session)
):
    updated = await _update_round(
        session,
        round_id,
        lambda rnd: round_service.apply_bet_selections(rnd, body.selections),
    )
    return _round_out(updated)


@router.put("/{round_id}/junk", response_model=RoundOut)
async def update_junk(
    round_id: str, body: JunkEventsUpdate, session: AsyncSession = Depends(get_session)
):
    events = [e.model_dump() for e in body.events]
    updated = await _update_round(
        session, round_id, lambda rnd: round_service.apply_junk_events(rnd, events)
    )
    return _round_out(updated)


@router.put("/{round_id}/teams", response_model=RoundOut)
async def update_teams(
    round_id: str, body: TeamsUpdate, session: AsyncSession = Depends(get_session)
):
    teams = [t.model_dump() for t in body.teams]
    updated = await _update_round(
        session,
        round_id,
        lambda rnd: round_service.set_teams(rnd, body.teamMode, teams),
    )
    return _round_out(updated)


@router.patch("/{round_id}/players/{player_id}", response_model=RoundOut)
async def update_round_player(
    round_id: str,
    player_id: str,
    body: RoundPlayerUpdate,
    session: AsyncSession = Depends(get_session),
):
    updated = await _update_round(
        session,
        round_id,
        lambda rnd: round_service.edit_round_player(
            rnd, player_id, name=body.name, handicap=body.handicap
        ),
    )
    return _round_out(updated)


@router.post("/{round_id}/bets", response_model=RoundOut, status_code=201)
async def add_round_bet(
    round_id: str, body: RoundBetCreate, session: AsyncSession = Depends(get_session)
):
    updated = await _update_round(
        session, round_id, lambda rnd: round_service.add_round_bet(rnd, body.model_dump())
    )
    return _round_out(updated)


@router.put("/{round_id}/bets/{bet_id}/winner", response_model=RoundOut)
async def set_round_bet_winner(
    round_id: str,
    bet_id: str,
    body: RoundBetWinnerUpdate,
    session: AsyncSession = Depends(get_session),
):
    updated = await _update_round(
        session,
        round_id,
        lambda rnd: round_service.set_round_bet_winner(rnd, bet_id, body.winner),
    )
    return _round_out(updated)


@router.get("/{round_id}/results")
async def get_results(round_id: str, session: AsyncSession = Depends(get_session)):
    r = await _get_round_or_404(session, round_id)
    return await live_results(to_snapshot(r))


@router.post("/{round_id}/end", response_model=RoundOut)
async def end_round(round_id: str, session: AsyncSession = Depends(get_session)):
    r = await _get_round_or_404(session, round_id)
    ended = round_service.end_round(to_snapshot(r))
    # another request may have ended the round since it was read
    if not await _write_if_active(session, round_id, ended):
        raise RoundAlreadyEnded(round_id)
    await live_results_cache.invalidate_rounds([round_id])
    await broadcast(
        round_id,
        {"type": "round_ended", "roundId": round_id, "results": ended["results"]},
    )
    return _round_out(ended)


@router.post("/{round_id}/share", response_model=ShareOut)
async def share_round(round_id: str, session: AsyncSession = Depends(get_session)):
    await _get_round_or_404(session, round_id)
    existing = (
        await session.execute(select(RoundShare).where(RoundShare.round_id == round_id))
    ).scalar_one_or_none()
    if existing:
        return ShareOut(code=existing.code, roundId=round_id)

    while True:
        code = "".join(secrets.choice(SHARE_ALPHABET) for _ in range(SHARE_CODE_LENGTH))
        if await session.get(RoundShare, code) is None:
            break
    session.add(RoundShare(code=code, round_id=round_id))
    await session.commit()
    logger.info("Shared round %s as %s", round_id, code)
    return ShareOut(code=code, roundId=round_id)


@shared_router.get("/{code}")
async def get_shared_round(code: str, session: AsyncSession = Depends(get_session)):
    share = await session.get(RoundShare, code.strip().upper())
    if not share:
        raise http_problem(404, f"share code '{code}' not found", "share_not_found")
    snapshot = to_snapshot(await _get_round_or_404(session, share.round_id))
    return {
        "round": _round_out(snapshot).model_dump(),
        "results": await live_results(snapshot),
    }
