import uuid

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..exceptions import PlayerAlreadyExists, PlayerNotFound, ProblemDetail
from ..models import Player
from ..schemas import PlayerCreate, PlayerOut, PlayerUpdate

router = APIRouter(
    prefix="/players",
    tags=["players"],
    responses={400: {"model": ProblemDetail}, 404: {"model": ProblemDetail}},
)


def _player_out(p: Player) -> PlayerOut:
    return PlayerOut(id=p.id, name=p.name, handicap=p.handicap)


async def _name_taken(session: AsyncSession, name: str, exclude_id: str | None = None) -> bool:
    stmt = select(Player.id).where(func.lower(Player.name) == name.lower())
    if exclude_id:
        stmt = stmt.where(Player.id != exclude_id)
    return (await session.execute(stmt)).first() is not None


async def get_player_or_404(session: AsyncSession, player_id: str) -> Player:
    player = await session.get(Player, player_id)
    if not player:
        raise PlayerNotFound(player_id)
    return player


@router.post("", response_model=PlayerOut, status_code=201)
async def create_player(body: PlayerCreate, session: AsyncSession = Depends(get_session)):
    if await _name_taken(session, body.name):
        raise PlayerAlreadyExists(body.name)
    p = Player(id=uuid.uuid4().hex, name=body.name, handicap=body.handicap)
    session.add(p)
    await session.commit()
    return _player_out(p)


@router.get("", response_model=list[PlayerOut])
async def list_players(
    q: str = "",
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    stmt = select(Player).order_by(Player.name)
    if q:
        stmt = stmt.where(Player.name.ilike(f"%{q}%"))
    rows = (await session.execute(stmt.limit(limit).offset(offset))).scalars().all()
    return [_player_out(p) for p in rows]


@router.get("/{player_id}", response_model=PlayerOut)
async def get_player(player_id: str, session: AsyncSession = Depends(get_session)):
    return _player_out(await get_player_or_404(session, player_id))


@router.patch("/{player_id}", response_model=PlayerOut)
async def update_player(
    player_id: str,
    body: PlayerUpdate,
    session: AsyncSession = Depends(get_session),
):
    # Rounds keep their own roster snapshot, so edits here never touch them.
    p = await get_player_or_404(session, player_id)
    if body.name is not None:
        if await _name_taken(session, body.name, exclude_id=player_id):
            raise PlayerAlreadyExists(body.name)
        p.name = body.name
    if body.handicap is not None:
        p.handicap = body.handicap
    await session.commit()
    return _player_out(p)


@router.delete("/{player_id}", status_code=204)
async def delete_player(player_id: str, session: AsyncSession = Depends(get_session)):
    p = await get_player_or_404(session, player_id)
    await session.delete(p)
    await session.commit()
    return Response(status_code=204)
