from fastapi import APIRouter, Depends, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from ..db import get_session
from ..exceptions import ProblemDetail, WagerNotFound
from ..models import Wager
from ..schemas import WagerCreate, WagerOut

router = APIRouter(
    prefix="/wagers",
    tags=["wagers"],
    responses={400: {"model": ProblemDetail}, 404: {"model": ProblemDetail}},
)


def wager_out(w: Wager) -> WagerOut:
    return WagerOut(
        id=w.id,
        name=w.name,
        type=w.type,
        amount=w.amount,
        carryOver=bool(w.carry_over),
    )


@router.get("", response_model=list[WagerOut])
async def list_wagers(session: AsyncSession = Depends(get_session)):
    rows = (await session.execute(select(Wager).order_by(Wager.name))).scalars().all()
    return [wager_out(w) for w in rows]


@router.post("", response_model=WagerOut, status_code=201)
async def create_wager(body: WagerCreate, session: AsyncSession = Depends(get_session)):
    w = Wager(
        id=uuid.uuid4().hex,
        name=(body.name or "").strip() or body.type,
        type=body.type,
        amount=round(body.amount, 2),
        carry_over=getattr(body, "carryOver", False),
    )
    session.add(w)
    await session.commit()
    return wager_out(w)


@router.delete("/{wager_id}", status_code=204)
async def delete_wager(wager_id: str, session: AsyncSession = Depends(get_session)):
    w = await session.get(Wager, wager_id)
    if not w:
        raise WagerNotFound(wager_id)
    await session.delete(w)
    await session.commit()
    return Response(status_code=204)
