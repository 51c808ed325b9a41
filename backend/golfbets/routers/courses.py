from fastapi import APIRouter, Depends, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from ..db import get_session
from ..exceptions import CourseNotFound, ProblemDetail, http_problem
from ..models import Course
from ..schemas import CourseCreate, CourseOut
from ..services.validation import ValidationError, normalize_hole_data

router = APIRouter(
    prefix="/courses",
    tags=["courses"],
    responses={400: {"model": ProblemDetail}, 404: {"model": ProblemDetail}},
)


def _course_out(c: Course) -> CourseOut:
    return CourseOut(id=c.id, name=c.name, city=c.city, holeData=c.hole_data)


async def get_course_or_404(session: AsyncSession, course_id: str) -> Course:
    course = await session.get(Course, course_id)
    if not course:
        raise CourseNotFound(course_id)
    return course


@router.get("", response_model=list[CourseOut])
async def list_courses(session: AsyncSession = Depends(get_session)):
    rows = (await session.execute(select(Course).order_by(Course.name))).scalars().all()
    return [_course_out(c) for c in rows]


@router.post("", response_model=CourseOut, status_code=201)
async def create_course(body: CourseCreate, session: AsyncSession = Depends(get_session)):
    try:
        hole_data = normalize_hole_data(
            {key: info.model_dump() for key, info in body.holeData.items()}
        )
    except ValidationError as exc:
        raise http_problem(400, exc.detail, "invalid_hole_data") from exc
    c = Course(id=uuid.uuid4().hex, name=body.name, city=body.city, hole_data=hole_data)
    session.add(c)
    await session.commit()
    return _course_out(c)


@router.get("/{course_id}", response_model=CourseOut)
async def get_course(course_id: str, session: AsyncSession = Depends(get_session)):
    return _course_out(await get_course_or_404(session, course_id))


@router.delete("/{course_id}", status_code=204)
async def delete_course(course_id: str, session: AsyncSession = Depends(get_session)):
    c = await get_course_or_404(session, course_id)
    await session.delete(c)
    await session.commit()
    return Response(status_code=204)
