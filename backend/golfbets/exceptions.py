from fastapi import HTTPException
from pydantic import BaseModel
from typing import Optional


class ProblemDetail(BaseModel):
    """RFC 7807 compliant error response."""

    type: str = "about:blank"
    title: str
    detail: Optional[str] = None
    status: int
    instance: Optional[str] = None
    code: str


class DomainException(Exception):
    """Base class for domain-specific exceptions."""

    def __init__(
        self,
        status_code: int,
        title: str,
        *,
        code: str,
        detail: str | None = None,
        type_: str = "about:blank",
    ) -> None:
        super().__init__(detail or title)
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.type = type_
        self.code = code


class PlayerAlreadyExists(DomainException):
    def __init__(self, name: str) -> None:
        super().__init__(
            status_code=400,
            title="Player exists",
            detail=f"player name '{name}' already exists",
            code="player_exists",
        )


class PlayerNotFound(DomainException):
    def __init__(self, player_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Player not found",
            detail=f"player '{player_id}' not found",
            code="player_not_found",
        )


class CourseNotFound(DomainException):
    def __init__(self, course_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Course not found",
            detail=f"course '{course_id}' not found",
            code="course_not_found",
        )


class WagerNotFound(DomainException):
    def __init__(self, wager_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Wager not found",
            detail=f"wager '{wager_id}' not found",
            code="wager_not_found",
        )


class RoundNotFound(DomainException):
    def __init__(self, round_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Round not found",
            detail=f"round '{round_id}' not found",
            code="round_not_found",
        )


class RoundStartError(DomainException):
    def __init__(self, reason: str) -> None:
        super().__init__(
            status_code=400,
            title="Round cannot start",
            detail=reason,
            code="round_not_startable",
        )


class RoundAlreadyEnded(DomainException):
    def __init__(self, round_id: str) -> None:
        super().__init__(
            status_code=409,
            title="Round already ended",
            detail=f"round '{round_id}' has already ended; its results are final",
            code="round_already_ended",
        )


class RoundNotActive(DomainException):
    def __init__(self, round_id: str, action: str) -> None:
        super().__init__(
            status_code=409,
            title="Round not active",
            detail=f"cannot {action}: round '{round_id}' has ended",
            code="round_not_active",
        )


def http_problem(
    status_code: int,
    detail: str,
    code: str,
    *,
    headers: Optional[dict[str, str]] = None,
) -> HTTPException:
    """Create an HTTPException with an attached problem code."""

    exc = HTTPException(status_code=status_code, detail=detail, headers=headers)
    setattr(exc, "code", code)
    return exc
