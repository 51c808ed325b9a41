from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from .db import Base


def _json():
    return JSON().with_variant(JSONB, "postgresql")


class Player(Base):
    __tablename__ = "player"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    handicap = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("uq_player_name_lower", func.lower(name), unique=True),
    )


class Course(Base):
    __tablename__ = "course"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    city = Column(String, nullable=True)
    hole_data = Column(_json(), nullable=False)


class Wager(Base):
    """A saved custom bet that can be switched on for a round."""

    __tablename__ = "wager"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)  # "Side Bet" | "Nassau" | "Skins" | "Match Play" | "9 Point"
    amount = Column(Float, nullable=False)
    carry_over = Column(Boolean, nullable=False, default=False)


class Round(Base):
    __tablename__ = "round"
    id = Column(String, primary_key=True)
    status = Column(String, nullable=False, default="Active", index=True)  # "Active" | "Ended"
    course_id = Column(String, ForeignKey("course.id"), nullable=True)
    course_name = Column(String, nullable=True)
    players = Column(_json(), nullable=False)
    team_mode = Column(String, nullable=False, default="individual")
    teams = Column(_json(), nullable=False, default=list)
    hole_data = Column(_json(), nullable=False)
    scores = Column(_json(), nullable=False, default=dict)
    wagers = Column(_json(), nullable=False, default=list)
    bet_selections = Column(_json(), nullable=False, default=dict)
    round_bets = Column(_json(), nullable=False, default=list)
    selected_junk_types = Column(_json(), nullable=False, default=list)
    junk_point_values = Column(_json(), nullable=False, default=dict)
    junk_events = Column(_json(), nullable=False, default=dict)
    handicap_mode = Column(String, nullable=False, default="lowest")
    results = Column(_json(), nullable=True)
    created_at = Column(String, nullable=False)
    ended_at = Column(String, nullable=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class RoundShare(Base):
    """Short code that opens a round read-only."""

    __tablename__ = "round_share"
    code = Column(String, primary_key=True)
    round_id = Column(String, ForeignKey("round.id", ondelete="CASCADE"), nullable=False, unique=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
