from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .scoring.side_bets import EVERYONE, TWO_PLAYERS

HandicapMode = Literal["lowest", "gross"]
TeamMode = Literal["individual", "teams"]
JunkType = Literal["greenies", "sandies", "poleys", "gainingDots", "losingDots"]


def _strip_name(value: Any, field: str = "name") -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValueError(f"{field} must not be empty")
    return trimmed


class PlayerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    handicap: int = Field(default=0, ge=-10, le=54)

    model_config = ConfigDict(extra="forbid")

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return _strip_name(value)


class PlayerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    handicap: Optional[int] = Field(default=None, ge=-10, le=54)

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _strip_name(value)

    @model_validator(mode="after")
    def _ensure_fields(self) -> "PlayerUpdate":
        if self.name is None and self.handicap is None:
            raise ValueError("provide a name or a handicap")
        return self


class PlayerOut(BaseModel):
    id: str
    name: str
    handicap: int


class HoleInfo(BaseModel):
    par: Literal[3, 4, 5]
    index: int = Field(default=0, ge=0, le=18)


class CourseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    city: Optional[str] = None
    holeData: Dict[str, HoleInfo]

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return _strip_name(value)

    @field_validator("holeData")
    @classmethod
    def _require_holes(cls, value: Dict[str, HoleInfo]) -> Dict[str, HoleInfo]:
        if not value:
            raise ValueError("holeData must include at least one hole")
        return value


class CourseOut(BaseModel):
    id: str
    name: str
    city: Optional[str] = None
    holeData: Dict[str, HoleInfo]


class _WagerBase(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    amount: float = Field(..., gt=0)

    model_config = ConfigDict(extra="forbid")


class SideBetCreate(_WagerBase):
    type: Literal["Side Bet"]
    name: str = Field(..., min_length=1, max_length=100)


class NassauCreate(_WagerBase):
    type: Literal["Nassau"]


class SkinsCreate(_WagerBase):
    type: Literal["Skins"]
    carryOver: bool = False


class MatchPlayCreate(_WagerBase):
    type: Literal["Match Play"]


class NinePointCreate(_WagerBase):
    type: Literal["9 Point"]


WagerCreate = Annotated[
    Union[SideBetCreate, NassauCreate, SkinsCreate, MatchPlayCreate, NinePointCreate],
    Field(discriminator="type"),
]


class WagerOut(BaseModel):
    id: str
    name: str
    type: str
    amount: float
    carryOver: bool = False


class TeamIn(BaseModel):
    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=100)
    playerIds: List[str] = Field(default_factory=list)


class RoundCreate(BaseModel):
    playerIds: List[str] = Field(..., min_length=1)
    courseId: Optional[str] = None
    holeData: Optional[Dict[str, HoleInfo]] = None
    wagerIds: List[str] = Field(default_factory=list)
    wagers: List[WagerCreate] = Field(default_factory=list)
    teamMode: TeamMode = "individual"
    teams: List[TeamIn] = Field(default_factory=list)
    selectedJunkTypes: List[JunkType] = Field(default_factory=list)
    junkPointValues: Dict[JunkType, float] = Field(default_factory=dict)
    handicapMode: Optional[HandicapMode] = None

    @model_validator(mode="after")
    def _require_course(self) -> "RoundCreate":
        if not self.courseId and not self.holeData:
            raise ValueError("a round needs a courseId or holeData")
        if len(set(self.playerIds)) != len(self.playerIds):
            raise ValueError("playerIds must be unique")
        return self


class RoundPlayerOut(BaseModel):
    playerId: str
    name: str
    handicap: int


class RoundOut(BaseModel):
    id: str
    status: Literal["Active", "Ended"]
    courseId: Optional[str] = None
    courseName: Optional[str] = None
    players: List[RoundPlayerOut]
    teamMode: TeamMode
    teams: List[Dict[str, Any]]
    holeData: Dict[str, HoleInfo]
    scores: Dict[str, Dict[str, int]]
    wagers: List[Dict[str, Any]]
    betSelections: Dict[str, str]
    roundBets: List[Dict[str, Any]]
    selectedJunkTypes: List[str]
    junkPointValues: Dict[str, float]
    junkEvents: Dict[str, Dict[str, Dict[str, bool]]]
    handicapMode: HandicapMode
    results: Optional[Dict[str, Any]] = None
    createdAt: str
    endedAt: Optional[str] = None


class RoundSummaryOut(BaseModel):
    id: str
    status: Literal["Active", "Ended"]
    courseName: Optional[str] = None
    playerNames: List[str]
    createdAt: str
    endedAt: Optional[str] = None


class ScoresUpdate(BaseModel):
    scores: Dict[str, Dict[str, Optional[int]]]


class BetSelectionsUpdate(BaseModel):
    selections: Dict[str, Optional[str]]


class JunkEventIn(BaseModel):
    player: str
    hole: Union[int, str]
    type: JunkType
    value: bool = True


class JunkEventsUpdate(BaseModel):
    events: List[JunkEventIn] = Field(..., min_length=1)


class RoundBetCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    betType: Literal["everyone", "twoPlayers"] = EVERYONE
    amount: float = Field(..., gt=0)
    odds: Optional[str] = Field(default=None, max_length=20)
    player1: Optional[str] = None
    player2: Optional[str] = None

    @field_validator("odds", mode="before")
    @classmethod
    def _odds_to_text(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise TypeError("odds must be a string or number")

    @model_validator(mode="after")
    def _require_players(self) -> "RoundBetCreate":
        if self.betType == TWO_PLAYERS and (not self.player1 or not self.player2):
            raise ValueError("two-player bets need player1 and player2")
        return self


class RoundBetWinnerUpdate(BaseModel):
    winner: Optional[str] = None


class RoundPlayerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    handicap: Optional[int] = Field(default=None, ge=-10, le=54)

    @model_validator(mode="after")
    def _ensure_fields(self) -> "RoundPlayerUpdate":
        if self.name is None and self.handicap is None:
            raise ValueError("provide a name or a handicap")
        return self


class TeamsUpdate(BaseModel):
    teamMode: TeamMode
    teams: List[TeamIn] = Field(default_factory=list)


class ShareOut(BaseModel):
    code: str
    roundId: str
