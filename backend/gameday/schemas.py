from typing import Annotated, Any, List, Literal, Optional, Union
from datetime import datetime
from pydantic import BaseModel, Field, field_validator, ConfigDict

from .services.completion import AttendanceStatus, CompletionState, Stage


class SetFormatOut(BaseModel):
    kind: Literal["sets"] = "sets"
    id: str
    name: str
    description: str
    setsToWin: Optional[int] = None
    maxSets: int
    setTargets: List[int]
    setCaps: List[Optional[int]]
    winByTwo: bool
    noMatchWinner: bool


class PeriodFormatOut(BaseModel):
    kind: Literal["periods"] = "periods"
    id: str
    name: str
    description: str
    periods: int
    periodLabel: str
    periodName: str
    hasOvertime: bool
    overtimeLabel: str
    allowTie: bool


ScoringFormatOut = Annotated[
    Union[SetFormatOut, PeriodFormatOut], Field(discriminator="kind")
]


class SportOut(BaseModel):
    id: str
    name: str
    icon: str
    isSetBased: bool
    formats: List[ScoringFormatOut]


class BadgeOut(BaseModel):
    id: str
    name: str
    icon: Optional[str] = None
    description: Optional[str] = None


class MatchResultOut(BaseModel):
    outcome: Literal["win", "loss", "tie", "none", "in_progress"]
    ourUnitsWon: int
    theirUnitsWon: int
    ourTotalPoints: int
    theirTotalPoints: int
    pointDifferential: int


class EvaluateIn(BaseModel):
    sport: str = Field(..., min_length=1)
    formatId: str = Field(..., min_length=1)
    # Validated by services.validation so the errors read the same everywhere.
    unitScores: List[Any] = Field(default_factory=list)
    enteredUnits: Optional[List[int]] = None

    model_config = ConfigDict(extra="forbid")


class EvaluateOut(BaseModel):
    result: MatchResultOut
    visibleUnits: int
    unitLabels: List[str]
    overtimeDue: bool
    canComplete: bool
    pendingReason: Optional[str] = None
    notice: Optional[str] = None


class AdvanceAction(BaseModel):
    type: Literal["advance"]


class BackAction(BaseModel):
    type: Literal["back"]


class SelectFormatAction(BaseModel):
    type: Literal["select_format"]
    formatId: str = Field(..., min_length=1)


class SetScoreAction(BaseModel):
    type: Literal["set_score"]
    index: int = Field(..., ge=0)
    side: Literal["our", "their"]
    # Raw score-box text or a number; non-digits are dropped.
    value: Union[int, str, None] = None


class AdjustScoreAction(BaseModel):
    type: Literal["adjust_score"]
    index: int = Field(..., ge=0)
    side: Literal["our", "their"]
    delta: int = Field(..., ge=-100, le=100)


class ToggleAttendanceAction(BaseModel):
    type: Literal["toggle_attendance"]
    playerId: str


class SetAttendanceAction(BaseModel):
    type: Literal["set_attendance"]
    playerId: str
    status: AttendanceStatus


class ToggleBadgeAction(BaseModel):
    type: Literal["toggle_badge"]
    playerId: str
    badgeType: str


class SetNotesAction(BaseModel):
    type: Literal["set_notes"]
    notes: Optional[str] = None


CompletionAction = Annotated[
    Union[
        AdvanceAction,
        BackAction,
        SelectFormatAction,
        SetScoreAction,
        AdjustScoreAction,
        ToggleAttendanceAction,
        SetAttendanceAction,
        ToggleBadgeAction,
        SetNotesAction,
    ],
    Field(discriminator="type"),
]


class CompletionStartIn(BaseModel):
    formatId: Optional[str] = None


class CompletionActionIn(BaseModel):
    state: CompletionState
    action: CompletionAction


class CompletionConfirmIn(BaseModel):
    state: CompletionState
    completedBy: Optional[str] = Field(default=None, max_length=100)

    @field_validator("completedBy", mode="before")
    @classmethod
    def _normalize_completed_by(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise TypeError("completedBy must be a string")
        return value.strip() or None


class CompletionView(BaseModel):
    state: CompletionState
    stage: Stage
    stageIndex: int
    result: MatchResultOut
    visibleUnits: int
    unitLabels: List[str]
    overtimeDue: bool
    canComplete: bool
    notice: Optional[str] = None
    presentCount: int


class AttendanceOut(BaseModel):
    playerId: str
    status: str


class GameBadgeOut(BaseModel):
    playerId: str
    badgeId: str
    context: Optional[str] = None


class GameOut(BaseModel):
    id: str
    teamId: str
    sport: str
    opponentName: Optional[str] = None
    scheduledAt: Optional[datetime] = None
    location: Optional[str] = None
    status: str
    scoringFormat: Optional[str] = None
    ourScore: Optional[int] = None
    opponentScore: Optional[int] = None
    pointDifferential: Optional[int] = None
    result: Optional[str] = None
    unitScores: Optional[List[dict]] = None
    ourSetsWon: Optional[int] = None
    opponentSetsWon: Optional[int] = None
    notes: Optional[str] = None
    completedAt: Optional[datetime] = None
    completedBy: Optional[str] = None
    attendance: List[AttendanceOut] = Field(default_factory=list)
    badges: List[GameBadgeOut] = Field(default_factory=list)
