"""Game completion wizard.

The wizard walks a coach through five steps (format, score, attendance,
badges, confirm). Its whole state lives in one ``CompletionState`` record that
is only ever changed through the transition functions below; each returns a
new state and leaves its input untouched. Nothing is written to the database
here: ``build_completion_writes`` turns a confirmed state into the payloads
that ``services.game_completion`` persists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config import NOTES_MAX_LENGTH
from ..scoring.formats import (
    PeriodFormat,
    ScoringFormat,
    SetFormat,
    default_format,
    get_format,
)
from ..scoring.periods import (
    append_overtime,
    drop_open_overtime,
    overtime_due,
    unit_label,
)
from ..scoring.result import (
    MatchResult,
    Outcome,
    PendingReason,
    evaluate_match,
    is_decided,
    pending_reason,
    visible_unit_count,
)
from ..scoring.units import SIDES, UnitScore
from .badges import GAME_BADGE_IDS, badge_context
from .validation import ValidationError, validate_unit_scores

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    FORMAT = "format"
    SCORE = "score"
    ATTENDANCE = "attendance"
    BADGES = "badges"
    CONFIRM = "confirm"


STAGES: tuple[Stage, ...] = tuple(Stage)

AttendanceStatus = Literal["present", "late", "absent"]
_NEXT_ATTENDANCE: Dict[str, AttendanceStatus] = {
    "present": "absent",
    "absent": "late",
    "late": "present",
}


class WorkflowError(Exception):
    """Raised when a transition is not allowed from the current state."""

    def __init__(self, detail: str, *, code: str = "completion_invalid_action") -> None:
        super().__init__(detail)
        self.detail = detail
        self.code = code


class CompletionBlocked(WorkflowError):
    """The game cannot be completed with the scores entered so far."""

    def __init__(self, reason: PendingReason) -> None:
        super().__init__(reason.message, code="completion_blocked")
        self.reason = reason


class PlayerRef(BaseModel):
    id: str
    name: str


class UnitScoreModel(BaseModel):
    our: int = Field(default=0, ge=0)
    their: int = Field(default=0, ge=0)


class BadgeAward(BaseModel):
    player_id: str
    badge_type: str

    model_config = ConfigDict(frozen=True)


class GameContext(BaseModel):
    game_id: str
    sport: str
    team_roster: List[PlayerRef] = Field(default_factory=list)
    opponent_name: Optional[str] = None


class CompletionState(BaseModel):
    game_id: str
    sport: str
    opponent_name: Optional[str] = None
    roster: List[PlayerRef] = Field(default_factory=list)
    stage: Stage = Stage.FORMAT
    format_id: str
    unit_scores: List[UnitScoreModel] = Field(default_factory=list)
    entered_units: List[int] = Field(default_factory=list)
    attendance: Dict[str, AttendanceStatus] = Field(default_factory=dict)
    badges: List[BadgeAward] = Field(default_factory=list)
    notes: str = ""

    model_config = ConfigDict(extra="forbid")


def _replace(state: CompletionState, **changes: Any) -> CompletionState:
    return state.model_copy(update=changes, deep=True)


def _require_stage(state: CompletionState, *stages: Stage) -> None:
    if state.stage not in stages:
        allowed = " or ".join(s.value for s in stages)
        raise WorkflowError(
            f"action is only allowed during the {allowed} step (current step: {state.stage.value})",
            code="completion_wrong_stage",
        )


def _require_player(state: CompletionState, player_id: str) -> None:
    if player_id not in {p.id for p in state.roster}:
        raise WorkflowError(
            f"player '{player_id}' is not on the roster",
            code="completion_unknown_player",
        )


def seed_units(fmt: ScoringFormat) -> List[UnitScoreModel]:
    if isinstance(fmt, SetFormat):
        count = fmt.max_sets
    elif isinstance(fmt, PeriodFormat):
        count = fmt.periods
    else:
        raise TypeError(f"unsupported scoring format: {fmt!r}")
    return [UnitScoreModel() for _ in range(count)]


def format_of(state: CompletionState) -> ScoringFormat:
    return get_format(state.sport, state.format_id)


def start_completion(
    context: GameContext, format_id: Optional[str] = None
) -> CompletionState:
    fmt = (
        get_format(context.sport, format_id)
        if format_id
        else default_format(context.sport)
    )
    logger.info(
        "Starting completion for game %s (%s, %s)", context.game_id, context.sport, fmt.id
    )
    return CompletionState(
        game_id=context.game_id,
        sport=context.sport,
        opponent_name=context.opponent_name,
        roster=list(context.team_roster),
        stage=Stage.FORMAT,
        format_id=fmt.id,
        unit_scores=seed_units(fmt),
        attendance={p.id: "present" for p in context.team_roster},
    )


def advance(state: CompletionState) -> CompletionState:
    position = STAGES.index(state.stage)
    if position == len(STAGES) - 1:
        raise WorkflowError("already at the confirm step", code="completion_last_stage")
    return _replace(state, stage=STAGES[position + 1])


def back(state: CompletionState) -> CompletionState:
    position = STAGES.index(state.stage)
    if position == 0:
        raise WorkflowError("already at the format step", code="completion_first_stage")
    return _replace(state, stage=STAGES[position - 1])


def select_format(state: CompletionState, format_id: str) -> CompletionState:
    _require_stage(state, Stage.FORMAT)
    fmt = get_format(state.sport, format_id)
    if fmt.id == state.format_id:
        return state
    return _replace(
        state, format_id=fmt.id, unit_scores=seed_units(fmt), entered_units=[]
    )


def set_unit_score(
    state: CompletionState, index: int, side: str, value: int
) -> CompletionState:
    """Record one side's score for set/period ``index`` (0-based).

    Negative values are floored at zero. For period formats an overtime
    period is appended once the regular periods are in and the game is level,
    and an empty overtime period is removed again once it no longer is.
    """

    _require_stage(state, Stage.SCORE)
    if side not in SIDES:
        raise WorkflowError(f"side must be one of {', '.join(SIDES)}", code="completion_bad_side")

    fmt = format_of(state)
    editable = min(visible_unit_count(fmt, state.unit_scores), len(state.unit_scores))
    if not 0 <= index < editable:
        raise WorkflowError(
            f"unit #{index + 1} cannot be edited yet", code="completion_unit_unavailable"
        )

    units = [UnitScore(u.our, u.their) for u in state.unit_scores]
    units[index] = units[index].with_side(side, value)
    entered = sorted(set(state.entered_units) | {index})

    if isinstance(fmt, PeriodFormat):
        if overtime_due(fmt, units, entered):
            units = append_overtime(units)
            logger.info(
                "Game %s tied after %d periods; adding %s",
                state.game_id,
                len(units) - 1,
                fmt.overtime_label,
            )
        else:
            kept = drop_open_overtime(fmt, units, entered)
            if len(kept) < len(units):
                logger.info(
                    "Game %s no longer tied; removing empty %s",
                    state.game_id,
                    unit_label(fmt, len(units) - 1),
                )
            units = kept

    return _replace(
        state,
        unit_scores=[UnitScoreModel(our=u.our, their=u.their) for u in units],
        entered_units=entered,
    )


def adjust_unit_score(
    state: CompletionState, index: int, side: str, delta: int
) -> CompletionState:
    """Increment or decrement a score; decrementing stops at zero."""

    if 0 <= index < len(state.unit_scores) and side in SIDES:
        current = getattr(state.unit_scores[index], side)
    else:
        current = 0
    return set_unit_score(state, index, side, max(current + delta, 0))


def set_attendance(
    state: CompletionState, player_id: str, status: AttendanceStatus
) -> CompletionState:
    _require_stage(state, Stage.ATTENDANCE)
    _require_player(state, player_id)
    if status not in _NEXT_ATTENDANCE:
        raise WorkflowError(
            f"attendance status must be one of {', '.join(_NEXT_ATTENDANCE)}",
            code="completion_bad_attendance",
        )
    attendance = dict(state.attendance)
    attendance[player_id] = status
    badges = state.badges
    if status == "absent":
        badges = [b for b in badges if b.player_id != player_id]
    return _replace(state, attendance=attendance, badges=badges)


def toggle_attendance(state: CompletionState, player_id: str) -> CompletionState:
    """Cycle a player present -> absent -> late -> present."""

    current = state.attendance.get(player_id, "present")
    return set_attendance(state, player_id, _NEXT_ATTENDANCE[current])


def toggle_badge(
    state: CompletionState, player_id: str, badge_type: str
) -> CompletionState:
    _require_stage(state, Stage.BADGES)
    _require_player(state, player_id)
    if badge_type not in GAME_BADGE_IDS:
        raise WorkflowError(
            f"unknown badge '{badge_type}'", code="completion_unknown_badge"
        )
    if state.attendance.get(player_id, "present") == "absent":
        raise WorkflowError(
            "badges can only go to players who attended", code="completion_player_absent"
        )

    award = BadgeAward(player_id=player_id, badge_type=badge_type)
    if award in state.badges:
        badges = [b for b in state.badges if b != award]
    else:
        badges = [*state.badges, award]
    return _replace(state, badges=badges)


def set_notes(state: CompletionState, notes: Optional[str]) -> CompletionState:
    text = (notes or "").strip()
    if len(text) > NOTES_MAX_LENGTH:
        raise WorkflowError(
            f"notes must be at most {NOTES_MAX_LENGTH} characters",
            code="completion_notes_too_long",
        )
    return _replace(state, notes=text)


def evaluate(state: CompletionState) -> MatchResult:
    return evaluate_match(format_of(state), state.unit_scores)


def completion_notice(state: CompletionState) -> Optional[str]:
    reason = pending_reason(format_of(state), state.unit_scores, state.entered_units)
    return reason.message if reason else None


def can_complete(state: CompletionState) -> bool:
    return is_decided(format_of(state), evaluate(state))


def present_count(state: CompletionState) -> int:
    return sum(1 for status in state.attendance.values() if status != "absent")


def check_state(state: CompletionState) -> CompletionState:
    """Reject a state that the transitions could never have produced.

    Used for states that arrive from outside the process.
    """

    fmt = format_of(state)
    if isinstance(fmt, SetFormat):
        if len(state.unit_scores) != fmt.max_sets:
            raise WorkflowError(
                f"{fmt.name} needs exactly {fmt.max_sets} set scores",
                code="completion_bad_units",
            )
    elif len(state.unit_scores) < fmt.periods:
        raise WorkflowError(
            f"{fmt.name} needs at least {fmt.periods} period scores",
            code="completion_bad_units",
        )
    try:
        validate_unit_scores([u.model_dump() for u in state.unit_scores])
    except ValidationError as exc:
        raise WorkflowError(exc.detail, code="completion_bad_units")
    if any(not 0 <= i < len(state.unit_scores) for i in state.entered_units):
        raise WorkflowError("entered units out of range", code="completion_bad_units")
    entered = set(state.entered_units)
    units = [UnitScore(u.our, u.their) for u in state.unit_scores]
    if any(u.scored and i not in entered for i, u in enumerate(units)):
        raise WorkflowError(
            "scores present for units that were never entered",
            code="completion_bad_units",
        )
    if isinstance(fmt, PeriodFormat):
        _check_overtime(fmt, units, entered)

    roster_ids = {p.id for p in state.roster}
    stray = sorted(set(state.attendance) - roster_ids)
    stray += sorted({b.player_id for b in state.badges} - roster_ids)
    if stray:
        raise WorkflowError(
            f"players not on the roster: {', '.join(stray)}",
            code="completion_unknown_player",
        )
    missing = sorted(roster_ids - set(state.attendance))
    if missing:
        raise WorkflowError(
            f"attendance missing for: {', '.join(missing)}",
            code="completion_bad_attendance",
        )
    unknown_badges = sorted({b.badge_type for b in state.badges} - GAME_BADGE_IDS)
    if unknown_badges:
        raise WorkflowError(
            f"unknown badges: {', '.join(unknown_badges)}",
            code="completion_unknown_badge",
        )
    if len(set(state.badges)) != len(state.badges):
        raise WorkflowError("badge awarded twice", code="completion_duplicate_badge")
    absent = sorted(
        {b.player_id for b in state.badges if state.attendance[b.player_id] == "absent"}
    )
    if absent:
        raise WorkflowError(
            f"badges awarded to absent players: {', '.join(absent)}",
            code="completion_player_absent",
        )
    return state


def _check_overtime(fmt: PeriodFormat, units: List[UnitScore], entered: set) -> None:
    if len(units) == fmt.periods:
        return
    if not fmt.has_overtime:
        raise WorkflowError(f"{fmt.name} has no overtime", code="completion_bad_units")
    # Every period but the newest one was entered before it was added.
    last = len(units) - 1
    if any(i not in entered for i in range(last)):
        raise WorkflowError(
            "overtime added before regulation was entered", code="completion_bad_units"
        )
    if last not in entered and not overtime_due(fmt, units[:last]):
        raise WorkflowError(
            "overtime added while the game was not tied", code="completion_bad_units"
        )


@dataclass
class CompletionWrites:
    finalize: Dict[str, Any]
    attendance: List[Dict[str, Any]] = field(default_factory=list)
    badges: List[Dict[str, Any]] = field(default_factory=list)


def build_completion_writes(
    state: CompletionState, completed_by: Optional[str] = None
) -> CompletionWrites:
    """Produce the three write payloads for a confirmed wizard.

    Raises ``CompletionBlocked`` when the result is not decided.
    """

    _require_stage(state, Stage.CONFIRM)
    fmt = format_of(state)
    result = evaluate_match(fmt, state.unit_scores)
    if not is_decided(fmt, result):
        reason = pending_reason(fmt, state.unit_scores, state.entered_units)
        logger.warning(
            "Completion blocked for game %s: %s",
            state.game_id,
            reason.value if reason else result.outcome.value,
        )
        raise CompletionBlocked(reason or PendingReason.UNDECIDED)

    # Sets hidden by an earlier decision are not part of the result.
    counted = state.unit_scores[: visible_unit_count(fmt, state.unit_scores)]
    finalize: Dict[str, Any] = {
        "gameId": state.game_id,
        "status": "completed",
        "formatId": fmt.id,
        "ourTotalPoints": result.our_total_points,
        "theirTotalPoints": result.their_total_points,
        "pointDifferential": result.point_differential,
        "outcome": None if result.outcome == Outcome.NONE else result.outcome.value,
        "unitScores": [u.model_dump() for u in counted],
        "notes": state.notes or None,
    }
    if isinstance(fmt, SetFormat):
        finalize["ourUnitsWon"] = result.our_units_won
        finalize["theirUnitsWon"] = result.their_units_won
    if completed_by:
        finalize["completedBy"] = completed_by

    attendance = [
        {"gameId": state.game_id, "playerId": player_id, "status": status}
        for player_id, status in sorted(state.attendance.items())
    ]
    context = badge_context(state.opponent_name, result.outcome.value)
    badges = [
        {
            "playerId": award.player_id,
            "badgeType": award.badge_type,
            "gameId": state.game_id,
            "context": context,
        }
        for award in state.badges
    ]
    return CompletionWrites(finalize=finalize, attendance=attendance, badges=badges)
