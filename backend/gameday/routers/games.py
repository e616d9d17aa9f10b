import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..exceptions import CompletionPartiallySaved, GameNotFound, ProblemDetail, http_problem
from ..models import Game, GameAttendance
from ..schemas import (
    AdjustScoreAction,
    AdvanceAction,
    AttendanceOut,
    BackAction,
    CompletionActionIn,
    CompletionConfirmIn,
    CompletionStartIn,
    CompletionView,
    GameBadgeOut,
    GameOut,
    SelectFormatAction,
    SetAttendanceAction,
    SetNotesAction,
    SetScoreAction,
    ToggleAttendanceAction,
    ToggleBadgeAction,
)
from ..scoring.formats import UnknownFormat, UnknownSport
from ..scoring.result import offers_overtime, unit_labels, visible_unit_count
from ..services import completion as wizard
from ..services.badges import load_game_badges
from ..services.completion import CompletionBlocked, CompletionState, WorkflowError
from ..services.game_completion import complete_game, load_game_context
from ..services.validation import ValidationError, parse_score_input
from ..time_utils import coerce_utc
from .scoring import result_out

logger = logging.getLogger(__name__)

# Resource-only prefix; versioning is added in main.py
router = APIRouter(
    prefix="/games",
    tags=["games"],
    responses={404: {"model": ProblemDetail}, 409: {"model": ProblemDetail}},
)


def _workflow_problem(exc: WorkflowError):
    status_code = 422 if isinstance(exc, CompletionBlocked) else 409
    return http_problem(status_code=status_code, detail=exc.detail, code=exc.code)


def _lookup_problem(exc: LookupError):
    code = "sport_not_configured" if isinstance(exc, UnknownSport) else "scoring_format_not_found"
    return http_problem(status_code=422, detail=str(exc), code=code)


def completion_view(state: CompletionState) -> CompletionView:
    fmt = wizard.format_of(state)
    visible = visible_unit_count(fmt, state.unit_scores)
    return CompletionView(
        state=state,
        stage=state.stage,
        stageIndex=wizard.STAGES.index(state.stage),
        result=result_out(wizard.evaluate(state)),
        visibleUnits=visible,
        unitLabels=unit_labels(fmt, visible),
        overtimeDue=offers_overtime(fmt, state.unit_scores, state.entered_units),
        canComplete=wizard.can_complete(state),
        notice=wizard.completion_notice(state),
        presentCount=wizard.present_count(state),
    )


def apply_action(state: CompletionState, action) -> CompletionState:
    if isinstance(action, AdvanceAction):
        return wizard.advance(state)
    if isinstance(action, BackAction):
        return wizard.back(state)
    if isinstance(action, SelectFormatAction):
        return wizard.select_format(state, action.formatId)
    if isinstance(action, SetScoreAction):
        return wizard.set_unit_score(
            state, action.index, action.side, parse_score_input(action.value)
        )
    if isinstance(action, AdjustScoreAction):
        return wizard.adjust_unit_score(state, action.index, action.side, action.delta)
    if isinstance(action, ToggleAttendanceAction):
        return wizard.toggle_attendance(state, action.playerId)
    if isinstance(action, SetAttendanceAction):
        return wizard.set_attendance(state, action.playerId, action.status)
    if isinstance(action, ToggleBadgeAction):
        return wizard.toggle_badge(state, action.playerId, action.badgeType)
    if isinstance(action, SetNotesAction):
        return wizard.set_notes(state, action.notes)
    raise TypeError(f"unsupported completion action: {action!r}")


def _require_same_game(gid: str, state: CompletionState) -> None:
    if state.game_id != gid:
        raise http_problem(
            status_code=422,
            detail="completion state belongs to another game",
            code="completion_game_mismatch",
        )


async def _game_out(session: AsyncSession, game: Game) -> GameOut:
    attendance = (
        await session.execute(
            select(GameAttendance)
            .where(GameAttendance.game_id == game.id)
            .order_by(GameAttendance.player_id)
        )
    ).scalars().all()
    badges = await load_game_badges(session, game.id)
    return GameOut(
        id=game.id,
        teamId=game.team_id,
        sport=game.sport_id,
        opponentName=game.opponent_name,
        scheduledAt=coerce_utc(game.scheduled_at),
        location=game.location,
        status=game.status,
        scoringFormat=game.scoring_format,
        ourScore=game.our_score,
        opponentScore=game.opponent_score,
        pointDifferential=game.point_differential,
        result=game.game_result,
        unitScores=game.unit_scores,
        ourSetsWon=game.our_sets_won,
        opponentSetsWon=game.opponent_sets_won,
        notes=game.notes,
        completedAt=coerce_utc(game.completed_at),
        completedBy=game.completed_by,
        attendance=[AttendanceOut(playerId=a.player_id, status=a.status) for a in attendance],
        badges=[
            GameBadgeOut(playerId=b.player_id, badgeId=b.badge_id, context=b.context)
            for b in badges
        ],
    )


# GET /api/v0/games/{gid}
@router.get("/{gid}", response_model=GameOut)
async def get_game(gid: str, session: AsyncSession = Depends(get_session)):
    game = await session.get(Game, gid)
    if not game:
        raise GameNotFound(gid)
    return await _game_out(session, game)


# POST /api/v0/games/{gid}/completion
@router.post("/{gid}/completion", response_model=CompletionView)
async def start_game_completion(
    gid: str,
    body: CompletionStartIn | None = None,
    session: AsyncSession = Depends(get_session),
):
    context = await load_game_context(session, gid)
    try:
        state = wizard.start_completion(context, body.formatId if body else None)
    except (UnknownSport, UnknownFormat) as exc:
        raise _lookup_problem(exc)
    return completion_view(state)


# POST /api/v0/games/{gid}/completion/actions
@router.post("/{gid}/completion/actions", response_model=CompletionView)
async def apply_completion_action(gid: str, body: CompletionActionIn):
    _require_same_game(gid, body.state)
    try:
        state = wizard.check_state(body.state)
        state = apply_action(state, body.action)
    except WorkflowError as exc:
        raise _workflow_problem(exc)
    except (UnknownSport, UnknownFormat) as exc:
        raise _lookup_problem(exc)
    except ValidationError as exc:
        raise http_problem(status_code=422, detail=exc.detail, code="completion_validation_error")
    return completion_view(state)


# POST /api/v0/games/{gid}/completion/confirm
@router.post("/{gid}/completion/confirm", response_model=GameOut)
async def confirm_game_completion(
    gid: str,
    body: CompletionConfirmIn,
    session: AsyncSession = Depends(get_session),
):
    _require_same_game(gid, body.state)
    context = await load_game_context(session, gid)
    if {p.id for p in context.team_roster} != {p.id for p in body.state.roster}:
        raise http_problem(
            status_code=409,
            detail="the team roster changed while the game was being completed",
            code="completion_roster_changed",
        )

    try:
        report = await complete_game(session, body.state, completed_by=body.completedBy)
    except WorkflowError as exc:
        raise _workflow_problem(exc)
    except (UnknownSport, UnknownFormat) as exc:
        raise _lookup_problem(exc)

    if not report.ok:
        raise CompletionPartiallySaved(gid, report.failed_step, report.saved_steps)

    game = await session.get(Game, gid)
    await session.refresh(game)
    return await _game_out(session, game)
