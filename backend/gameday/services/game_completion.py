"""Persist a confirmed completion wizard.

Three writes run one after the other, each in its own commit: the game
result, the attendance snapshot, then the badge awards. A failed write stops
the sequence and is reported; writes that already committed stay in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import uuid
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import GameAlreadyCompleted, GameNotFound
from ..models import (
    GAME_STATUS_COMPLETED,
    GAME_STATUS_SCHEDULED,
    Game,
    GameAttendance,
    Player,
    PlayerBadge,
)
from .completion import (
    CompletionState,
    CompletionWrites,
    GameContext,
    PlayerRef,
    build_completion_writes,
    check_state,
)

logger = logging.getLogger(__name__)

STEP_RESULT = "game result"
STEP_ATTENDANCE = "attendance"
STEP_BADGES = "badges"


@dataclass
class CompletionReport:
    game_id: str
    saved_steps: list[str] = field(default_factory=list)
    failed_step: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failed_step is None


def _utcnow() -> datetime:
    # Stored naive, in UTC.
    return datetime.now(timezone.utc).replace(tzinfo=None)


async def _get_scheduled_game(session: AsyncSession, game_id: str) -> Game:
    game = await session.get(Game, game_id)
    if game is None:
        raise GameNotFound(game_id)
    if game.status != GAME_STATUS_SCHEDULED:
        raise GameAlreadyCompleted(game_id)
    return game


async def load_game_context(session: AsyncSession, game_id: str) -> GameContext:
    """Gather what the wizard needs for a scheduled game."""

    game = await _get_scheduled_game(session, game_id)
    players = (
        await session.execute(
            select(Player)
            .where(Player.team_id == game.team_id, Player.deleted_at.is_(None))
            .order_by(Player.name)
        )
    ).scalars().all()
    return GameContext(
        game_id=game.id,
        sport=game.sport_id,
        team_roster=[PlayerRef(id=p.id, name=p.name) for p in players],
        opponent_name=game.opponent_name,
    )


async def save_game_result(
    session: AsyncSession, writes: CompletionWrites, completed_by: Optional[str]
) -> None:
    payload = writes.finalize
    game = await session.get(Game, payload["gameId"])
    if game is None:
        raise GameNotFound(payload["gameId"])
    game.status = GAME_STATUS_COMPLETED
    game.scoring_format = payload["formatId"]
    game.our_score = payload["ourTotalPoints"]
    game.opponent_score = payload["theirTotalPoints"]
    game.point_differential = payload["pointDifferential"]
    game.game_result = payload["outcome"]
    game.unit_scores = payload["unitScores"]
    game.our_sets_won = payload.get("ourUnitsWon")
    game.opponent_sets_won = payload.get("theirUnitsWon")
    game.notes = payload.get("notes")
    game.completed_at = _utcnow()
    game.completed_by = completed_by
    await session.commit()


async def replace_attendance(
    session: AsyncSession, writes: CompletionWrites, completed_by: Optional[str]
) -> None:
    game_id = writes.finalize["gameId"]
    await session.execute(delete(GameAttendance).where(GameAttendance.game_id == game_id))
    session.add_all(
        GameAttendance(
            id=uuid.uuid4().hex,
            game_id=row["gameId"],
            player_id=row["playerId"],
            status=row["status"],
            recorded_by=completed_by,
        )
        for row in writes.attendance
    )
    await session.commit()


async def award_badges(
    session: AsyncSession, writes: CompletionWrites, completed_by: Optional[str]
) -> None:
    if not writes.badges:
        return
    game_id = writes.finalize["gameId"]
    existing = set(
        (
            await session.execute(
                select(PlayerBadge.player_id, PlayerBadge.badge_id).where(
                    PlayerBadge.game_id == game_id
                )
            )
        ).all()
    )
    for row in writes.badges:
        key = (row["playerId"], row["badgeType"])
        if key in existing:
            continue
        existing.add(key)
        session.add(
            PlayerBadge(
                id=uuid.uuid4().hex,
                player_id=row["playerId"],
                badge_id=row["badgeType"],
                game_id=game_id,
                context=row["context"],
                awarded_by=completed_by,
            )
        )
    await session.commit()


async def complete_game(
    session: AsyncSession,
    state: CompletionState,
    *,
    completed_by: Optional[str] = None,
) -> CompletionReport:
    """Write a confirmed wizard state.

    Raises ``GameNotFound``/``GameAlreadyCompleted`` for a game that is not
    scheduled and ``CompletionBlocked`` when the result is undecided; nothing
    is written in those cases. Database errors during the writes are caught
    and reported on the returned ``CompletionReport``.
    """

    await _get_scheduled_game(session, state.game_id)
    writes = build_completion_writes(check_state(state), completed_by)

    report = CompletionReport(game_id=state.game_id)
    steps = (
        (STEP_RESULT, save_game_result),
        (STEP_ATTENDANCE, replace_attendance),
        (STEP_BADGES, award_badges),
    )
    for name, step in steps:
        try:
            await step(session, writes, completed_by)
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.exception(
                "Saving %s failed for game %s (saved: %s)",
                name,
                state.game_id,
                ", ".join(report.saved_steps) or "nothing",
            )
            report.failed_step = name
            report.error = str(exc)
            return report
        report.saved_steps.append(name)

    logger.info(
        "Completed game %s: %s (%d attendance rows, %d badges)",
        state.game_id,
        writes.finalize["outcome"] or "no winner",
        len(writes.attendance),
        len(writes.badges),
    )
    return report
