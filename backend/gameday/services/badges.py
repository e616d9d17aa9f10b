"""Game badge catalog.

Coaches hand these out to players during game completion.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Badge, PlayerBadge


@dataclass(frozen=True)
class BadgeDefinition:
    id: str
    name: str
    icon: str
    description: str


GAME_BADGES: list[BadgeDefinition] = [
    BadgeDefinition(
        id="game_mvp",
        name="Game MVP",
        icon="🏆",
        description="Most valuable player of the game.",
    ),
    BadgeDefinition(
        id="defensive_player",
        name="Defensive Player",
        icon="🛡️",
        description="Stood out on defense.",
    ),
    BadgeDefinition(
        id="best_server",
        name="Ace Machine",
        icon="🎯",
        description="Served, shot or pitched with standout accuracy.",
    ),
    BadgeDefinition(
        id="team_spirit",
        name="Team Spirit",
        icon="💪",
        description="Lifted the bench and the team all game.",
    ),
    BadgeDefinition(
        id="most_improved",
        name="Most Improved",
        icon="📈",
        description="Showed the biggest step forward.",
    ),
    BadgeDefinition(
        id="clutch_player",
        name="Clutch Player",
        icon="⭐",
        description="Came through when it mattered most.",
    ),
]

GAME_BADGE_IDS = frozenset(b.id for b in GAME_BADGES)


def badge_context(opponent_name: str | None, outcome: str) -> str:
    return f"Game vs {opponent_name or 'opponent'} - {outcome}"


async def sync_badge_catalog(session: AsyncSession) -> None:
    """Insert or refresh the catalog rows so badge awards can reference them."""

    existing = {
        b.id: b for b in (await session.execute(select(Badge))).scalars().all()
    }
    updated = False
    for definition in GAME_BADGES:
        badge = existing.get(definition.id)
        if not badge:
            session.add(
                Badge(
                    id=definition.id,
                    name=definition.name,
                    icon=definition.icon,
                    description=definition.description,
                )
            )
            updated = True
            continue

        for field in ("name", "icon", "description"):
            new_value = getattr(definition, field)
            if getattr(badge, field) != new_value:
                setattr(badge, field, new_value)
                updated = True

    if updated:
        await session.commit()


async def load_game_badges(session: AsyncSession, game_id: str) -> list[PlayerBadge]:
    rows = (
        await session.execute(
            select(PlayerBadge)
            .where(PlayerBadge.game_id == game_id)
            .order_by(PlayerBadge.player_id, PlayerBadge.badge_id)
        )
    ).scalars().all()
    return list(rows)
