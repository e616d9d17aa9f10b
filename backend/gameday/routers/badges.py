from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..models import Badge
from ..schemas import BadgeOut
from ..services.badges import GAME_BADGES, sync_badge_catalog

router = APIRouter(prefix="/badges", tags=["badges"])

_CATALOG_ORDER = {definition.id: position for position, definition in enumerate(GAME_BADGES)}


def _to_badge_out(badge: Badge) -> BadgeOut:
    return BadgeOut(
        id=badge.id,
        name=badge.name,
        icon=badge.icon,
        description=badge.description,
    )


# GET /api/v0/badges
@router.get("", response_model=list[BadgeOut])
async def list_badges(session: AsyncSession = Depends(get_session)):
    await sync_badge_catalog(session)
    rows = (await session.execute(select(Badge))).scalars().all()
    rows = sorted(
        (badge for badge in rows if badge.id in _CATALOG_ORDER),
        key=lambda badge: _CATALOG_ORDER[badge.id],
    )
    return [_to_badge_out(badge) for badge in rows]
