import asyncio
import os
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from gameday.db import normalize_database_url
from gameday.models import Game, Player, Sport, Team
from gameday.scoring.formats import list_sports
from gameday.services.badges import sync_badge_catalog

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL environment variable is required")

engine = create_async_engine(
    normalize_database_url(DATABASE_URL), echo=False, pool_pre_ping=True
)
Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

DEMO_TEAMS = [
    ("demo-volleyball", "volleyball", "Demo 14U Volleyball", "Lakeside Spikers"),
    ("demo-basketball", "basketball", "Demo 12U Basketball", "Northside Hawks"),
    ("demo-soccer", "soccer", "Demo 10U Soccer", "River FC"),
]

DEMO_PLAYERS = [
    "Avery Cole",
    "Blake Dunn",
    "Casey Ford",
    "Devon Hale",
    "Emery Lane",
    "Finley Moss",
]


async def main():
    async with Session() as s:
        have = {x.id for x in (await s.execute(select(Sport))).scalars().all()}
        for config in list_sports():
            if config.id not in have:
                s.add(Sport(id=config.id, name=config.name))
        await s.commit()

        await sync_badge_catalog(s)

        existing_teams = {x.id for x in (await s.execute(select(Team))).scalars().all()}
        existing_players = {
            x.id for x in (await s.execute(select(Player))).scalars().all()
        }
        existing_games = {x.id for x in (await s.execute(select(Game))).scalars().all()}
        tipoff = datetime.utcnow().replace(minute=0, second=0, microsecond=0)

        for offset, (team_id, sport_id, name, opponent) in enumerate(DEMO_TEAMS):
            if team_id not in existing_teams:
                s.add(Team(id=team_id, sport_id=sport_id, name=name))
            for number, player_name in enumerate(DEMO_PLAYERS, start=1):
                pid = f"{team_id}-{number}"
                if pid not in existing_players:
                    s.add(
                        Player(
                            id=pid,
                            team_id=team_id,
                            name=player_name,
                            jersey_number=str(number),
                        )
                    )
            gid = f"{team_id}-game-1"
            if gid not in existing_games:
                s.add(
                    Game(
                        id=gid,
                        team_id=team_id,
                        sport_id=sport_id,
                        opponent_name=opponent,
                        scheduled_at=tipoff + timedelta(days=offset + 1),
                        location="Community Center",
                    )
                )
        await s.commit()

if __name__ == "__main__":
    asyncio.run(main())
