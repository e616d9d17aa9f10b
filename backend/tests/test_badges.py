import asyncio
from collections.abc import Iterable

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gameday.db import Base, get_session
from gameday.models import Badge
from gameday.routers import badges
from gameday.services.badges import GAME_BADGES, badge_context, sync_badge_catalog


@pytest.fixture()
def badges_client():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async_session_maker = sessionmaker(
        engine, expire_on_commit=False, class_=AsyncSession
    )

    async def init_schema() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, tables=[Badge.__table__])

    asyncio.run(init_schema())

    async def override_get_session() -> Iterable[AsyncSession]:
        async with async_session_maker() as session:
            yield session

    app = FastAPI()
    app.include_router(badges.router, prefix="/api/v0")
    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as client:
        yield client, async_session_maker

    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())


def test_list_badges_returns_catalog_in_order(badges_client):
    client, _ = badges_client
    resp = client.get("/api/v0/badges")
    assert resp.status_code == 200
    data = resp.json()
    assert [b["id"] for b in data] == [
        "game_mvp",
        "defensive_player",
        "best_server",
        "team_spirit",
        "most_improved",
        "clutch_player",
    ]
    assert data[2]["name"] == "Ace Machine"


def test_sync_repairs_stale_rows_and_ignores_unknown_ones(badges_client):
    client, session_maker = badges_client

    async def seed() -> None:
        async with session_maker() as session:
            session.add_all(
                [
                    Badge(id="game_mvp", name="Old MVP", icon=None, description=None),
                    Badge(id="retired_badge", name="Retired", icon=None, description=None),
                ]
            )
            await session.commit()

    asyncio.run(seed())
    data = client.get("/api/v0/badges").json()
    assert len(data) == len(GAME_BADGES)
    assert data[0]["name"] == "Game MVP"
    assert data[0]["icon"] == "🏆"
    assert "retired_badge" not in {b["id"] for b in data}


def test_sync_is_idempotent(badges_client):
    _, session_maker = badges_client

    async def run():
        async with session_maker() as session:
            await sync_badge_catalog(session)
            await sync_badge_catalog(session)
            return (await session.execute(select(Badge))).scalars().all()

    assert len(asyncio.run(run())) == len(GAME_BADGES)


def test_badge_context():
    assert badge_context("Lakeside", "win") == "Game vs Lakeside - win"
    assert badge_context(None, "none") == "Game vs opponent - none"
