"""Shared test fixtures for kanban_platform."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from kanban_platform.app import _lifespan, create_app
from kanban_platform.db.engine import (
    create_async_engine,
    create_session_factory,
    create_tables,
)
from kanban_platform.db.models import ProjectRecord
from kanban_platform.settings import PlatformSettings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

SQLITE_URL = "sqlite+aiosqlite://"


async def add_project(
    session_factory: async_sessionmaker[AsyncSession],
    name: str = "Test project",
) -> str:
    """Insert a parent project row and return its id."""
    project_id = str(uuid.uuid4())
    async with session_factory() as session:
        session.add(ProjectRecord(id=project_id, name=name))
        await session.commit()
    return project_id


# ======================================================================
# Application fixtures
# ======================================================================


@pytest.fixture
def settings() -> PlatformSettings:
    """Settings with an in-memory database and analytics on, in-process only."""
    return PlatformSettings(
        database_url=SQLITE_URL,
        analytics={"enabled": True},
    )


@pytest.fixture
async def app(settings: PlatformSettings) -> AsyncGenerator[FastAPI, None]:
    app = create_app(settings)
    async with _lifespan(app):
        yield app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def project_id(app: FastAPI) -> str:
    return await add_project(app.state.session_factory)


# ======================================================================
# Bare database fixtures
# ======================================================================


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(SQLITE_URL)
    await create_tables(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as s:
        yield s


@pytest.fixture
def make_project(app: FastAPI):  # type: ignore[no-untyped-def]
    """Factory inserting extra parent projects into the app database."""

    async def _make(name: str = "Another project") -> str:
        return await add_project(app.state.session_factory, name)

    return _make
