"""Async database engine, session factory, and table bootstrapping."""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.ext.asyncio import (
    create_async_engine as _sa_create_async_engine,
)

from kanban_platform.db.models import Base


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_async_engine(database_url: str) -> AsyncEngine:
    """Create an :class:`AsyncEngine` for the given *database_url*.

    Supported schemes:

    * ``postgresql+asyncpg://...``
    * ``sqlite+aiosqlite://...``

    For SQLite the ``check_same_thread`` connect-arg is disabled and
    foreign-key enforcement is switched on for every new connection.
    """
    kwargs: dict[str, object] = {}

    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}

    engine = _sa_create_async_engine(database_url, **kwargs)
    if is_sqlite:
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Return a session factory bound to *engine*.

    Sessions produced by the factory have
    ``expire_on_commit=False`` so that attributes remain
    accessible after a commit without an additional query.
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables declared on :class:`Base`.

    Uses ``run_sync`` to execute the blocking
    ``metadata.create_all`` inside the async context.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
