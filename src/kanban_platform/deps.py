"""Dependency injection for FastAPI route handlers.

Everything shared across requests (session factory, analytics tracker)
is constructed by the application lifespan and stored on ``app.state``;
these helpers hand it to handlers explicitly through ``Depends``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002

from kanban_platform.analytics.tracker import AnalyticsTracker  # noqa: TC001
from kanban_platform.features.store import FeatureStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session from the app-level session factory."""
    factory = request.app.state.session_factory
    async with factory() as session:
        yield session


def get_feature_store(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> FeatureStore:
    return FeatureStore(session)


def get_tracker(request: Request) -> AnalyticsTracker:
    tracker: AnalyticsTracker = request.app.state.analytics
    return tracker


StoreDep = Annotated[FeatureStore, Depends(get_feature_store)]
TrackerDep = Annotated[AnalyticsTracker, Depends(get_tracker)]
