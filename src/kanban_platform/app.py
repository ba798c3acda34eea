"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.cors import CORSMiddleware

from kanban_platform import __version__
from kanban_platform.analytics.sink import AnalyticsLogSink
from kanban_platform.analytics.tracker import AnalyticsTracker
from kanban_platform.db.engine import (
    create_async_engine,
    create_session_factory,
    create_tables,
)
from kanban_platform.events.event_bus import EventBus
from kanban_platform.features.router import router as feature_router
from kanban_platform.health.router import router as health_router
from kanban_platform.middleware.correlation import CorrelationIdMiddleware
from kanban_platform.middleware.errors import (
    CatchAllErrorMiddleware,
    register_error_handlers,
)
from kanban_platform.middleware.logging import setup_logging
from kanban_platform.settings import PlatformSettings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


def _redact_url(url: str) -> str:
    if "@" not in url:
        return url
    credentials, host = url.split("@", 1)
    return credentials.rsplit(":", 1)[0] + ":***@" + host


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage startup / shutdown of platform components."""
    settings: PlatformSettings = app.state.settings

    # --- Startup --------------------------------------------------------
    engine = create_async_engine(settings.database_url)
    session_factory = create_session_factory(engine)
    await create_tables(engine)

    event_bus = EventBus()
    analytics = AnalyticsTracker.from_config(settings.analytics, event_bus)
    analytics_sink = AnalyticsLogSink(event_bus)
    if analytics.enabled:
        analytics_sink.start()

    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.event_bus = event_bus
    app.state.analytics = analytics
    app.state.analytics_sink = analytics_sink

    logger.info(
        "Platform started (database=%s, analytics=%s)",
        _redact_url(settings.database_url),
        "on" if analytics.enabled else "off",
    )

    yield

    # --- Shutdown -------------------------------------------------------
    await analytics.aclose()
    await analytics_sink.stop()
    await engine.dispose()
    logger.info("Platform shut down")


def create_app(settings: PlatformSettings | None = None) -> FastAPI:
    """Build and return the configured FastAPI application."""
    if settings is None:
        settings = PlatformSettings()

    setup_logging(settings.log_level)

    app = FastAPI(
        title="Kanban Platform",
        version=__version__,
        debug=settings.debug,
        lifespan=_lifespan,
    )
    app.state.settings = settings

    # ----- Middleware stack (outer → inner) ----------------------------
    # Order: Correlation → CatchAll → CORS → GZip
    # Added in reverse because Starlette processes them LIFO.
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CatchAllErrorMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    # ----- Exception handlers -----------------------------------------
    register_error_handlers(app)

    # ----- Routers ---------------------------------------------------
    app.include_router(health_router)
    app.include_router(feature_router)

    return app
