"""Tests for kanban_platform.app — factory and lifespan."""

from __future__ import annotations

from kanban_platform import __version__
from kanban_platform.analytics.tracker import AnalyticsTracker
from kanban_platform.app import _lifespan, _redact_url, create_app
from kanban_platform.envelope import ApiResponse
from kanban_platform.settings import PlatformSettings


class TestCreateApp:
    def test_routes_registered(self) -> None:
        app = create_app(PlatformSettings(database_url="sqlite+aiosqlite://"))
        paths = set(app.openapi()["paths"])
        assert {"/health", "/health/ready", "/api/features", "/api/features/{feature_id}"} <= paths
        assert app.version == __version__


class TestLifespan:
    async def test_populates_state(self) -> None:
        app = create_app(PlatformSettings(database_url="sqlite+aiosqlite://"))
        async with _lifespan(app):
            assert isinstance(app.state.analytics, AnalyticsTracker)
            assert app.state.analytics.enabled is False
            assert app.state.session_factory is not None


class TestRedactUrl:
    def test_hides_password(self) -> None:
        url = "postgresql+asyncpg://user:secret@db:5432/kanban"
        assert _redact_url(url) == "postgresql+asyncpg://user:***@db:5432/kanban"

    def test_without_credentials(self) -> None:
        assert _redact_url("sqlite+aiosqlite://") == "sqlite+aiosqlite://"


class TestApiResponse:
    def test_ok_defaults(self) -> None:
        assert ApiResponse[int].ok(3).model_dump() == {
            "success": True,
            "data": 3,
            "message": None,
        }

    def test_empty_payload(self) -> None:
        assert ApiResponse[None].ok().data is None
