"""Pydantic-settings configuration for the Kanban platform."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------


class AnalyticsConfig(BaseModel):
    """Product analytics delivery."""

    enabled: bool = False
    endpoint: str = Field(
        default="",
        description="HTTP collector URL. Empty keeps events in-process.",
    )
    api_key: str = ""
    distinct_id: str = ""
    timeout_seconds: float = 5.0


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class PlatformSettings(BaseSettings):
    """Central configuration for the Kanban platform.

    All values can be overridden via environment variables prefixed
    with ``KANBAN_``.  Nested models use ``__`` as a delimiter,
    e.g. ``KANBAN_ANALYTICS__ENABLED``.
    """

    model_config = SettingsConfigDict(
        env_prefix="KANBAN_",
        env_nested_delimiter="__",
    )

    # -- Core -----------------------------------------------------------------

    host: str = "0.0.0.0"
    port: int = 9000
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    database_url: str = "sqlite+aiosqlite:///./kanban.db"

    # -- CORS -----------------------------------------------------------------

    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
    )

    # -- Sub-configs ----------------------------------------------------------

    analytics: AnalyticsConfig = Field(
        default_factory=AnalyticsConfig,
    )
