"""Best-effort product analytics.

:meth:`AnalyticsTracker.track` never raises and never waits on the
network: events go onto the in-process :class:`EventBus` immediately
and, when a collector endpoint is configured, are POSTed from a
background task.  Delivery problems are logged and dropped.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from kanban_platform.events.event_bus import EventBus
    from kanban_platform.settings import AnalyticsConfig

logger = logging.getLogger(__name__)

ANALYTICS_TOPIC = "analytics"


class AnalyticsTracker:
    """Fire-and-forget event sink gated by the ``enabled`` policy flag."""

    def __init__(
        self,
        *,
        enabled: bool,
        event_bus: EventBus,
        endpoint: str = "",
        api_key: str = "",
        distinct_id: str = "",
        timeout_seconds: float = 5.0,
    ) -> None:
        self._enabled = enabled
        self._bus = event_bus
        self._endpoint = endpoint
        self._api_key = api_key
        self._distinct_id = distinct_id
        self._timeout = timeout_seconds
        self._pending: set[asyncio.Task[None]] = set()

    @classmethod
    def from_config(cls, config: AnalyticsConfig, event_bus: EventBus) -> AnalyticsTracker:
        return cls(
            enabled=config.enabled,
            event_bus=event_bus,
            endpoint=config.endpoint,
            api_key=config.api_key,
            distinct_id=config.distinct_id,
            timeout_seconds=config.timeout_seconds,
        )

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def track(self, event: str, properties: dict[str, Any]) -> None:
        """Record *event* if analytics are allowed.  Returns immediately."""
        if not self._enabled:
            return

        try:
            self._bus.publish(ANALYTICS_TOPIC, {"event": event, "properties": properties})
        except Exception:
            logger.warning("Could not publish analytics event %s", event, exc_info=True)

        if not self._endpoint:
            return

        try:
            task = asyncio.get_running_loop().create_task(self._deliver(event, properties))
        except RuntimeError:
            logger.warning("No running event loop, dropping analytics event %s", event)
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def aclose(self) -> None:
        """Wait for in-flight deliveries to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    async def _deliver(self, event: str, properties: dict[str, Any]) -> None:
        body = json.dumps(
            {
                "api_key": self._api_key,
                "event": event,
                "distinct_id": self._distinct_id,
                "properties": properties,
                "timestamp": datetime.now(UTC).isoformat(),
            },
            default=str,
        )
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(
                    self._endpoint,
                    content=body,
                    headers={"Content-Type": "application/json"},
                )
            if resp.status_code >= 400:
                logger.warning(
                    "Analytics collector returned %d for %s",
                    resp.status_code,
                    event,
                )
        except Exception:
            logger.warning("Analytics delivery failed for %s", event, exc_info=True)
