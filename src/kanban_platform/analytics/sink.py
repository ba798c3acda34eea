"""Consumer that writes analytics events to the application log."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from kanban_platform.analytics.tracker import ANALYTICS_TOPIC

if TYPE_CHECKING:
    from kanban_platform.events.event_bus import Event, EventBus

logger = logging.getLogger(__name__)


class AnalyticsLogSink:
    """Drain the analytics topic and log one INFO line per event."""

    def __init__(self, event_bus: EventBus) -> None:
        self._bus = event_bus
        self._queue: asyncio.Queue[Event] | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            return
        self._queue = self._bus.subscribe(ANALYTICS_TOPIC)
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Analytics log sink started")

    async def stop(self) -> None:
        """Cancel the consumer and log whatever is still queued."""
        if self._task is None or self._queue is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._bus.unsubscribe(ANALYTICS_TOPIC, self._queue)
        while not self._queue.empty():
            self._emit(self._queue.get_nowait())
        self._task = None
        self._queue = None
        logger.info("Analytics log sink stopped")

    async def _run(self) -> None:
        assert self._queue is not None
        while True:
            self._emit(await self._queue.get())

    @staticmethod
    def _emit(event: Event) -> None:
        logger.info(
            "Analytics event %s",
            event.get("event"),
            extra={
                "analytics_event": event.get("event"),
                "properties": event.get("properties", {}),
            },
        )
