"""In-process fan-out of platform events to asyncio queues."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

Event = dict[str, Any]


class EventBus:
    """Topic-keyed fan-out; each subscriber owns a bounded queue.

    Publishing never blocks: a subscriber whose queue is full misses
    the event.
    """

    def __init__(self, maxsize: int = 256) -> None:
        self._maxsize = maxsize
        self._queues: defaultdict[str, list[asyncio.Queue[Event]]] = defaultdict(list)

    def subscribe(self, topic: str) -> asyncio.Queue[Event]:
        queue: asyncio.Queue[Event] = asyncio.Queue(maxsize=self._maxsize)
        self._queues[topic].append(queue)
        return queue

    def unsubscribe(self, topic: str, queue: asyncio.Queue[Event]) -> None:
        queues = self._queues.get(topic, [])
        if queue in queues:
            queues.remove(queue)
        if not queues:
            self._queues.pop(topic, None)

    def publish(self, topic: str, event: Event) -> int:
        """Stamp *event* with its topic and publish time, then fan it out.

        Returns how many subscribers received it.
        """
        queues = self._queues.get(topic)
        if not queues:
            return 0

        stamped = {**event, "topic": topic, "published_at": datetime.now(UTC).isoformat()}
        delivered = 0
        for queue in queues:
            try:
                queue.put_nowait(stamped)
            except asyncio.QueueFull:
                logger.warning("Subscriber on %s is full, event dropped", topic)
            else:
                delivered += 1
        return delivered
