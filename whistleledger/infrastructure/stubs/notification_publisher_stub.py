"""Notification publisher stub implementation.

In-memory fan-out of report events. Subscribers receive an asyncio.Queue
per channel; the most recent events are also kept for assertions in
tests.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict, deque

from whistleledger.application.ports.notification_publisher import (
    NotificationPublisherPort,
)
from whistleledger.domain.events.report import ReportEvent

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECORDED = 1000


class NotificationPublisherStub(NotificationPublisherPort):
    """In-memory publisher with per-channel subscriber queues.

    Attributes:
        published: The last ``max_recorded`` events published, oldest first.
    """

    def __init__(self, max_recorded: int = DEFAULT_MAX_RECORDED) -> None:
        self.published: deque[ReportEvent] = deque(maxlen=max_recorded)
        self._subscribers: dict[str, list[asyncio.Queue[ReportEvent]]] = defaultdict(
            list
        )

    def subscribe(self, channel: str) -> asyncio.Queue[ReportEvent]:
        """Return a queue receiving every later event on ``channel``."""
        queue: asyncio.Queue[ReportEvent] = asyncio.Queue()
        self._subscribers[channel].append(queue)
        return queue

    def unsubscribe(self, channel: str, queue: asyncio.Queue[ReportEvent]) -> None:
        subscribers = self._subscribers.get(channel, [])
        if queue in subscribers:
            subscribers.remove(queue)

    async def publish(self, event: ReportEvent) -> None:
        self.published.append(event)
        for queue in self._subscribers.get(event.channel, []):
            queue.put_nowait(event)
        logger.debug(
            "Event published: type=%s, channel=%s, report_id=%s",
            event.event_type,
            event.channel,
            event.report_id,
        )

    def events_of_type(self, event_type: str) -> list[ReportEvent]:
        """Return recorded events of ``event_type`` (for testing)."""
        return [event for event in self.published if event.event_type == event_type]

    def clear(self) -> None:
        """Clear recorded events (for testing)."""
        self.published.clear()
