"""Notification publisher port.

Defines the interface used to push report events to subscribers of a
channel (the report-scoped channel or the broadcast channel). The real
transport (websockets, SSE, a message bus) is an external collaborator.

Publication is best-effort: callers log and swallow publish failures.
"""

from __future__ import annotations

from typing import Protocol

from whistleledger.domain.events.report import ReportEvent


class NotificationPublisherPort(Protocol):
    """Protocol for publishing report events."""

    async def publish(self, event: ReportEvent) -> None:
        """Publish ``event`` on ``event.channel``.

        Raises:
            Exception: On delivery failure. Callers must not let this fail
                the underlying state mutation.
        """
        ...
