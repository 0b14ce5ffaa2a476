"""Fire-and-forget publication of report events.

Events are published after the store commit. A failing publisher is
logged and swallowed; it never fails the mutation that produced the
event.
"""

from __future__ import annotations

from whistleledger.application.ports.notification_publisher import (
    NotificationPublisherPort,
)
from whistleledger.application.services.base import LoggingMixin
from whistleledger.domain.events.report import ReportEvent


class ReportEventDispatcher(LoggingMixin):
    """Publishes report events on a best-effort basis.

    Attributes:
        _publisher: Notification transport, or None to drop events.
    """

    def __init__(self, publisher: NotificationPublisherPort | None = None) -> None:
        self._publisher = publisher
        self._init_logger(component="notifications")

    async def dispatch(self, event: ReportEvent) -> bool:
        """Publish ``event``.

        Returns:
            True if the publisher accepted the event, False if it was
            dropped or the publisher failed.
        """
        log = self._log_operation(
            "dispatch",
            event_type=event.event_type,
            report_id=event.report_id,
            channel=event.channel,
        )
        if self._publisher is None:
            log.debug("event_dropped_no_publisher")
            return False

        try:
            await self._publisher.publish(event)
        except Exception as e:
            log.warning("event_publish_failed", error=str(e), error_type=type(e).__name__)
            return False

        log.debug("event_published")
        return True
