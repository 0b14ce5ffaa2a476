"""Unit tests for NotificationPublisherStub."""

from __future__ import annotations

import pytest

from whistleledger.domain.events.report import ReportEvent, report_channel
from whistleledger.infrastructure.stubs.notification_publisher_stub import (
    NotificationPublisherStub,
)


def _event(report_id: str, event_type: str = "new_message") -> ReportEvent:
    return ReportEvent(
        event_type=event_type,
        report_id=report_id,
        channel=report_channel(report_id),
    )


class TestNotificationPublisherStub:
    @pytest.mark.asyncio
    async def test_subscriber_receives_only_its_channel(
        self, publisher: NotificationPublisherStub
    ) -> None:
        queue = publisher.subscribe(report_channel("r1"))

        await publisher.publish(_event("r1"))
        await publisher.publish(_event("r2"))

        assert queue.qsize() == 1
        assert queue.get_nowait().report_id == "r1"
        assert len(publisher.published) == 2

    @pytest.mark.asyncio
    async def test_unsubscribed_queue_stops_receiving(
        self, publisher: NotificationPublisherStub
    ) -> None:
        channel = report_channel("r1")
        queue = publisher.subscribe(channel)
        publisher.unsubscribe(channel, queue)

        await publisher.publish(_event("r1"))

        assert queue.empty()

    @pytest.mark.asyncio
    async def test_events_of_type_and_clear(
        self, publisher: NotificationPublisherStub
    ) -> None:
        await publisher.publish(_event("r1", "new_message"))
        await publisher.publish(_event("r1", "reward_processed"))

        assert len(publisher.events_of_type("reward_processed")) == 1

        publisher.clear()
        assert len(publisher.published) == 0

    @pytest.mark.asyncio
    async def test_recorded_events_are_bounded(self) -> None:
        publisher = NotificationPublisherStub(max_recorded=3)

        for index in range(5):
            await publisher.publish(_event(f"r{index}"))

        assert [event.report_id for event in publisher.published] == ["r2", "r3", "r4"]
