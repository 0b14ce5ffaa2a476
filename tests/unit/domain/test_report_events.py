"""Unit tests for report event shaping."""

from __future__ import annotations

from decimal import Decimal

from whistleledger.domain.events.report import (
    BROADCAST_CHANNEL,
    NEW_MESSAGE_EVENT_TYPE,
    NEW_REPORT_EVENT_TYPE,
    REPORT_STATUS_CHANGED_EVENT_TYPE,
    REWARD_PROCESSED_EVENT_TYPE,
    new_message_event,
    new_report_event,
    report_channel,
    reward_processed_event,
    status_changed_event,
)
from whistleledger.domain.models.caller import CallerRole
from whistleledger.domain.models.chat_message import ChatMessage
from whistleledger.domain.models.report import Report


def _report() -> Report:
    return Report(id="abc123", masked_id="M-abc123", title="Kickbacks", criticality=5)


class TestReportEvents:
    def test_report_channel(self) -> None:
        assert report_channel("abc123") == "report_abc123"

    def test_new_report_goes_to_broadcast_channel(self) -> None:
        event = new_report_event(_report())

        assert event.event_type == NEW_REPORT_EVENT_TYPE
        assert event.channel == BROADCAST_CHANNEL
        assert event.payload["masked_id"] == "M-abc123"
        assert event.payload["criticality"] == 5

    def test_new_report_payload_omits_description(self) -> None:
        assert "description" not in new_report_event(_report()).payload

    def test_status_changed_carries_extra_fields(self) -> None:
        event = status_changed_event(_report(), assigned_to="investigator1")

        assert event.event_type == REPORT_STATUS_CHANGED_EVENT_TYPE
        assert event.channel == "report_abc123"
        assert event.payload == {"status": "pending", "assigned_to": "investigator1"}

    def test_new_message_goes_to_report_channel(self) -> None:
        message = ChatMessage(
            id="m1",
            report_id="abc123",
            sender="whistleblower",
            sender_role=CallerRole.WHISTLEBLOWER,
            content="More evidence attached",
        )
        event = new_message_event(message)

        assert event.event_type == NEW_MESSAGE_EVENT_TYPE
        assert event.channel == "report_abc123"
        assert event.payload["sender"] == "whistleblower"

    def test_reward_amount_is_float_on_the_wire(self) -> None:
        event = reward_processed_event("abc123", Decimal("25.50"), "thanks", "txn_1")
        data = event.to_dict()

        assert event.event_type == REWARD_PROCESSED_EVENT_TYPE
        assert data["amount"] == 25.5
        assert data["transaction_id"] == "txn_1"
        assert data["report_id"] == "abc123"
