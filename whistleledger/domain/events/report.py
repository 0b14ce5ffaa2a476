"""Report event payloads for real-time notification.

This module defines the events published after a report mutation has been
committed to the ledger store:
- new_report: A report was submitted (broadcast channel)
- report_status_changed: A lifecycle transition happened (report channel)
- new_message: A chat message was appended (report channel)
- reward_processed: A reward was paid (report channel)

Ground rules:
1. EVENT AFTER COMMIT - Events describe state that is already stored
2. FIRE-AND-FORGET - A failed publish never fails the mutation
3. NO CONTENT BYTES - Attachments travel as URIs only
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from whistleledger.domain.models.chat_message import ChatMessage
    from whistleledger.domain.models.report import Report

# Event type constants
NEW_REPORT_EVENT_TYPE: str = "new_report"
REPORT_STATUS_CHANGED_EVENT_TYPE: str = "report_status_changed"
NEW_MESSAGE_EVENT_TYPE: str = "new_message"
REWARD_PROCESSED_EVENT_TYPE: str = "reward_processed"

# Channel receiving new_report for every subscriber (e.g. investigator dashboards)
BROADCAST_CHANNEL: str = "reports"


def report_channel(report_id: str) -> str:
    """Return the report-scoped channel name."""
    return f"report_{report_id}"


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class ReportEvent:
    """A notification about a committed report mutation.

    Attributes:
        event_type: One of the *_EVENT_TYPE constants.
        report_id: The report the event is about.
        channel: Channel the event is delivered on.
        payload: Transition-specific fields.
        occurred_at: When the event was created (UTC).
    """

    event_type: str
    report_id: str
    channel: str
    payload: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dict for transport."""
        return {
            "event_type": self.event_type,
            "report_id": self.report_id,
            "channel": self.channel,
            "occurred_at": self.occurred_at.isoformat(),
            **self.payload,
        }


def new_report_event(report: Report) -> ReportEvent:
    return ReportEvent(
        event_type=NEW_REPORT_EVENT_TYPE,
        report_id=report.id,
        channel=BROADCAST_CHANNEL,
        payload={
            "masked_id": report.masked_id,
            "title": report.title,
            "criticality": report.criticality,
            "status": report.status.value,
            "anonymous": report.anonymous,
            "has_voice_note": report.has_voice_note,
            "has_attachments": report.has_attachments,
            "date": report.date.isoformat(),
        },
    )


def status_changed_event(report: Report, **extra: Any) -> ReportEvent:
    """Build a report_status_changed event.

    Args:
        report: The report as committed after the transition.
        **extra: Transition-specific fields (assigned_to, reopen_reason,
            reward_processed, closure_summary, ...).
    """
    return ReportEvent(
        event_type=REPORT_STATUS_CHANGED_EVENT_TYPE,
        report_id=report.id,
        channel=report_channel(report.id),
        payload={"status": report.status.value, **extra},
    )


def new_message_event(message: ChatMessage) -> ReportEvent:
    return ReportEvent(
        event_type=NEW_MESSAGE_EVENT_TYPE,
        report_id=message.report_id,
        channel=report_channel(message.report_id),
        payload=message.to_dict(),
    )


def reward_processed_event(
    report_id: str,
    amount: Decimal,
    note: str,
    transaction_id: str | None,
) -> ReportEvent:
    return ReportEvent(
        event_type=REWARD_PROCESSED_EVENT_TYPE,
        report_id=report_id,
        channel=report_channel(report_id),
        payload={
            "amount": float(amount),
            "note": note,
            "transaction_id": transaction_id,
            "reward_processed": True,
        },
    )
