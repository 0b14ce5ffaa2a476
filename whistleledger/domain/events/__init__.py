"""Domain events for Whistle Ledger."""

from whistleledger.domain.events.report import (
    BROADCAST_CHANNEL,
    NEW_MESSAGE_EVENT_TYPE,
    NEW_REPORT_EVENT_TYPE,
    REPORT_STATUS_CHANGED_EVENT_TYPE,
    REWARD_PROCESSED_EVENT_TYPE,
    ReportEvent,
    new_message_event,
    new_report_event,
    report_channel,
    reward_processed_event,
    status_changed_event,
)

__all__: list[str] = [
    "BROADCAST_CHANNEL",
    "NEW_MESSAGE_EVENT_TYPE",
    "NEW_REPORT_EVENT_TYPE",
    "REPORT_STATUS_CHANGED_EVENT_TYPE",
    "REWARD_PROCESSED_EVENT_TYPE",
    "ReportEvent",
    "new_message_event",
    "new_report_event",
    "report_channel",
    "reward_processed_event",
    "status_changed_event",
]
