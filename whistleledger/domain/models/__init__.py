"""Domain models for Whistle Ledger."""

from whistleledger.domain.models.caller import (
    ANONYMOUS_WHISTLEBLOWER_ID,
    Caller,
    CallerRole,
)
from whistleledger.domain.models.chat_message import ChatMessage
from whistleledger.domain.models.file_attachment import FileAttachment
from whistleledger.domain.models.report import (
    DEFAULT_CRITICALITY,
    LifecycleVariant,
    Report,
    ReportStatus,
    mask_report_id,
    normalize_criticality,
    valid_transitions,
)

__all__: list[str] = [
    "ANONYMOUS_WHISTLEBLOWER_ID",
    "Caller",
    "CallerRole",
    "ChatMessage",
    "DEFAULT_CRITICALITY",
    "FileAttachment",
    "LifecycleVariant",
    "Report",
    "ReportStatus",
    "mask_report_id",
    "normalize_criticality",
    "valid_transitions",
]
