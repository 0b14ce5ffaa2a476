"""Chat message domain model.

Messages form the append-only chat history of a report. Once stored a
message is never edited or deleted; only its read flag changes, and only
from False to True.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, ClassVar

from whistleledger.domain.models.caller import CallerRole
from whistleledger.domain.models.file_attachment import FileAttachment


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class ChatMessage:
    """An entry in a report's chat history.

    Attributes:
        id: Server-assigned message identifier.
        report_id: Back-reference to the owning report.
        sender: Sender identity.
        sender_role: Role of the sender at send time.
        content: Message text (may be empty when an attachment is present).
        timestamp: Server-assigned send time (UTC).
        read: Whether a party other than the sender has read the message.
        attachment: Optional attachment metadata.
    """

    id: str
    report_id: str
    sender: str
    sender_role: CallerRole
    content: str = field(default="")
    timestamp: datetime = field(default_factory=_utc_now)
    read: bool = field(default=False)
    attachment: FileAttachment | None = field(default=None)

    MAX_CONTENT_LENGTH: ClassVar[int] = 10_000

    def __post_init__(self) -> None:
        """Validate chat message fields."""
        if not self.content.strip() and self.attachment is None:
            raise ValueError("Chat message requires content or an attachment")
        if len(self.content) > self.MAX_CONTENT_LENGTH:
            raise ValueError(
                f"Chat message exceeds maximum length of {self.MAX_CONTENT_LENGTH} characters"
            )

    @property
    def has_attachment(self) -> bool:
        return self.attachment is not None

    def mark_read(self) -> ChatMessage:
        """Return a copy flagged as read."""
        if self.read:
            return self
        return replace(self, read=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "report_id": self.report_id,
            "sender": self.sender,
            "sender_role": self.sender_role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "read": self.read,
            "has_attachment": self.has_attachment,
            "attachment": self.attachment.to_dict() if self.attachment else None,
        }
