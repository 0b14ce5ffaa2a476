"""File attachment metadata.

Attachment and voice-note bytes live in external storage. A report or
chat message only ever holds the metadata and a storage URI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class FileAttachment:
    """Metadata for a file held in external storage.

    Attributes:
        name: Original file name.
        content_type: MIME type.
        storage_path: URI of the stored bytes.
        size: Size in bytes.
        uploaded_by: Identity of the uploader.
        uploaded_at: Upload timestamp (UTC).
    """

    name: str
    storage_path: str
    content_type: str = field(default="application/octet-stream")
    size: int = field(default=0)
    uploaded_by: str | None = field(default=None)
    uploaded_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Validate attachment metadata."""
        if not self.name.strip():
            raise ValueError("Attachment name must not be empty")
        if not self.storage_path.strip():
            raise ValueError("Attachment storage_path must not be empty")
        if self.size < 0:
            raise ValueError(f"Attachment size must be non-negative, got {self.size}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "content_type": self.content_type,
            "storage_path": self.storage_path,
            "size": self.size,
            "uploaded_by": self.uploaded_by,
            "uploaded_at": self.uploaded_at.isoformat(),
        }
