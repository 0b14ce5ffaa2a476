"""Case management API request/response models.

Pydantic models for the whistleblower, investigator and management
portals. Domain objects are converted with the ``from_domain``
classmethods; amounts leave the API as floats.

Developer Golden Rules:
1. VALIDATE EARLY - Pydantic handles schema validation
2. DOMAIN RULES IN DOMAIN - Business preconditions (positive amounts,
   required summaries) are enforced by the services and surface as 400
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, Field, PlainSerializer

from whistleledger.domain.errors import ValidationError
from whistleledger.domain.models.caller import CallerRole
from whistleledger.domain.models.chat_message import ChatMessage
from whistleledger.domain.models.file_attachment import FileAttachment
from whistleledger.domain.models.report import Report, ReportStatus

# ISO 8601 with Z suffix
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


# =============================================================================
# Attachments
# =============================================================================


class FileAttachmentModel(BaseModel):
    """Attachment metadata; the file itself lives at ``storage_path``."""

    name: str = Field(..., min_length=1, max_length=255)
    storage_path: str = Field(..., min_length=1, max_length=2048)
    content_type: str = Field(default="application/octet-stream", max_length=255)
    size: int = Field(default=0, ge=0)
    uploaded_by: str | None = Field(default=None)
    uploaded_at: DateTimeWithZ | None = Field(default=None)

    def to_domain(self, uploaded_by: str | None = None) -> FileAttachment:
        kwargs: dict[str, Any] = {
            "name": self.name,
            "storage_path": self.storage_path,
            "content_type": self.content_type,
            "size": self.size,
            "uploaded_by": uploaded_by or self.uploaded_by,
        }
        if self.uploaded_at is not None:
            kwargs["uploaded_at"] = self.uploaded_at
        try:
            return FileAttachment(**kwargs)
        except ValueError as e:
            raise ValidationError(str(e), field="attachments") from None

    @classmethod
    def from_domain(cls, attachment: FileAttachment) -> FileAttachmentModel:
        return cls(
            name=attachment.name,
            storage_path=attachment.storage_path,
            content_type=attachment.content_type,
            size=attachment.size,
            uploaded_by=attachment.uploaded_by,
            uploaded_at=attachment.uploaded_at,
        )


# =============================================================================
# Requests
# =============================================================================


class SubmitReportRequest(BaseModel):
    """Request body for a new report.

    ``criticality`` is accepted as given and normalized by the service:
    anything that is not an integer from 1 to 5 becomes 3.
    """

    title: str = Field(default="", max_length=500)
    description: str = Field(default="")
    criticality: Any = Field(default=None, description="1 (low) to 5 (critical)")
    anonymous: bool = Field(default=True)
    submitter: str | None = Field(default=None, max_length=255)
    reward_wallet: str | None = Field(default=None, max_length=255)
    attachments: list[FileAttachmentModel] = Field(default_factory=list)
    voice_note: str | None = Field(default=None, max_length=2048)
    department: str = Field(default="", max_length=255)
    location: str = Field(default="", max_length=255)
    monetary_value: str = Field(default="", max_length=255)
    relationship: str = Field(default="", max_length=255)
    encounter: str = Field(default="", max_length=255)
    authorities_aware: bool = Field(default=False)


class ManagementSummaryRequest(BaseModel):
    summary: str = Field(..., description="Investigator findings")


class CloseReportRequest(BaseModel):
    closure_summary: str = Field(..., description="Management closure text")


class ReopenReportRequest(BaseModel):
    reason: str = Field(..., description="Why the investigation is reopened")


class ProcessRewardRequest(BaseModel):
    # Parsed by the service so a non-numeric amount is a VALIDATION_ERROR
    amount: str | int | float = Field(
        ..., description="Amount to pay, must be greater than 0"
    )
    note: str = Field(default="", max_length=2000)


class SendChatMessageRequest(BaseModel):
    content: str = Field(default="")
    attachment: FileAttachmentModel | None = Field(default=None)


# =============================================================================
# Responses
# =============================================================================


class ChatMessageResponse(BaseModel):
    id: str
    report_id: str
    sender: str
    sender_role: str
    content: str
    timestamp: DateTimeWithZ
    read: bool
    attachment: FileAttachmentModel | None = None

    @classmethod
    def from_domain(
        cls, message: ChatMessage, mask_staff: bool = False
    ) -> ChatMessageResponse:
        """Build the response; ``mask_staff`` replaces staff ids with their role."""
        sender = message.sender
        if mask_staff and message.sender_role != CallerRole.WHISTLEBLOWER:
            sender = message.sender_role.value
        return cls(
            id=message.id,
            report_id=message.report_id,
            sender=sender,
            sender_role=message.sender_role.value,
            content=message.content,
            timestamp=message.timestamp,
            read=message.read,
            attachment=(
                FileAttachmentModel.from_domain(message.attachment)
                if message.attachment
                else None
            ),
        )


class MarkReadResponse(BaseModel):
    report_id: str
    marked_read: int


class ReportStatusResponse(BaseModel):
    """Whistleblower view of a report.

    Investigator identity and management notes are not exposed to the
    reporter.
    """

    id: str
    masked_id: str
    title: str
    criticality: int
    status: ReportStatus
    is_reopened: bool
    reward_processed: bool
    unread_messages: int
    date: DateTimeWithZ
    updated_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, report: Report, reader: str) -> ReportStatusResponse:
        return cls(
            id=report.id,
            masked_id=report.masked_id,
            title=report.title,
            criticality=report.criticality,
            status=report.status,
            is_reopened=report.is_reopened,
            reward_processed=report.reward_processed,
            unread_messages=report.unread_count_for(reader),
            date=report.date,
            updated_at=report.updated_at,
        )


class ReportResponse(BaseModel):
    """Full case view for investigators and management."""

    id: str
    masked_id: str
    title: str
    description: str
    criticality: int
    submitter: str | None
    anonymous: bool
    reward_wallet: str | None
    status: ReportStatus
    assigned_to: str | None
    assigned_to_name: str | None
    management_summary: str
    closure_summary: str
    is_reopened: bool
    reopen_reasons: list[str]
    previous_investigator: str | None
    permanently_closed: bool
    reward_processed: bool
    reward_amount: float | None
    reward_note: str | None
    reward_transaction_id: str | None
    chat_history: list[ChatMessageResponse]
    attachments: list[FileAttachmentModel]
    has_attachments: bool
    has_voice_note: bool
    voice_note: str | None
    department: str
    location: str
    monetary_value: str
    relationship: str
    encounter: str
    authorities_aware: bool
    date: DateTimeWithZ
    updated_at: DateTimeWithZ
    version: int

    @classmethod
    def from_domain(cls, report: Report) -> ReportResponse:
        return cls(
            id=report.id,
            masked_id=report.masked_id,
            title=report.title,
            description=report.description,
            criticality=report.criticality,
            submitter=report.submitter,
            anonymous=report.anonymous,
            reward_wallet=report.reward_wallet,
            status=report.status,
            assigned_to=report.assigned_to,
            assigned_to_name=report.assigned_to_name,
            management_summary=report.management_summary,
            closure_summary=report.closure_summary,
            is_reopened=report.is_reopened,
            reopen_reasons=list(report.reopen_reasons),
            previous_investigator=report.previous_investigator,
            permanently_closed=report.permanently_closed,
            reward_processed=report.reward_processed,
            reward_amount=(
                float(report.reward_amount) if report.reward_amount is not None else None
            ),
            reward_note=report.reward_note,
            reward_transaction_id=report.reward_transaction_id,
            chat_history=[
                ChatMessageResponse.from_domain(m) for m in report.chat_history
            ],
            attachments=[FileAttachmentModel.from_domain(a) for a in report.attachments],
            has_attachments=report.has_attachments,
            has_voice_note=report.has_voice_note,
            voice_note=report.voice_note,
            department=report.department,
            location=report.location,
            monetary_value=report.monetary_value,
            relationship=report.relationship,
            encounter=report.encounter,
            authorities_aware=report.authorities_aware,
            date=report.date,
            updated_at=report.updated_at,
            version=report.version,
        )


class SubmitReportResponse(BaseModel):
    """Returned to the reporter on intake; ``id`` is their tracking key."""

    id: str
    masked_id: str
    status: ReportStatus
    criticality: int
    date: DateTimeWithZ


class InvestigatorStatistics(BaseModel):
    id: str
    name: str
    active_reports: int
    completed_reports: int


class CriticalityBreakdown(BaseModel):
    high: int
    medium: int
    low: int


class StatisticsResponse(BaseModel):
    total_reports: int
    by_status: dict[str, int]
    by_criticality: CriticalityBreakdown
    investigators: list[InvestigatorStatistics]
    reward_balance: float | None = None

    @classmethod
    def from_statistics(cls, statistics: dict[str, Any]) -> StatisticsResponse:
        balance = statistics.get("reward_balance")
        return cls(
            total_reports=statistics["total_reports"],
            by_status=statistics["by_status"],
            by_criticality=CriticalityBreakdown(**statistics["by_criticality"]),
            investigators=[
                InvestigatorStatistics(**entry) for entry in statistics["investigators"]
            ],
            reward_balance=float(balance) if balance is not None else None,
        )


class RewardBalanceResponse(BaseModel):
    balance: float
    currency: str
