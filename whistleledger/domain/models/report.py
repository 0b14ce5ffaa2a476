"""Report domain model and lifecycle state machine.

This module defines the central case record of the system together with
the transition matrices that govern how a report moves between statuses.

State Machine (four-tier lifecycle, the default):
    PENDING -> UNDER_INVESTIGATION             (investigator assigns)
    UNDER_INVESTIGATION -> INVESTIGATION_COMPLETE (assignee completes)
    INVESTIGATION_COMPLETE -> COMPLETED        (management permanently closes)
    INVESTIGATION_COMPLETE -> PENDING          (management reopens)
    COMPLETED -> PENDING                       (reopen, blocked once permanently closed)

State Machine (two-tier lifecycle):
    PENDING -> UNDER_INVESTIGATION
    UNDER_INVESTIGATION -> COMPLETED           (reward settled on completion)
    COMPLETED -> PENDING                       (management reopens)

A deployment picks one lifecycle and applies it to every report.

Report is a frozen dataclass. Every transition returns a new instance and
leaves the original untouched, so a transition that raises never leaves a
half-mutated record behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

from whistleledger.domain.models.chat_message import ChatMessage
from whistleledger.domain.models.file_attachment import FileAttachment

DEFAULT_CRITICALITY: int = 3
MIN_CRITICALITY: int = 1
MAX_CRITICALITY: int = 5
MASKED_ID_PREFIX: str = "M-"


class ReportStatus(str, Enum):
    """Status in the report lifecycle.

    States:
        PENDING: Submitted (or reopened) and waiting for an investigator
        UNDER_INVESTIGATION: Assigned to an investigator
        INVESTIGATION_COMPLETE: Investigator finished, awaiting management
        COMPLETED: Closed
    """

    PENDING = "pending"
    UNDER_INVESTIGATION = "under_investigation"
    INVESTIGATION_COMPLETE = "investigation_complete"
    COMPLETED = "completed"


class LifecycleVariant(str, Enum):
    """Shape of the lifecycle applied by a deployment.

    Variants:
        FOUR_TIER: Management review stage and permanent closure; reward
                   is paid by management after permanent closure.
        TWO_TIER: Completion closes the case directly and settles the
                  reward best-effort at that moment.
    """

    FOUR_TIER = "four_tier"
    TWO_TIER = "two_tier"


FOUR_TIER_TRANSITIONS: dict[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.PENDING: frozenset({ReportStatus.UNDER_INVESTIGATION}),
    ReportStatus.UNDER_INVESTIGATION: frozenset({ReportStatus.INVESTIGATION_COMPLETE}),
    ReportStatus.INVESTIGATION_COMPLETE: frozenset(
        {ReportStatus.COMPLETED, ReportStatus.PENDING}
    ),
    ReportStatus.COMPLETED: frozenset({ReportStatus.PENDING}),
}

TWO_TIER_TRANSITIONS: dict[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.PENDING: frozenset({ReportStatus.UNDER_INVESTIGATION}),
    ReportStatus.UNDER_INVESTIGATION: frozenset({ReportStatus.COMPLETED}),
    # Never entered under the two-tier lifecycle
    ReportStatus.INVESTIGATION_COMPLETE: frozenset(),
    ReportStatus.COMPLETED: frozenset({ReportStatus.PENDING}),
}

TRANSITION_MATRICES: dict[LifecycleVariant, dict[ReportStatus, frozenset[ReportStatus]]] = {
    LifecycleVariant.FOUR_TIER: FOUR_TIER_TRANSITIONS,
    LifecycleVariant.TWO_TIER: TWO_TIER_TRANSITIONS,
}

# Statuses from which management may reopen a case
REOPENABLE_STATUSES: frozenset[ReportStatus] = frozenset(
    {ReportStatus.INVESTIGATION_COMPLETE, ReportStatus.COMPLETED}
)


def valid_transitions(
    status: ReportStatus,
    variant: LifecycleVariant = LifecycleVariant.FOUR_TIER,
) -> frozenset[ReportStatus]:
    """Get the statuses reachable from ``status`` under ``variant``."""
    return TRANSITION_MATRICES[variant].get(status, frozenset())


def completion_status(variant: LifecycleVariant) -> ReportStatus:
    """Status an investigation moves to when the assignee completes it."""
    if variant == LifecycleVariant.TWO_TIER:
        return ReportStatus.COMPLETED
    return ReportStatus.INVESTIGATION_COMPLETE


def normalize_criticality(value: Any) -> int:
    """Normalize a criticality input to an int in 1..5.

    Intake is permissive: anything missing, non-numeric or out of range
    becomes the default criticality (3) instead of being rejected.
    Fractional input is truncated, so "4.7" is 4.

    Args:
        value: Raw criticality input (int, numeric string, None, ...).

    Returns:
        Criticality between 1 and 5.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_CRITICALITY
    try:
        number = int(Decimal(str(value).strip()))
    except (ArithmeticError, TypeError, ValueError):
        return DEFAULT_CRITICALITY
    if MIN_CRITICALITY <= number <= MAX_CRITICALITY:
        return number
    return DEFAULT_CRITICALITY


def mask_report_id(report_id: str, length: int = 8) -> str:
    """Derive the display-safe masked identifier of a report."""
    return f"{MASKED_ID_PREFIX}{report_id[:length]}"


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Report:
    """A whistleblower report and its full case state.

    Attributes:
        id: Opaque unique identifier, immutable.
        masked_id: Display identifier derived from id, immutable.
        title: Free text, may be empty.
        description: Free text, may be empty.
        criticality: 1 (low) to 5 (critical), informational only.
        submitter: Reporter identity, None when anonymous.
        anonymous: Whether the reporter chose anonymity.
        reward_wallet: Optional payout destination.
        status: Current lifecycle status.
        assigned_to: Investigator identity, None while pending.
        assigned_to_name: Investigator display name.
        management_summary: Investigator findings, required to complete.
        closure_summary: Management text stored on permanent closure.
        is_reopened: Whether the case has ever been reopened.
        reopen_reasons: Ordered audit trail of reopen reasons.
        previous_investigator: Assignee at the time of the last reopen.
        permanently_closed: Set by permanent closure; blocks reopening.
        reward_processed: Whether the reward has been paid.
        reward_amount: Amount paid.
        reward_note: Management note stored with the payment.
        reward_transaction_id: Payout gateway transaction reference.
        chat_history: Append-only ordered chat messages.
        attachments: File metadata; bytes live in external storage.
        has_voice_note: Whether a voice note was submitted.
        voice_note: URI of the voice note.
        department, location, monetary_value, relationship, encounter,
        authorities_aware: Optional intake details, informational.
        date: Creation timestamp (UTC), immutable.
        updated_at: Last committed mutation (UTC).
        version: Write counter maintained by the ledger store.
    """

    id: str
    masked_id: str
    title: str = field(default="")
    description: str = field(default="")
    criticality: int = field(default=DEFAULT_CRITICALITY)
    submitter: str | None = field(default=None)
    anonymous: bool = field(default=True)
    reward_wallet: str | None = field(default=None)
    status: ReportStatus = field(default=ReportStatus.PENDING)
    assigned_to: str | None = field(default=None)
    assigned_to_name: str | None = field(default=None)
    management_summary: str = field(default="")
    closure_summary: str = field(default="")
    is_reopened: bool = field(default=False)
    reopen_reasons: tuple[str, ...] = field(default=())
    previous_investigator: str | None = field(default=None)
    permanently_closed: bool = field(default=False)
    reward_processed: bool = field(default=False)
    reward_amount: Decimal | None = field(default=None)
    reward_note: str | None = field(default=None)
    reward_transaction_id: str | None = field(default=None)
    chat_history: tuple[ChatMessage, ...] = field(default=())
    attachments: tuple[FileAttachment, ...] = field(default=())
    has_voice_note: bool = field(default=False)
    voice_note: str | None = field(default=None)
    department: str = field(default="")
    location: str = field(default="")
    monetary_value: str = field(default="")
    relationship: str = field(default="")
    encounter: str = field(default="")
    authorities_aware: bool = field(default=False)
    date: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)
    version: int = field(default=0)

    MAX_TEXT_LENGTH: ClassVar[int] = 10_000

    def __post_init__(self) -> None:
        """Validate report fields."""
        if not MIN_CRITICALITY <= self.criticality <= MAX_CRITICALITY:
            raise ValueError(
                f"Criticality must be between {MIN_CRITICALITY} and "
                f"{MAX_CRITICALITY}, got {self.criticality}"
            )
        if len(self.description) > self.MAX_TEXT_LENGTH:
            raise ValueError(
                f"Report description exceeds maximum length of {self.MAX_TEXT_LENGTH} characters"
            )
        if self.anonymous and self.submitter is not None:
            raise ValueError("Anonymous reports cannot carry a submitter")

    @property
    def has_attachments(self) -> bool:
        return len(self.attachments) > 0

    def unread_count_for(self, reader: str) -> int:
        """Count messages ``reader`` has not read yet.

        A reader's own messages are implicitly read and never counted.
        """
        return sum(
            1
            for message in self.chat_history
            if not message.read and message.sender != reader
        )

    def _transition(
        self,
        new_status: ReportStatus,
        variant: LifecycleVariant,
    ) -> None:
        """Check that ``new_status`` is reachable from the current status.

        Raises:
            InvalidTransitionError: If the transition matrix forbids it.
        """
        # Import here to avoid circular dependency
        from whistleledger.domain.errors.state_transition import (
            InvalidTransitionError,
        )

        allowed = valid_transitions(self.status, variant)
        if new_status not in allowed:
            raise InvalidTransitionError(
                report_id=self.id,
                from_status=self.status,
                to_status=new_status,
                allowed_transitions=list(allowed),
            )

    def with_assignment(
        self,
        investigator_id: str,
        investigator_name: str,
        variant: LifecycleVariant = LifecycleVariant.FOUR_TIER,
    ) -> Report:
        """Assign an investigator, moving the report under investigation.

        Raises:
            InvalidTransitionError: If the report is not pending.
        """
        self._transition(ReportStatus.UNDER_INVESTIGATION, variant)
        return replace(
            self,
            status=ReportStatus.UNDER_INVESTIGATION,
            assigned_to=investigator_id,
            assigned_to_name=investigator_name,
            updated_at=_utc_now(),
        )

    def with_management_summary(self, summary: str) -> Report:
        """Record (or overwrite) the investigator's findings.

        Raises:
            InvalidTransitionError: If the report is not under investigation.
        """
        from whistleledger.domain.errors.state_transition import (
            InvalidTransitionError,
        )

        if self.status != ReportStatus.UNDER_INVESTIGATION:
            raise InvalidTransitionError(
                report_id=self.id,
                from_status=self.status,
                to_status=self.status,
                reason="Management summary can only be added during investigation.",
            )
        return replace(self, management_summary=summary, updated_at=_utc_now())

    def with_investigation_completed(
        self,
        variant: LifecycleVariant = LifecycleVariant.FOUR_TIER,
    ) -> Report:
        """Complete the investigation.

        Raises:
            InvalidTransitionError: If the report is not under investigation.
            ManagementSummaryRequiredError: If no management summary exists.
        """
        from whistleledger.domain.errors.report import ManagementSummaryRequiredError

        target = completion_status(variant)
        self._transition(target, variant)
        if not self.management_summary.strip():
            raise ManagementSummaryRequiredError(self.id)
        return replace(self, status=target, updated_at=_utc_now())

    def with_permanent_closure(self, closure_summary: str) -> Report:
        """Permanently close a completed investigation.

        Raises:
            InvalidTransitionError: If the report is not awaiting closure
                (including reports that are already permanently closed).
        """
        from whistleledger.domain.errors.state_transition import (
            InvalidTransitionError,
        )

        if self.permanently_closed:
            raise InvalidTransitionError(
                report_id=self.id,
                from_status=self.status,
                to_status=ReportStatus.COMPLETED,
                reason="Report is already permanently closed.",
            )
        # Closure only follows management review, whatever the lifecycle
        if self.status != ReportStatus.INVESTIGATION_COMPLETE:
            raise InvalidTransitionError(
                report_id=self.id,
                from_status=self.status,
                to_status=ReportStatus.COMPLETED,
                reason="Only completed investigations can be permanently closed.",
            )
        return replace(
            self,
            status=ReportStatus.COMPLETED,
            permanently_closed=True,
            closure_summary=closure_summary,
            updated_at=_utc_now(),
        )

    def with_reopen(
        self,
        reason: str,
        variant: LifecycleVariant = LifecycleVariant.FOUR_TIER,
    ) -> Report:
        """Move a finished case back to pending for re-investigation.

        The current assignee becomes the previous investigator and the
        reason is appended to the reopen audit trail.

        Raises:
            ReportPermanentlyClosedError: If the case is permanently closed.
            InvalidTransitionError: If the report is not in a reopenable status.
        """
        from whistleledger.domain.errors.state_transition import (
            InvalidTransitionError,
            ReportPermanentlyClosedError,
        )

        if self.permanently_closed:
            raise ReportPermanentlyClosedError(self.id, self.status)
        if self.status not in REOPENABLE_STATUSES:
            raise InvalidTransitionError(
                report_id=self.id,
                from_status=self.status,
                to_status=ReportStatus.PENDING,
                allowed_transitions=list(valid_transitions(self.status, variant)),
                reason="Only finished investigations can be reopened.",
            )
        self._transition(ReportStatus.PENDING, variant)
        return replace(
            self,
            status=ReportStatus.PENDING,
            is_reopened=True,
            reopen_reasons=self.reopen_reasons + (reason,),
            previous_investigator=self.assigned_to,
            assigned_to=None,
            assigned_to_name=None,
            updated_at=_utc_now(),
        )

    def with_reward(
        self,
        amount: Decimal,
        note: str,
        transaction_id: str | None = None,
    ) -> Report:
        """Record a reward payment.

        Without ``transaction_id`` this is a reservation: the reward is
        claimed but the payout has not been confirmed yet.
        """
        return replace(
            self,
            reward_processed=True,
            reward_amount=amount,
            reward_note=note,
            reward_transaction_id=transaction_id,
            updated_at=_utc_now(),
        )

    def with_reward_transaction(self, transaction_id: str) -> Report:
        """Confirm a reserved reward with the provider's transaction id."""
        return replace(self, reward_transaction_id=transaction_id, updated_at=_utc_now())

    def without_reward(self) -> Report:
        """Drop a reward reservation whose payout failed."""
        return replace(
            self,
            reward_processed=False,
            reward_amount=None,
            reward_note=None,
            reward_transaction_id=None,
            updated_at=_utc_now(),
        )

    def with_message(self, message: ChatMessage) -> Report:
        """Append a message to the chat history."""
        return replace(
            self,
            chat_history=self.chat_history + (message,),
            updated_at=_utc_now(),
        )

    def with_messages_read(self, reader: str) -> tuple[Report, int]:
        """Mark every unread message not sent by ``reader`` as read.

        Messages sent by the reader are left untouched.

        Returns:
            Tuple of (updated report, number of messages flipped). When
            nothing changes the same instance is returned.
        """
        flipped = 0
        history: list[ChatMessage] = []
        for message in self.chat_history:
            if message.sender != reader and not message.read:
                history.append(message.mark_read())
                flipped += 1
            else:
                history.append(message)
        if flipped == 0:
            return self, 0
        return (
            replace(self, chat_history=tuple(history), updated_at=_utc_now()),
            flipped,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert report to a JSON-friendly dict."""
        return {
            "id": self.id,
            "masked_id": self.masked_id,
            "title": self.title,
            "description": self.description,
            "criticality": self.criticality,
            "submitter": self.submitter,
            "anonymous": self.anonymous,
            "reward_wallet": self.reward_wallet,
            "status": self.status.value,
            "assigned_to": self.assigned_to,
            "assigned_to_name": self.assigned_to_name,
            "management_summary": self.management_summary,
            "closure_summary": self.closure_summary,
            "is_reopened": self.is_reopened,
            "reopen_reasons": list(self.reopen_reasons),
            "previous_investigator": self.previous_investigator,
            "permanently_closed": self.permanently_closed,
            "reward_processed": self.reward_processed,
            "reward_amount": (
                str(self.reward_amount) if self.reward_amount is not None else None
            ),
            "reward_note": self.reward_note,
            "reward_transaction_id": self.reward_transaction_id,
            "chat_history": [message.to_dict() for message in self.chat_history],
            "attachments": [attachment.to_dict() for attachment in self.attachments],
            "has_attachments": self.has_attachments,
            "has_voice_note": self.has_voice_note,
            "voice_note": self.voice_note,
            "department": self.department,
            "location": self.location,
            "monetary_value": self.monetary_value,
            "relationship": self.relationship,
            "encounter": self.encounter,
            "authorities_aware": self.authorities_aware,
            "date": self.date.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "version": self.version,
        }
