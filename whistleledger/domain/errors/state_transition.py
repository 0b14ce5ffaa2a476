"""State transition errors for the report lifecycle state machine.

This module defines errors for transitions that are not legal from the
report's current status, and for the reopen guard on permanently closed
cases.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from whistleledger.domain.exceptions import WhistleLedgerError

if TYPE_CHECKING:
    from whistleledger.domain.models.report import ReportStatus


class InvalidTransitionError(WhistleLedgerError):
    """Raised when a transition is not legal from the report's current status.

    Attributes:
        report_id: The report the transition was attempted on.
        from_status: Current status of the report.
        to_status: Attempted target status.
        allowed_transitions: Valid target statuses from the current status.
    """

    code = "INVALID_TRANSITION"

    def __init__(
        self,
        report_id: str,
        from_status: ReportStatus,
        to_status: ReportStatus,
        allowed_transitions: list[ReportStatus] | None = None,
        reason: str | None = None,
    ) -> None:
        """Initialize invalid transition error.

        Args:
            report_id: ID of the report.
            from_status: Current report status.
            to_status: Attempted invalid target status.
            allowed_transitions: Valid statuses from current status (optional).
            reason: Extra explanation appended to the message (optional).
        """
        self.report_id = report_id
        self.from_status = from_status
        self.to_status = to_status
        self.allowed_transitions = allowed_transitions or []

        allowed_str = (
            f" Valid transitions: {sorted(s.value for s in self.allowed_transitions)}"
            if self.allowed_transitions
            else ""
        )
        reason_str = f" {reason}" if reason else ""
        super().__init__(
            f"Invalid transition for report {report_id}: "
            f"{from_status.value} -> {to_status.value}.{allowed_str}{reason_str}"
        )


class ReportPermanentlyClosedError(InvalidTransitionError):
    """Raised when reopening a report that management permanently closed.

    Once permanently closed, a case can never move back to pending.
    """

    code = "PERMANENTLY_CLOSED"

    def __init__(self, report_id: str, from_status: ReportStatus) -> None:
        from whistleledger.domain.models.report import ReportStatus

        super().__init__(
            report_id=report_id,
            from_status=from_status,
            to_status=ReportStatus.PENDING,
            reason="Report is permanently closed and cannot be reopened.",
        )
