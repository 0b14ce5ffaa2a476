"""Report lookup, validation and precondition errors.

This module defines the errors raised when a referenced report does not
exist, when input is malformed, or when a required field is missing for
a transition.
"""

from __future__ import annotations

from whistleledger.domain.exceptions import WhistleLedgerError


class ReportNotFoundError(WhistleLedgerError):
    """Raised when a referenced report ID does not exist.

    Attributes:
        report_id: The ID that was looked up.
    """

    code = "NOT_FOUND"

    def __init__(self, report_id: str) -> None:
        self.report_id = report_id
        super().__init__(f"Report with ID {report_id} does not exist")


class ReportAlreadyExistsError(WhistleLedgerError):
    """Raised when saving a new report whose ID is already stored."""

    code = "ALREADY_EXISTS"

    def __init__(self, report_id: str) -> None:
        self.report_id = report_id
        super().__init__(f"Report with ID {report_id} already exists")


class ValidationError(WhistleLedgerError):
    """Raised for malformed input (empty required text, bad amounts).

    Attributes:
        field: Name of the offending input field, if known.
    """

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class PreconditionFailedError(WhistleLedgerError):
    """Raised when a field required by a transition is missing.

    Examples: missing closure summary, missing reopen reason, reward
    requested for a report without a payout wallet.

    Attributes:
        report_id: The report the transition was attempted on.
        requirement: Short name of the missing requirement.
    """

    code = "PRECONDITION_FAILED"

    def __init__(self, report_id: str, requirement: str, message: str) -> None:
        self.report_id = report_id
        self.requirement = requirement
        super().__init__(message)


class ManagementSummaryRequiredError(PreconditionFailedError):
    """Raised when completing an investigation that has no management summary.

    An investigation is never completed silently: the assigned investigator
    must record findings with add_management_summary first.
    """

    code = "MANAGEMENT_SUMMARY_REQUIRED"

    def __init__(self, report_id: str) -> None:
        super().__init__(
            report_id=report_id,
            requirement="management_summary",
            message=(
                f"Report {report_id} has no management summary. "
                "Add a summary before completing the investigation."
            ),
        )
