"""Domain errors for Whistle Ledger.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from WhistleLedgerError.
"""

from whistleledger.domain.errors.access import ForbiddenError
from whistleledger.domain.errors.concurrent_modification import (
    ConcurrentModificationError,
)
from whistleledger.domain.errors.report import (
    ManagementSummaryRequiredError,
    PreconditionFailedError,
    ReportAlreadyExistsError,
    ReportNotFoundError,
    ValidationError,
)
from whistleledger.domain.errors.reward import (
    AlreadyProcessedError,
    InsufficientFundsError,
    PayoutFailedError,
)
from whistleledger.domain.errors.state_transition import (
    InvalidTransitionError,
    ReportPermanentlyClosedError,
)
from whistleledger.domain.exceptions import WhistleLedgerError

__all__: list[str] = [
    "AlreadyProcessedError",
    "ConcurrentModificationError",
    "ForbiddenError",
    "InsufficientFundsError",
    "InvalidTransitionError",
    "ManagementSummaryRequiredError",
    "PayoutFailedError",
    "PreconditionFailedError",
    "ReportAlreadyExistsError",
    "ReportNotFoundError",
    "ReportPermanentlyClosedError",
    "ValidationError",
    "WhistleLedgerError",
]
