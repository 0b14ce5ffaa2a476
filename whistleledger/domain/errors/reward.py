"""Reward settlement errors."""

from __future__ import annotations

from decimal import Decimal

from whistleledger.domain.exceptions import WhistleLedgerError


class AlreadyProcessedError(WhistleLedgerError):
    """Raised when a reward is requested for a report that was already paid.

    Reward settlement is one-shot per report; reprocessing is rejected
    rather than treated as idempotent.
    """

    code = "ALREADY_PROCESSED"

    def __init__(self, report_id: str) -> None:
        self.report_id = report_id
        super().__init__(f"Reward for report {report_id} has already been processed")


class InsufficientFundsError(WhistleLedgerError):
    """Raised when the requested reward exceeds the current balance.

    Attributes:
        requested: Amount that was requested.
        available: Balance at the time of the request.
    """

    code = "INSUFFICIENT_FUNDS"

    def __init__(self, requested: Decimal, available: Decimal) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient reward balance: requested {requested}, available {available}"
        )


class PayoutFailedError(WhistleLedgerError):
    """Raised by a payout gateway when the transfer could not be made."""

    code = "PAYOUT_FAILED"

    def __init__(self, wallet: str, message: str) -> None:
        self.wallet = wallet
        super().__init__(f"Payout to wallet {wallet} failed: {message}")
