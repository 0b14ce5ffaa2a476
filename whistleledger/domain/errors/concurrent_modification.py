"""Concurrent modification error for optimistic compare-and-swap writes.

Raised by ledger store backends that implement put(expected_version=...)
when the stored version no longer matches the version the caller read.
"""

from __future__ import annotations

from whistleledger.domain.exceptions import WhistleLedgerError


class ConcurrentModificationError(WhistleLedgerError):
    """Raised when a CAS write fails due to a concurrent modification.

    This is a recoverable error - the caller should re-read the report
    and decide whether to retry or abort.

    Attributes:
        report_id: ID of the report that was being written.
        expected_version: The version the caller expected to overwrite.
        actual_version: The version currently stored.
    """

    code = "CONCURRENT_MODIFICATION"

    def __init__(
        self,
        report_id: str,
        expected_version: int,
        actual_version: int,
    ) -> None:
        self.report_id = report_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Concurrent modification detected for report {report_id}. "
            f"Expected version {expected_version}, found {actual_version}."
        )
