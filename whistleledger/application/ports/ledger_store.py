"""Ledger store port.

This module defines the abstract interface for report persistence. A
ledger contract or any key-value backend keyed by report ID may
implement this protocol.

Consistency contract:
- update() is an atomic read-modify-write with respect to one report ID.
  Concurrent update() calls on the same ID are serialized; calls on
  different IDs never wait on each other.
- A mutator that raises leaves the stored report unchanged.
- Every committed write increments Report.version.
- put(expected_version=...) is a compare-and-swap for backends that use
  optimistic concurrency instead of per-key locks.

Developer Golden Rules:
1. FAIL LOUD - Store raises on errors, never returns partial results
2. NO NOTIFICATIONS IN MUTATORS - Events are published after update()
   returns, never from inside the critical section
3. NO EXTERNAL CALLS IN MUTATORS - Payment providers and other remote
   systems are called between updates, never while a report is locked
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol

from whistleledger.domain.models.report import Report

ReportMutator = Callable[[Report], Awaitable[Report]]
ReportPredicate = Callable[[Report], bool]


class LedgerStoreProtocol(Protocol):
    """Protocol for report persistence operations.

    Methods:
        save: Store a new report
        get: Retrieve a report by ID
        put: Overwrite a report, optionally compare-and-swap on version
        scan: List reports matching a predicate
        update: Atomic read-modify-write of one report
    """

    async def save(self, report: Report) -> Report:
        """Store a new report.

        Args:
            report: The report to create.

        Returns:
            The stored report (version 1).

        Raises:
            ReportAlreadyExistsError: If report.id already exists.
        """
        ...

    async def get(self, report_id: str) -> Report | None:
        """Retrieve a report by ID.

        Returns:
            The report if found, None otherwise.
        """
        ...

    async def put(self, report: Report, expected_version: int | None = None) -> Report:
        """Overwrite a stored report.

        Args:
            report: The new report state.
            expected_version: If given, the write only succeeds when the
                stored version equals this value.

        Returns:
            The stored report with its new version.

        Raises:
            ReportNotFoundError: If the report doesn't exist.
            ConcurrentModificationError: If expected_version doesn't match.
        """
        ...

    async def scan(self, predicate: ReportPredicate | None = None) -> list[Report]:
        """List reports matching ``predicate`` (all reports when None)."""
        ...

    async def update(self, report_id: str, mutator: ReportMutator) -> Report:
        """Atomically fetch, mutate and store one report.

        Args:
            report_id: The report to mutate.
            mutator: Coroutine function receiving the current report and
                returning the new state. Raising aborts the update.

        Returns:
            The committed report. If the mutator returns the very same
            instance it received, nothing is written and that instance
            is returned.

        Raises:
            ReportNotFoundError: If the report doesn't exist.
            Exception: Whatever the mutator raises, unchanged.
        """
        ...
