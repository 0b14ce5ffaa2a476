"""Ledger store stub implementation.

In-memory implementation of LedgerStoreProtocol for development and
testing. Writes to one report are serialized by a per-report asyncio.Lock
created lazily under a registry lock; writes to different reports never
contend.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

from whistleledger.application.ports.ledger_store import (
    LedgerStoreProtocol,
    ReportMutator,
    ReportPredicate,
)
from whistleledger.domain.errors import (
    ConcurrentModificationError,
    ReportAlreadyExistsError,
    ReportNotFoundError,
)
from whistleledger.domain.models.report import Report

logger = logging.getLogger(__name__)


class LedgerStoreStub(LedgerStoreProtocol):
    """In-memory stub implementation of LedgerStoreProtocol.

    NOT suitable for production use: state lives only as long as the
    process.

    Attributes:
        _reports: Dictionary mapping report.id to Report.
        _locks: Per-report write locks.
        _registry_lock: Guards creation of per-report locks and inserts.
    """

    def __init__(self) -> None:
        self._reports: dict[str, Report] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._registry_lock = asyncio.Lock()

    async def _lock_for(self, report_id: str) -> asyncio.Lock:
        async with self._registry_lock:
            lock = self._locks.get(report_id)
            if lock is None:
                lock = asyncio.Lock()
                self._locks[report_id] = lock
            return lock

    async def save(self, report: Report) -> Report:
        """Store a new report at version 1.

        Raises:
            ReportAlreadyExistsError: If report.id already exists.
        """
        async with self._registry_lock:
            if report.id in self._reports:
                raise ReportAlreadyExistsError(report.id)
            stored = replace(report, version=1)
            self._reports[report.id] = stored
        logger.debug("Report saved: report_id=%s", report.id)
        return stored

    async def get(self, report_id: str) -> Report | None:
        return self._reports.get(report_id)

    async def put(self, report: Report, expected_version: int | None = None) -> Report:
        """Overwrite a report, optionally compare-and-swap on version.

        Raises:
            ReportNotFoundError: If the report doesn't exist.
            ConcurrentModificationError: If expected_version doesn't match.
        """
        lock = await self._lock_for(report.id)
        async with lock:
            current = self._reports.get(report.id)
            if current is None:
                raise ReportNotFoundError(report.id)
            if expected_version is not None and current.version != expected_version:
                logger.warning(
                    "CAS failed: report_id=%s, expected_version=%d, actual_version=%d",
                    report.id,
                    expected_version,
                    current.version,
                )
                raise ConcurrentModificationError(
                    report_id=report.id,
                    expected_version=expected_version,
                    actual_version=current.version,
                )
            stored = replace(report, version=current.version + 1)
            self._reports[report.id] = stored
        return stored

    async def scan(self, predicate: ReportPredicate | None = None) -> list[Report]:
        reports = list(self._reports.values())
        if predicate is None:
            return reports
        return [report for report in reports if predicate(report)]

    async def update(self, report_id: str, mutator: ReportMutator) -> Report:
        """Atomically fetch, mutate and store one report.

        Raises:
            ReportNotFoundError: If the report doesn't exist.
            Exception: Whatever the mutator raises; nothing is written.
        """
        lock = await self._lock_for(report_id)
        async with lock:
            current = self._reports.get(report_id)
            if current is None:
                raise ReportNotFoundError(report_id)

            updated = await mutator(current)
            if updated is current:
                return current

            stored = replace(updated, version=current.version + 1)
            self._reports[report_id] = stored
        logger.debug(
            "Report updated: report_id=%s, version=%d", report_id, stored.version
        )
        return stored

    # Test helpers

    def clear(self) -> None:
        """Clear all stored reports (for testing)."""
        self._reports.clear()
        self._locks.clear()

    def count(self) -> int:
        """Return the number of stored reports (for testing)."""
        return len(self._reports)
