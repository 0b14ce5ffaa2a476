"""Case Query Service.

Read-only projections over the ledger store: single reports, filtered
lists and the statistics shown on the investigator and management
dashboards. Lists are ordered by criticality (highest first), then by
submission date (newest first).
"""

from __future__ import annotations

from typing import Any

from whistleledger.application.ports.ledger_store import LedgerStoreProtocol
from whistleledger.application.ports.reward_ledger import RewardLedgerProtocol
from whistleledger.application.services.base import LoggingMixin
from whistleledger.domain.errors import ReportNotFoundError
from whistleledger.domain.models.report import Report, ReportStatus

HIGH_CRITICALITY_MIN = 4
MEDIUM_CRITICALITY = 3

_FINISHED_STATUSES = frozenset(
    {ReportStatus.INVESTIGATION_COMPLETE, ReportStatus.COMPLETED}
)


def _sort_key(report: Report) -> tuple[int, float]:
    return (report.criticality, report.date.timestamp())


def _ordered(reports: list[Report]) -> list[Report]:
    return sorted(reports, key=_sort_key, reverse=True)


class CaseQueryService(LoggingMixin):
    """Read-only queries over reports."""

    def __init__(
        self,
        store: LedgerStoreProtocol,
        reward_ledger: RewardLedgerProtocol | None = None,
    ) -> None:
        self._store = store
        self._reward_ledger = reward_ledger
        self._init_logger(component="queries")

    async def get_report(self, report_id: str) -> Report:
        """Return one report.

        Raises:
            ReportNotFoundError: If the report doesn't exist.
        """
        report = await self._store.get(report_id)
        if report is None:
            raise ReportNotFoundError(report_id)
        return report

    async def list_reports(self, status: ReportStatus | None = None) -> list[Report]:
        """Return all reports, or only those in ``status``."""
        if status is None:
            reports = await self._store.scan()
        else:
            reports = await self._store.scan(lambda r: r.status == status)
        return _ordered(reports)

    async def list_unassigned(self) -> list[Report]:
        """Return pending reports no investigator has picked up."""
        reports = await self._store.scan(
            lambda r: r.status == ReportStatus.PENDING and r.assigned_to is None
        )
        return _ordered(reports)

    async def list_by_assignee(self, investigator_id: str) -> list[Report]:
        """Return reports currently assigned to ``investigator_id``."""
        reports = await self._store.scan(lambda r: r.assigned_to == investigator_id)
        return _ordered(reports)

    async def get_statistics(self) -> dict[str, Any]:
        """Aggregate dashboard statistics.

        Returns:
            Dict with total_reports, by_status (every status present),
            by_criticality (high >= 4, medium == 3, low <= 2), one
            investigators entry per assignee, and reward_balance when a
            reward ledger is configured.
        """
        reports = await self._store.scan()

        by_status = {status.value: 0 for status in ReportStatus}
        by_criticality = {"high": 0, "medium": 0, "low": 0}
        investigators: dict[str, dict[str, Any]] = {}

        for report in reports:
            by_status[report.status.value] += 1

            if report.criticality >= HIGH_CRITICALITY_MIN:
                by_criticality["high"] += 1
            elif report.criticality == MEDIUM_CRITICALITY:
                by_criticality["medium"] += 1
            else:
                by_criticality["low"] += 1

            if report.assigned_to:
                entry = investigators.setdefault(
                    report.assigned_to,
                    {
                        "id": report.assigned_to,
                        "name": report.assigned_to_name or report.assigned_to,
                        "active_reports": 0,
                        "completed_reports": 0,
                    },
                )
                if report.status == ReportStatus.UNDER_INVESTIGATION:
                    entry["active_reports"] += 1
                elif report.status in _FINISHED_STATUSES:
                    entry["completed_reports"] += 1

        statistics: dict[str, Any] = {
            "total_reports": len(reports),
            "by_status": by_status,
            "by_criticality": by_criticality,
            "investigators": sorted(investigators.values(), key=lambda i: i["id"]),
        }
        if self._reward_ledger is not None:
            statistics["reward_balance"] = await self._reward_ledger.balance()

        self._log_operation("get_statistics").debug(
            "statistics_computed", total_reports=len(reports)
        )
        return statistics
