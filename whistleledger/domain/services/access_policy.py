"""Capability checks for report operations.

A single check function is shared by every mutating operation so the
actor guards are enforced identically whatever transport the call came
through.

Usage:
    from whistleledger.domain.services.access_policy import require_role

    require_role(caller, {CallerRole.MANAGEMENT}, action="reopen report")
    require_assignee(caller, report, action="complete investigation")
"""

from __future__ import annotations

from collections.abc import Iterable

from whistleledger.domain.errors.access import ForbiddenError
from whistleledger.domain.models.caller import Caller, CallerRole
from whistleledger.domain.models.report import Report

# Roles allowed to read any case and its statistics
CASE_READER_ROLES: frozenset[CallerRole] = frozenset(
    {CallerRole.INVESTIGATOR, CallerRole.MANAGEMENT, CallerRole.ADMIN}
)

# Roles allowed to take part in a report's chat
CHAT_PARTICIPANT_ROLES: frozenset[CallerRole] = frozenset(
    {CallerRole.WHISTLEBLOWER, CallerRole.INVESTIGATOR, CallerRole.MANAGEMENT}
)


def require_role(
    caller: Caller,
    required_roles: Iterable[CallerRole],
    action: str = "perform this action",
) -> None:
    """Ensure the caller holds one of ``required_roles``.

    Raises:
        ForbiddenError: If the caller's role is not allowed.
    """
    allowed = frozenset(required_roles)
    if caller.role not in allowed:
        raise ForbiddenError(
            caller_id=caller.id,
            action=action,
            message=(
                f"Role {caller.role.value} may not {action}. "
                f"Required: {sorted(role.value for role in allowed)}"
            ),
        )


def require_assignee(caller: Caller, report: Report, action: str) -> None:
    """Ensure the caller is the investigator assigned to ``report``.

    Raises:
        ForbiddenError: If the caller is not the assignee.
    """
    require_role(caller, {CallerRole.INVESTIGATOR}, action=action)
    if report.assigned_to != caller.id:
        raise ForbiddenError(
            caller_id=caller.id,
            action=action,
            message=f"Investigator {caller.id} is not assigned to report {report.id}",
        )


def require_assignment_eligibility(caller: Caller, report: Report) -> None:
    """Ensure the caller may pick up ``report``.

    The investigator who held a case when it was reopened may not be
    assigned to it again. Only the last assignee is excluded.

    Raises:
        ForbiddenError: If the caller is the previous investigator.
    """
    require_role(caller, {CallerRole.INVESTIGATOR}, action="assign report")
    if report.is_reopened and report.previous_investigator == caller.id:
        raise ForbiddenError(
            caller_id=caller.id,
            action="assign report",
            message=(
                f"Investigator {caller.id} is not eligible to investigate "
                f"reopened report {report.id}"
            ),
        )
