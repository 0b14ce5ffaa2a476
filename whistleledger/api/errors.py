"""Domain error to RFC 7807 problem translation.

Every case route catches WhistleLedgerError and re-raises the result of
problem_exception() with ``from None``. Subclasses are matched before
their parents, so ManagementSummaryRequiredError keeps its own title.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from whistleledger.domain.errors import (
    AlreadyProcessedError,
    ConcurrentModificationError,
    ForbiddenError,
    InsufficientFundsError,
    InvalidTransitionError,
    ManagementSummaryRequiredError,
    PayoutFailedError,
    PreconditionFailedError,
    ReportAlreadyExistsError,
    ReportNotFoundError,
    ReportPermanentlyClosedError,
    ValidationError,
    WhistleLedgerError,
)

PROBLEM_TYPE_BASE = "urn:whistleledger:problem"

# (error class, HTTP status, problem slug, title); most specific first
_PROBLEM_TABLE: tuple[tuple[type[WhistleLedgerError], int, str, str], ...] = (
    (ReportNotFoundError, 404, "report-not-found", "Report Not Found"),
    (ReportPermanentlyClosedError, 409, "permanently-closed", "Report Permanently Closed"),
    (InvalidTransitionError, 409, "invalid-transition", "Invalid State Transition"),
    (ForbiddenError, 403, "forbidden", "Forbidden"),
    (
        ManagementSummaryRequiredError,
        412,
        "management-summary-required",
        "Management Summary Required",
    ),
    (PreconditionFailedError, 412, "precondition-failed", "Precondition Failed"),
    (AlreadyProcessedError, 409, "already-processed", "Reward Already Processed"),
    (InsufficientFundsError, 409, "insufficient-funds", "Insufficient Funds"),
    (ValidationError, 400, "validation-error", "Invalid Request"),
    (ConcurrentModificationError, 409, "concurrent-modification", "Concurrent Modification"),
    (ReportAlreadyExistsError, 409, "already-exists", "Report Already Exists"),
    (PayoutFailedError, 502, "payout-failed", "Payout Failed"),
)


def problem_exception(error: WhistleLedgerError, request: Request) -> HTTPException:
    """Build the HTTPException carrying the RFC 7807 body for ``error``."""
    status, slug, title = 500, "internal-error", "Internal Error"
    for error_type, error_status, error_slug, error_title in _PROBLEM_TABLE:
        if isinstance(error, error_type):
            status, slug, title = error_status, error_slug, error_title
            break

    return HTTPException(
        status_code=status,
        detail={
            "type": f"{PROBLEM_TYPE_BASE}:{slug}",
            "title": title,
            "status": status,
            "detail": str(error),
            "instance": str(request.url),
            "code": error.code,
        },
    )


def unauthorized_exception(request: Request, detail: str) -> HTTPException:
    """401 problem for requests without a usable caller identity."""
    return HTTPException(
        status_code=401,
        detail={
            "type": f"{PROBLEM_TYPE_BASE}:unauthorized",
            "title": "Unauthorized",
            "status": 401,
            "detail": detail,
            "instance": str(request.url),
            "code": "UNAUTHORIZED",
        },
    )
