"""Management portal routes.

Management reviews completed investigations: it permanently closes them,
pays rewards from the shared balance, or reopens them for another
investigator. Admin callers may use the read routes only.
"""

from fastapi import APIRouter, Depends, Query, Request

from whistleledger.api.dependencies.cases import (
    get_authenticated_caller,
    get_lifecycle_service,
    get_query_service,
    get_reward_config,
    get_reward_ledger,
)
from whistleledger.api.errors import problem_exception
from whistleledger.api.models.cases import (
    CloseReportRequest,
    ProcessRewardRequest,
    ReopenReportRequest,
    ReportResponse,
    RewardBalanceResponse,
    StatisticsResponse,
)
from whistleledger.api.models.errors import ProblemDetail
from whistleledger.application.services.case_query_service import CaseQueryService
from whistleledger.application.services.report_lifecycle_service import (
    ReportLifecycleService,
)
from whistleledger.application.services.reward_ledger_service import (
    RewardLedgerService,
)
from whistleledger.config.case_config import RewardConfig
from whistleledger.domain.errors import WhistleLedgerError
from whistleledger.domain.models.caller import Caller, CallerRole
from whistleledger.domain.models.report import ReportStatus
from whistleledger.domain.services.access_policy import require_role

router = APIRouter(prefix="/v1/management", tags=["management"])

MANAGEMENT_READER_ROLES = frozenset({CallerRole.MANAGEMENT, CallerRole.ADMIN})

_ERROR_RESPONSES = {
    400: {"model": ProblemDetail, "description": "Invalid request"},
    401: {"model": ProblemDetail, "description": "Missing caller identity"},
    403: {"model": ProblemDetail, "description": "Caller may not perform this action"},
    404: {"model": ProblemDetail, "description": "Report not found"},
    409: {"model": ProblemDetail, "description": "Conflict with the report state"},
    412: {"model": ProblemDetail, "description": "Precondition failed"},
    502: {"model": ProblemDetail, "description": "Payout gateway failure"},
}


@router.get(
    "/reports",
    response_model=list[ReportResponse],
    responses=_ERROR_RESPONSES,
    summary="List reports",
)
async def list_reports(
    request: Request,
    status: ReportStatus | None = Query(default=None),
    caller: Caller = Depends(get_authenticated_caller),
    service: CaseQueryService = Depends(get_query_service),
) -> list[ReportResponse]:
    try:
        require_role(caller, MANAGEMENT_READER_ROLES, action="list reports")
        reports = await service.list_reports(status)
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return [ReportResponse.from_domain(r) for r in reports]


@router.get(
    "/reports/{report_id}",
    response_model=ReportResponse,
    responses=_ERROR_RESPONSES,
    summary="Get a report",
)
async def get_report(
    report_id: str,
    request: Request,
    caller: Caller = Depends(get_authenticated_caller),
    service: CaseQueryService = Depends(get_query_service),
) -> ReportResponse:
    try:
        require_role(caller, MANAGEMENT_READER_ROLES, action="read report")
        report = await service.get_report(report_id)
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return ReportResponse.from_domain(report)


@router.post(
    "/reports/{report_id}/close",
    response_model=ReportResponse,
    responses=_ERROR_RESPONSES,
    summary="Permanently close a completed investigation",
)
async def close_report(
    report_id: str,
    request_data: CloseReportRequest,
    request: Request,
    caller: Caller = Depends(get_authenticated_caller),
    service: ReportLifecycleService = Depends(get_lifecycle_service),
) -> ReportResponse:
    try:
        report = await service.permanently_close(
            caller, report_id, request_data.closure_summary
        )
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return ReportResponse.from_domain(report)


@router.post(
    "/reports/{report_id}/reward",
    response_model=ReportResponse,
    responses=_ERROR_RESPONSES,
    summary="Pay the whistleblower's reward",
)
async def process_reward(
    report_id: str,
    request_data: ProcessRewardRequest,
    request: Request,
    caller: Caller = Depends(get_authenticated_caller),
    service: ReportLifecycleService = Depends(get_lifecycle_service),
) -> ReportResponse:
    try:
        report = await service.process_reward(
            caller, report_id, request_data.note, request_data.amount
        )
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return ReportResponse.from_domain(report)


@router.post(
    "/reports/{report_id}/reopen",
    response_model=ReportResponse,
    responses=_ERROR_RESPONSES,
    summary="Reopen an investigation",
)
async def reopen_report(
    report_id: str,
    request_data: ReopenReportRequest,
    request: Request,
    caller: Caller = Depends(get_authenticated_caller),
    service: ReportLifecycleService = Depends(get_lifecycle_service),
) -> ReportResponse:
    try:
        report = await service.reopen(caller, report_id, request_data.reason)
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return ReportResponse.from_domain(report)


@router.get(
    "/statistics",
    response_model=StatisticsResponse,
    responses=_ERROR_RESPONSES,
    summary="Case statistics",
)
async def get_statistics(
    request: Request,
    caller: Caller = Depends(get_authenticated_caller),
    service: CaseQueryService = Depends(get_query_service),
) -> StatisticsResponse:
    try:
        require_role(caller, MANAGEMENT_READER_ROLES, action="read statistics")
        statistics = await service.get_statistics()
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return StatisticsResponse.from_statistics(statistics)


@router.get(
    "/reward-balance",
    response_model=RewardBalanceResponse,
    responses=_ERROR_RESPONSES,
    summary="Remaining reward balance",
)
async def get_reward_balance(
    request: Request,
    caller: Caller = Depends(get_authenticated_caller),
    ledger: RewardLedgerService = Depends(get_reward_ledger),
    config: RewardConfig = Depends(get_reward_config),
) -> RewardBalanceResponse:
    try:
        require_role(caller, MANAGEMENT_READER_ROLES, action="read reward balance")
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    balance = await ledger.balance()
    return RewardBalanceResponse(balance=float(balance), currency=config.currency)
