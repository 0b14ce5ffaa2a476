"""Investigator portal routes.

Investigators browse the case queue, pick up pending reports, record
their findings, complete investigations and chat with the reporter.
Reads are also open to management and admin callers.

Every route requires the caller identity headers (401 otherwise).
"""

from fastapi import APIRouter, Depends, Query, Request

from whistleledger.api.dependencies.cases import (
    get_authenticated_caller,
    get_chat_service,
    get_lifecycle_service,
    get_query_service,
)
from whistleledger.api.errors import problem_exception
from whistleledger.api.models.cases import (
    ChatMessageResponse,
    ManagementSummaryRequest,
    MarkReadResponse,
    ReportResponse,
    SendChatMessageRequest,
    StatisticsResponse,
)
from whistleledger.api.models.errors import ProblemDetail
from whistleledger.application.services.case_query_service import CaseQueryService
from whistleledger.application.services.report_chat_service import ReportChatService
from whistleledger.application.services.report_lifecycle_service import (
    ReportLifecycleService,
)
from whistleledger.domain.errors import WhistleLedgerError
from whistleledger.domain.models.caller import Caller, CallerRole
from whistleledger.domain.models.report import ReportStatus
from whistleledger.domain.services.access_policy import CASE_READER_ROLES, require_role

router = APIRouter(prefix="/v1/investigator", tags=["investigator"])

_ERROR_RESPONSES = {
    400: {"model": ProblemDetail, "description": "Invalid request"},
    401: {"model": ProblemDetail, "description": "Missing caller identity"},
    403: {"model": ProblemDetail, "description": "Caller may not perform this action"},
    404: {"model": ProblemDetail, "description": "Report not found"},
    409: {"model": ProblemDetail, "description": "Invalid state transition"},
    412: {"model": ProblemDetail, "description": "Precondition failed"},
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
        require_role(caller, CASE_READER_ROLES, action="list reports")
        reports = await service.list_reports(status)
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return [ReportResponse.from_domain(r) for r in reports]


@router.get(
    "/reports/unassigned",
    response_model=list[ReportResponse],
    responses=_ERROR_RESPONSES,
    summary="List unassigned pending reports",
)
async def list_unassigned(
    request: Request,
    caller: Caller = Depends(get_authenticated_caller),
    service: CaseQueryService = Depends(get_query_service),
) -> list[ReportResponse]:
    try:
        require_role(caller, CASE_READER_ROLES, action="list reports")
        reports = await service.list_unassigned()
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return [ReportResponse.from_domain(r) for r in reports]


@router.get(
    "/my-reports",
    response_model=list[ReportResponse],
    responses=_ERROR_RESPONSES,
    summary="List reports assigned to the caller",
)
async def list_my_reports(
    request: Request,
    caller: Caller = Depends(get_authenticated_caller),
    service: CaseQueryService = Depends(get_query_service),
) -> list[ReportResponse]:
    try:
        require_role(caller, {CallerRole.INVESTIGATOR}, action="list assigned reports")
        reports = await service.list_by_assignee(caller.id)
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
        require_role(caller, CASE_READER_ROLES, action="read report")
        report = await service.get_report(report_id)
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return ReportResponse.from_domain(report)


@router.post(
    "/reports/{report_id}/assign",
    response_model=ReportResponse,
    responses=_ERROR_RESPONSES,
    summary="Take a pending report for investigation",
)
async def assign_report(
    report_id: str,
    request: Request,
    caller: Caller = Depends(get_authenticated_caller),
    service: ReportLifecycleService = Depends(get_lifecycle_service),
) -> ReportResponse:
    try:
        report = await service.assign(caller, report_id)
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return ReportResponse.from_domain(report)


@router.put(
    "/reports/{report_id}/summary",
    response_model=ReportResponse,
    responses=_ERROR_RESPONSES,
    summary="Record the management summary",
)
async def add_management_summary(
    report_id: str,
    request_data: ManagementSummaryRequest,
    request: Request,
    caller: Caller = Depends(get_authenticated_caller),
    service: ReportLifecycleService = Depends(get_lifecycle_service),
) -> ReportResponse:
    try:
        report = await service.add_management_summary(
            caller, report_id, request_data.summary
        )
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return ReportResponse.from_domain(report)


@router.post(
    "/reports/{report_id}/complete",
    response_model=ReportResponse,
    responses=_ERROR_RESPONSES,
    summary="Complete the investigation",
)
async def complete_investigation(
    report_id: str,
    request: Request,
    caller: Caller = Depends(get_authenticated_caller),
    service: ReportLifecycleService = Depends(get_lifecycle_service),
) -> ReportResponse:
    try:
        report = await service.complete_investigation(caller, report_id)
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return ReportResponse.from_domain(report)


@router.post(
    "/reports/{report_id}/chat",
    response_model=ChatMessageResponse,
    status_code=201,
    responses=_ERROR_RESPONSES,
    summary="Send a chat message to the reporter",
)
async def send_chat_message(
    report_id: str,
    request_data: SendChatMessageRequest,
    request: Request,
    caller: Caller = Depends(get_authenticated_caller),
    service: ReportChatService = Depends(get_chat_service),
) -> ChatMessageResponse:
    try:
        attachment = (
            request_data.attachment.to_domain(uploaded_by=caller.id)
            if request_data.attachment
            else None
        )
        message = await service.send_chat_message(
            caller, report_id, request_data.content, attachment
        )
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return ChatMessageResponse.from_domain(message)


@router.put(
    "/reports/{report_id}/chat/read",
    response_model=MarkReadResponse,
    responses=_ERROR_RESPONSES,
    summary="Mark the reporter's messages as read",
)
async def mark_chat_read(
    report_id: str,
    request: Request,
    caller: Caller = Depends(get_authenticated_caller),
    service: ReportChatService = Depends(get_chat_service),
) -> MarkReadResponse:
    try:
        count = await service.mark_messages_as_read(caller, report_id)
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return MarkReadResponse(report_id=report_id, marked_read=count)


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
        require_role(caller, CASE_READER_ROLES, action="read statistics")
        statistics = await service.get_statistics()
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return StatisticsResponse.from_statistics(statistics)
