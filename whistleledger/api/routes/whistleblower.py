"""Whistleblower portal routes.

Reporters submit reports, follow their status by report ID and chat with
the people handling the case. No identity is required: requests without
caller headers act as the anonymous whistleblower.

Developer Golden Rules:
1. REPORTER VIEW ONLY - Investigator identity and internal notes are
   never returned on these routes; staff chat senders appear as their role
2. FAIL LOUD - Domain errors become RFC 7807 responses
"""

from fastapi import APIRouter, Depends, Request

from whistleledger.api.dependencies.cases import (
    get_chat_service,
    get_lifecycle_service,
    get_optional_caller,
    get_query_service,
)
from whistleledger.api.errors import problem_exception
from whistleledger.api.models.cases import (
    ChatMessageResponse,
    MarkReadResponse,
    ReportStatusResponse,
    SendChatMessageRequest,
    SubmitReportRequest,
    SubmitReportResponse,
)
from whistleledger.api.models.errors import ProblemDetail
from whistleledger.application.services.case_query_service import CaseQueryService
from whistleledger.application.services.report_chat_service import ReportChatService
from whistleledger.application.services.report_lifecycle_service import (
    ReportLifecycleService,
)
from whistleledger.domain.errors import WhistleLedgerError
from whistleledger.domain.models.caller import Caller

router = APIRouter(prefix="/v1/whistleblower", tags=["whistleblower"])

_ERROR_RESPONSES = {
    400: {"model": ProblemDetail, "description": "Invalid request"},
    403: {"model": ProblemDetail, "description": "Caller may not perform this action"},
    404: {"model": ProblemDetail, "description": "Report not found"},
}


@router.post(
    "/reports",
    response_model=SubmitReportResponse,
    status_code=201,
    responses=_ERROR_RESPONSES,
    summary="Submit a new report",
)
async def submit_report(
    request_data: SubmitReportRequest,
    request: Request,
    caller: Caller = Depends(get_optional_caller),
    service: ReportLifecycleService = Depends(get_lifecycle_service),
) -> SubmitReportResponse:
    """Submit a report; the returned id is the reporter's tracking key."""
    try:
        report = await service.submit_report(
            caller,
            title=request_data.title,
            description=request_data.description,
            criticality=request_data.criticality,
            anonymous=request_data.anonymous,
            submitter=request_data.submitter,
            reward_wallet=request_data.reward_wallet,
            attachments=[a.to_domain(uploaded_by=caller.id) for a in request_data.attachments],
            voice_note=request_data.voice_note,
            department=request_data.department,
            location=request_data.location,
            monetary_value=request_data.monetary_value,
            relationship=request_data.relationship,
            encounter=request_data.encounter,
            authorities_aware=request_data.authorities_aware,
        )
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None

    return SubmitReportResponse(
        id=report.id,
        masked_id=report.masked_id,
        status=report.status,
        criticality=report.criticality,
        date=report.date,
    )


@router.get(
    "/reports/{report_id}",
    response_model=ReportStatusResponse,
    responses=_ERROR_RESPONSES,
    summary="Check report status",
)
async def get_report_status(
    report_id: str,
    request: Request,
    caller: Caller = Depends(get_optional_caller),
    service: CaseQueryService = Depends(get_query_service),
) -> ReportStatusResponse:
    try:
        report = await service.get_report(report_id)
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return ReportStatusResponse.from_domain(report, caller.id)


@router.get(
    "/reports/{report_id}/chat",
    response_model=list[ChatMessageResponse],
    responses=_ERROR_RESPONSES,
    summary="Get chat history",
)
async def get_chat_history(
    report_id: str,
    request: Request,
    service: ReportChatService = Depends(get_chat_service),
) -> list[ChatMessageResponse]:
    try:
        messages = await service.get_chat_history(report_id)
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return [ChatMessageResponse.from_domain(m, mask_staff=True) for m in messages]


@router.post(
    "/reports/{report_id}/chat",
    response_model=ChatMessageResponse,
    status_code=201,
    responses=_ERROR_RESPONSES,
    summary="Send a chat message",
)
async def send_chat_message(
    report_id: str,
    request_data: SendChatMessageRequest,
    request: Request,
    caller: Caller = Depends(get_optional_caller),
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
    return ChatMessageResponse.from_domain(message, mask_staff=True)


@router.put(
    "/reports/{report_id}/chat/read",
    response_model=MarkReadResponse,
    responses=_ERROR_RESPONSES,
    summary="Mark investigator messages as read",
)
async def mark_chat_read(
    report_id: str,
    request: Request,
    caller: Caller = Depends(get_optional_caller),
    service: ReportChatService = Depends(get_chat_service),
) -> MarkReadResponse:
    try:
        count = await service.mark_messages_as_read(caller, report_id)
    except WhistleLedgerError as e:
        raise problem_exception(e, request) from None
    return MarkReadResponse(report_id=report_id, marked_read=count)
