"""Application services for Whistle Ledger."""

from whistleledger.application.services.case_query_service import CaseQueryService
from whistleledger.application.services.report_chat_service import ReportChatService
from whistleledger.application.services.report_event_dispatcher import (
    ReportEventDispatcher,
)
from whistleledger.application.services.report_lifecycle_service import (
    ReportLifecycleService,
)
from whistleledger.application.services.reward_ledger_service import (
    RewardLedgerService,
    parse_amount,
)

__all__: list[str] = [
    "CaseQueryService",
    "ReportChatService",
    "ReportEventDispatcher",
    "ReportLifecycleService",
    "RewardLedgerService",
    "parse_amount",
]
