"""Case management API dependencies.

Dependency injection for the lifecycle, chat and query services plus
caller resolution. The ledger store, notification publisher and payout
gateway are in-memory stubs; production would swap in real adapters
here.

Caller identity is resolved upstream (gateway or auth proxy) and passed
in the X-Caller-Id, X-Caller-Name and X-Caller-Role headers.
"""

from __future__ import annotations

from fastapi import Header, Request

from whistleledger.api.errors import unauthorized_exception
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
)
from whistleledger.config.case_config import LifecycleConfig, RewardConfig
from whistleledger.domain.models.caller import Caller, CallerRole
from whistleledger.infrastructure.stubs.ledger_store_stub import LedgerStoreStub
from whistleledger.infrastructure.stubs.notification_publisher_stub import (
    NotificationPublisherStub,
)
from whistleledger.infrastructure.stubs.payout_gateway_stub import PayoutGatewayStub

CALLER_ID_HEADER = "X-Caller-Id"
CALLER_NAME_HEADER = "X-Caller-Name"
CALLER_ROLE_HEADER = "X-Caller-Role"

# Singleton instances
_ledger_store: LedgerStoreStub | None = None
_notification_publisher: NotificationPublisherStub | None = None
_payout_gateway: PayoutGatewayStub | None = None
_reward_ledger: RewardLedgerService | None = None
_reward_config: RewardConfig | None = None
_lifecycle_config: LifecycleConfig | None = None
_lifecycle_service: ReportLifecycleService | None = None
_chat_service: ReportChatService | None = None
_query_service: CaseQueryService | None = None


def get_reward_config() -> RewardConfig:
    """Get reward configuration, loaded once from the environment."""
    global _reward_config
    if _reward_config is None:
        _reward_config = RewardConfig.from_environment()
    return _reward_config


def get_lifecycle_config() -> LifecycleConfig:
    """Get lifecycle configuration, loaded once from the environment."""
    global _lifecycle_config
    if _lifecycle_config is None:
        _lifecycle_config = LifecycleConfig.from_environment()
    return _lifecycle_config


def get_ledger_store() -> LedgerStoreStub:
    global _ledger_store
    if _ledger_store is None:
        _ledger_store = LedgerStoreStub()
    return _ledger_store


def get_notification_publisher() -> NotificationPublisherStub:
    global _notification_publisher
    if _notification_publisher is None:
        _notification_publisher = NotificationPublisherStub()
    return _notification_publisher


def get_payout_gateway() -> PayoutGatewayStub:
    global _payout_gateway
    if _payout_gateway is None:
        _payout_gateway = PayoutGatewayStub()
    return _payout_gateway


def get_reward_ledger() -> RewardLedgerService:
    """Get the process-wide reward ledger."""
    global _reward_ledger
    if _reward_ledger is None:
        _reward_ledger = RewardLedgerService(get_reward_config().initial_balance)
    return _reward_ledger


def get_lifecycle_service() -> ReportLifecycleService:
    global _lifecycle_service
    if _lifecycle_service is None:
        _lifecycle_service = ReportLifecycleService(
            store=get_ledger_store(),
            reward_ledger=get_reward_ledger(),
            payout_gateway=get_payout_gateway(),
            dispatcher=ReportEventDispatcher(get_notification_publisher()),
            lifecycle_config=get_lifecycle_config(),
            reward_config=get_reward_config(),
        )
    return _lifecycle_service


def get_chat_service() -> ReportChatService:
    global _chat_service
    if _chat_service is None:
        _chat_service = ReportChatService(
            store=get_ledger_store(),
            dispatcher=ReportEventDispatcher(get_notification_publisher()),
        )
    return _chat_service


def get_query_service() -> CaseQueryService:
    global _query_service
    if _query_service is None:
        _query_service = CaseQueryService(
            store=get_ledger_store(),
            reward_ledger=get_reward_ledger(),
        )
    return _query_service


# =============================================================================
# Caller resolution
# =============================================================================


def _parse_role(raw_role: str | None) -> CallerRole | None:
    if not raw_role:
        return None
    try:
        return CallerRole(raw_role.strip().lower())
    except ValueError:
        return None


def get_optional_caller(
    x_caller_id: str | None = Header(default=None, alias=CALLER_ID_HEADER),
    x_caller_name: str | None = Header(default=None, alias=CALLER_NAME_HEADER),
    x_caller_role: str | None = Header(default=None, alias=CALLER_ROLE_HEADER),
) -> Caller:
    """Resolve the caller for whistleblower routes.

    Requests without identity headers act as the anonymous whistleblower.
    """
    role = _parse_role(x_caller_role)
    if not x_caller_id or not x_caller_id.strip() or role is None:
        return Caller.anonymous_whistleblower()
    return Caller(id=x_caller_id.strip(), role=role, name=(x_caller_name or "").strip())


def get_authenticated_caller(
    request: Request,
    x_caller_id: str | None = Header(default=None, alias=CALLER_ID_HEADER),
    x_caller_name: str | None = Header(default=None, alias=CALLER_NAME_HEADER),
    x_caller_role: str | None = Header(default=None, alias=CALLER_ROLE_HEADER),
) -> Caller:
    """Resolve the caller for investigator and management routes.

    Raises:
        HTTPException: 401 if the identity headers are missing or the role
            is unknown.
    """
    if not x_caller_id or not x_caller_id.strip():
        raise unauthorized_exception(request, f"Missing {CALLER_ID_HEADER} header")
    role = _parse_role(x_caller_role)
    if role is None:
        raise unauthorized_exception(
            request, f"Missing or unknown {CALLER_ROLE_HEADER} header"
        )
    return Caller(id=x_caller_id.strip(), role=role, name=(x_caller_name or "").strip())


# Testing helper functions


def reset_case_dependencies() -> None:
    """Reset all singleton instances for testing.

    Call this in test fixtures to ensure clean state between tests.
    """
    global _ledger_store
    global _notification_publisher
    global _payout_gateway
    global _reward_ledger
    global _reward_config
    global _lifecycle_config
    global _lifecycle_service
    global _chat_service
    global _query_service

    _ledger_store = None
    _notification_publisher = None
    _payout_gateway = None
    _reward_ledger = None
    _reward_config = None
    _lifecycle_config = None
    _lifecycle_service = None
    _chat_service = None
    _query_service = None
