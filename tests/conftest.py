"""
Pytest configuration and shared fixtures for Whistle Ledger tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for failing or observed collaborators
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from __future__ import annotations

from decimal import Decimal

import pytest

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
from whistleledger.domain.models.report import LifecycleVariant
from whistleledger.infrastructure.stubs.ledger_store_stub import LedgerStoreStub
from whistleledger.infrastructure.stubs.notification_publisher_stub import (
    NotificationPublisherStub,
)
from whistleledger.infrastructure.stubs.payout_gateway_stub import PayoutGatewayStub


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from whistleledger import __version__

    return __version__


# =============================================================================
# Callers
# =============================================================================


@pytest.fixture
def whistleblower() -> Caller:
    return Caller.anonymous_whistleblower()


@pytest.fixture
def investigator() -> Caller:
    return Caller(id="investigator1", role=CallerRole.INVESTIGATOR, name="Ines")


@pytest.fixture
def other_investigator() -> Caller:
    return Caller(id="investigator2", role=CallerRole.INVESTIGATOR, name="Ivo")


@pytest.fixture
def management() -> Caller:
    return Caller(id="manager1", role=CallerRole.MANAGEMENT, name="Mara")


@pytest.fixture
def admin() -> Caller:
    return Caller(id="admin1", role=CallerRole.ADMIN, name="Ada")


# =============================================================================
# Stubs and services
# =============================================================================


@pytest.fixture
def store() -> LedgerStoreStub:
    return LedgerStoreStub()


@pytest.fixture
def publisher() -> NotificationPublisherStub:
    return NotificationPublisherStub()


@pytest.fixture
def payout_gateway() -> PayoutGatewayStub:
    return PayoutGatewayStub()


@pytest.fixture
def reward_ledger() -> RewardLedgerService:
    return RewardLedgerService(Decimal("1000"))


@pytest.fixture
def reward_config() -> RewardConfig:
    return RewardConfig(
        initial_balance=Decimal("1000"),
        reward_amount=Decimal("100"),
        currency="BTC",
    )


@pytest.fixture
def lifecycle_service(
    store: LedgerStoreStub,
    reward_ledger: RewardLedgerService,
    payout_gateway: PayoutGatewayStub,
    publisher: NotificationPublisherStub,
    reward_config: RewardConfig,
) -> ReportLifecycleService:
    """Four-tier lifecycle engine wired to in-memory stubs."""
    return ReportLifecycleService(
        store=store,
        reward_ledger=reward_ledger,
        payout_gateway=payout_gateway,
        dispatcher=ReportEventDispatcher(publisher),
        lifecycle_config=LifecycleConfig(variant=LifecycleVariant.FOUR_TIER),
        reward_config=reward_config,
    )


@pytest.fixture
def two_tier_service(
    store: LedgerStoreStub,
    reward_ledger: RewardLedgerService,
    payout_gateway: PayoutGatewayStub,
    publisher: NotificationPublisherStub,
    reward_config: RewardConfig,
) -> ReportLifecycleService:
    """Two-tier lifecycle engine wired to in-memory stubs."""
    return ReportLifecycleService(
        store=store,
        reward_ledger=reward_ledger,
        payout_gateway=payout_gateway,
        dispatcher=ReportEventDispatcher(publisher),
        lifecycle_config=LifecycleConfig(variant=LifecycleVariant.TWO_TIER),
        reward_config=reward_config,
    )


@pytest.fixture
def chat_service(
    store: LedgerStoreStub,
    publisher: NotificationPublisherStub,
) -> ReportChatService:
    return ReportChatService(store=store, dispatcher=ReportEventDispatcher(publisher))


@pytest.fixture
def query_service(
    store: LedgerStoreStub,
    reward_ledger: RewardLedgerService,
) -> CaseQueryService:
    return CaseQueryService(store=store, reward_ledger=reward_ledger)
