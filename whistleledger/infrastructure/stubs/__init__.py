"""In-memory infrastructure stubs for development and testing."""

from whistleledger.infrastructure.stubs.ledger_store_stub import LedgerStoreStub
from whistleledger.infrastructure.stubs.notification_publisher_stub import (
    NotificationPublisherStub,
)
from whistleledger.infrastructure.stubs.payout_gateway_stub import PayoutGatewayStub

__all__: list[str] = [
    "LedgerStoreStub",
    "NotificationPublisherStub",
    "PayoutGatewayStub",
]
