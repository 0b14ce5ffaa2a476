"""Application ports (interfaces) for Whistle Ledger.

Ports define the contracts the lifecycle engine consumes. Infrastructure
provides implementations; the in-memory stubs live in
whistleledger.infrastructure.stubs.
"""

from whistleledger.application.ports.ledger_store import (
    LedgerStoreProtocol,
    ReportMutator,
    ReportPredicate,
)
from whistleledger.application.ports.notification_publisher import (
    NotificationPublisherPort,
)
from whistleledger.application.ports.payout_gateway import (
    PayoutGatewayPort,
    PayoutTransaction,
)
from whistleledger.application.ports.reward_ledger import RewardLedgerProtocol

__all__: list[str] = [
    "LedgerStoreProtocol",
    "NotificationPublisherPort",
    "PayoutGatewayPort",
    "PayoutTransaction",
    "ReportMutator",
    "ReportPredicate",
    "RewardLedgerProtocol",
]
