"""Payout gateway port.

Abstracts the payment provider that sends a reward to a whistleblower's
wallet. No real transfer is implemented in this package; the stub logs
the request and returns a transaction record.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol


@dataclass(frozen=True)
class PayoutTransaction:
    """Record returned by a payout gateway.

    Attributes:
        id: Provider transaction reference.
        wallet: Destination wallet.
        amount: Amount sent.
        currency: Currency symbol.
        status: Provider status string (e.g. "completed").
        timestamp: When the provider accepted the transfer.
    """

    id: str
    wallet: str
    amount: Decimal
    currency: str
    status: str
    timestamp: datetime


class PayoutGatewayPort(Protocol):
    """Protocol for reward payouts."""

    async def send_reward(
        self,
        wallet: str,
        amount: Decimal,
        currency: str,
    ) -> PayoutTransaction:
        """Send ``amount`` of ``currency`` to ``wallet``.

        Raises:
            PayoutFailedError: If the provider rejects the transfer.
        """
        ...
