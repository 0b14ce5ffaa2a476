"""Payout gateway stub implementation.

Logs the reward transfer and returns a transaction record. No funds move.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from whistleledger.application.ports.payout_gateway import (
    PayoutGatewayPort,
    PayoutTransaction,
)
from whistleledger.domain.errors import PayoutFailedError

logger = logging.getLogger(__name__)


class PayoutGatewayStub(PayoutGatewayPort):
    """Logging stub of a payment provider.

    Attributes:
        transactions: Every transaction "sent", in order.
    """

    def __init__(self) -> None:
        self.transactions: list[PayoutTransaction] = []

    async def send_reward(
        self,
        wallet: str,
        amount: Decimal,
        currency: str,
    ) -> PayoutTransaction:
        """Record a transfer of ``amount`` ``currency`` to ``wallet``.

        Raises:
            PayoutFailedError: If the wallet is empty or amount not positive.
        """
        if not wallet or not wallet.strip():
            raise PayoutFailedError(wallet, "Wallet address is required")
        if amount <= 0:
            raise PayoutFailedError(wallet, f"Invalid payout amount: {amount}")

        transaction = PayoutTransaction(
            id=f"txn_{uuid4().hex}",
            wallet=wallet,
            amount=amount,
            currency=currency,
            status="completed",
            timestamp=datetime.now(timezone.utc),
        )
        self.transactions.append(transaction)
        logger.info(
            "Reward payout sent: transaction_id=%s, amount=%s, currency=%s",
            transaction.id,
            amount,
            currency,
        )
        return transaction
