"""Unit tests for PayoutGatewayStub."""

from __future__ import annotations

from decimal import Decimal

import pytest

from whistleledger.domain.errors import PayoutFailedError
from whistleledger.infrastructure.stubs.payout_gateway_stub import PayoutGatewayStub


class TestPayoutGatewayStub:
    @pytest.mark.asyncio
    async def test_send_reward_records_transaction(
        self, payout_gateway: PayoutGatewayStub
    ) -> None:
        txn = await payout_gateway.send_reward("bc1qwallet", Decimal("100"), "BTC")

        assert txn.id.startswith("txn_")
        assert txn.status == "completed"
        assert txn.amount == Decimal("100")
        assert payout_gateway.transactions == [txn]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("wallet", "amount"),
        [("", Decimal("1")), ("   ", Decimal("1")), ("bc1qwallet", Decimal("0"))],
    )
    async def test_invalid_payouts_fail(
        self,
        payout_gateway: PayoutGatewayStub,
        wallet: str,
        amount: Decimal,
    ) -> None:
        with pytest.raises(PayoutFailedError):
            await payout_gateway.send_reward(wallet, amount, "BTC")
        assert payout_gateway.transactions == []
