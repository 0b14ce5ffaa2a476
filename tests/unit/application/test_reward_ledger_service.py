"""Unit tests for RewardLedgerService and amount parsing."""

from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from whistleledger.application.services.reward_ledger_service import (
    RewardLedgerService,
    parse_amount,
)
from whistleledger.domain.errors import InsufficientFundsError, ValidationError


class TestParseAmount:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(5, Decimal("5")), ("12.50", Decimal("12.50")), (Decimal("0.1"), Decimal("0.1"))],
    )
    def test_valid_amounts(self, value: object, expected: Decimal) -> None:
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", [0, -1, "abc", "NaN", "Infinity", None, True])
    def test_invalid_amounts(self, value: object) -> None:
        with pytest.raises(ValidationError):
            parse_amount(value)


class TestRewardLedgerService:
    @pytest.mark.asyncio
    async def test_deduct_reduces_balance(self) -> None:
        ledger = RewardLedgerService(Decimal("1000"))
        assert await ledger.deduct(Decimal("250")) == Decimal("750")
        assert await ledger.balance() == Decimal("750")

    @pytest.mark.asyncio
    async def test_deduct_full_balance(self) -> None:
        ledger = RewardLedgerService(Decimal("100"))
        assert await ledger.deduct(Decimal("100")) == Decimal("0")

    @pytest.mark.asyncio
    async def test_overdraft_is_rejected(self) -> None:
        ledger = RewardLedgerService(Decimal("100"))
        with pytest.raises(InsufficientFundsError) as exc_info:
            await ledger.deduct(Decimal("100.01"))
        assert exc_info.value.code == "INSUFFICIENT_FUNDS"
        assert await ledger.balance() == Decimal("100")

    @pytest.mark.asyncio
    async def test_credit_restores_balance(self) -> None:
        ledger = RewardLedgerService(Decimal("100"))
        await ledger.deduct(Decimal("40"))
        assert await ledger.credit(Decimal("40")) == Decimal("100")

    @pytest.mark.asyncio
    async def test_concurrent_deductions_never_overdraw(self) -> None:
        ledger = RewardLedgerService(Decimal("500"))

        results = await asyncio.gather(
            *(ledger.deduct(Decimal("100")) for _ in range(8)),
            return_exceptions=True,
        )

        assert sum(isinstance(r, Decimal) for r in results) == 5
        assert sum(isinstance(r, InsufficientFundsError) for r in results) == 3
        assert await ledger.balance() == Decimal("0")

    def test_negative_initial_balance_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            RewardLedgerService(Decimal("-1"))
