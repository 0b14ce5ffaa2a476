"""Reward ledger service.

Holds the single reward balance shared by every request. The balance is
mutated only through deduct() and credit(), each under one asyncio.Lock,
so concurrent payouts can never drive it below zero.

Developer Golden Rules:
1. COMPARE-AND-DEDUCT - The sufficiency check and the deduction happen
   under the same lock
2. FAIL LOUD - Invalid or uncovered amounts raise, never clamp
"""

from __future__ import annotations

import asyncio
from decimal import Decimal, InvalidOperation

from whistleledger.application.services.base import LoggingMixin
from whistleledger.domain.errors import InsufficientFundsError, ValidationError


def parse_amount(value: object, field: str = "amount") -> Decimal:
    """Convert a caller-supplied amount to a positive Decimal.

    Accepts Decimal, int, float and numeric strings.

    Raises:
        ValidationError: If the value is not a finite number greater than 0.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Invalid {field}: must be a number", field=field)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(
            f"Invalid {field}: must be a number", field=field
        ) from None
    if not amount.is_finite():
        raise ValidationError(f"Invalid {field}: must be a number", field=field)
    if amount <= 0:
        raise ValidationError(f"Invalid {field}: must be greater than 0", field=field)
    return amount


class RewardLedgerService(LoggingMixin):
    """In-process reward balance implementing RewardLedgerProtocol.

    Constructed once at bootstrap from RewardConfig.initial_balance and
    injected wherever rewards are paid.
    """

    def __init__(self, initial_balance: Decimal = Decimal("1000")) -> None:
        if initial_balance < 0:
            raise ValueError(
                f"initial_balance must be non-negative, got {initial_balance}"
            )
        self._balance = Decimal(initial_balance)
        self._lock = asyncio.Lock()
        self._init_logger(component="rewards")

    async def balance(self) -> Decimal:
        """Return the current balance."""
        async with self._lock:
            return self._balance

    async def deduct(self, amount: Decimal) -> Decimal:
        """Atomically deduct ``amount`` if the balance covers it.

        Returns:
            The balance after deduction.

        Raises:
            ValidationError: If amount is not positive.
            InsufficientFundsError: If amount exceeds the balance.
        """
        amount = parse_amount(amount)
        log = self._log_operation("deduct", amount=str(amount))

        async with self._lock:
            if amount > self._balance:
                log.warning(
                    "reward_deduction_rejected",
                    available=str(self._balance),
                )
                raise InsufficientFundsError(requested=amount, available=self._balance)
            self._balance -= amount
            remaining = self._balance

        log.info("reward_balance_deducted", remaining=str(remaining))
        return remaining

    async def credit(self, amount: Decimal) -> Decimal:
        """Add ``amount`` back to the balance.

        Returns:
            The balance after the credit.

        Raises:
            ValidationError: If amount is not positive.
        """
        amount = parse_amount(amount)
        async with self._lock:
            self._balance += amount
            remaining = self._balance

        self._log_operation("credit", amount=str(amount)).info(
            "reward_balance_credited", remaining=str(remaining)
        )
        return remaining
