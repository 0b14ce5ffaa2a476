"""Reward ledger port.

The reward ledger holds the single balance rewards are paid from. It is
shared by every request, so deduct() must be an atomic compare-and-deduct.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol


class RewardLedgerProtocol(Protocol):
    """Protocol for the shared reward balance."""

    async def balance(self) -> Decimal:
        """Return the current balance."""
        ...

    async def deduct(self, amount: Decimal) -> Decimal:
        """Atomically deduct ``amount`` if the balance covers it.

        Returns:
            The balance after deduction.

        Raises:
            ValidationError: If amount is not positive.
            InsufficientFundsError: If amount exceeds the balance.
        """
        ...

    async def credit(self, amount: Decimal) -> Decimal:
        """Add ``amount`` to the balance and return the new balance.

        Raises:
            ValidationError: If amount is not positive.
        """
        ...
