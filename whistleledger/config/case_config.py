"""Case management configuration.

Configuration for the reward balance, reward payouts and the report
lifecycle, with environment variable overrides.

Environment Variables (Reward):
- MANAGEMENT_REWARD_BALANCE: Opening reward balance (default: 1000)
- REWARD_AMOUNT: Amount paid on two-tier completion (default: 100)
- REWARD_CURRENCY: Currency symbol sent to the payout gateway (default: BTC)

Environment Variables (Lifecycle):
- REPORT_LIFECYCLE_VARIANT: "four_tier" or "two_tier" (default: four_tier)
- MASKED_ID_LENGTH: Characters of the report id shown in the masked id
  (default: 8)

Environment Variables (Runtime):
- ENVIRONMENT: "production" selects JSON logs (default: development)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from whistleledger.domain.models.report import LifecycleVariant


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_decimal_env(key: str, default: Decimal) -> Decimal:
    """Get decimal environment variable with default.

    Non-numeric and non-finite values fall back to ``default``.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        parsed = Decimal(value.strip())
    except InvalidOperation:
        return default
    if not parsed.is_finite():
        return default
    return parsed


@dataclass(frozen=True)
class RewardConfig:
    """Configuration for reward settlement.

    Attributes:
        initial_balance: Opening balance of the shared reward ledger.
        reward_amount: Fixed amount paid when a two-tier report completes.
        currency: Currency symbol passed to the payout gateway.
    """

    initial_balance: Decimal = Decimal("1000")
    reward_amount: Decimal = Decimal("100")
    currency: str = "BTC"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.initial_balance < 0:
            raise ValueError(
                f"initial_balance must be non-negative, got {self.initial_balance}"
            )
        if self.reward_amount <= 0:
            raise ValueError(f"reward_amount must be positive, got {self.reward_amount}")
        if not self.currency.strip():
            raise ValueError("currency must not be empty")

    @classmethod
    def from_environment(cls) -> RewardConfig:
        """Create config from environment variables with defaults."""
        return cls(
            initial_balance=_get_decimal_env(
                "MANAGEMENT_REWARD_BALANCE", Decimal("1000")
            ),
            reward_amount=_get_decimal_env("REWARD_AMOUNT", Decimal("100")),
            currency=os.environ.get("REWARD_CURRENCY", "BTC"),
        )


@dataclass(frozen=True)
class LifecycleConfig:
    """Configuration for the report lifecycle.

    Attributes:
        variant: Lifecycle applied to every report in the deployment.
        masked_id_length: Length of the id prefix used in masked ids.
    """

    variant: LifecycleVariant = LifecycleVariant.FOUR_TIER
    masked_id_length: int = 8

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not 4 <= self.masked_id_length <= 32:
            raise ValueError(
                f"masked_id_length must be between 4 and 32, got {self.masked_id_length}"
            )

    @classmethod
    def from_environment(cls) -> LifecycleConfig:
        """Create config from environment variables with defaults.

        Raises:
            ValueError: If REPORT_LIFECYCLE_VARIANT names an unknown variant.
        """
        raw_variant = os.environ.get(
            "REPORT_LIFECYCLE_VARIANT", LifecycleVariant.FOUR_TIER.value
        )
        return cls(
            variant=LifecycleVariant(raw_variant.strip().lower()),
            masked_id_length=_get_int_env("MASKED_ID_LENGTH", 8),
        )


def get_environment() -> str:
    """Return the deployment environment name (default: development)."""
    return os.environ.get("ENVIRONMENT", "development").strip().lower()


DEFAULT_REWARD_CONFIG = RewardConfig()
DEFAULT_LIFECYCLE_CONFIG = LifecycleConfig()
