"""Configuration module for Whistle Ledger."""

from whistleledger.config.case_config import (
    DEFAULT_LIFECYCLE_CONFIG,
    DEFAULT_REWARD_CONFIG,
    LifecycleConfig,
    RewardConfig,
    get_environment,
)

__all__ = [
    "DEFAULT_LIFECYCLE_CONFIG",
    "DEFAULT_REWARD_CONFIG",
    "LifecycleConfig",
    "RewardConfig",
    "get_environment",
]
