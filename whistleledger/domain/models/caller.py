"""Caller identity resolved by the upstream auth collaborator.

Token issuance and verification live outside this package. Every
operation receives an already-resolved Caller carrying an id, a display
name and a role.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Sender identity used for chat messages from anonymous reporters
ANONYMOUS_WHISTLEBLOWER_ID: str = "whistleblower"


class CallerRole(str, Enum):
    """Role of the caller.

    Roles:
        WHISTLEBLOWER: Reporter, usually anonymous
        INVESTIGATOR: Case investigator
        MANAGEMENT: Oversight (closure, reopen, reward payout)
        ADMIN: Read-only system administration
    """

    WHISTLEBLOWER = "whistleblower"
    INVESTIGATOR = "investigator"
    MANAGEMENT = "management"
    ADMIN = "admin"


@dataclass(frozen=True, eq=True)
class Caller:
    """Resolved caller identity.

    Attributes:
        id: Stable identity (e.g. "investigator1").
        role: Caller role.
        name: Display name, defaults to the id.
    """

    id: str
    role: CallerRole
    name: str = field(default="")

    def __post_init__(self) -> None:
        """Validate caller fields."""
        if not self.id or not self.id.strip():
            raise ValueError("Caller id must not be empty")
        if not self.name:
            object.__setattr__(self, "name", self.id)

    @classmethod
    def anonymous_whistleblower(cls) -> Caller:
        """Return the caller used for unauthenticated reporter requests."""
        return cls(
            id=ANONYMOUS_WHISTLEBLOWER_ID,
            role=CallerRole.WHISTLEBLOWER,
            name="Anonymous",
        )
