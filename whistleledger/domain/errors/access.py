"""Access errors raised by the capability check."""

from __future__ import annotations

from whistleledger.domain.exceptions import WhistleLedgerError


class ForbiddenError(WhistleLedgerError):
    """Raised when the caller's role or identity does not satisfy an actor guard.

    Examples: a whistleblower attempting to assign a case, an investigator
    who is not the assignee attempting to complete it, or the previous
    investigator of a reopened case attempting to pick it up again.

    Attributes:
        caller_id: Identity of the rejected caller.
        action: The operation that was attempted.
    """

    code = "FORBIDDEN"

    def __init__(self, caller_id: str, action: str, message: str | None = None) -> None:
        self.caller_id = caller_id
        self.action = action
        super().__init__(message or f"Caller {caller_id} is not permitted to {action}")
