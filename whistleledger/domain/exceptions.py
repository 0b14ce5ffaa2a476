"""Base exception classes for the Whistle Ledger domain layer."""


class WhistleLedgerError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class.
    This enables consistent error handling across the application
    and a single translation point in the HTTP layer.

    Attributes:
        code: Stable machine-readable error code.
    """

    code: str = "ERROR"

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
