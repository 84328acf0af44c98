"""Mini README: Error taxonomy shared by the ledger and its interfaces.

Every error raised by a ledger operation derives from ``BillingError`` and is
recoverable by the user: interfaces show ``str(error)`` as a transient
message and carry on. A failed operation never leaves a partial mutation
behind.
"""

from __future__ import annotations


class BillingError(Exception):
    """Base class for user-facing billing failures."""


class ValidationError(BillingError):
    """Raised when form input is missing or malformed."""


class InvalidAmount(ValidationError):
    """Raised when a payment amount is not a positive number."""


class UnknownUtility(BillingError):
    """Raised when a utility identifier is not registered."""

    def __init__(self, utility_id: str) -> None:
        super().__init__(f"Utility '{utility_id}' not found")
        self.utility_id = utility_id


class InsufficientDue(BillingError):
    """Raised when a payment exceeds the outstanding balance."""

    def __init__(self, amount: float, balance: float) -> None:
        super().__init__(
            f"Amount {amount:,.2f} exceeds outstanding balance {balance:,.2f}"
        )
        self.amount = amount
        self.balance = balance


class SplitNotFound(BillingError):
    """Raised when a split identifier is not registered."""

    def __init__(self, split_id: int) -> None:
        super().__init__(f"Split {split_id} not found")
        self.split_id = split_id


class IndexOutOfRange(BillingError):
    """Raised when a participant position does not exist within a split."""

    def __init__(self, split_id: int, index: int) -> None:
        super().__init__(f"Split {split_id} has no participant at position {index}")
        self.split_id = split_id
        self.index = index


class StorageError(Exception):
    """Raised by storage backends when a slot cannot be read or decoded."""
