"""Custom exceptions for Trip Ledger.

None of these derive from ValueError, so raising them inside a pydantic
validator propagates the exception itself instead of a ValidationError.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .money import Money


class TripLedgerError(Exception):
    """Base exception for all Trip Ledger errors."""

    pass


class ConfigurationError(TripLedgerError):
    """Raised when configuration is invalid or missing."""

    pass


class SnapshotError(TripLedgerError):
    """Raised when a trip snapshot cannot be read or does not match the schema."""

    pass


# ============================================================================
# Validation errors (user-actionable)
# ============================================================================


class ExpenseValidationError(TripLedgerError):
    """Base class for errors caused by bad expense input."""

    pass


class EmptyParticipantsError(ExpenseValidationError):
    """Raised when an expense is split among nobody."""

    def __init__(self, message: str | None = None):
        super().__init__(message or "An expense must be split among at least one member")


class DuplicateParticipantError(ExpenseValidationError):
    """Raised when the same member appears twice in a split or membership list."""

    def __init__(self, member_id: str, message: str | None = None):
        self.member_id = member_id
        super().__init__(message or f"Member {member_id!r} is listed more than once")


class UnknownMemberError(ExpenseValidationError):
    """Raised when a member id is not part of the active membership snapshot."""

    def __init__(self, member_id: str, message: str | None = None):
        self.member_id = member_id
        super().__init__(
            message or f"Member {member_id!r} is not an active member of this trip"
        )


class SplitMismatchError(ExpenseValidationError):
    """Raised when split amounts don't add up to the expense total."""

    def __init__(self, expected: Money, actual: Money, message: str | None = None):
        self.expected = expected
        self.actual = actual
        self.discrepancy = actual - expected
        super().__init__(
            message
            or f"Splits sum to {actual}, expected {expected} "
            f"(off by {abs(self.discrepancy)})"
        )


class InvalidAmountError(ExpenseValidationError):
    """Raised when an amount is not positive or has sub-cent precision."""

    pass


class InvalidExpenseError(ExpenseValidationError):
    """Raised when an expense field (description, category) is malformed."""

    pass


# ============================================================================
# Invariant violations (not user-actionable)
# ============================================================================


class UnbalancedLedgerError(TripLedgerError):
    """Raised when net balances don't sum to zero.

    This signals corrupted upstream data or a bug, never bad user input.
    """

    def __init__(self, residual: Money, message: str | None = None):
        self.residual = residual
        super().__init__(
            message or f"Net balances do not sum to zero (residual {residual})"
        )
