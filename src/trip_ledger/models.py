"""Pydantic domain models for Trip Ledger."""

from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import Decimal
from enum import StrEnum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from .exceptions import (
    DuplicateParticipantError,
    EmptyParticipantsError,
    InvalidAmountError,
    SplitMismatchError,
)
from .money import Money


class ExpenseCategory(StrEnum):
    """Categories the trip UI offers; anything else is reported as OTHER."""

    FOOD = "FOOD"
    TRANSPORT = "TRANSPORT"
    ACCOMMODATION = "ACCOMMODATION"
    ACTIVITIES = "ACTIVITIES"
    SHOPPING = "SHOPPING"
    OTHER = "OTHER"


# ============================================================================
# Input Models
# ============================================================================


class Member(BaseModel):
    """A trip participant from the membership snapshot."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    is_active: bool = True  # accepted invitation


def active_roster(members: Iterable[Member]) -> dict[str, Member]:
    """
    Index the active members of a snapshot by id, keeping snapshot order.

    Raises:
        DuplicateParticipantError: If two snapshot entries share an id
    """
    roster: dict[str, Member] = {}
    seen: set[str] = set()
    for member in members:
        if member.id in seen:
            raise DuplicateParticipantError(
                member.id, f"Member {member.id!r} appears twice in the membership list"
            )
        seen.add(member.id)
        if member.is_active:
            roster[member.id] = member
    return roster


class Split(BaseModel):
    """The portion of one expense attributed to one member."""

    model_config = ConfigDict(frozen=True)

    member_id: str
    amount: Money


class ExpenseRecord(BaseModel):
    """A single expense paid by one member and split across several.

    Construction enforces a positive amount, at least one split, one split per
    member and sum(splits) == amount to the cent, so records loaded from
    storage fail just as fast as freshly created ones.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    payer_id: str
    amount: Money
    category: str = ExpenseCategory.OTHER.value
    description: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    splits: tuple[Split, ...]

    @model_validator(mode="after")
    def check_splits_cover_amount(self) -> "ExpenseRecord":
        if not self.amount.is_positive():
            raise InvalidAmountError(
                f"Expense {self.id} amount must be positive, got {self.amount}"
            )
        if not self.splits:
            raise EmptyParticipantsError(f"Expense {self.id} has no splits")

        seen: set[str] = set()
        for split in self.splits:
            if split.member_id in seen:
                raise DuplicateParticipantError(split.member_id)
            seen.add(split.member_id)

        split_total = Money.sum(split.amount for split in self.splits)
        if split_total != self.amount:
            raise SplitMismatchError(expected=self.amount, actual=split_total)
        return self

    @property
    def participant_ids(self) -> list[str]:
        return [split.member_id for split in self.splits]


# ============================================================================
# Derived Models
# ============================================================================


class Balance(BaseModel):
    """One member's standing across the whole ledger.

    Positive net means the member owes into the pool; negative means the
    member is owed money.
    """

    model_config = ConfigDict(frozen=True)

    member_id: str
    display_name: str
    total_paid: Money
    total_owed: Money

    @computed_field  # type: ignore[prop-decorator]
    @property
    def net(self) -> Money:
        return self.total_owed - self.total_paid


class Transfer(BaseModel):
    """A single settlement payment from a debtor to a creditor."""

    model_config = ConfigDict(frozen=True)

    from_member_id: str
    to_member_id: str
    amount: Money


class BalanceSheet(BaseModel):
    """Everything the presentation layer needs to show a trip's money state.

    Pure output: recomputed from the ledger and membership on every request.
    """

    model_config = ConfigDict(frozen=True)

    total_spent: Money
    member_count: int
    per_member_balance: dict[str, Balance]  # membership order
    settlement: tuple[Transfer, ...]
    category_breakdown: dict[str, Money]
    category_percentages: dict[str, Decimal]
