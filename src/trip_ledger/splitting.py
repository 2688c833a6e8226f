"""Split distribution: turning a total and a set of participants into exact splits."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime

from .exceptions import (
    DuplicateParticipantError,
    EmptyParticipantsError,
    InvalidAmountError,
    InvalidExpenseError,
    SplitMismatchError,
    UnknownMemberError,
)
from .models import ExpenseCategory, ExpenseRecord, Member, Split, active_roster
from .money import Money

logger = logging.getLogger(__name__)

MAX_CATEGORY_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 200

Shares = Sequence[str] | Sequence[Split] | Mapping[str, Money]


def normalize_category(
    category: str | None, default: str = ExpenseCategory.OTHER.value
) -> str:
    """
    Normalize a category label for storage.

    Args:
        category: The raw category from the caller (may be None or blank)
        default: Category used when none is given

    Returns:
        Stripped, upper-cased category

    Raises:
        InvalidExpenseError: If the category is longer than 50 characters
    """
    if category is None or not category.strip():
        return default.strip().upper()

    normalized = category.strip().upper()
    if len(normalized) > MAX_CATEGORY_LENGTH:
        raise InvalidExpenseError(
            f"Category is too long ({len(normalized)} > {MAX_CATEGORY_LENGTH} characters)"
        )
    return normalized


def _check_participants(
    member_ids: Iterable[str], roster: Mapping[str, Member]
) -> set[str]:
    """Reject empty, duplicate and unknown participant ids."""
    chosen: set[str] = set()
    for member_id in member_ids:
        if member_id in chosen:
            raise DuplicateParticipantError(member_id)
        if member_id not in roster:
            raise UnknownMemberError(member_id)
        chosen.add(member_id)

    if not chosen:
        raise EmptyParticipantsError()

    return chosen


def split_equally(
    amount: Money, participant_ids: Sequence[str], members: Iterable[Member]
) -> list[Split]:
    """
    Split `amount` equally among `participant_ids`.

    Shares are laid out in membership order and the leftover cents go to the
    earliest members in that order, so $100.00 across three members is
    [$33.34, $33.33, $33.33] regardless of the order the ids were passed in.

    Raises:
        EmptyParticipantsError: If no participants are given
        DuplicateParticipantError: If a participant is listed twice
        UnknownMemberError: If a participant is not an active member
    """
    roster = active_roster(members)
    chosen = _check_participants(participant_ids, roster)

    ordered_ids = [member_id for member_id in roster if member_id in chosen]
    shares = amount.distribute(len(ordered_ids))

    return [
        Split(member_id=member_id, amount=share)
        for member_id, share in zip(ordered_ids, shares, strict=True)
    ]


def validate_explicit_splits(
    amount: Money,
    splits: Sequence[Split] | Mapping[str, Money],
    members: Iterable[Member],
) -> list[Split]:
    """
    Validate caller-supplied per-member amounts against the expense total.

    Unlike a float comparison, there is no tolerance: a single cent off is a
    mismatch.

    Returns:
        The splits in membership order

    Raises:
        EmptyParticipantsError: If no splits are given
        DuplicateParticipantError: If a member has two splits
        UnknownMemberError: If a split names a non-member
        InvalidAmountError: If a split amount is zero or negative
        SplitMismatchError: If the splits don't sum to exactly `amount`
    """
    roster = active_roster(members)

    if isinstance(splits, Mapping):
        pairs = [Split(member_id=mid, amount=share) for mid, share in splits.items()]
    else:
        pairs = list(splits)

    _check_participants((split.member_id for split in pairs), roster)

    for split in pairs:
        if not split.amount.is_positive():
            raise InvalidAmountError(
                f"Split amount for member {split.member_id!r} must be positive, "
                f"got {split.amount}"
            )

    split_total = Money.sum(split.amount for split in pairs)
    if split_total != amount:
        raise SplitMismatchError(expected=amount, actual=split_total)

    by_member = {split.member_id: split for split in pairs}
    return [by_member[member_id] for member_id in roster if member_id in by_member]


def create_expense(
    total_amount: Money,
    payer_id: str,
    shares: Shares,
    category: str | None,
    members: Sequence[Member],
    *,
    description: str = "",
    expense_id: str | None = None,
    created_at: datetime | None = None,
    default_category: str = ExpenseCategory.OTHER.value,
) -> ExpenseRecord:
    """
    Create an expense record with exact splits.

    `shares` selects the split policy:
    - a sequence of member ids splits the total equally among them
    - a mapping of member id to Money, or a sequence of Split, is taken as
      explicit per-member amounts and must sum to the total exactly

    Args:
        total_amount: What the payer spent
        payer_id: Member who paid
        shares: Participants or explicit splits (see above)
        category: Expense category; blank means `default_category`
        members: Membership snapshot; only active members may take part
        description: Free-text description
        expense_id: Identifier from the caller's storage (a UUID when omitted)
        created_at: Creation time (now, in UTC, when omitted)
        default_category: Category used when none is given

    Returns:
        The new expense record

    Raises:
        ExpenseValidationError: Any of its subclasses, naming the specific reason
    """
    if not total_amount.is_positive():
        raise InvalidAmountError(f"Expense amount must be positive, got {total_amount}")

    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise InvalidExpenseError(
            f"Description is too long "
            f"({len(description)} > {MAX_DESCRIPTION_LENGTH} characters)"
        )

    members = list(members)
    roster = active_roster(members)
    if payer_id not in roster:
        raise UnknownMemberError(payer_id)

    if isinstance(shares, str):
        raise InvalidExpenseError(
            "Participants must be a list of member ids, not a single string"
        )

    if not isinstance(shares, Mapping):
        # One-shot iterables must survive the policy check below
        shares = list(shares)

    if isinstance(shares, Mapping) or (
        shares and all(isinstance(share, Split) for share in shares)
    ):
        splits = validate_explicit_splits(total_amount, shares, members)  # type: ignore[arg-type]
        policy = "explicit"
    else:
        splits = split_equally(total_amount, shares, members)  # type: ignore[arg-type]
        policy = "equal"

    fields: dict = {
        "payer_id": payer_id,
        "amount": total_amount,
        "category": normalize_category(category, default_category),
        "description": description.strip(),
        "splits": splits,
    }
    if expense_id is not None:
        fields["id"] = expense_id
    if created_at is not None:
        fields["created_at"] = created_at

    expense = ExpenseRecord(**fields)

    logger.info(
        f"Created expense {expense.id}: {total_amount} paid by {payer_id}, "
        f"{policy} split across {len(splits)} member(s)"
    )

    return expense
