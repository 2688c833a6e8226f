"""Per-member net balances derived from a ledger and a membership snapshot."""

import logging
from collections.abc import Iterable

from .exceptions import UnbalancedLedgerError, UnknownMemberError
from .ledger import Ledger
from .models import Balance, Member, active_roster
from .money import Money

logger = logging.getLogger(__name__)


def compute_balances(ledger: Ledger, members: Iterable[Member]) -> dict[str, Balance]:
    """
    Compute one balance per active member, recomputed from scratch.

    Every active member appears in the result, including members with no
    activity (zero balance). Payers and split members must all be active
    members; an unknown reference fails instead of being skipped.

    Args:
        ledger: The trip's expenses
        members: Membership snapshot (inactive members are ignored)

    Returns:
        Mapping of member id to balance, in membership order

    Raises:
        UnknownMemberError: If an expense references a non-member
        UnbalancedLedgerError: If the nets don't sum to zero
    """
    roster = active_roster(members)

    paid = {member_id: 0 for member_id in roster}
    owed = {member_id: 0 for member_id in roster}

    for expense in ledger:
        if expense.payer_id not in roster:
            raise UnknownMemberError(
                expense.payer_id,
                f"Expense {expense.id} was paid by {expense.payer_id!r}, "
                f"who is not an active member of this trip",
            )
        paid[expense.payer_id] += expense.amount.cents

        for split in expense.splits:
            if split.member_id not in roster:
                raise UnknownMemberError(
                    split.member_id,
                    f"Expense {expense.id} is split with {split.member_id!r}, "
                    f"who is not an active member of this trip",
                )
            owed[split.member_id] += split.amount.cents

    balances = {
        member_id: Balance(
            member_id=member_id,
            display_name=member.display_name,
            total_paid=Money(cents=paid[member_id]),
            total_owed=Money(cents=owed[member_id]),
        )
        for member_id, member in roster.items()
    }

    # Conservation: every cent paid is owed by someone
    residual = Money.sum(balance.net for balance in balances.values())
    if not residual.is_zero():
        raise UnbalancedLedgerError(residual)

    logger.debug(
        f"Computed balances for {len(balances)} members "
        f"over {len(ledger.expenses)} expenses"
    )

    return balances
