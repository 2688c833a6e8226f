"""Settlement planning: the fewest pairwise transfers that zero every balance."""

import logging
from collections.abc import Iterable, Mapping

from .exceptions import UnbalancedLedgerError
from .models import Balance, Transfer
from .money import Money

logger = logging.getLogger(__name__)


def _by_magnitude(entries: list[tuple[str, int]]) -> list[tuple[str, int]]:
    """Largest amount first; equal amounts ordered by member id."""
    return sorted(entries, key=lambda entry: (-entry[1], entry[0]))


def plan_settlement(
    balances: Mapping[str, Balance] | Iterable[Balance],
) -> list[Transfer]:
    """
    Compute a settlement plan using greedy debtor/creditor matching.

    Steps:
    1. Split members into debtors (net > 0) and creditors (net < 0)
    2. Sort both sides by magnitude, largest first, ties by member id
    3. Pair the current debtor with the current creditor and transfer the
       smaller of their remaining amounts
    4. Advance past whichever side reaches zero (both, if both do)

    Each transfer zeroes at least one member, so n members with a nonzero
    net need at most n - 1 transfers.

    Args:
        balances: Balances to settle (mapping from compute_balances, or any iterable)

    Returns:
        Ordered list of transfers; empty when everyone is already square

    Raises:
        UnbalancedLedgerError: If the nets don't sum to zero
    """
    if isinstance(balances, Mapping):
        balances = balances.values()
    balances = list(balances)

    residual = Money.sum(balance.net for balance in balances)
    if not residual.is_zero():
        raise UnbalancedLedgerError(residual)

    debtors = _by_magnitude(
        [(b.member_id, b.net.cents) for b in balances if b.net.is_positive()]
    )
    creditors = _by_magnitude(
        [(b.member_id, -b.net.cents) for b in balances if b.net.is_negative()]
    )

    debt_left = [amount for _, amount in debtors]
    credit_left = [amount for _, amount in creditors]

    transfers: list[Transfer] = []
    i = 0
    j = 0

    while i < len(debtors) and j < len(creditors):
        amount = min(debt_left[i], credit_left[j])

        transfer = Transfer(
            from_member_id=debtors[i][0],
            to_member_id=creditors[j][0],
            amount=Money(cents=amount),
        )
        transfers.append(transfer)
        logger.debug(
            f"Transfer {transfer.amount} from {transfer.from_member_id} "
            f"to {transfer.to_member_id}"
        )

        debt_left[i] -= amount
        credit_left[j] -= amount

        if debt_left[i] == 0:
            i += 1
        if credit_left[j] == 0:
            j += 1

    # Zero residual guarantees both sides run out together
    assert i == len(debtors) and j == len(creditors), "Settlement left balances open"

    return transfers
