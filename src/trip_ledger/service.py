"""Service layer that composes splitting, balances and settlement.

The functions here are pure: every call recomputes from the ledger and
membership snapshot it is given and keeps no state between calls, so
concurrent calls on consistent snapshots cannot interfere. Serializing writes
to the ledger itself is the caller's job.
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from .balances import compute_balances
from .config import Settings
from .exceptions import UnbalancedLedgerError
from .ledger import Ledger
from .models import BalanceSheet, ExpenseRecord, Member
from .money import Money
from .settlement import plan_settlement
from .splitting import Shares, create_expense

logger = logging.getLogger(__name__)


def compute_balance_sheet(ledger: Ledger, members: Sequence[Member]) -> BalanceSheet:
    """
    Build the full balance sheet for a trip.

    Args:
        ledger: The trip's expenses
        members: Membership snapshot (inactive members are ignored)

    Returns:
        Totals, per-member balances, settlement plan and category breakdown

    Raises:
        UnknownMemberError: If an expense references a non-member
        DuplicateParticipantError: If the membership snapshot repeats an id
        UnbalancedLedgerError: If the ledger breaks money conservation
    """
    try:
        balances = compute_balances(ledger, members)
        settlement = plan_settlement(balances)
    except UnbalancedLedgerError as e:
        logger.error(
            f"Ledger with {len(ledger.expenses)} expenses is unbalanced: {e}"
        )
        raise

    sheet = BalanceSheet(
        total_spent=ledger.total_spent(),
        member_count=len(balances),
        per_member_balance=balances,
        settlement=tuple(settlement),
        category_breakdown=ledger.expenses_by_category(),
        category_percentages=ledger.category_percentages(),
    )

    logger.info(
        f"Computed balance sheet: {len(ledger.expenses)} expenses, "
        f"{sheet.member_count} members, total {sheet.total_spent}, "
        f"{len(settlement)} transfer(s) to settle"
    )

    return sheet


class ExpenseService:
    """Entry point for the API layer: creates expenses and balance sheets."""

    def __init__(self, settings: Settings):
        """Initialize the expense service."""
        self.settings = settings

    def create_expense(
        self,
        total_amount: Money,
        payer_id: str,
        shares: Shares,
        category: str | None,
        members: Sequence[Member],
        *,
        description: str = "",
        expense_id: str | None = None,
        created_at: datetime | None = None,
    ) -> ExpenseRecord:
        """Create an expense, defaulting the category from settings."""
        return create_expense(
            total_amount,
            payer_id,
            shares,
            category,
            members,
            description=description,
            expense_id=expense_id,
            created_at=created_at,
            default_category=self.settings.default_category,
        )

    def add_expense(
        self,
        ledger: Ledger,
        total_amount: Money,
        payer_id: str,
        shares: Shares,
        category: str | None,
        members: Sequence[Member],
        *,
        description: str = "",
    ) -> tuple[Ledger, ExpenseRecord]:
        """
        Create an expense and return it together with the extended ledger.

        The original ledger is left untouched.
        """
        expense = self.create_expense(
            total_amount, payer_id, shares, category, members, description=description
        )
        return ledger.append(expense), expense

    def compute_balance_sheet(
        self, ledger: Ledger, members: Sequence[Member]
    ) -> BalanceSheet:
        """Build the balance sheet for a trip."""
        return compute_balance_sheet(ledger, members)
