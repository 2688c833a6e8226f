"""The ordered set of expense records for one trip, with aggregate queries."""

from collections.abc import Iterator
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from .models import ExpenseCategory, ExpenseRecord
from .money import Money

_KNOWN_CATEGORIES = {category.value for category in ExpenseCategory}


def category_bucket(category: str | None) -> str:
    """Map a stored category onto a known bucket, OTHER when unmatched or absent."""
    if not category:
        return ExpenseCategory.OTHER.value
    normalized = category.strip().upper()
    return normalized if normalized in _KNOWN_CATEGORIES else ExpenseCategory.OTHER.value


class Ledger(BaseModel):
    """An immutable, ordered collection of a trip's expenses."""

    model_config = ConfigDict(frozen=True)

    expenses: tuple[ExpenseRecord, ...] = ()

    def __iter__(self) -> Iterator[ExpenseRecord]:  # type: ignore[override]
        return iter(self.expenses)

    def append(self, expense: ExpenseRecord) -> "Ledger":
        """Return a new ledger with `expense` added at the end."""
        return Ledger(expenses=(*self.expenses, expense))

    def total_spent(self) -> Money:
        """Sum of all expense amounts; zero for an empty ledger."""
        return Money.sum(expense.amount for expense in self.expenses)

    def expenses_by_category(self) -> dict[str, Money]:
        """
        Total spend per category bucket.

        Buckets appear in order of first use in the ledger. Categories outside
        the known set are counted under OTHER.
        """
        totals: dict[str, Money] = {}
        for expense in self.expenses:
            bucket = category_bucket(expense.category)
            totals[bucket] = totals.get(bucket, Money.zero()) + expense.amount
        return totals

    def category_percentages(self) -> dict[str, Decimal]:
        """Each bucket's share of total spend, rounded to one decimal place."""
        total = self.total_spent()
        return {
            bucket: amount.percentage_of(total)
            for bucket, amount in self.expenses_by_category().items()
        }

    def expenses_for_member(self, member_id: str) -> list[ExpenseRecord]:
        """Expenses the member paid for or has a split in, in ledger order."""
        return [
            expense
            for expense in self.expenses
            if expense.payer_id == member_id or member_id in expense.participant_ids
        ]
