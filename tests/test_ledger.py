"""Tests for Ledger aggregate queries."""

from decimal import Decimal

import pytest

from trip_ledger.ledger import Ledger, category_bucket
from trip_ledger.models import ExpenseRecord, Split
from trip_ledger.money import Money


def make_expense(id: str, amount: str, category: str = "OTHER", payer: str = "a"):
    """Create an expense split entirely to member b."""
    money = Money.from_decimal(amount)
    return ExpenseRecord(
        id=id,
        payer_id=payer,
        amount=money,
        category=category,
        splits=[Split(member_id="b", amount=money)],
    )


@pytest.fixture
def ledger():
    return Ledger(
        expenses=(
            make_expense("1", "40.00", "FOOD"),
            make_expense("2", "25.50", "TRANSPORT"),
            make_expense("3", "10.00", "FOOD"),
            make_expense("4", "24.50", "SOUVENIRS"),
        )
    )


class TestTotals:
    """total_spent()."""

    def test_total_spent(self, ledger):
        assert ledger.total_spent() == Money.from_decimal("100.00")

    def test_empty_ledger_is_zero(self):
        """An empty ledger yields zero, not an error."""
        assert Ledger().total_spent() == Money.zero()

    def test_order_independent(self, ledger):
        reversed_ledger = Ledger(expenses=tuple(reversed(ledger.expenses)))
        assert reversed_ledger.total_spent() == ledger.total_spent()


class TestExpensesByCategory:
    """expenses_by_category() and category_percentages()."""

    def test_groups_by_category(self, ledger):
        assert ledger.expenses_by_category() == {
            "FOOD": Money.from_decimal("50.00"),
            "TRANSPORT": Money.from_decimal("25.50"),
            "OTHER": Money.from_decimal("24.50"),
        }

    def test_unknown_category_goes_to_other(self):
        ledger = Ledger(
            expenses=(
                make_expense("1", "5.00", "souvenirs"),
                make_expense("2", "5.00", "OTHER"),
            )
        )
        assert ledger.expenses_by_category() == {"OTHER": Money.from_decimal("10.00")}

    def test_empty_ledger(self):
        assert Ledger().expenses_by_category() == {}
        assert Ledger().category_percentages() == {}

    def test_percentages(self, ledger):
        assert ledger.category_percentages() == {
            "FOOD": Decimal("50.0"),
            "TRANSPORT": Decimal("25.5"),
            "OTHER": Decimal("24.5"),
        }

    @pytest.mark.parametrize(
        "raw,bucket",
        [
            ("FOOD", "FOOD"),
            (" accommodation ", "ACCOMMODATION"),
            ("Activities", "ACTIVITIES"),
            ("", "OTHER"),
            (None, "OTHER"),
            ("GAS", "OTHER"),
        ],
    )
    def test_category_bucket(self, raw, bucket):
        assert category_bucket(raw) == bucket


class TestLedgerCollection:
    """Immutability and iteration."""

    def test_append_returns_new_ledger(self, ledger):
        extra = make_expense("5", "1.00")
        extended = ledger.append(extra)

        assert len(extended.expenses) == 5
        assert len(ledger.expenses) == 4
        assert list(extended)[-1] == extra

    def test_empty_ledger_is_truthy(self):
        """An empty ledger is still a ledger, like any other model."""
        assert Ledger()
        assert bool(Ledger(expenses=())) is True

    def test_iterates_in_order(self, ledger):
        assert [expense.id for expense in ledger] == ["1", "2", "3", "4"]

    def test_expenses_for_member(self):
        ledger = Ledger(
            expenses=(
                make_expense("1", "5.00", payer="a"),
                make_expense("2", "5.00", payer="c"),
            )
        )

        assert [e.id for e in ledger.expenses_for_member("a")] == ["1"]
        assert [e.id for e in ledger.expenses_for_member("b")] == ["1", "2"]
        assert ledger.expenses_for_member("z") == []
