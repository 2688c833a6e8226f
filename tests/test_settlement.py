"""Tests for settlement planning."""

from collections import defaultdict

import pytest

from trip_ledger.exceptions import UnbalancedLedgerError
from trip_ledger.models import Balance, Transfer
from trip_ledger.money import Money
from trip_ledger.settlement import plan_settlement


def balance(member_id: str, net: str) -> Balance:
    """Build a balance with the given net (positive owes, negative is owed)."""
    amount = Money.from_decimal(net)
    return Balance(
        member_id=member_id,
        display_name=member_id.upper(),
        total_paid=-amount if amount.is_negative() else Money.zero(),
        total_owed=amount if amount.is_positive() else Money.zero(),
    )


def apply_transfers(balances: list[Balance], transfers: list[Transfer]) -> dict[str, int]:
    """Apply every transfer to the nets; a correct plan leaves all at zero."""
    remaining = defaultdict(int, {b.member_id: b.net.cents for b in balances})
    for transfer in transfers:
        remaining[transfer.from_member_id] -= transfer.amount.cents
        remaining[transfer.to_member_id] += transfer.amount.cents
    return dict(remaining)


class TestPlanSettlement:
    """Greedy debtor/creditor matching."""

    def test_single_creditor(self):
        """B and C each pay A $30.00, B first (tie broken by id)."""
        balances = [balance("a", "-60.00"), balance("b", "30.00"), balance("c", "30.00")]

        transfers = plan_settlement(balances)

        assert transfers == [
            Transfer(from_member_id="b", to_member_id="a", amount=Money.from_decimal("30.00")),
            Transfer(from_member_id="c", to_member_id="a", amount=Money.from_decimal("30.00")),
        ]

    def test_largest_debtor_pays_largest_creditor_first(self):
        balances = [
            balance("a", "-10.00"),
            balance("b", "-50.00"),
            balance("c", "45.00"),
            balance("d", "15.00"),
        ]

        transfers = plan_settlement(balances)

        assert [(t.from_member_id, t.to_member_id, str(t.amount)) for t in transfers] == [
            ("c", "b", "$45.00"),
            ("d", "b", "$5.00"),
            ("d", "a", "$10.00"),
        ]

    def test_accepts_mapping(self):
        balances = {"a": balance("a", "-1.00"), "b": balance("b", "1.00")}

        assert plan_settlement(balances) == [
            Transfer(from_member_id="b", to_member_id="a", amount=Money(cents=100))
        ]

    def test_all_zero(self):
        """Everyone square: no transfers, not an error."""
        balances = [balance("a", "0"), balance("b", "0")]

        assert plan_settlement(balances) == []

    def test_no_members(self):
        assert plan_settlement([]) == []

    def test_single_nonzero_balance(self):
        """One nonzero balance means corrupted input."""
        with pytest.raises(UnbalancedLedgerError):
            plan_settlement([balance("a", "10.00"), balance("b", "0")])

    def test_nets_not_summing_to_zero(self):
        with pytest.raises(UnbalancedLedgerError) as exc_info:
            plan_settlement([balance("a", "10.00"), balance("b", "-9.99")])

        assert exc_info.value.residual == Money(cents=1)


class TestSettlementProperties:
    """Correctness, minimality and determinism."""

    @pytest.fixture
    def balances(self):
        return [
            balance("ann", "-123.45"),
            balance("ben", "67.89"),
            balance("cat", "-0.01"),
            balance("dev", "40.00"),
            balance("eli", "15.57"),
            balance("fay", "0"),
        ]

    def test_applying_transfers_zeroes_everyone(self, balances):
        transfers = plan_settlement(balances)

        assert set(apply_transfers(balances, transfers).values()) == {0}

    def test_at_most_n_minus_one_transfers(self, balances):
        nonzero = [b for b in balances if not b.net.is_zero()]

        assert len(plan_settlement(balances)) <= len(nonzero) - 1

    def test_total_transferred_equals_total_debt(self, balances):
        transfers = plan_settlement(balances)
        debt = Money.sum(b.net for b in balances if b.net.is_positive())

        assert Money.sum(t.amount for t in transfers) == debt

    def test_all_transfers_positive_and_directional(self, balances):
        debtors = {b.member_id for b in balances if b.net.is_positive()}
        creditors = {b.member_id for b in balances if b.net.is_negative()}

        for transfer in plan_settlement(balances):
            assert transfer.amount.is_positive()
            assert transfer.from_member_id in debtors
            assert transfer.to_member_id in creditors

    def test_deterministic_regardless_of_input_order(self, balances):
        """Identical balances give the identical plan, in any input order."""
        assert plan_settlement(balances) == plan_settlement(list(reversed(balances)))

    def test_equal_magnitudes_ordered_by_id(self):
        balances = [
            balance("z", "5.00"),
            balance("m", "5.00"),
            balance("y", "-5.00"),
            balance("n", "-5.00"),
        ]

        transfers = plan_settlement(balances)

        assert [(t.from_member_id, t.to_member_id) for t in transfers] == [
            ("m", "n"),
            ("z", "y"),
        ]
