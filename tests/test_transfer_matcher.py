"""
Unit Tests for Transfer Matcher

The matcher works on plain balances, so these tests use synthetic balance
sets without going through the share computation.
"""

import random
from decimal import Decimal

import pytest

from splitter.calculators.matching import DEFAULT_TOLERANCE, TransferMatcher
from splitter.models import Balance, Transfer


def make_balances(*pairs):
    """make_balances(("A", 10), ("B", -10)) → list of Balance"""
    return [Balance(name=name, alias=f"{name.lower()}.pay", amount=Decimal(str(amount))) for name, amount in pairs]


def routes(transfers):
    return [(t.from_name, t.to_name, t.display_amount) for t in transfers]


class TestBasicMatching:
    """Test simple creditor/debtor pairings."""

    @pytest.fixture
    def matcher(self):
        return TransferMatcher()

    def test_single_pair(self, matcher):
        transfers = matcher.match(make_balances(("A", 10), ("B", -10)))

        assert transfers == [Transfer(from_name="B", to_name="A", alias="a.pay", amount=Decimal("10"))]

    def test_one_creditor_two_debtors(self, matcher):
        """One creditor cannot be paid by a single debtor."""
        transfers = matcher.match(make_balances(("A", 60), ("B", -30), ("C", -30)))

        assert routes(transfers) == [("B", "A", "30.00"), ("C", "A", "30.00")]

    def test_two_creditors_one_debtor(self, matcher):
        transfers = matcher.match(make_balances(("A", 20), ("B", 10), ("C", -30)))

        assert routes(transfers) == [("C", "A", "20.00"), ("C", "B", "10.00")]

    def test_alias_is_the_receivers(self, matcher):
        transfers = matcher.match(make_balances(("A", -5), ("B", 5)))

        assert transfers[0].alias == "b.pay"

    def test_no_balances(self, matcher):
        assert matcher.match([]) == []

    def test_only_zero_balances(self, matcher):
        """Exactly-zero balances are left out before matching."""
        assert matcher.match(make_balances(("A", 0), ("B", 0))) == []


class TestMatchingOrder:
    """Test largest-first ordering and stable tie-breaking."""

    @pytest.fixture
    def matcher(self):
        return TransferMatcher()

    def test_largest_debtor_pays_first(self, matcher):
        transfers = matcher.match(make_balances(("A", 50), ("B", -10), ("C", -40)))

        assert routes(transfers) == [("C", "A", "40.00"), ("B", "A", "10.00")]

    def test_largest_creditor_is_paid_first(self, matcher):
        transfers = matcher.match(make_balances(("A", 10), ("B", 40), ("C", -50)))

        assert routes(transfers) == [("C", "B", "40.00"), ("C", "A", "10.00")]

    def test_ties_keep_roster_order(self, matcher):
        """Equal balances are matched in the order they were given."""
        transfers = matcher.match(make_balances(("A", 10), ("B", 10), ("C", -10), ("D", -10)))

        assert routes(transfers) == [("C", "A", "10.00"), ("D", "B", "10.00")]

    def test_ties_keep_roster_order_reversed_input(self, matcher):
        transfers = matcher.match(make_balances(("D", -10), ("C", -10), ("B", 10), ("A", 10)))

        assert routes(transfers) == [("D", "B", "10.00"), ("C", "A", "10.00")]


class TestTolerance:
    """Test close-out of near-zero remainders."""

    def test_default_tolerance(self):
        assert TransferMatcher().tolerance == DEFAULT_TOLERANCE == Decimal("0.01")

    def test_near_zero_remainder_is_closed_out(self):
        """The creditor's 0.005 remainder closes it; the tiny debtor never pays."""
        matcher = TransferMatcher()
        transfers = matcher.match(make_balances(("A", "10"), ("B", "-9.995"), ("C", "-0.005")))

        assert [(t.from_name, t.to_name, t.amount) for t in transfers] == [("B", "A", Decimal("9.995"))]

    def test_amounts_stay_unrounded(self):
        """Rounding is for display only."""
        matcher = TransferMatcher()
        transfers = matcher.match(make_balances(("A", "6.666"), ("B", "-3.333"), ("C", "-3.333")))

        assert [t.amount for t in transfers] == [Decimal("3.333"), Decimal("3.333")]
        assert [t.display_amount for t in transfers] == ["3.33", "3.33"]

    def test_custom_tolerance_closes_larger_remainders(self):
        balances = make_balances(("A", "10"), ("B", "-9.5"), ("C", "-0.5"))

        assert len(TransferMatcher().match(balances)) == 2
        assert len(TransferMatcher(tolerance=Decimal("1")).match(balances)) == 1

    def test_tolerance_accepts_strings(self):
        assert TransferMatcher(tolerance="0.05").tolerance == Decimal("0.05")

    @pytest.mark.parametrize("tolerance", [0, "0", "-0.01", Decimal("-1"), "abc", "Infinity", "NaN"])
    def test_tolerance_must_be_positive_number(self, tolerance):
        with pytest.raises(ValueError, match="tolerance must be"):
            TransferMatcher(tolerance=tolerance)

    def test_tiny_tolerance_still_settles(self):
        """Sides that land exactly on zero close even below any tolerance."""
        third = Decimal(10) / 3
        balances = make_balances(("A", "10"), ("B", -third), ("C", -(10 - third)))
        transfers = TransferMatcher(tolerance=Decimal("1E-40")).match(balances)

        assert [(t.from_name, t.to_name) for t in transfers] == [("C", "A"), ("B", "A")]
        assert sum(t.amount for t in transfers) == Decimal("10")


class TestMatchingInvariants:
    """Properties that must hold for any balance set."""

    @staticmethod
    def random_balances(rng, count):
        """Cent-aligned balances that sum to exactly zero."""
        cents = [rng.randint(-10000, 10000) for _ in range(count - 1)]
        cents.append(-sum(cents))
        return [
            Balance(name=f"P{i}", alias="", amount=Decimal(c) / 100)
            for i, c in enumerate(cents)
        ]

    @pytest.mark.parametrize("seed", range(20))
    def test_every_balance_is_settled(self, seed):
        rng = random.Random(seed)
        balances = self.random_balances(rng, rng.randint(2, 12))

        transfers = TransferMatcher().match(balances)

        for balance in balances:
            received = sum((t.amount for t in transfers if t.to_name == balance.name), Decimal("0"))
            paid = sum((t.amount for t in transfers if t.from_name == balance.name), Decimal("0"))
            if balance.amount > 0:
                assert abs(received - balance.amount) < DEFAULT_TOLERANCE
                assert paid == 0
            elif balance.amount < 0:
                assert abs(paid + balance.amount) < DEFAULT_TOLERANCE
                assert received == 0
            else:
                assert received == paid == 0

    @pytest.mark.parametrize("seed", range(20))
    def test_transfer_count_bound(self, seed):
        """At most creditors + debtors - 1 transfers."""
        rng = random.Random(seed)
        balances = self.random_balances(rng, rng.randint(2, 12))
        creditors = sum(1 for b in balances if b.amount > 0)
        debtors = sum(1 for b in balances if b.amount < 0)

        transfers = TransferMatcher().match(balances)

        assert len(transfers) <= max(creditors + debtors - 1, 0)
        assert all(t.amount > 0 for t in transfers)

    def test_input_balances_are_not_modified(self):
        balances = make_balances(("A", 60), ("B", -30), ("C", -30))

        TransferMatcher().match(balances)

        assert [b.amount for b in balances] == [Decimal("60"), Decimal("-30"), Decimal("-30")]
