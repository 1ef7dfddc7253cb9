"""
Unit Tests for Balance Calculator

Tests verify equal share and balance derivation against known rosters.
"""

from decimal import Decimal

import pytest

from splitter.calculators.balances import BalanceCalculator
from splitter.models import Participant


class TestEqualShare:
    """Test total and equal share over enabled participants."""

    @pytest.fixture
    def calculator(self):
        return BalanceCalculator()

    def test_share_is_mean_of_enabled_spending(self, calculator):
        """30 + 10 + 20 = 60 over 3 people → 20 each"""
        sheet = calculator.calculate([
            Participant(name="A", spent=30),
            Participant(name="B", spent=10),
            Participant(name="C", spent=20),
        ])

        assert sheet.enabled_count == 3
        assert sheet.total_spent == Decimal("60")
        assert sheet.equal_share == Decimal("20")

    def test_disabled_participants_are_excluded(self, calculator):
        """Disabled spending counts neither in total nor in head count."""
        sheet = calculator.calculate([
            Participant(name="A", spent=30),
            Participant(name="B", spent=10),
            Participant(name="X", spent=1000, enabled=False),
        ])

        assert sheet.enabled_count == 2
        assert sheet.total_spent == Decimal("40")
        assert sheet.equal_share == Decimal("20")
        assert [b.name for b in sheet.balances] == ["A", "B"]

    def test_empty_roster_gives_empty_sheet(self, calculator):
        """No participants → no share, no balances, no division."""
        sheet = calculator.calculate([])

        assert sheet.enabled_count == 0
        assert sheet.equal_share is None
        assert sheet.balances == []

    def test_all_disabled_gives_empty_sheet(self, calculator):
        """Nobody enabled is the same as nobody at all."""
        sheet = calculator.calculate([
            Participant(name="A", spent=30, enabled=False),
            Participant(name="B", spent=10, enabled=False),
        ])

        assert sheet.equal_share is None
        assert sheet.total_spent == Decimal("0")
        assert sheet.balances == []


class TestBalances:
    """Test per-participant balances."""

    @pytest.fixture
    def calculator(self):
        return BalanceCalculator()

    def test_balances_are_spent_minus_share(self, calculator):
        sheet = calculator.calculate([
            Participant(name="A", spent=30, alias="a.pay"),
            Participant(name="B", spent=10),
            Participant(name="C", spent=20),
        ])

        assert [(b.name, b.amount) for b in sheet.balances] == [
            ("A", Decimal("10")),
            ("B", Decimal("-10")),
            ("C", Decimal("0")),
        ]
        assert sheet.balances[0].alias == "a.pay"
        assert sheet.balances[0].spent == Decimal("30")

    def test_creditors_and_debtors(self, calculator):
        """Exactly-zero balances are neither creditors nor debtors."""
        sheet = calculator.calculate([
            Participant(name="A", spent=30),
            Participant(name="B", spent=10),
            Participant(name="C", spent=20),
        ])

        assert [b.name for b in sheet.creditors] == ["A"]
        assert [b.name for b in sheet.debtors] == ["B"]

    def test_balances_sum_to_zero_with_repeating_share(self, calculator):
        """100 / 3 does not terminate; balances still net out."""
        sheet = calculator.calculate([
            Participant(name="A", spent=100),
            Participant(name="B", spent=0),
            Participant(name="C", spent=0),
        ])

        total = sum(b.amount for b in sheet.balances)
        assert abs(total) < Decimal("1e-20")

    def test_negative_spent_is_not_sanitized(self, calculator):
        """Negative spending skews balances but is accepted."""
        sheet = calculator.calculate([
            Participant(name="A", spent=-10),
            Participant(name="B", spent=10),
        ])

        assert sheet.equal_share == Decimal("0")
        assert [b.amount for b in sheet.balances] == [Decimal("-10"), Decimal("10")]

    def test_fractional_spending(self, calculator):
        sheet = calculator.calculate([
            Participant(name="A", spent=12.5),
            Participant(name="B", spent=7.25),
        ])

        assert sheet.equal_share == Decimal("9.875")
        assert sheet.balances[0].amount == Decimal("2.625")

    def test_input_roster_is_not_modified(self, calculator):
        roster = [Participant(name="A", spent=30), Participant(name="B", spent=10)]
        before = list(roster)

        calculator.calculate(roster)

        assert roster == before
