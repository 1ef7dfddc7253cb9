"""
Balance Calculator

Derives each enabled participant's balance against the equal share.
"""

from decimal import Decimal
from typing import Sequence

from ..models import Balance, BalanceSheet, Participant


class BalanceCalculator:
    """Computes the equal share and per-participant balances."""

    def calculate(self, participants: Sequence[Participant]) -> BalanceSheet:
        """
        Build the balance sheet for a roster snapshot.

        Steps:
        1. Keep only enabled participants
        2. total = sum(spent), equal_share = total / count
        3. balance = spent - equal_share

        An empty enabled set yields an empty sheet (no share is computed).
        """
        enabled = [p for p in participants if p.enabled]
        if not enabled:
            return BalanceSheet()

        total = sum((p.spent for p in enabled), Decimal("0"))
        share = total / len(enabled)

        balances = [
            Balance(name=p.name, alias=p.alias, amount=p.spent - share, spent=p.spent)
            for p in enabled
        ]

        return BalanceSheet(
            enabled_count=len(enabled),
            total_spent=total,
            equal_share=share,
            balances=balances,
        )
