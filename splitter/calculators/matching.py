"""
Transfer Matcher

Greedy creditor/debtor matching that turns balances into payments.
"""

from decimal import Decimal, InvalidOperation
from typing import Sequence

from ..models import Balance, Transfer

DEFAULT_TOLERANCE = Decimal("0.01")


class TransferMatcher:
    """Matches debtors to creditors, largest positions first."""

    def __init__(self, tolerance: Decimal = DEFAULT_TOLERANCE):
        try:
            tolerance = Decimal(str(tolerance))
        except InvalidOperation:
            raise ValueError(f"tolerance must be a number, got: {tolerance!r}")
        if not tolerance.is_finite() or tolerance <= 0:
            raise ValueError(f"tolerance must be a positive number, got: {tolerance}")
        self.tolerance = tolerance

    def match(self, balances: Sequence[Balance]) -> list[Transfer]:
        """
        Produce the transfers that bring every balance back to zero.

        Creditors (balance > 0) are sorted descending and debtors
        (balance < 0) ascending; both sorts are stable so equal balances keep
        roster order. Exactly-zero balances are left out here, near-zero ones
        are closed out by the tolerance check while matching.

        The input balances are not modified.
        """
        creditors = sorted(
            (b for b in balances if b.amount > 0), key=lambda b: b.amount, reverse=True
        )
        debtors = sorted((b for b in balances if b.amount < 0), key=lambda b: b.amount)

        # Remaining amounts, indexed like the sorted lists
        owed = [c.amount for c in creditors]
        owing = [d.amount for d in debtors]

        transfers = []
        i = 0
        j = 0

        while i < len(debtors) and j < len(creditors):
            amount = min(-owing[i], owed[j])
            transfers.append(
                Transfer(
                    from_name=debtors[i].name,
                    to_name=creditors[j].name,
                    alias=creditors[j].alias,
                    amount=amount,
                )
            )

            owing[i] += amount
            owed[j] -= amount

            # A side that reached (or crossed) zero is always closed
            if owing[i] >= 0 or abs(owing[i]) < self.tolerance:
                i += 1
            if owed[j] <= 0 or abs(owed[j]) < self.tolerance:
                j += 1

        return transfers
