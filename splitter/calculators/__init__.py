"""
Calculators Package

Provides the calculation components for a settlement run.
"""

from .balances import BalanceCalculator
from .matching import DEFAULT_TOLERANCE, TransferMatcher

__all__ = [
    "BalanceCalculator",
    "TransferMatcher",
    "DEFAULT_TOLERANCE",
]
