"""
PARTY SPLIT SETTLEMENT ENGINE
Equal-share expense splitting with greedy transfer matching
"""

from .models import Participant, SettlementResult, Transfer
from .processor import SettlementProcessor, compute_settlement
from .store import RosterStore

__all__ = [
    'SettlementProcessor',
    'compute_settlement',
    'Participant',
    'Transfer',
    'SettlementResult',
    'RosterStore',
]
