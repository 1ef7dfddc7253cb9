"""
Settlement Processor - Main Orchestrator

Coordinates the settlement pipeline through discrete, testable steps.
"""

import json
from decimal import Decimal
from typing import Any, Dict, List, Sequence

from .calculators import DEFAULT_TOLERANCE, BalanceCalculator, TransferMatcher
from .models import Participant, SettlementContext, SettlementResult, Transfer
from .output import OutputBuilder
from .validators import RosterValidator


class SettlementProcessor:
    """
    Main orchestrator for a settlement run.

    Implements a clear pipeline pattern:
    1. Snapshot Input
    2. Derive Balances
    3. Match Transfers
    4. Build Output

    The processor holds no per-run state; one instance can serve any number
    of concurrent callers.
    """

    def __init__(self, tolerance: Decimal = DEFAULT_TOLERANCE):
        self.validator = RosterValidator()
        self.balance_calculator = BalanceCalculator()
        self.transfer_matcher = TransferMatcher(tolerance)
        self.output_builder = OutputBuilder()

    @property
    def tolerance(self) -> Decimal:
        return self.transfer_matcher.tolerance

    def compute(self, participants: Sequence[Participant]) -> List[Transfer]:
        """Participants in, transfers out. Never raises for a valid roster."""
        return self._run(participants).transfers

    def process(self, participants: Sequence[Participant]) -> SettlementResult:
        """
        Run the complete pipeline.

        Args:
            participants: Roster snapshot (enabled and disabled)

        Returns:
            SettlementResult with summary, balances and transfers
        """
        ctx = self._run(participants)
        return self.output_builder.build(ctx)

    def process_from_dict(self, data: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Settle a roster given as a list of raw participant records.

        Convenience method for API usage. Raises ValueError when the
        document is not a valid roster.
        """
        self.validator.validate(data)
        participants = [Participant.from_dict(record) for record in data]
        return self.process_to_dict(participants)

    def process_to_dict(self, participants: Sequence[Participant]) -> Dict[str, Any]:
        """Run the pipeline and return the API response dictionary."""
        return self._result_to_dict(self.process(participants))

    def _run(self, participants: Sequence[Participant]) -> SettlementContext:
        # Step 1: Snapshot so later edits to the caller's list are not seen
        ctx = SettlementContext(participants=tuple(participants))

        # Step 2: Balances (empty sheet when nobody is enabled)
        ctx.sheet = self.balance_calculator.calculate(ctx.participants)

        # Step 3: Greedy matching
        ctx.transfers = self.transfer_matcher.match(ctx.sheet.balances)

        return ctx

    def _result_to_dict(self, result: SettlementResult) -> Dict[str, Any]:
        """Convert SettlementResult to dictionary for API response."""
        return {
            "summary": result.summary,
            "balances": result.balances,
            "transfers": result.transfers,
        }


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def compute_settlement(
    participants: Sequence[Participant], tolerance: Decimal = DEFAULT_TOLERANCE
) -> List[Transfer]:
    """Compute the transfers that settle a roster."""
    return SettlementProcessor(tolerance).compute(participants)


def settle_from_dict(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Settle a roster from Python records and return a Python dict."""
    processor = SettlementProcessor()
    return processor.process_from_dict(records)


def settle_from_json(json_input: str) -> str:
    """
    Settle a roster from a JSON document and return a JSON string.
    Errors are reported in the returned document, never raised.
    """
    try:
        records = json.loads(json_input)
        processor = SettlementProcessor()
        result = processor.process_from_dict(records)
        return json.dumps(result, indent=2)

    except ValueError as e:
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)
