"""
Output Builder

Constructs the final API response from the settlement context.
"""

from typing import Optional

from .models import Balance, SettlementContext, SettlementResult, Transfer, format_amount


def _fmt(value) -> Optional[str]:
    """Format a Decimal for the response, keeping None as None."""
    if value is None:
        return None
    return format_amount(value)


class OutputBuilder:
    """Builds the final output response."""

    def build(self, ctx: SettlementContext) -> SettlementResult:
        """Construct the complete settlement result from the context."""
        return SettlementResult(
            summary=self._build_summary(ctx),
            balances=[self._build_balance(b) for b in ctx.sheet.balances],
            transfers=[self._build_transfer(t) for t in ctx.transfers],
        )

    def _build_summary(self, ctx: SettlementContext) -> dict:
        sheet = ctx.sheet
        return {
            "participants": len(ctx.participants),
            "enabled_participants": sheet.enabled_count,
            "total_spent": _fmt(sheet.total_spent),
            "equal_share": _fmt(sheet.equal_share),
            "creditors": len(sheet.creditors),
            "debtors": len(sheet.debtors),
            "transfer_count": len(ctx.transfers),
        }

    def _build_balance(self, balance: Balance) -> dict:
        return {
            "name": balance.name,
            "alias": balance.alias,
            "spent": _fmt(balance.spent),
            "balance": _fmt(balance.amount),
        }

    def _build_transfer(self, transfer: Transfer) -> dict:
        """Transfer record plus the line shown to the payer."""
        output = transfer.to_dict()
        output["description"] = describe_transfer(transfer)
        return output


def describe_transfer(transfer: Transfer) -> str:
    """e.g. 'B pays 10.00 to A (alias: ana.pay)'"""
    line = f"{transfer.from_name} pays {transfer.display_amount} to {transfer.to_name}"
    if transfer.alias:
        line += f" (alias: {transfer.alias})"
    return line
