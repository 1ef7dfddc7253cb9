"""
Domain Models for the Party Split settlement engine

These dataclasses provide type-safe representations of the roster and of the
settlement results. All monetary values use Decimal for precision.
"""

from dataclasses import dataclass, field, replace
from decimal import ROUND_HALF_UP, Decimal, localcontext

# =============================================================================
# INPUT MODELS
# =============================================================================


def to_decimal(value) -> Decimal:
    """Convert a JSON number (or numeric string) to Decimal."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class Participant:
    """One person on the roster.

    Frozen: edits go through the store, which builds a new snapshot.
    """

    name: str = ""
    spent: Decimal = Decimal("0")
    alias: str = ""  # payment handle shown to payers
    enabled: bool = True

    def __post_init__(self):
        object.__setattr__(self, "spent", to_decimal(self.spent))

    def with_changes(self, **changes) -> "Participant":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "spent": float(self.spent),
            "alias": self.alias,
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Participant":
        return cls(
            name=data.get("name", ""),
            spent=to_decimal(data.get("spent", 0)),
            alias=data.get("alias", ""),
            enabled=data.get("enabled", True),
        )


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass
class Balance:
    """Net position of an enabled participant: spent minus equal share.

    Positive = creditor (is owed money), negative = debtor (owes money).
    """

    name: str
    alias: str
    amount: Decimal
    spent: Decimal = Decimal("0")


@dataclass
class BalanceSheet:
    """Results of the balance derivation step."""

    enabled_count: int = 0
    total_spent: Decimal = Decimal("0")
    equal_share: Decimal | None = None  # None when nobody is enabled
    balances: list[Balance] = field(default_factory=list)

    @property
    def creditors(self) -> list[Balance]:
        return [b for b in self.balances if b.amount > 0]

    @property
    def debtors(self) -> list[Balance]:
        return [b for b in self.balances if b.amount < 0]


@dataclass(frozen=True)
class Transfer:
    """A single payment instruction from a debtor to a creditor."""

    from_name: str
    to_name: str
    alias: str  # receiver's alias
    amount: Decimal  # unrounded; formatted only on output

    @property
    def display_amount(self) -> str:
        return format_amount(self.amount)

    def to_dict(self) -> dict:
        return {
            "from": self.from_name,
            "to": self.to_name,
            "alias": self.alias,
            "amount": self.display_amount,
        }


@dataclass
class SettlementContext:
    """
    Holds all intermediate state during a settlement run.
    This is the "bag" that flows through the pipeline.
    """

    # Input (immutable during processing)
    participants: tuple[Participant, ...]

    # Step results (populated as we go)
    sheet: BalanceSheet = field(default_factory=BalanceSheet)
    transfers: list[Transfer] = field(default_factory=list)


@dataclass
class SettlementResult:
    """Final output of a settlement run."""

    summary: dict
    balances: list
    transfers: list


def format_amount(value: Decimal) -> str:
    """Two-decimal presentation string, e.g. Decimal('10') -> '10.00'."""
    with localcontext() as ctx:
        # Room for every integer digit plus the two cents digits
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        quantized = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if quantized == 0:
        quantized = abs(quantized)  # no "-0.00"
    return str(quantized)
