"""Transaction domain model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from cryptosim.domain.models.enums import TransactionKind


@dataclass(frozen=True)
class Transaction:
    """
    Immutable record of one completed buy or sell.

    tax_withheld is set for SELL only; BUY transactions carry None.
    """

    id: str
    asset_id: str
    quantity: Decimal
    unit_price: Decimal
    kind: TransactionKind
    timestamp: datetime
    tax_withheld: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if isinstance(self.kind, str):
            object.__setattr__(self, "kind", TransactionKind(self.kind))

    @property
    def gross_amount(self) -> Decimal:
        """quantity x unit_price, before tax."""
        return self.quantity * self.unit_price

    @property
    def net_cash_impact(self) -> Decimal:
        """
        Signed effect of this transaction on the cash balance.

        Positive = cash added, Negative = cash removed.
        """
        if self.kind == TransactionKind.BUY:
            return -self.gross_amount
        return self.gross_amount - (self.tax_withheld or Decimal("0"))
