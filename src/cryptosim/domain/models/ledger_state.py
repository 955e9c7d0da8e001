"""LedgerState: the unit of persistence."""

from dataclasses import dataclass, field
from decimal import Decimal

from cryptosim.domain.models.holding import Holding
from cryptosim.domain.models.transaction import Transaction


@dataclass
class LedgerState:
    """Cash balance, holdings keyed by asset id, and the ordered transaction log."""

    cash_balance: Decimal
    holdings: dict[str, Holding] = field(default_factory=dict)
    transactions: list[Transaction] = field(default_factory=list)
