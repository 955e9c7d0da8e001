"""Domain layer - pure business models with no external dependencies."""

from cryptosim.domain.models import (
    TransactionKind,
    Holding,
    Transaction,
    LedgerState,
)

__all__ = [
    "TransactionKind",
    "Holding",
    "Transaction",
    "LedgerState",
]
