"""Domain models package."""

from cryptosim.domain.models.enums import TransactionKind
from cryptosim.domain.models.holding import Holding
from cryptosim.domain.models.transaction import Transaction
from cryptosim.domain.models.ledger_state import LedgerState

__all__ = [
    "TransactionKind",
    "Holding",
    "Transaction",
    "LedgerState",
]
