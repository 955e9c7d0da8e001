"""Enumerations for domain models."""

from enum import Enum


class TransactionKind(str, Enum):
    """Kinds of ledger transactions."""

    BUY = "BUY"
    SELL = "SELL"
