"""Repository protocol definitions (interfaces)."""

from cryptosim.repositories.protocols.ledger_state_repo import LedgerStateRepository

__all__ = [
    "LedgerStateRepository",
]
