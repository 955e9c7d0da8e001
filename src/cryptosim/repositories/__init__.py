"""Repository layer - persistence abstractions and implementations."""

from cryptosim.repositories.protocols import LedgerStateRepository

__all__ = [
    "LedgerStateRepository",
]
