"""Ledger state repository protocol (the persistence adapter)."""

from typing import Protocol, Optional

from cryptosim.domain.models import LedgerState


class LedgerStateRepository(Protocol):
    """Interface for saving and loading the whole ledger state."""

    def save(self, state: LedgerState) -> None:
        """Durably persist the state, replacing what was stored before."""
        ...

    def load(self) -> Optional[LedgerState]:
        """Return the most recently saved state, or None if nothing was saved yet."""
        ...
