"""JSON file repository implementation."""

from cryptosim.repositories.json_file.ledger_state_repo import JsonFileLedgerStateRepository

__all__ = [
    "JsonFileLedgerStateRepository",
]
