"""SQLAlchemy repository implementations."""

from cryptosim.repositories.sqlalchemy.database import (
    open_ledger_database,
    get_session_factory,
    close_ledger_database,
    Base,
)
from cryptosim.repositories.sqlalchemy.ledger_state_repo import SqlAlchemyLedgerStateRepository

__all__ = [
    "open_ledger_database",
    "get_session_factory",
    "close_ledger_database",
    "Base",
    "SqlAlchemyLedgerStateRepository",
]
