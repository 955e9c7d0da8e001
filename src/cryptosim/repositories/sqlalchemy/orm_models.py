"""SQLAlchemy ORM model definitions."""

from decimal import Decimal

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Enum as SqlEnum,
)
from sqlalchemy.types import TypeDecorator

from cryptosim.repositories.sqlalchemy.database import Base
from cryptosim.domain.models.enums import TransactionKind


class DecimalText(TypeDecorator):
    """Stores Decimal values as text so SQLite keeps them exact."""

    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else Decimal(value)


class LedgerMetaORM(Base):
    """Single-row table holding the cash balance."""

    __tablename__ = "ledger_meta"

    id = Column(Integer, primary_key=True)
    cash_balance = Column(DecimalText, nullable=False)


class HoldingORM(Base):
    """SQLAlchemy model for Holding."""

    __tablename__ = "holdings"

    asset_id = Column(String(64), primary_key=True)
    quantity = Column(DecimalText, nullable=False)
    average_cost = Column(DecimalText, nullable=False)


class TransactionORM(Base):
    """SQLAlchemy model for Transaction (ledger entry)."""

    __tablename__ = "ledger_transactions"

    txn_id = Column(String(64), primary_key=True)
    # Insertion order = chronological order
    seq = Column(Integer, nullable=False, unique=True)
    asset_id = Column(String(64), nullable=False)
    quantity = Column(DecimalText, nullable=False)
    unit_price = Column(DecimalText, nullable=False)
    kind = Column(SqlEnum(TransactionKind), nullable=False)
    timestamp_utc = Column(DateTime, nullable=False)
    tax_withheld = Column(DecimalText, nullable=True)
