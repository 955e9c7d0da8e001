"""SQLAlchemy implementation of LedgerStateRepository."""

import logging
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cryptosim.core.exceptions import PersistenceError
from cryptosim.core.timezone import to_utc
from cryptosim.domain.models import Holding, LedgerState, Transaction
from cryptosim.repositories.sqlalchemy.orm_models import (
    LedgerMetaORM,
    HoldingORM,
    TransactionORM,
)

logger = logging.getLogger(__name__)

_META_ROW_ID = 1


class SqlAlchemyLedgerStateRepository:
    """
    SQLAlchemy-backed ledger state repository.

    Each save and load runs in its own session from session_factory, so
    the repository can be shared across request threads.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def save(self, state: LedgerState) -> None:
        """Replace the stored state in a single commit."""
        db = self._session_factory()
        try:
            db.query(TransactionORM).delete()
            db.query(HoldingORM).delete()

            meta = db.get(LedgerMetaORM, _META_ROW_ID)
            if meta is None:
                meta = LedgerMetaORM(id=_META_ROW_ID, cash_balance=state.cash_balance)
                db.add(meta)
            else:
                meta.cash_balance = state.cash_balance

            db.add_all(
                [
                    HoldingORM(
                        asset_id=h.asset_id,
                        quantity=h.quantity,
                        average_cost=h.average_cost,
                    )
                    for h in state.holdings.values()
                ]
            )
            db.add_all(
                [self._transaction_to_orm(seq, t) for seq, t in enumerate(state.transactions)]
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise PersistenceError(f"Could not save ledger state: {exc}") from exc
        finally:
            db.close()
        logger.debug(
            "Saved ledger state: %d holdings, %d transactions",
            len(state.holdings),
            len(state.transactions),
        )

    def load(self) -> Optional[LedgerState]:
        """Return the stored state, or None if nothing was saved yet."""
        db = self._session_factory()
        try:
            meta = db.get(LedgerMetaORM, _META_ROW_ID)
            if meta is None:
                return None
            return LedgerState(
                cash_balance=meta.cash_balance,
                holdings={
                    h.asset_id: self._holding_to_domain(h)
                    for h in db.query(HoldingORM).order_by(HoldingORM.asset_id)
                },
                transactions=[
                    self._transaction_to_domain(t)
                    for t in db.query(TransactionORM).order_by(TransactionORM.seq)
                ],
            )
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not load ledger state: {exc}") from exc
        finally:
            db.close()

    @staticmethod
    def _transaction_to_orm(seq: int, txn: Transaction) -> TransactionORM:
        """Convert domain transaction to ORM model; timestamps stored as naive UTC."""
        return TransactionORM(
            txn_id=txn.id,
            seq=seq,
            asset_id=txn.asset_id,
            quantity=txn.quantity,
            unit_price=txn.unit_price,
            kind=txn.kind,
            timestamp_utc=to_utc(txn.timestamp).replace(tzinfo=None),
            tax_withheld=txn.tax_withheld,
        )

    @staticmethod
    def _holding_to_domain(orm: HoldingORM) -> Holding:
        """Convert ORM holding to domain model."""
        return Holding(
            asset_id=orm.asset_id,
            quantity=orm.quantity,
            average_cost=orm.average_cost,
        )

    @staticmethod
    def _transaction_to_domain(orm: TransactionORM) -> Transaction:
        """Convert ORM transaction to domain model."""
        return Transaction(
            id=orm.txn_id,
            asset_id=orm.asset_id,
            quantity=orm.quantity,
            unit_price=orm.unit_price,
            kind=orm.kind,
            timestamp=to_utc(orm.timestamp_utc),
            tax_withheld=orm.tax_withheld,
        )
