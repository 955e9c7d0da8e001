"""Trading service: market prices in, ledger mutation, persistence out."""

import logging
import threading
from decimal import Decimal
from typing import Optional

from cryptosim.core.exceptions import InvalidArgumentError
from cryptosim.domain.models import LedgerState, Transaction, TransactionKind
from cryptosim.domain.views import SellPreview
from cryptosim.repositories.protocols import LedgerStateRepository
from cryptosim.services.ledger_engine import LedgerEngine
from cryptosim.services.market_data_service import MarketDataService

logger = logging.getLogger(__name__)


def normalize_asset_id(asset_id: str) -> str:
    """Asset ids are stored lowercase and trimmed."""
    if not isinstance(asset_id, str) or not asset_id.strip():
        raise InvalidArgumentError("asset_id must be a non-empty string")
    return asset_id.strip().lower()


class TradingService:
    """
    Orchestrates a trade around the ledger engine.

    Looks up the market price (when none is given) before calling the
    engine, and saves the new state after every successful mutation. A
    failed trade is never saved.

    Each mutation and its save run under one lock, which snapshot reads
    also take. Requests call in from worker threads.
    """

    def __init__(
        self,
        engine: LedgerEngine,
        market_data_service: MarketDataService,
        repository: LedgerStateRepository,
    ):
        self._engine = engine
        self._market = market_data_service
        self._repo = repository
        self._lock = threading.RLock()

    @property
    def engine(self) -> LedgerEngine:
        return self._engine

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def snapshot(self) -> LedgerState:
        with self._lock:
            return self._engine.snapshot()

    def load(self) -> bool:
        """
        Restore the last saved state into the engine.

        Returns False (engine keeps its defaults) when nothing was saved yet.
        """
        with self._lock:
            state = self._repo.load()
            if state is None:
                logger.info(
                    "No saved ledger found; starting with %s cash", self._engine.starting_cash
                )
                return False
            self._engine.restore(state)
        logger.info(
            "Loaded ledger: cash=%s, %d holdings, %d transactions",
            state.cash_balance,
            len(state.holdings),
            len(state.transactions),
        )
        return True

    def buy(
        self,
        asset_id: str,
        quantity: Decimal,
        unit_price: Optional[Decimal] = None,
    ) -> Transaction:
        """Buy at unit_price, or at the current market price when omitted."""
        asset_id = normalize_asset_id(asset_id)
        if unit_price is None:
            unit_price = self._market.get_price(asset_id)
        with self._lock:
            txn = self._engine.apply_buy(asset_id, quantity, unit_price)
            logger.info("BUY %s %s @ %s", txn.quantity, asset_id, txn.unit_price)
            self._save()
        return txn

    def sell(
        self,
        asset_id: str,
        quantity: Decimal,
        unit_price: Optional[Decimal] = None,
    ) -> Transaction:
        """Sell at unit_price, or at the current market price when omitted."""
        asset_id = normalize_asset_id(asset_id)
        if unit_price is None:
            unit_price = self._market.get_price(asset_id)
        with self._lock:
            txn = self._engine.apply_sell(asset_id, quantity, unit_price)
            logger.info(
                "SELL %s %s @ %s (tax %s)", txn.quantity, asset_id, txn.unit_price, txn.tax_withheld
            )
            self._save()
        return txn

    def buy_at_market(self, asset_id: str, quantity: Decimal) -> Transaction:
        return self.buy(asset_id, quantity)

    def sell_at_market(self, asset_id: str, quantity: Decimal) -> Transaction:
        return self.sell(asset_id, quantity)

    def current_price(self, asset_id: str) -> Decimal:
        return self._market.get_price(normalize_asset_id(asset_id))

    def preview_sell(
        self,
        asset_id: str,
        quantity: Decimal,
        unit_price: Optional[Decimal] = None,
    ) -> SellPreview:
        if unit_price is None:
            unit_price = self._market.get_price(normalize_asset_id(asset_id))
        with self._lock:
            return self._engine.preview_sell(quantity, unit_price)

    def max_buy_quantity(self, asset_id: str, unit_price: Optional[Decimal] = None) -> Decimal:
        if unit_price is None:
            unit_price = self._market.get_price(normalize_asset_id(asset_id))
        with self._lock:
            return self._engine.max_buy_quantity(unit_price)

    def reset(self) -> LedgerState:
        with self._lock:
            self._engine.reset()
            logger.info("Ledger reset to %s cash", self._engine.starting_cash)
            self._save()
            return self._engine.snapshot()

    def restore(self, state: LedgerState) -> LedgerState:
        """Install an imported state and persist it."""
        with self._lock:
            self._engine.restore(state)
            logger.info("Ledger restored from import (%d transactions)", len(state.transactions))
            self._save()
            return self._engine.snapshot()

    def history(
        self,
        asset_id: Optional[str] = None,
        kind: Optional[TransactionKind] = None,
    ) -> list[Transaction]:
        """Transaction history, newest first, optionally filtered."""
        with self._lock:
            transactions = self._engine.transactions
        if asset_id:
            asset_id = normalize_asset_id(asset_id)
            transactions = [t for t in transactions if t.asset_id == asset_id]
        if kind is not None:
            transactions = [t for t in transactions if t.kind == kind]
        return list(reversed(transactions))

    def _save(self) -> None:
        self._repo.save(self._engine.snapshot())
