"""Ledger engine: applies buy/sell transactions to cash and holdings."""

import uuid
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from decimal import Decimal, DecimalException, InvalidOperation, ROUND_DOWN
from typing import Any, Callable, Iterator, Optional

from cryptosim.config.settings import DEFAULT_STARTING_CASH, SELL_TAX_RATE
from cryptosim.core.timezone import now_utc, to_utc
from cryptosim.core.exceptions import (
    InvalidArgumentError,
    InsufficientFundsError,
    UnknownAssetError,
    InsufficientHoldingsError,
    InvalidStateError,
)
from cryptosim.domain.models import Holding, LedgerState, Transaction, TransactionKind
from cryptosim.domain.views import SellPreview

MAX_BUY_DECIMAL_PLACES = 4


def _new_transaction_id() -> str:
    return str(uuid.uuid4())


def _as_decimal(value: Any) -> Decimal:
    """Coerce int/str/float/Decimal to a finite Decimal; raise ValueError otherwise."""
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except InvalidOperation as exc:
            raise ValueError(f"not a number: {value!r}") from exc
    elif isinstance(value, float):
        result = Decimal(str(value))
    else:
        raise ValueError(f"not a number: {value!r}")
    if not result.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    return result


def _positive_argument(name: str, value: Any) -> Decimal:
    try:
        result = _as_decimal(value)
    except ValueError as exc:
        raise InvalidArgumentError(f"{name} must be a number: {exc}") from exc
    if result <= 0:
        raise InvalidArgumentError(f"{name} must be > 0, got {result}")
    return result


def _asset_argument(asset_id: Any) -> str:
    if not isinstance(asset_id, str) or not asset_id.strip():
        raise InvalidArgumentError("asset_id must be a non-empty string")
    return asset_id


@contextmanager
def _amount_range(operation: str) -> Iterator[None]:
    """Report Decimal overflow or excess precision as a rejected argument."""
    try:
        yield
    except DecimalException as exc:
        raise InvalidArgumentError(
            f"{operation}: amounts are outside the supported range ({type(exc).__name__})"
        ) from exc


class LedgerEngine:
    """
    Single-owner state machine for the paper trading ledger.

    Holds the cash balance, the holdings set and the append-only transaction
    log. Every mutating operation validates fully before writing anything,
    so a raised error always leaves the state exactly as it was.

    The engine does not fetch prices, persist, or log; callers do that
    before and after invoking it.
    """

    def __init__(
        self,
        starting_cash: Decimal = DEFAULT_STARTING_CASH,
        tax_rate: Decimal = SELL_TAX_RATE,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        try:
            starting_cash = _as_decimal(starting_cash)
            tax_rate = _as_decimal(tax_rate)
        except ValueError as exc:
            raise InvalidArgumentError(f"Invalid ledger configuration: {exc}") from exc
        if starting_cash < 0:
            raise InvalidArgumentError("starting_cash cannot be negative")
        if not Decimal("0") <= tax_rate < Decimal("1"):
            raise InvalidArgumentError("tax_rate must be within [0, 1)")

        self._starting_cash = starting_cash
        self._tax_rate = tax_rate
        self._clock = clock or now_utc
        self._id_factory = id_factory or _new_transaction_id

        self._cash = starting_cash
        self._holdings: dict[str, Holding] = {}
        self._transactions: list[Transaction] = []
        # Every id ever handed out or restored; survives reset()
        self._issued_ids: set[str] = set()

    # Read-only accessors

    @property
    def starting_cash(self) -> Decimal:
        return self._starting_cash

    @property
    def tax_rate(self) -> Decimal:
        return self._tax_rate

    @property
    def cash_balance(self) -> Decimal:
        return self._cash

    @property
    def holdings(self) -> dict[str, Holding]:
        """Copy of the holdings set."""
        return {asset_id: replace(h) for asset_id, h in self._holdings.items()}

    @property
    def transactions(self) -> list[Transaction]:
        """Copy of the transaction log in chronological order."""
        return list(self._transactions)

    def get_holding(self, asset_id: str) -> Optional[Holding]:
        holding = self._holdings.get(asset_id)
        return replace(holding) if holding else None

    # Mutations

    def apply_buy(self, asset_id: str, quantity: Decimal, unit_price: Decimal) -> Transaction:
        """
        Buy quantity units of asset_id at unit_price.

        New holdings start with average_cost = unit_price; existing ones get
        the weighted average of old and new units.

        Raises:
            InvalidArgumentError: quantity or unit_price <= 0
            InsufficientFundsError: quantity x unit_price exceeds cash
        """
        asset_id = _asset_argument(asset_id)
        quantity = _positive_argument("quantity", quantity)
        unit_price = _positive_argument("unit_price", unit_price)

        with _amount_range("buy"):
            cost = quantity * unit_price
            if cost > self._cash:
                raise InsufficientFundsError(str(cost), str(self._cash))

            existing = self._holdings.get(asset_id)
            if existing is None:
                updated = Holding(asset_id=asset_id, quantity=quantity, average_cost=unit_price)
            else:
                new_quantity = existing.quantity + quantity
                updated = Holding(
                    asset_id=asset_id,
                    quantity=new_quantity,
                    average_cost=(existing.quantity * existing.average_cost + cost)
                    / new_quantity,
                )
            new_cash = self._cash - cost

        transaction = self._build_transaction(
            asset_id, quantity, unit_price, TransactionKind.BUY, tax_withheld=None
        )

        self._cash = new_cash
        self._holdings[asset_id] = updated
        self._append(transaction)
        return transaction

    def apply_sell(self, asset_id: str, quantity: Decimal, unit_price: Decimal) -> Transaction:
        """
        Sell quantity units of asset_id at unit_price.

        Cash increases by gross proceeds minus the flat sell tax. The average
        cost of the remaining units is unchanged; a holding sold down to
        exactly zero is removed.

        Raises:
            InvalidArgumentError: quantity or unit_price <= 0
            UnknownAssetError: no holding for asset_id
            InsufficientHoldingsError: quantity exceeds the held quantity
        """
        asset_id = _asset_argument(asset_id)
        quantity = _positive_argument("quantity", quantity)
        unit_price = _positive_argument("unit_price", unit_price)

        holding = self._holdings.get(asset_id)
        if holding is None:
            raise UnknownAssetError(asset_id)
        if quantity > holding.quantity:
            raise InsufficientHoldingsError(asset_id, str(quantity), str(holding.quantity))

        preview = self.preview_sell(quantity, unit_price)
        with _amount_range("sell"):
            new_cash = self._cash + preview.net_proceeds
        transaction = self._build_transaction(
            asset_id, quantity, unit_price, TransactionKind.SELL, tax_withheld=preview.tax
        )

        remaining = holding.quantity - quantity
        if remaining == 0:
            del self._holdings[asset_id]
        else:
            self._holdings[asset_id] = replace(holding, quantity=remaining)
        self._cash = new_cash
        self._append(transaction)
        return transaction

    def reset(self) -> None:
        """Clear holdings and history and restore the starting cash."""
        self._cash = self._starting_cash
        self._holdings = {}
        self._transactions = []

    def snapshot(self) -> LedgerState:
        """Return a copy of the full ledger state."""
        return LedgerState(
            cash_balance=self._cash,
            holdings=self.holdings,
            transactions=self.transactions,
        )

    def restore(self, state: LedgerState) -> None:
        """
        Replace the in-memory state with a previously captured snapshot.

        Raises:
            InvalidStateError: the snapshot violates a ledger invariant; the
                current state is kept unchanged.
        """
        cash, holdings, transactions = validate_state(state)
        self._cash = cash
        self._holdings = holdings
        self._transactions = transactions
        self._issued_ids.update(t.id for t in transactions)

    # Queries

    def preview_sell(self, quantity: Decimal, unit_price: Decimal) -> SellPreview:
        """Gross, tax and net proceeds for a prospective sale. Does not check holdings."""
        quantity = _positive_argument("quantity", quantity)
        unit_price = _positive_argument("unit_price", unit_price)
        with _amount_range("sell preview"):
            gross = quantity * unit_price
            tax = gross * self._tax_rate
            net = gross - tax
        return SellPreview(gross_proceeds=gross, tax=tax, net_proceeds=net)

    def max_buy_quantity(self, unit_price: Decimal) -> Decimal:
        """Largest quantity affordable at unit_price, rounded down to 4 decimal places."""
        unit_price = _positive_argument("unit_price", unit_price)
        step = Decimal(1).scaleb(-MAX_BUY_DECIMAL_PLACES)
        with _amount_range("max buy"):
            return (self._cash / unit_price).quantize(step, rounding=ROUND_DOWN)

    # Internals

    def _build_transaction(
        self,
        asset_id: str,
        quantity: Decimal,
        unit_price: Decimal,
        kind: TransactionKind,
        tax_withheld: Optional[Decimal],
    ) -> Transaction:
        txn_id = self._id_factory()
        while txn_id in self._issued_ids:
            txn_id = _new_transaction_id()

        timestamp = to_utc(self._clock())
        if self._transactions and timestamp < self._transactions[-1].timestamp:
            # Wall clock went backwards; keep the log non-decreasing
            timestamp = self._transactions[-1].timestamp

        return Transaction(
            id=txn_id,
            asset_id=asset_id,
            quantity=quantity,
            unit_price=unit_price,
            kind=kind,
            timestamp=timestamp,
            tax_withheld=tax_withheld,
        )

    def _append(self, transaction: Transaction) -> None:
        self._transactions.append(transaction)
        self._issued_ids.add(transaction.id)


def validate_state(
    state: LedgerState,
) -> tuple[Decimal, dict[str, Holding], list[Transaction]]:
    """
    Check a snapshot against the ledger invariants.

    Returns normalized copies of its parts (Decimal values, UTC timestamps)
    ready to be installed; raises InvalidStateError on the first violation.
    """
    if not isinstance(state, LedgerState):
        raise InvalidStateError(f"Expected LedgerState, got {type(state).__name__}")

    try:
        cash = _as_decimal(state.cash_balance)
    except ValueError as exc:
        raise InvalidStateError(f"Invalid cash balance: {exc}") from exc
    if cash < 0:
        raise InvalidStateError(f"Cash balance cannot be negative: {cash}")

    holdings: dict[str, Holding] = {}
    for key, holding in state.holdings.items():
        if not isinstance(key, str) or not key.strip():
            raise InvalidStateError(f"Holding key must be a non-empty string, got {key!r}")
        if not isinstance(holding, Holding):
            raise InvalidStateError(f"Holding entry for {key} is not a Holding")
        if holding.asset_id != key:
            raise InvalidStateError(
                f"Holding key {key} does not match asset id {holding.asset_id}"
            )
        try:
            quantity = _as_decimal(holding.quantity)
            average_cost = _as_decimal(holding.average_cost)
        except ValueError as exc:
            raise InvalidStateError(f"Invalid holding {key}: {exc}") from exc
        if quantity < 0:
            raise InvalidStateError(f"Holding {key} has negative quantity: {quantity}")
        if quantity == 0:
            raise InvalidStateError(f"Holding {key} has zero quantity")
        if average_cost < 0:
            raise InvalidStateError(f"Holding {key} has negative average cost: {average_cost}")
        holdings[key] = Holding(asset_id=key, quantity=quantity, average_cost=average_cost)

    transactions: list[Transaction] = []
    seen_ids: set[str] = set()
    previous: Optional[datetime] = None
    for txn in state.transactions:
        if not isinstance(txn, Transaction):
            raise InvalidStateError("Transaction log contains a non-Transaction entry")
        if not isinstance(txn.id, str) or not txn.id:
            raise InvalidStateError(f"Transaction id must be a non-empty string, got {txn.id!r}")
        if not isinstance(txn.asset_id, str) or not txn.asset_id.strip():
            raise InvalidStateError(f"Transaction {txn.id} has no asset id")
        if txn.id in seen_ids:
            raise InvalidStateError(f"Duplicate transaction id: {txn.id}")
        seen_ids.add(txn.id)
        try:
            quantity = _as_decimal(txn.quantity)
            unit_price = _as_decimal(txn.unit_price)
            tax = _as_decimal(txn.tax_withheld) if txn.tax_withheld is not None else None
        except ValueError as exc:
            raise InvalidStateError(f"Invalid transaction {txn.id}: {exc}") from exc
        if quantity <= 0 or unit_price <= 0:
            raise InvalidStateError(
                f"Transaction {txn.id} must have positive quantity and unit price"
            )
        if tax is not None and tax < 0:
            raise InvalidStateError(f"Transaction {txn.id} has negative tax")
        if txn.kind == TransactionKind.BUY and tax:
            raise InvalidStateError(f"BUY transaction {txn.id} cannot carry tax")
        if txn.kind == TransactionKind.SELL and tax is None:
            raise InvalidStateError(f"SELL transaction {txn.id} has no tax withheld")
        if not isinstance(txn.timestamp, datetime):
            raise InvalidStateError(f"Transaction {txn.id} has no valid timestamp")
        timestamp = to_utc(txn.timestamp)
        if previous is not None and timestamp < previous:
            raise InvalidStateError(f"Transaction {txn.id} is out of chronological order")
        previous = timestamp
        transactions.append(
            replace(
                txn,
                quantity=quantity,
                unit_price=unit_price,
                tax_withheld=tax,
                timestamp=timestamp,
            )
        )

    return cash, holdings, transactions
