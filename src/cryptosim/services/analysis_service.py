"""Analysis service for portfolio valuation reports."""

import threading
from decimal import Decimal, DecimalException
from typing import Optional

from cryptosim.core.currency import convert_amount
from cryptosim.core.exceptions import InvalidArgumentError
from cryptosim.core.timezone import now_utc
from cryptosim.domain.models import LedgerState
from cryptosim.domain.views import HoldingSummaryItem, PortfolioSummaryView
from cryptosim.services.ledger_engine import LedgerEngine
from cryptosim.services.market_data_service import MarketDataService
from cryptosim.services.valuation import compute_total_value, compute_valuation

_CENT = Decimal("0.01")
_PRICE_PLACES = Decimal("0.00000001")


class AnalysisService:
    """
    Service for portfolio summaries.

    Combines a ledger snapshot with current prices via the valuation
    calculator, then converts money amounts to the display currency.
    """

    def __init__(
        self,
        engine: LedgerEngine,
        market_data_service: MarketDataService,
        base_currency: str = "USD",
        lock: Optional[threading.RLock] = None,
    ):
        self._engine = engine
        self._market = market_data_service
        self._base_currency = base_currency
        self._lock = lock or threading.RLock()

    def portfolio_summary(self, currency: Optional[str] = None) -> PortfolioSummaryView:
        """
        Value the portfolio at current prices.

        Total P/L is measured against the starting cash. Holdings without a
        price are valued at 0.
        """
        currency = (currency or self._base_currency).upper()
        with self._lock:
            state = self._engine.snapshot()
            starting_cash = self._engine.starting_cash
        prices = self._market.get_prices(list(state.holdings)) if state.holdings else {}
        try:
            return self._summarize(state, starting_cash, prices, currency)
        except DecimalException as exc:
            raise InvalidArgumentError(
                f"Portfolio amounts are out of range for display in {currency}"
            ) from exc

    def _summarize(
        self,
        state: LedgerState,
        starting_cash: Decimal,
        prices: dict[str, Decimal],
        currency: str,
    ) -> PortfolioSummaryView:
        valuation = compute_valuation(state.holdings, prices)
        total_value = compute_total_value(state.cash_balance, valuation)
        holdings_value = total_value - state.cash_balance

        total_pnl = total_value - starting_cash
        if starting_cash != 0:
            total_pnl_percent = (total_pnl / starting_cash * 100).quantize(_CENT)
        else:
            total_pnl_percent = Decimal("0")

        def display(amount: Decimal) -> Decimal:
            return convert_amount(amount, currency, self._base_currency).quantize(_CENT)

        def display_price(price: Decimal) -> Decimal:
            return convert_amount(price, currency, self._base_currency).quantize(_PRICE_PLACES)

        items = []
        for asset_id, holding in state.holdings.items():
            value = valuation[asset_id]
            price = prices.get(asset_id)
            items.append(
                HoldingSummaryItem(
                    asset_id=asset_id,
                    quantity=holding.quantity,
                    average_cost=display_price(holding.average_cost),
                    current_price=display_price(price) if price is not None else None,
                    market_value=display(value.market_value),
                    unrealized_pnl=display(value.unrealized_pnl),
                    unrealized_pnl_percent=value.unrealized_pnl_percent.quantize(_CENT),
                )
            )
        items.sort(key=lambda i: i.market_value, reverse=True)

        return PortfolioSummaryView(
            currency=currency,
            cash_balance=display(state.cash_balance),
            holdings_value=display(holdings_value),
            total_value=display(total_value),
            total_pnl=display(total_pnl),
            total_pnl_percent=total_pnl_percent,
            items=items,
            as_of=now_utc(),
        )
