"""Valuation calculator: pure functions over holdings and current prices."""

from decimal import Decimal
from typing import Callable, Mapping, Optional, Union

from cryptosim.domain.models import Holding
from cryptosim.domain.views import HoldingValuation

PriceLookup = Union[Mapping[str, Decimal], Callable[[str], Optional[Decimal]]]

_ZERO = Decimal("0")


def _lookup_price(price_lookup: PriceLookup, asset_id: str) -> Optional[Decimal]:
    if callable(price_lookup):
        return price_lookup(asset_id)
    return price_lookup.get(asset_id)


def value_holding(holding: Holding, current_price: Optional[Decimal]) -> HoldingValuation:
    """
    Value one holding.

    A missing price is a soft miss: market value 0 and a 0% return. An
    average cost of 0 also yields a 0% return.
    """
    market_value = holding.quantity * current_price if current_price is not None else _ZERO
    unrealized_pnl = market_value - holding.quantity * holding.average_cost

    if current_price is None or holding.average_cost == 0:
        pnl_percent = _ZERO
    else:
        pnl_percent = (current_price / holding.average_cost - 1) * 100

    return HoldingValuation(
        market_value=market_value,
        unrealized_pnl=unrealized_pnl,
        unrealized_pnl_percent=pnl_percent,
    )


def compute_valuation(
    holdings: Mapping[str, Holding],
    price_lookup: PriceLookup,
) -> dict[str, HoldingValuation]:
    """
    Value every holding against current prices.

    price_lookup is either a mapping asset_id -> price or a callable
    returning the price or None.
    """
    return {
        asset_id: value_holding(holding, _lookup_price(price_lookup, asset_id))
        for asset_id, holding in holdings.items()
    }


def compute_total_value(
    cash_balance: Decimal,
    valuation: Mapping[str, HoldingValuation],
) -> Decimal:
    """Cash plus the market value of all holdings."""
    return cash_balance + sum((v.market_value for v in valuation.values()), _ZERO)
