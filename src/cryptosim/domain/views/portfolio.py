"""View models for valuation and market outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Quote:
    """Market quote for an asset, priced in the base currency."""

    asset_id: str
    symbol: str
    name: str
    price: Decimal
    change_percent_24h: Decimal
    as_of: datetime


@dataclass
class HoldingValuation:
    """Valuation of a single holding at current prices."""

    market_value: Decimal
    unrealized_pnl: Decimal
    unrealized_pnl_percent: Decimal


@dataclass
class SellPreview:
    """Proceeds breakdown for a prospective sale."""

    gross_proceeds: Decimal
    tax: Decimal
    net_proceeds: Decimal


@dataclass
class HoldingSummaryItem:
    """A holding enriched with price and valuation, for display."""

    asset_id: str
    quantity: Decimal
    average_cost: Decimal
    current_price: Optional[Decimal]
    market_value: Decimal
    unrealized_pnl: Decimal
    unrealized_pnl_percent: Decimal


@dataclass
class PortfolioSummaryView:
    """Portfolio totals in a display currency."""

    currency: str
    cash_balance: Decimal
    holdings_value: Decimal
    total_value: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal
    items: list[HoldingSummaryItem] = field(default_factory=list)
    as_of: Optional[datetime] = None
