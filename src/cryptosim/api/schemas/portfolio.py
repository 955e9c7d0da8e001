"""Pydantic schemas for portfolio summary API."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class PortfolioItemResponse(BaseModel):
    """A holding with price and valuation, in the display currency."""

    asset_id: str
    quantity: Decimal
    average_cost: Decimal
    current_price: Optional[Decimal] = None
    market_value: Decimal
    unrealized_pnl: Decimal
    unrealized_pnl_percent: Decimal


class PortfolioSummaryResponse(BaseModel):
    """Portfolio summary: cash, holdings value, totals and per-holding items."""

    currency: str
    cash_balance: Decimal
    holdings_value: Decimal
    total_value: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal
    items: list[PortfolioItemResponse]
    as_of: Optional[datetime] = None
