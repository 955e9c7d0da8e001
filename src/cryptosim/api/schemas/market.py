"""Pydantic schemas for market data endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from cryptosim.domain.views import Quote


class QuoteResponse(BaseModel):
    """Response schema for a market quote."""

    asset_id: str
    symbol: str
    name: str
    price: Decimal
    change_percent_24h: Decimal
    as_of: datetime

    @classmethod
    def from_domain(cls, quote: Quote) -> "QuoteResponse":
        return cls(
            asset_id=quote.asset_id,
            symbol=quote.symbol,
            name=quote.name,
            price=quote.price,
            change_percent_24h=quote.change_percent_24h,
            as_of=quote.as_of,
        )


class MoversResponse(BaseModel):
    """Top gainers and losers by 24h change."""

    gainers: list[QuoteResponse]
    losers: list[QuoteResponse]
