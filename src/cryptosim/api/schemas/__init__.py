"""Pydantic schemas for API request/response."""

from cryptosim.api.schemas.ledger import (
    TradeRequest,
    TransactionResponse,
    TransactionListResponse,
    HoldingResponse,
    LedgerStateResponse,
    SellPreviewResponse,
    MaxBuyResponse,
)
from cryptosim.api.schemas.portfolio import (
    PortfolioItemResponse,
    PortfolioSummaryResponse,
)
from cryptosim.api.schemas.market import (
    QuoteResponse,
    MoversResponse,
)

__all__ = [
    "TradeRequest",
    "TransactionResponse",
    "TransactionListResponse",
    "HoldingResponse",
    "LedgerStateResponse",
    "SellPreviewResponse",
    "MaxBuyResponse",
    "PortfolioItemResponse",
    "PortfolioSummaryResponse",
    "QuoteResponse",
    "MoversResponse",
]
