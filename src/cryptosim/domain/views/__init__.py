"""View models for service outputs."""

from cryptosim.domain.views.portfolio import (
    Quote,
    HoldingValuation,
    SellPreview,
    HoldingSummaryItem,
    PortfolioSummaryView,
)

__all__ = [
    "Quote",
    "HoldingValuation",
    "SellPreview",
    "HoldingSummaryItem",
    "PortfolioSummaryView",
]
