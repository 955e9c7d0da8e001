"""Portfolio summary API."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from cryptosim.api.deps import get_analysis_service
from cryptosim.api.schemas import PortfolioItemResponse, PortfolioSummaryResponse
from cryptosim.services import AnalysisService

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


@router.get("", response_model=PortfolioSummaryResponse)
def get_portfolio(
    currency: Optional[str] = Query(None, description="Display currency: USD, EUR or PLN"),
    analysis: AnalysisService = Depends(get_analysis_service),
) -> PortfolioSummaryResponse:
    """
    Return the portfolio valued at current market prices.

    Amounts are converted to the display currency; the ledger itself is
    unaffected by the choice of currency.
    """
    summary = analysis.portfolio_summary(currency)
    return PortfolioSummaryResponse(
        currency=summary.currency,
        cash_balance=summary.cash_balance,
        holdings_value=summary.holdings_value,
        total_value=summary.total_value,
        total_pnl=summary.total_pnl,
        total_pnl_percent=summary.total_pnl_percent,
        items=[
            PortfolioItemResponse(
                asset_id=item.asset_id,
                quantity=item.quantity,
                average_cost=item.average_cost,
                current_price=item.current_price,
                market_value=item.market_value,
                unrealized_pnl=item.unrealized_pnl,
                unrealized_pnl_percent=item.unrealized_pnl_percent,
            )
            for item in summary.items
        ],
        as_of=summary.as_of,
    )
