"""Market data endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from cryptosim.api.deps import get_market_data_service
from cryptosim.api.schemas import QuoteResponse, MoversResponse
from cryptosim.services import MarketDataService

router = APIRouter(prefix="/market", tags=["market"])


@router.get("/quotes", response_model=list[QuoteResponse])
def get_quotes(
    asset_ids: Optional[str] = Query(None, description="Comma-separated asset ids (all if empty)"),
    market: MarketDataService = Depends(get_market_data_service),
) -> list[QuoteResponse]:
    """Get current quotes."""
    asset_id_list = [a.strip() for a in asset_ids.split(",") if a.strip()] if asset_ids else None
    quotes = market.get_quotes(asset_id_list)
    return [QuoteResponse.from_domain(q) for q in quotes.values()]


@router.get("/movers", response_model=MoversResponse)
def get_movers(
    limit: int = Query(3, ge=1, le=10),
    market: MarketDataService = Depends(get_market_data_service),
) -> MoversResponse:
    """Top gainers and losers by 24h change."""
    gainers, losers = market.top_movers(limit)
    return MoversResponse(
        gainers=[QuoteResponse.from_domain(q) for q in gainers],
        losers=[QuoteResponse.from_domain(q) for q in losers],
    )
