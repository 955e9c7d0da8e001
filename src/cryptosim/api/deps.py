"""Dependency injection for FastAPI."""

from fastapi import Depends

from cryptosim.app_context import AppContext, get_app_context
from cryptosim.services import TradingService, AnalysisService, MarketDataService


def get_context() -> AppContext:
    """Provide the process-wide AppContext."""
    return get_app_context()


def get_trading_service(context: AppContext = Depends(get_context)) -> TradingService:
    """Provide TradingService instance."""
    return context.trading


def get_analysis_service(context: AppContext = Depends(get_context)) -> AnalysisService:
    """Provide AnalysisService instance."""
    return context.analysis


def get_market_data_service(context: AppContext = Depends(get_context)) -> MarketDataService:
    """Provide MarketDataService instance."""
    return context.market_data
