"""Service layer - ledger engine and business logic orchestration."""

from cryptosim.services.ledger_engine import LedgerEngine, validate_state
from cryptosim.services.valuation import compute_valuation, compute_total_value
from cryptosim.services.market_data_service import MarketDataService
from cryptosim.services.trading_service import TradingService
from cryptosim.services.analysis_service import AnalysisService

__all__ = [
    "LedgerEngine",
    "validate_state",
    "compute_valuation",
    "compute_total_value",
    "MarketDataService",
    "TradingService",
    "AnalysisService",
]
