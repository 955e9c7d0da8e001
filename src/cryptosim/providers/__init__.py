"""Market data providers module."""

from cryptosim.providers.market_data_provider import MarketDataProvider
from cryptosim.providers.stub_provider import StubMarketDataProvider, TRACKED_ASSETS

__all__ = [
    "MarketDataProvider",
    "StubMarketDataProvider",
    "TRACKED_ASSETS",
]
