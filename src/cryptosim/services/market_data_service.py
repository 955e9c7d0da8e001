"""Market data service for current prices."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from cryptosim.core.timezone import now_utc
from cryptosim.core.exceptions import PriceUnavailableError
from cryptosim.domain.views import Quote
from cryptosim.providers.market_data_provider import MarketDataProvider

logger = logging.getLogger(__name__)


class MarketDataService:
    """
    Service for fetching market prices.

    Wraps provider with caching and graceful degradation.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        cache_ttl_seconds: int = 60,
    ):
        self._provider = provider
        self._cache_ttl = cache_ttl_seconds
        self._quote_cache: dict[str, Quote] = {}
        self._cache_time: Optional[datetime] = None

    def get_quotes(self, asset_ids: Optional[list[str]] = None) -> dict[str, Quote]:
        """
        Fetch quotes for assets with caching.

        Returns dict mapping asset_id -> Quote. Uses cached data if within
        TTL; falls back to cache on provider failure. None means every asset
        the provider tracks.
        """
        if asset_ids is None:
            asset_ids = self._provider.list_assets()
        if not asset_ids:
            return {}

        asset_ids = [a.lower() for a in asset_ids]

        # Check cache validity
        if self._is_cache_valid():
            cached_result = {a: self._quote_cache[a] for a in asset_ids if a in self._quote_cache}
            missing = [a for a in asset_ids if a not in cached_result]
            if not missing:
                return cached_result
        else:
            missing = asset_ids
            cached_result = {}

        # Fetch missing quotes from provider
        try:
            new_quotes = self._provider.get_quotes(missing)
            self._quote_cache.update(new_quotes)
            self._cache_time = now_utc()
            cached_result.update(new_quotes)
        except Exception:
            # Graceful degradation: return whatever is in cache
            logger.warning("Price provider failed; serving cached quotes", exc_info=True)
            for asset_id in missing:
                if asset_id in self._quote_cache:
                    cached_result[asset_id] = self._quote_cache[asset_id]

        return {a: cached_result[a] for a in asset_ids if a in cached_result}

    def get_price(self, asset_id: str) -> Decimal:
        """Current unit price for an asset; raises PriceUnavailableError if unknown."""
        quote = self.get_quotes([asset_id]).get(asset_id.lower())
        if quote is None:
            raise PriceUnavailableError(asset_id)
        return quote.price

    def get_prices(self, asset_ids: list[str]) -> dict[str, Decimal]:
        """Mapping asset_id -> price for the assets that have a quote."""
        return {asset_id: q.price for asset_id, q in self.get_quotes(asset_ids).items()}

    def top_movers(self, limit: int = 3) -> tuple[list[Quote], list[Quote]]:
        """Return (gainers, losers) by 24h change, best and worst first."""
        quotes = sorted(
            self.get_quotes().values(),
            key=lambda q: q.change_percent_24h,
            reverse=True,
        )
        gainers = quotes[:limit]
        losers = list(reversed(quotes[-limit:])) if limit > 0 else []
        return gainers, losers

    def invalidate(self) -> None:
        """Drop cached quotes."""
        self._quote_cache.clear()
        self._cache_time = None

    def _is_cache_valid(self) -> bool:
        """Check if cache is within TTL."""
        if not self._cache_time:
            return False
        elapsed = (now_utc() - self._cache_time).total_seconds()
        return elapsed < self._cache_ttl
