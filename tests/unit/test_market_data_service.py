"""
Unit tests for MarketDataService.

Tests cover:
- Getting quotes from provider
- Quote caching behavior
- Cache TTL expiration
- Graceful degradation on provider failure
- Price lookup and top movers
"""

import pytest
from decimal import Decimal
from unittest.mock import MagicMock

from cryptosim.core.exceptions import PriceUnavailableError
from cryptosim.services import MarketDataService
from cryptosim.domain.views import Quote

from tests.conftest import (
    DeterministicMarketProvider,
    FailingMarketProvider,
    utc_datetime,
)


def make_quote(asset_id: str, price: str, change: str = "0") -> Quote:
    return Quote(
        asset_id=asset_id,
        symbol=asset_id[:3].upper(),
        name=asset_id.capitalize(),
        price=Decimal(price),
        change_percent_24h=Decimal(change),
        as_of=utc_datetime(2024, 6, 15, 14, 0, 0),
    )


# =============================================================================
# BASIC QUOTE RETRIEVAL TESTS
# =============================================================================


class TestGetQuotes:
    """Tests for basic quote retrieval."""

    def test_get_quotes_returns_quote_data(self, market_data_service: MarketDataService):
        """
        GIVEN a market data provider with a bitcoin quote
        WHEN I call get_quotes(["bitcoin"])
        THEN result contains Quote with price, change and as_of
        """
        quotes = market_data_service.get_quotes(["bitcoin"])

        assert "bitcoin" in quotes
        quote = quotes["bitcoin"]
        assert quote.price == Decimal("65000")
        assert quote.change_percent_24h == Decimal("2.50")
        assert quote.as_of is not None

    def test_get_quotes_empty_list_returns_empty_dict(self, market_data_service: MarketDataService):
        assert market_data_service.get_quotes([]) == {}

    def test_get_quotes_none_returns_all_tracked(self, market_data_service: MarketDataService):
        quotes = market_data_service.get_quotes()

        assert set(quotes) == {"bitcoin", "ethereum", "solana", "dogecoin"}

    def test_get_quotes_normalizes_to_lowercase(self, market_data_service: MarketDataService):
        """
        GIVEN a provider
        WHEN I request with mixed-case ids
        THEN ids are normalized to lowercase
        """
        quotes = market_data_service.get_quotes(["Bitcoin", "ETHEREUM"])

        assert set(quotes) == {"bitcoin", "ethereum"}

    def test_get_quotes_unknown_asset_not_in_result(self, market_data_service: MarketDataService):
        quotes = market_data_service.get_quotes(["bitcoin", "notacoin"])

        assert "bitcoin" in quotes
        assert "notacoin" not in quotes


# =============================================================================
# CACHING TESTS
# =============================================================================


class TestQuoteCaching:
    """Tests for quote caching behavior."""

    def test_cache_hit_does_not_call_provider(self):
        """
        GIVEN cache TTL is 60 seconds
        WHEN I call get_quotes twice within TTL
        THEN provider is called only once
        """
        mock_provider = MagicMock()
        mock_provider.get_quotes.return_value = {"bitcoin": make_quote("bitcoin", "65000")}

        service = MarketDataService(provider=mock_provider, cache_ttl_seconds=60)

        quotes1 = service.get_quotes(["bitcoin"])
        quotes2 = service.get_quotes(["bitcoin"])

        assert mock_provider.get_quotes.call_count == 1
        assert quotes1 == quotes2

    def test_cache_returns_cached_data(self, deterministic_provider: DeterministicMarketProvider):
        service = MarketDataService(provider=deterministic_provider, cache_ttl_seconds=60)
        service.get_quotes(["bitcoin"])

        deterministic_provider.prices["bitcoin"] = (Decimal("1"), Decimal("0"))
        quotes = service.get_quotes(["bitcoin"])

        assert quotes["bitcoin"].price == Decimal("65000")

    def test_cache_miss_for_new_asset_calls_provider(self):
        """
        GIVEN bitcoin is cached
        WHEN I request bitcoin and ethereum
        THEN provider is asked for ethereum only
        """
        requested = []

        def fake_get_quotes(asset_ids):
            requested.append(list(asset_ids))
            return {a: make_quote(a, "100") for a in asset_ids}

        mock_provider = MagicMock()
        mock_provider.get_quotes = fake_get_quotes

        service = MarketDataService(provider=mock_provider, cache_ttl_seconds=60)

        service.get_quotes(["bitcoin"])
        quotes = service.get_quotes(["bitcoin", "ethereum"])

        assert requested == [["bitcoin"], ["ethereum"]]
        assert len(quotes) == 2

    def test_cache_expiry_calls_provider_again(self, deterministic_provider: DeterministicMarketProvider):
        service = MarketDataService(provider=deterministic_provider, cache_ttl_seconds=60)

        service.get_quotes(["bitcoin"])
        assert deterministic_provider.calls == 1

        # Pretend the cache was filled long ago
        service._cache_time = utc_datetime(2000, 1, 1)

        service.get_quotes(["bitcoin"])
        assert deterministic_provider.calls == 2

    def test_invalidate_forces_refetch(self, deterministic_provider: DeterministicMarketProvider):
        service = MarketDataService(provider=deterministic_provider, cache_ttl_seconds=60)
        service.get_quotes(["bitcoin"])
        deterministic_provider.prices["bitcoin"] = (Decimal("70000"), Decimal("7.69"))

        service.invalidate()

        assert service.get_price("bitcoin") == Decimal("70000")


# =============================================================================
# FALLBACK / GRACEFUL DEGRADATION TESTS
# =============================================================================


class TestGracefulDegradation:
    """Tests for graceful degradation on provider failure."""

    def test_fallback_to_cache_on_provider_failure(self):
        """
        GIVEN a bitcoin quote cached from a previous call
        AND provider is now failing
        WHEN I call get_quotes after the cache expired
        THEN the cached quote is returned
        """
        calls = 0

        def flaky_get_quotes(asset_ids):
            nonlocal calls
            calls += 1
            if calls == 1:
                return {"bitcoin": make_quote("bitcoin", "65000")}
            raise ConnectionError("Network unavailable")

        mock_provider = MagicMock()
        mock_provider.get_quotes = flaky_get_quotes

        service = MarketDataService(provider=mock_provider, cache_ttl_seconds=60)

        assert service.get_quotes(["bitcoin"])["bitcoin"].price == Decimal("65000")

        service._cache_time = utc_datetime(2000, 1, 1)

        assert service.get_quotes(["bitcoin"])["bitcoin"].price == Decimal("65000")

    def test_provider_failure_with_no_cache_returns_empty(self, failing_provider: FailingMarketProvider):
        service = MarketDataService(provider=failing_provider, cache_ttl_seconds=60)

        assert service.get_quotes(["bitcoin"]) == {}

    def test_provider_failure_is_logged(self, failing_provider: FailingMarketProvider, caplog):
        service = MarketDataService(provider=failing_provider, cache_ttl_seconds=60)

        with caplog.at_level("WARNING"):
            service.get_quotes(["bitcoin"])

        assert "Price provider failed" in caplog.text


# =============================================================================
# PRICE LOOKUP TESTS
# =============================================================================


class TestPriceLookup:
    """Tests for get_price() and get_prices()."""

    def test_get_price(self, market_data_service: MarketDataService):
        assert market_data_service.get_price("ethereum") == Decimal("3500")

    def test_get_price_unknown_asset_raises(self, market_data_service: MarketDataService):
        with pytest.raises(PriceUnavailableError) as exc_info:
            market_data_service.get_price("notacoin")

        assert exc_info.value.code == "PRICE_UNAVAILABLE"

    def test_get_price_provider_down_raises(self, failing_provider: FailingMarketProvider):
        service = MarketDataService(provider=failing_provider, cache_ttl_seconds=60)

        with pytest.raises(PriceUnavailableError):
            service.get_price("bitcoin")

    def test_get_prices_skips_unknown(self, market_data_service: MarketDataService):
        prices = market_data_service.get_prices(["bitcoin", "notacoin"])

        assert prices == {"bitcoin": Decimal("65000")}


# =============================================================================
# TOP MOVERS TESTS
# =============================================================================


class TestTopMovers:
    """Tests for top_movers()."""

    def test_gainers_and_losers_ordered(self, market_data_service: MarketDataService):
        """
        GIVEN quotes with changes +4.10, +2.50, -1.25, -3.00
        WHEN I ask for the top 2 movers
        THEN gainers are best first and losers worst first
        """
        gainers, losers = market_data_service.top_movers(limit=2)

        assert [q.asset_id for q in gainers] == ["solana", "bitcoin"]
        assert [q.asset_id for q in losers] == ["dogecoin", "ethereum"]

    def test_limit_zero(self, market_data_service: MarketDataService):
        assert market_data_service.top_movers(limit=0) == ([], [])
