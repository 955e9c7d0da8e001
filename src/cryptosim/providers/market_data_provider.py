"""Market data provider protocol (the price source)."""

from typing import Protocol

from cryptosim.domain.views import Quote


class MarketDataProvider(Protocol):
    """
    Protocol for price sources.

    Implementations return current quotes priced in the base currency.
    """

    def get_quotes(self, asset_ids: list[str]) -> dict[str, Quote]:
        """
        Fetch quotes for multiple assets.

        Returns dict mapping asset_id -> Quote. Unknown assets are omitted
        from the result; connection problems raise.
        """
        ...

    def list_assets(self) -> list[str]:
        """Return the asset ids this provider tracks."""
        ...
