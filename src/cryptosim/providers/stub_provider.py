"""Simulated crypto price feed for offline use."""

import random
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from cryptosim.core.timezone import now_utc
from cryptosim.domain.views import Quote


@dataclass(frozen=True)
class AssetInfo:
    """Static metadata and simulated base price for a tracked asset."""

    asset_id: str
    symbol: str
    name: str
    base_price: Decimal
    # Half-width of the random spread around base_price
    spread: Decimal


TRACKED_ASSETS: dict[str, AssetInfo] = {
    info.asset_id: info
    for info in (
        AssetInfo("bitcoin", "BTC", "Bitcoin", Decimal("65000"), Decimal("1000")),
        AssetInfo("ethereum", "ETH", "Ethereum", Decimal("3500"), Decimal("100")),
        AssetInfo("binancecoin", "BNB", "Binance Coin", Decimal("580"), Decimal("20")),
        AssetInfo("ripple", "XRP", "XRP", Decimal("0.6"), Decimal("0.05")),
        AssetInfo("cardano", "ADA", "Cardano", Decimal("0.45"), Decimal("0.025")),
        AssetInfo("dogecoin", "DOGE", "Dogecoin", Decimal("0.12"), Decimal("0.01")),
        AssetInfo("solana", "SOL", "Solana", Decimal("150"), Decimal("10")),
        AssetInfo("polkadot", "DOT", "Polkadot", Decimal("6.5"), Decimal("0.5")),
        AssetInfo("polygon", "MATIC", "Polygon", Decimal("0.7"), Decimal("0.05")),
        AssetInfo("chainlink", "LINK", "Chainlink", Decimal("15"), Decimal("1")),
    )
}

# Max absolute simulated 24h change, in percent
_MAX_CHANGE_PERCENT = 5
_PRICE_PLACES = Decimal("0.00000001")


class StubMarketDataProvider:
    """
    Simulated provider for the tracked assets.

    Each call draws a price around the asset's base price and a random 24h
    change within +/-5%. Pass a seed for reproducible sequences.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def list_assets(self) -> list[str]:
        return list(TRACKED_ASSETS)

    def get_quotes(self, asset_ids: list[str]) -> dict[str, Quote]:
        """Return simulated quotes; unknown assets are omitted."""
        as_of = now_utc()
        result: dict[str, Quote] = {}

        for asset_id in asset_ids:
            info = TRACKED_ASSETS.get(asset_id.lower())
            if info is None:
                continue

            jitter = Decimal(str(self._rng.uniform(-1, 1))) * info.spread
            change_pct = Decimal(
                str(self._rng.uniform(-_MAX_CHANGE_PERCENT, _MAX_CHANGE_PERCENT))
            ).quantize(Decimal("0.01"))
            price = ((info.base_price + jitter) * (1 + change_pct / 100)).quantize(_PRICE_PLACES)

            result[info.asset_id] = Quote(
                asset_id=info.asset_id,
                symbol=info.symbol,
                name=info.name,
                price=price,
                change_percent_24h=change_pct,
                as_of=as_of,
            )

        return result
