from __future__ import annotations

import logging

from pricesync.cache import PriceCache
from pricesync.config.settings import CryptoProviderConfig
from pricesync.providers.http import build_url, fetch_json

logger = logging.getLogger(__name__)

_PRICE_PATH = "/simple/price"

# Ticker -> CoinGecko coin id. Anything else is not priced live.
COIN_IDS: dict[str, str] = {
    "BTC": "bitcoin",
    "DOGE": "dogecoin",
    "ETH": "ethereum",
    "SOL": "solana",
    "XRP": "ripple",
}


def resolve_coin_id(symbol: str) -> str | None:
    return COIN_IDS.get(symbol.strip().upper())


def cache_key(coin_id: str) -> str:
    return f"crypto_{coin_id}"


class CoinGeckoCryptoProvider:
    name = "coingecko"

    def __init__(self, config: CryptoProviderConfig, cache: PriceCache) -> None:
        self.config = config
        self.cache = cache

    def fetch_quote(self, coin_id: str) -> dict | None:
        url = build_url(
            self.config.base_url,
            _PRICE_PATH,
            {"ids": coin_id, "vs_currencies": self.config.currency},
        )
        return self.cache.get_or_fetch(
            cache_key(coin_id),
            lambda: fetch_json(url, "CoinGecko", timeout=self.config.timeout_seconds),
        )

    def fetch_price(self, symbol: str) -> float | None:
        coin_id = resolve_coin_id(symbol)
        if coin_id is None:
            logger.debug("No CoinGecko id for %s", symbol)
            return None

        quote = self.fetch_quote(coin_id)
        if not isinstance(quote, dict):
            return None
        prices = quote.get(coin_id)
        if not isinstance(prices, dict):
            return None
        price = prices.get(self.config.currency)
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            return None
        return float(price)
