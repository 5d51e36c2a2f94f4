from __future__ import annotations

import logging

from pricesync.cache import PriceCache
from pricesync.config.settings import StockProviderConfig
from pricesync.providers.http import build_url, fetch_json
from pricesync.schemas.provider import SymbolSearchResult

logger = logging.getLogger(__name__)

_QUOTE_PATH = "/quote"
_SEARCH_PATH = "/search"
_SEARCH_LIMIT = 10
_SEARCH_TYPES = {"Common Stock", ""}


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


def cache_key(symbol: str) -> str:
    return f"stock_{normalize_symbol(symbol)}"


class FinnhubStockProvider:
    name = "finnhub"

    def __init__(self, config: StockProviderConfig, cache: PriceCache) -> None:
        self.config = config
        self.cache = cache

    def _get(self, path: str, params: dict[str, str], service_name: str):
        if not self.config.api_key:
            logger.warning("Finnhub API key is not configured; skipping %s", service_name)
            return None
        url = build_url(self.config.base_url, path, {**params, "token": self.config.api_key})
        return fetch_json(url, service_name, timeout=self.config.timeout_seconds)

    def fetch_quote(self, symbol: str) -> dict | None:
        symbol = normalize_symbol(symbol)
        if not symbol:
            return None
        return self.cache.get_or_fetch(
            cache_key(symbol),
            lambda: self._get(_QUOTE_PATH, {"symbol": symbol}, "Finnhub"),
        )

    def fetch_price(self, symbol: str) -> float | None:
        quote = self.fetch_quote(symbol)
        if not isinstance(quote, dict):
            return None
        price = quote.get("c")
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            return None
        return float(price)

    def search_symbols(self, query: str) -> list[SymbolSearchResult]:
        if not query or len(query) < 2:
            return []

        payload = self._get(_SEARCH_PATH, {"q": query}, "Finnhub Search")
        if not isinstance(payload, dict) or not isinstance(payload.get("result"), list):
            return []

        results: list[SymbolSearchResult] = []
        for item in payload["result"]:
            if not isinstance(item, dict):
                continue
            symbol = item.get("symbol")
            if not isinstance(symbol, str) or "." in symbol:
                continue
            item_type = item.get("type")
            if item_type not in _SEARCH_TYPES:
                continue
            results.append(
                SymbolSearchResult(
                    symbol=symbol,
                    description=item.get("description") or "",
                    type=item_type,
                )
            )
            if len(results) == _SEARCH_LIMIT:
                break
        return results
