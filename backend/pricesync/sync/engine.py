"""
sync/engine.py
──────────────
Decorates investment records with a ``current_value``.

Each record is valued in its own task: stocks and crypto through their
quote provider (cache first, network on a miss), everything else at cost.
A provider failure only ever degrades the record it belongs to.
"""

from __future__ import annotations

import asyncio
import datetime
import logging
from collections.abc import Callable, Sequence

from pricesync.cache import PriceCache
from pricesync.config.settings import Settings, settings as default_settings
from pricesync.providers.base import QuoteProvider
from pricesync.providers.coingecko import CoinGeckoCryptoProvider
from pricesync.providers.finnhub import FinnhubStockProvider
from pricesync.schemas.investment import AssetType, InvestmentRecord
from pricesync.sync.valuation import accrued_fd_value, cost_basis, to_number

logger = logging.getLogger(__name__)


class PriceSyncEngine:
    """
    Resolve live prices for a batch of investment records.

    Example:
        >>> engine = build_engine()
        >>> records = [InvestmentRecord(asset_type="Stocks", symbol="AAPL", quantity=10, total_cost=1000)]
        >>> synced = asyncio.run(engine.sync_prices(records))
        >>> synced[0].current_value
        1500.0
    """

    def __init__(
        self,
        stock_provider: QuoteProvider,
        crypto_provider: QuoteProvider,
        accrue_fixed_deposits: bool = False,
        today: Callable[[], datetime.date] = datetime.date.today,
    ) -> None:
        self.providers: dict[str, QuoteProvider] = {
            AssetType.STOCKS.value: stock_provider,
            AssetType.CRYPTO.value: crypto_provider,
        }
        self.accrue_fixed_deposits = accrue_fixed_deposits
        self._today = today

    # ── public API ────────────────────────────────────────────────────────

    async def sync_prices(
        self, records: Sequence[InvestmentRecord]
    ) -> list[InvestmentRecord]:
        """
        Value every record concurrently and return decorated copies.

        The result has the same length and order as ``records``; every
        element carries a non-null ``current_value``. The inputs are not
        modified.
        """
        values = await asyncio.gather(*(self._value_record(record) for record in records))
        synced = [
            record.model_copy(update={"current_value": value})
            for record, value in zip(records, values)
        ]
        logger.info("Synced prices for %d investments", len(synced))
        return synced

    # ── internals ─────────────────────────────────────────────────────────

    async def _value_record(self, record: InvestmentRecord) -> float:
        try:
            value = await self._live_value(record)
        except Exception:
            logger.exception(
                "Price sync failed for %s %s", record.asset_type, record.symbol
            )
            value = None
        return value if value is not None else cost_basis(record)

    async def _live_value(self, record: InvestmentRecord) -> float | None:
        if record.asset_type == AssetType.FD.value:
            if self.accrue_fixed_deposits:
                return accrued_fd_value(record, self._today())
            return None

        provider = self.providers.get(record.asset_type or "")
        if provider is None or not record.symbol:
            return None

        quantity = to_number(record.quantity)
        if quantity is None or quantity <= 0:
            return None

        # Providers block on redis and urllib; keep them off the event loop.
        price = await asyncio.to_thread(provider.fetch_price, record.symbol)
        if price is None:
            return None
        return price * quantity


def build_engine(config: Settings | None = None, cache: PriceCache | None = None) -> PriceSyncEngine:
    config = config or default_settings
    cache = cache or PriceCache(ttl_seconds=config.price_cache_ttl_seconds)
    return PriceSyncEngine(
        stock_provider=FinnhubStockProvider(config.stock_provider_config(), cache),
        crypto_provider=CoinGeckoCryptoProvider(config.crypto_provider_config(), cache),
        accrue_fixed_deposits=config.accrue_fixed_deposits,
    )
