from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from pricesync.cache import PriceCache
from pricesync.config.settings import settings
from pricesync.providers.finnhub import FinnhubStockProvider
from pricesync.schemas.investment import SyncRequest, SyncResponse
from pricesync.schemas.provider import SymbolSearchResult
from pricesync.sync.engine import PriceSyncEngine, build_engine
from pricesync.sync.valuation import summarize

router = APIRouter()


def get_engine() -> PriceSyncEngine:
    return build_engine(settings)


def get_stock_provider() -> FinnhubStockProvider:
    cache = PriceCache(ttl_seconds=settings.price_cache_ttl_seconds)
    return FinnhubStockProvider(settings.stock_provider_config(), cache)


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.post("/investments/sync", response_model=SyncResponse)
async def sync_investments_endpoint(
    payload: SyncRequest, engine: PriceSyncEngine = Depends(get_engine)
) -> SyncResponse:
    synced = await engine.sync_prices(payload.investments)
    return SyncResponse(investments=synced, summary=summarize(synced))


@router.get("/symbols/search", response_model=list[SymbolSearchResult])
def search_symbols_endpoint(
    q: str = Query(default=""),
    provider: FinnhubStockProvider = Depends(get_stock_provider),
) -> list[SymbolSearchResult]:
    return provider.search_symbols(q)
