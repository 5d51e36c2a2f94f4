from __future__ import annotations

import asyncio

from pricesync.schemas.investment import InvestmentRecord
from pricesync.sync.engine import build_engine


async def _sync(investments: list[dict]) -> list[dict]:
    records = [InvestmentRecord.model_validate(item) for item in investments]
    engine = build_engine()
    synced = await engine.sync_prices(records)
    return [record.model_dump(mode="json") for record in synced]


def run_price_sync(investments: list[dict]) -> list[dict]:
    return asyncio.run(_sync(investments))
