from __future__ import annotations

import datetime
import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError
from redis import Redis

from pricesync.config.settings import settings
from pricesync.schemas.provider import CacheEntry

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime.datetime]


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


def _get_client() -> Redis:
    return Redis.from_url(settings.redis_url)


class PriceCache:
    """Durable quote cache on Redis.

    Entries are stored as ``{key, data, timestamp}`` JSON and are only
    served while younger than ``ttl_seconds``. Redis failures never reach
    the caller: reads degrade to a miss and writes to a no-op.
    """

    def __init__(
        self,
        client: Redis | None = None,
        ttl_seconds: int | None = None,
        clock: Clock = _utcnow,
    ) -> None:
        self._client = client
        self.ttl = datetime.timedelta(
            seconds=ttl_seconds if ttl_seconds is not None else settings.price_cache_ttl_seconds
        )
        self._clock = clock

    @property
    def client(self) -> Redis:
        if self._client is None:
            self._client = _get_client()
        return self._client

    def get(self, key: str) -> Any | None:
        try:
            raw = self.client.get(key)
        except Exception:
            logger.warning("Error reading %s from cache", key, exc_info=True)
            return None

        if not raw:
            return None

        try:
            entry = CacheEntry.model_validate_json(raw)
        except (ValidationError, ValueError):
            logger.warning("Discarding unreadable cache entry %s", key)
            return None

        try:
            stale = self._clock() - entry.timestamp >= self.ttl
        except TypeError:
            logger.warning("Discarding cache entry %s with an unusable timestamp", key)
            return None
        if stale:
            logger.debug("Cache entry %s is stale", key)
            return None
        return entry.data

    def set(self, key: str, data: Any) -> None:
        try:
            entry = CacheEntry(key=key, data=data, timestamp=self._clock())
            self.client.set(key, entry.model_dump_json())
        except Exception:
            logger.warning("Error writing %s to cache", key, exc_info=True)

    def get_or_fetch(self, key: str, fetcher: Callable[[], Any | None]) -> Any | None:
        cached = self.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        data = fetcher()
        if data:
            self.set(key, data)
        return data
