import datetime
import json
from unittest.mock import Mock
from urllib.error import HTTPError

import pytest

from pricesync.cache import PriceCache
from pricesync.config.settings import CryptoProviderConfig, StockProviderConfig


class FakeRedis:
    def __init__(self) -> None:
        self.store: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.store.get(key)

    def set(self, key: str, value: str) -> None:
        self.store[key] = value


class FakeResponse:
    def __init__(self, payload) -> None:
        self.body = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")

    def read(self) -> bytes:
        return self.body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        return None


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime.datetime(2026, 1, 5, 12, 0, tzinfo=datetime.UTC)

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += datetime.timedelta(**kwargs)


def http_error(url: str = "https://example.test", code: int = 500) -> HTTPError:
    return HTTPError(url, code, "Server Error", hdrs=None, fp=None)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(fake_redis, clock) -> PriceCache:
    return PriceCache(client=fake_redis, ttl_seconds=900, clock=clock)


@pytest.fixture
def stock_config() -> StockProviderConfig:
    return StockProviderConfig(base_url="https://finnhub.test/api/v1", api_key="secret")


@pytest.fixture
def crypto_config() -> CryptoProviderConfig:
    return CryptoProviderConfig(base_url="https://coingecko.test/api/v3", currency="inr")


@pytest.fixture
def fake_urlopen(monkeypatch):
    """Route provider HTTP calls to a mock; set ``side_effect`` per test."""
    mock = Mock()
    monkeypatch.setattr("pricesync.providers.http.urlopen", mock)
    return mock
