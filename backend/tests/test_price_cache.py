import json

from pricesync.cache import PriceCache


class BrokenRedis:
    def get(self, key: str):
        raise ConnectionError("redis down")

    def set(self, key: str, value: str):
        raise ConnectionError("redis down")


def test_cache_roundtrip(cache, fake_redis) -> None:
    cache.set("stock_AAPL", {"c": 150.0})

    assert cache.get("stock_AAPL") == {"c": 150.0}
    stored = json.loads(fake_redis.store["stock_AAPL"])
    assert stored["key"] == "stock_AAPL"
    assert stored["data"] == {"c": 150.0}
    assert "timestamp" in stored


def test_cache_miss_returns_none(cache) -> None:
    assert cache.get("stock_MSFT") is None


def test_cache_entry_expires_after_fifteen_minutes(cache, clock) -> None:
    cache.set("crypto_bitcoin", {"bitcoin": {"inr": 5000000}})

    clock.advance(minutes=14, seconds=59)
    assert cache.get("crypto_bitcoin") == {"bitcoin": {"inr": 5000000}}

    clock.advance(seconds=1)
    assert cache.get("crypto_bitcoin") is None


def test_cache_set_overwrites_and_restamps(cache, clock) -> None:
    cache.set("stock_AAPL", {"c": 150.0})
    clock.advance(minutes=10)
    cache.set("stock_AAPL", {"c": 151.0})
    clock.advance(minutes=10)

    assert cache.get("stock_AAPL") == {"c": 151.0}


def test_cache_survives_new_instance(fake_redis, clock) -> None:
    PriceCache(client=fake_redis, ttl_seconds=900, clock=clock).set("stock_AAPL", {"c": 1.0})

    reopened = PriceCache(client=fake_redis, ttl_seconds=900, clock=clock)

    assert reopened.get("stock_AAPL") == {"c": 1.0}


def test_corrupt_entry_is_a_miss(cache, fake_redis) -> None:
    fake_redis.store["stock_AAPL"] = "{not json"

    assert cache.get("stock_AAPL") is None


def test_redis_failures_fail_open(clock) -> None:
    cache = PriceCache(client=BrokenRedis(), ttl_seconds=900, clock=clock)

    cache.set("stock_AAPL", {"c": 150.0})
    assert cache.get("stock_AAPL") is None


def test_get_or_fetch_only_stores_truthy_data(cache, fake_redis) -> None:
    assert cache.get_or_fetch("stock_AAPL", lambda: None) is None
    assert "stock_AAPL" not in fake_redis.store

    calls = []

    def fetcher():
        calls.append(1)
        return {"c": 10.0}

    assert cache.get_or_fetch("stock_AAPL", fetcher) == {"c": 10.0}
    assert cache.get_or_fetch("stock_AAPL", fetcher) == {"c": 10.0}
    assert len(calls) == 1


def test_entry_without_timezone_is_a_miss_and_gets_replaced(cache, fake_redis) -> None:
    fake_redis.store["stock_AAPL"] = json.dumps(
        {"key": "stock_AAPL", "data": {"c": 1}, "timestamp": "2026-01-05T11:59:00"}
    )

    assert cache.get("stock_AAPL") is None
    assert cache.get_or_fetch("stock_AAPL", lambda: {"c": 150}) == {"c": 150}
    assert cache.get("stock_AAPL") == {"c": 150}


def test_naive_clock_does_not_raise(fake_redis, clock) -> None:
    PriceCache(client=fake_redis, ttl_seconds=900, clock=clock).set("stock_AAPL", {"c": 1.0})
    naive = PriceCache(client=fake_redis, ttl_seconds=900, clock=lambda: clock.now.replace(tzinfo=None))

    assert naive.get("stock_AAPL") is None
