"""Quote provider protocol."""

from typing import Protocol


class QuoteProvider(Protocol):
    """
    A live price source for one asset class.

    ``fetch_price`` returns the current price of ``symbol`` in the
    provider's fixed currency, or ``None`` when no live price is available.
    Implementations consult the price cache first and must not raise on
    network or HTTP failures.
    """

    name: str

    def fetch_price(self, symbol: str) -> float | None:
        ...
