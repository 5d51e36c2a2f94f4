from typing import Any

from pydantic import AwareDatetime, BaseModel


class CacheEntry(BaseModel):
    key: str
    data: Any
    timestamp: AwareDatetime


class SymbolSearchResult(BaseModel):
    symbol: str
    description: str = ""
    type: str = ""
