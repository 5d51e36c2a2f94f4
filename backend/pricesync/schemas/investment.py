from __future__ import annotations

import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

Numeric = Union[float, str, None]


class AssetType(str, Enum):
    STOCKS = "Stocks"
    MUTUAL_FUNDS = "Mutual Funds"
    FD = "FD"
    CRYPTO = "Crypto"
    GOLD = "Gold"
    BONDS = "Bonds"
    REAL_ESTATE = "Real Estate"
    OTHERS = "Others"


class InvestmentRecord(BaseModel):
    # Unknown keys (id, title, user_id, ...) ride along untouched.
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    symbol: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("symbol", "api_symbol")
    )
    asset_type: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("asset_type", "assetType", "type")
    )
    quantity: Numeric = None
    total_cost: Numeric = Field(
        default=None, validation_alias=AliasChoices("total_cost", "totalCost")
    )
    interest_rate: Numeric = Field(
        default=None,
        validation_alias=AliasChoices("interest_rate", "interestRate", "purchase_price"),
    )
    date: Optional[Union[datetime.date, str]] = None
    current_value: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("current_value", "currentValue")
    )


class PortfolioSummary(BaseModel):
    count: int = 0
    total_cost: float = 0.0
    current_value: float = 0.0
    profit_loss: float = 0.0
    percentage_change: Optional[float] = None


class SyncRequest(BaseModel):
    investments: list[InvestmentRecord] = Field(default_factory=list)


class SyncResponse(BaseModel):
    investments: list[InvestmentRecord] = Field(default_factory=list)
    summary: PortfolioSummary = Field(default_factory=PortfolioSummary)
