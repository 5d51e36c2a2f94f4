from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StockProviderConfig(BaseModel):
    base_url: str
    api_key: str | None = None
    timeout_seconds: float = 10.0


class CryptoProviderConfig(BaseModel):
    base_url: str
    currency: str = "inr"
    timeout_seconds: float = 10.0


class ProviderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PRICESYNC_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )
    finnhub_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("FINNHUB_API_KEY", "PRICESYNC_FINNHUB_API_KEY"),
    )
    finnhub_base_url: str = "https://finnhub.io/api/v1"
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    quote_currency: str = "inr"
    request_timeout_seconds: float = 10.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PRICESYNC_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices("REDIS_URL", "PRICESYNC_REDIS_URL"),
    )
    price_sync_queue_name: str = Field(
        default="price_sync",
        validation_alias=AliasChoices("PRICE_SYNC_QUEUE_NAME", "PRICESYNC_PRICE_SYNC_QUEUE_NAME"),
    )
    price_cache_ttl_seconds: int = 15 * 60
    accrue_fixed_deposits: bool = False

    providers: ProviderSettings = Field(default_factory=ProviderSettings)

    def stock_provider_config(self) -> StockProviderConfig:
        return StockProviderConfig(
            base_url=self.providers.finnhub_base_url,
            api_key=self.providers.finnhub_api_key,
            timeout_seconds=self.providers.request_timeout_seconds,
        )

    def crypto_provider_config(self) -> CryptoProviderConfig:
        return CryptoProviderConfig(
            base_url=self.providers.coingecko_base_url,
            currency=self.providers.quote_currency,
            timeout_seconds=self.providers.request_timeout_seconds,
        )


settings = Settings()
