from __future__ import annotations

from functools import cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.pricing import Coin


class AppSettings(BaseSettings):
    fiat_coin: Coin = Coin.EUR

    kraken_base_url: str = "https://api.kraken.com"
    binance_base_url: str = "https://api.binance.com"

    http_timeout_seconds: float = 10.0
    http_retry_attempts: int = 5
    http_retry_backoff_seconds: float = 1.0

    kraken_interval_minutes: int = 1440
    kraken_max_pages: int = 20

    data_retry_attempts: int = 3
    backoff_initial_seconds: float = 1.0
    backoff_factor: float = 2.0
    backoff_max_seconds: float = 30.0

    binance_price_basis: Literal["close", "high", "low"] = "close"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@cache
def config() -> AppSettings:
    return AppSettings()
