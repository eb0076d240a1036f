from __future__ import annotations

from decimal import InvalidOperation
from typing import Any

from .errors import DecodeError
from .http_client import JsonFetcher, JsonHttpClient
from .ohlc_types import OHLCSample, to_price

# API docs: https://developers.binance.com/docs/binance-spot-api-docs/rest-api/market-data-endpoints
ONE_MINUTE_MS = 60_000


class BinanceClient:
    def __init__(
        self,
        *,
        base_url: str = "https://api.binance.com",
        fetcher: JsonFetcher | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.fetcher = fetcher or JsonHttpClient()

    def get_minute_klines(self, symbol: str, *, start_ms: int) -> list[OHLCSample]:
        """One-minute candles in ``[start_ms, start_ms + 60000]``."""
        if not symbol:
            raise ValueError("symbol must be provided")

        params = {
            "symbol": symbol,
            "interval": "1m",
            "startTime": str(start_ms),
            "endTime": str(start_ms + ONE_MINUTE_MS),
        }
        payload = self.fetcher.get_json(f"{self.base_url}/api/v1/klines", params=params)
        if not isinstance(payload, list):
            raise DecodeError("Binance klines returned unexpected payload type", payload=payload, pair=symbol)
        return [self._parse_kline(row, symbol=symbol) for row in payload]

    @staticmethod
    def _parse_kline(row: Any, *, symbol: str) -> OHLCSample:
        # [open time, open, high, low, close, volume, close time, ...]
        if not isinstance(row, list) or len(row) < 5:
            raise DecodeError("Binance kline has unexpected shape", payload=row, pair=symbol)
        try:
            return OHLCSample(
                timestamp=int(row[0]) // 1000,
                open=to_price(row[1]),
                high=to_price(row[2]),
                low=to_price(row[3]),
                close=to_price(row[4]),
            )
        except (InvalidOperation, TypeError, ValueError) as exc:
            raise DecodeError("Binance kline contains non-numeric values", payload=row, pair=symbol) from exc


__all__ = ["BinanceClient", "ONE_MINUTE_MS"]
