from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Callable

from .binance_client import BinanceClient
from .errors import DataUnavailableError
from .ohlc_types import CandleWindow, OHLCSample
from .retry import BackoffPolicy, retry_unavailable

logger = logging.getLogger(__name__)


class BinanceCandleWindow:
    def __init__(
        self,
        client: BinanceClient,
        *,
        retry_attempts: int = 3,
        backoff: BackoffPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.retry_attempts = retry_attempts
        self.backoff = backoff or BackoffPolicy()
        self._sleep = sleep

    def window_average(self, pair: str, start_ms: int) -> CandleWindow:
        candles = retry_unavailable(
            lambda: self._fetch_candles(pair, start_ms),
            attempts=self.retry_attempts,
            backoff=self.backoff,
            sleep=self._sleep,
        )

        count = Decimal(len(candles))
        window = CandleWindow(
            avg_low=sum((candle.low for candle in candles), Decimal(0)) / count,
            avg_high=sum((candle.high for candle in candles), Decimal(0)) / count,
            avg_close=sum((candle.close for candle in candles), Decimal(0)) / count,
            count=len(candles),
        )
        logger.debug("Binance %s window at %d over %d candles: %s", pair, start_ms, len(candles), window)
        return window

    def _fetch_candles(self, pair: str, start_ms: int) -> list[OHLCSample]:
        candles = self.client.get_minute_klines(pair, start_ms=start_ms)
        if not candles:
            raise DataUnavailableError(
                f"Binance klines returned no candles at startTime={start_ms}", stage="binance-klines", pair=pair
            )
        return candles


__all__ = ["BinanceCandleWindow"]
