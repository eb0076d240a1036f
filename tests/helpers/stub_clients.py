from __future__ import annotations

from decimal import Decimal

from services.ohlc_types import KrakenOHLCPage, OHLCSample


def sample(timestamp: int, low: str, high: str, close: str | None = None) -> OHLCSample:
    low_value = Decimal(low)
    high_value = Decimal(high)
    return OHLCSample(
        timestamp=timestamp,
        open=low_value,
        high=high_value,
        low=low_value,
        close=Decimal(close) if close is not None else (low_value + high_value) / 2,
    )


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class StubKrakenClient:
    """Serves queued pages (or raises queued errors) in call order."""

    def __init__(self, responses: list[list[OHLCSample] | Exception]) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, int, int]] = []

    def get_ohlc(self, pair: str, *, interval: int, since: int) -> KrakenOHLCPage:
        self.calls.append((pair, interval, since))
        if not self.responses:
            raise AssertionError(f"unexpected Kraken call for {pair} since={since}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        last = response[-1].timestamp if response else None
        return KrakenOHLCPage(pair=pair, samples=tuple(response), last=last)


class StubBinanceClient:
    def __init__(self, candles: dict[str, list[list[OHLCSample] | Exception]]) -> None:
        self.candles = {symbol: list(responses) for symbol, responses in candles.items()}
        self.calls: list[tuple[str, int]] = []

    def get_minute_klines(self, symbol: str, *, start_ms: int) -> list[OHLCSample]:
        self.calls.append((symbol, start_ms))
        responses = self.candles.get(symbol)
        if not responses:
            raise AssertionError(f"unexpected Binance call for {symbol}")
        response = responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response
