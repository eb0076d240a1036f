from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterator, Literal

from config import config
from domain.pricing import BridgePriceSource, Coin, FiatPriceProvider, ProviderVariant

from .binance_client import BinanceClient
from .binance_window import BinanceCandleWindow
from .errors import PriceResolutionError, UnsupportedCoinError, UnsupportedProviderError
from .http_client import JsonHttpClient
from .kraken_bracketing import KrakenTickBracketing
from .kraken_client import KrakenClient
from .ohlc_types import CandleWindow
from .path_resolver import PathResolver
from .retry import BackoffPolicy

logger = logging.getLogger(__name__)

PriceBasis = Literal["close", "high", "low"]
IDENTITY = Decimal(1)


class KrakenBtcBridge(BridgePriceSource):
    """Prices BTC in fiat through the resolver's Kraken strategy only."""

    def __init__(self, resolver: ExchangePriceResolver) -> None:
        self._resolver = resolver

    def btc_fiat_price(self, timestamp: datetime) -> Decimal:
        return self._resolver.resolve_kraken(Coin.BTC, timestamp)


class ExchangePriceResolver(FiatPriceProvider):
    def __init__(
        self,
        *,
        kraken: KrakenTickBracketing,
        binance: BinanceCandleWindow,
        fiat_coin: Coin = Coin.EUR,
        path_resolver: PathResolver | None = None,
        bridge: BridgePriceSource | None = None,
        binance_price_basis: PriceBasis = "close",
    ) -> None:
        if binance_price_basis not in ("close", "high", "low"):
            raise ValueError(f"Unsupported Binance price basis: {binance_price_basis}")

        self.kraken = kraken
        self.binance = binance
        self.fiat_coin = fiat_coin
        self.path_resolver = path_resolver or PathResolver(fiat_coin)
        self.bridge = bridge or KrakenBtcBridge(self)
        self.binance_price_basis = binance_price_basis

    def resolve(self, variant: ProviderVariant, coin: Coin, timestamp: datetime) -> Decimal:
        try:
            variant = ProviderVariant(variant)
        except ValueError as exc:
            raise UnsupportedProviderError(
                f"Unsupported provider {variant!r}", stage="resolve", coin=str(coin), timestamp=timestamp
            ) from exc
        try:
            coin = Coin(coin)
        except ValueError as exc:
            raise UnsupportedCoinError(
                f"Unknown coin {coin!r}", stage="resolve", coin=str(coin), timestamp=timestamp
            ) from exc

        if variant in (ProviderVariant.UNSPECIFIED, ProviderVariant.KRAKEN):
            price = self.resolve_kraken(coin, timestamp)
        elif variant == ProviderVariant.BINANCE:
            price = self.resolve_binance(coin, timestamp)
        else:
            raise UnsupportedProviderError(
                f"Unsupported provider {variant!r}", stage="resolve", coin=str(coin), timestamp=timestamp
            )

        logger.info("%s %s price at %s: %s %s", variant, coin, timestamp.isoformat(), price, self.fiat_coin)
        return price

    def resolve_kraken(self, coin: Coin, timestamp: datetime) -> Decimal:
        target_ts = int(_as_utc(timestamp).timestamp())

        price: Decimal | None = None
        with _failure_context(coin, timestamp):
            for pair in self.path_resolver.kraken_path(coin):
                hop = self.kraken.hop_price(pair, target_ts)
                price = hop if price is None else price * hop

        if price is None:
            return IDENTITY
        return price

    def resolve_binance(self, coin: Coin, timestamp: datetime) -> Decimal:
        start_ms = _minute_start_ms(timestamp)

        folded: CandleWindow | None = None
        with _failure_context(coin, timestamp):
            for pair in self.path_resolver.binance_path(coin):
                window = self.binance.window_average(pair, start_ms)
                folded = window if folded is None else _multiply(folded, window)

            btc_price = IDENTITY if folded is None else self._basis(folded)
            return btc_price * self.bridge.btc_fiat_price(timestamp)

    def _basis(self, window: CandleWindow) -> Decimal:
        """BTC-denominated figure multiplied by the bridge rate.

        Defaults to the averaged close, the figure Binance prices have always been
        converted from; ``high`` and ``low`` remain selectable through settings.
        """
        if self.binance_price_basis == "high":
            return window.avg_high
        if self.binance_price_basis == "low":
            return window.avg_low
        return window.avg_close


@contextmanager
def _failure_context(coin: Coin, timestamp: datetime) -> Iterator[None]:
    """Tag failures raised below with the coin and requested time when they lack them."""
    try:
        yield
    except PriceResolutionError as exc:
        if exc.coin is None:
            exc.coin = str(coin)
        if exc.timestamp is None:
            exc.timestamp = timestamp
        raise


def _multiply(left: CandleWindow, right: CandleWindow) -> CandleWindow:
    return CandleWindow(
        avg_low=left.avg_low * right.avg_low,
        avg_high=left.avg_high * right.avg_high,
        avg_close=left.avg_close * right.avg_close,
        count=left.count + right.count,
    )


def _as_utc(timestamp: datetime) -> datetime:
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def _minute_start_ms(timestamp: datetime) -> int:
    minute = _as_utc(timestamp).replace(second=0, microsecond=0)
    return int(minute.timestamp()) * 1000


def build_default_resolver() -> ExchangePriceResolver:
    settings = config()
    fetcher = JsonHttpClient(
        timeout=settings.http_timeout_seconds,
        retry_attempts=settings.http_retry_attempts,
        retry_backoff_seconds=settings.http_retry_backoff_seconds,
    )
    backoff = BackoffPolicy(
        initial_seconds=settings.backoff_initial_seconds,
        factor=settings.backoff_factor,
        max_seconds=settings.backoff_max_seconds,
    )
    kraken = KrakenTickBracketing(
        KrakenClient(base_url=settings.kraken_base_url, fetcher=fetcher),
        interval_minutes=settings.kraken_interval_minutes,
        max_pages=settings.kraken_max_pages,
        retry_attempts=settings.data_retry_attempts,
        backoff=backoff,
    )
    binance = BinanceCandleWindow(
        BinanceClient(base_url=settings.binance_base_url, fetcher=fetcher),
        retry_attempts=settings.data_retry_attempts,
        backoff=backoff,
    )
    return ExchangePriceResolver(
        kraken=kraken,
        binance=binance,
        fiat_coin=settings.fiat_coin,
        binance_price_basis=settings.binance_price_basis,
    )


__all__ = ["ExchangePriceResolver", "KrakenBtcBridge", "build_default_resolver"]
