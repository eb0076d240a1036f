from __future__ import annotations

from datetime import datetime
from typing import Protocol

from domain.pricing import Coin, FiatPriceProvider, ProviderVariant

from .errors import UnsupportedCoinError
from .price_types import PriceQuote


class PriceSnapshotSource(Protocol):
    def fetch_snapshot(self, base_id: str, quote_id: str, timestamp: datetime) -> PriceQuote: ...


class ExchangePriceSource(PriceSnapshotSource):
    """Serves fiat quotes for one exchange's trade log through the price resolver."""

    def __init__(
        self,
        *,
        resolver: FiatPriceProvider,
        fiat_coin: Coin,
        variant: ProviderVariant = ProviderVariant.UNSPECIFIED,
        source_name: str | None = None,
    ) -> None:
        self.resolver = resolver
        self.fiat_coin = fiat_coin
        self.variant = variant
        self.source_name = source_name or f"exchange-{variant.value.lower()}"

    def fetch_snapshot(self, base_id: str, quote_id: str, timestamp: datetime) -> PriceQuote:
        base = base_id.upper()
        quote = quote_id.upper()
        if quote != self.fiat_coin.value:
            msg = f"{self.source_name} only quotes in {self.fiat_coin.value}, got {quote}"
            raise ValueError(msg)
        try:
            coin = Coin(base)
        except ValueError as exc:
            raise UnsupportedCoinError(f"Unknown coin {base}", stage="snapshot", coin=base) from exc

        rate = self.resolver.resolve(self.variant, coin, timestamp)
        return PriceQuote(
            timestamp=timestamp,
            base_id=base,
            quote_id=quote,
            rate=rate,
            source=self.source_name,
            provider=self.variant,
            valid_from=timestamp,
            valid_to=timestamp,
        )


__all__ = ["ExchangePriceSource", "PriceSnapshotSource"]
