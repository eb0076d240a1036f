from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Protocol


class Coin(StrEnum):
    BTC = "BTC"
    ETH = "ETH"
    EOS = "EOS"
    LTC = "LTC"
    XRP = "XRP"
    BCH = "BCH"
    BNB = "BNB"
    ADA = "ADA"
    TRX = "TRX"
    XLM = "XLM"
    NEO = "NEO"
    IOTA = "IOTA"
    DASH = "DASH"
    ZEC = "ZEC"
    ETC = "ETC"
    XMR = "XMR"

    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"
    CAD = "CAD"
    JPY = "JPY"
    CHF = "CHF"


class ProviderVariant(StrEnum):
    """Exchange whose trade log originated a pricing request.

    UNSPECIFIED falls back to Kraken, which is the default price source.
    """

    UNSPECIFIED = "UNSPECIFIED"
    KRAKEN = "KRAKEN"
    BINANCE = "BINANCE"


class FiatPriceProvider(Protocol):
    """Lookup interface for the fiat value of one coin at a given instant."""

    def resolve(self, variant: ProviderVariant, coin: Coin, timestamp: datetime) -> Decimal: ...


class BridgePriceSource(Protocol):
    """Supplies the BTC→fiat rate used to convert BTC-denominated prices."""

    def btc_fiat_price(self, timestamp: datetime) -> Decimal: ...


__all__ = ["BridgePriceSource", "Coin", "FiatPriceProvider", "ProviderVariant"]
