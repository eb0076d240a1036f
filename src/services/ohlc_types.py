from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class OHLCSample:
    timestamp: int
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal


@dataclass(frozen=True)
class KrakenOHLCPage:
    pair: str
    samples: tuple[OHLCSample, ...]
    last: int | None


@dataclass(frozen=True)
class PriceBracket:
    """Two adjacent samples around a target time plus everything seen while searching.

    ``window`` is sorted by timestamp and ends with ``after``.
    """

    before: OHLCSample
    after: OHLCSample
    window: tuple[OHLCSample, ...]


@dataclass(frozen=True)
class CandleWindow:
    avg_low: Decimal
    avg_high: Decimal
    avg_close: Decimal
    count: int


def to_price(value: Any) -> Decimal:
    """Parse an exchange price field; NaN and infinities are rejected with ValueError."""
    price = Decimal(str(value))
    if not price.is_finite():
        raise ValueError(f"non-finite price {value!r}")
    return price


__all__ = ["CandleWindow", "KrakenOHLCPage", "OHLCSample", "PriceBracket", "to_price"]
