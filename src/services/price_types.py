from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from domain.pricing import ProviderVariant


@dataclass(frozen=True)
class PriceQuote:
    """Fiat price of one coin as resolved from an exchange's history.

    ``valid_from``/``valid_to`` both equal the priced instant: exchange prices
    are point lookups, not buckets.
    """

    timestamp: datetime
    base_id: str
    quote_id: str
    rate: Decimal
    source: str
    provider: ProviderVariant
    valid_from: datetime
    valid_to: datetime


__all__ = ["PriceQuote"]
