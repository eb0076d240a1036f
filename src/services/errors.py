from __future__ import annotations

from datetime import datetime
from typing import Any


class PriceResolutionError(RuntimeError):
    """Base failure of a price resolution, tagged with where and for what it failed."""

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        coin: str | None = None,
        pair: str | None = None,
        timestamp: datetime | int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.coin = coin
        self.pair = pair
        self.timestamp = timestamp

    def __str__(self) -> str:
        context = [
            f"{name}={value}"
            for name, value in (
                ("stage", self.stage),
                ("coin", self.coin),
                ("pair", self.pair),
                ("timestamp", self.timestamp),
            )
            if value is not None
        ]
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class UnsupportedProviderError(PriceResolutionError):
    pass


class UnsupportedCoinError(PriceResolutionError):
    pass


class DataUnavailableError(PriceResolutionError):
    pass


class InternalInconsistencyError(PriceResolutionError):
    pass


class BracketNotFoundError(PriceResolutionError):
    pass


class TransportError(PriceResolutionError):
    def __init__(
        self, message: str, *, status_code: int | None = None, payload: Any | None = None, **context: Any
    ) -> None:
        super().__init__(message, **context)
        self.status_code = status_code
        self.payload = payload


class DecodeError(PriceResolutionError):
    def __init__(self, message: str, *, payload: Any | None = None, **context: Any) -> None:
        super().__init__(message, **context)
        self.payload = payload


__all__ = [
    "BracketNotFoundError",
    "DataUnavailableError",
    "DecodeError",
    "InternalInconsistencyError",
    "PriceResolutionError",
    "TransportError",
    "UnsupportedCoinError",
    "UnsupportedProviderError",
]
