from __future__ import annotations

from decimal import InvalidOperation
from typing import Any

from .errors import DataUnavailableError, DecodeError
from .http_client import JsonFetcher, JsonHttpClient
from .ohlc_types import KrakenOHLCPage, OHLCSample, to_price

# API docs: https://docs.kraken.com/api/docs/rest-api/get-ohlc-data


class KrakenClient:
    def __init__(
        self,
        *,
        base_url: str = "https://api.kraken.com",
        fetcher: JsonFetcher | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.fetcher = fetcher or JsonHttpClient()

    def get_ohlc(self, pair: str, *, interval: int, since: int) -> KrakenOHLCPage:
        if not pair:
            raise ValueError("pair must be provided")
        if interval <= 0:
            raise ValueError("interval must be > 0")

        params = {
            "pair": pair,
            "interval": str(interval),
            "since": str(since),
        }
        payload = self.fetcher.get_json(f"{self.base_url}/0/public/OHLC", params=params)
        if not isinstance(payload, dict):
            raise DecodeError("Kraken OHLC returned unexpected payload type", payload=payload, pair=pair)

        result = payload.get("result")
        if result is None:
            errors = payload.get("error") or []
            message = "; ".join(str(err) for err in errors) or "Kraken OHLC returned no result"
            raise DataUnavailableError(f"{message} at since={since}", stage="kraken-ohlc", pair=pair)
        if not isinstance(result, dict):
            raise DecodeError("Kraken OHLC result is not an object", payload=payload, pair=pair)

        samples: list[OHLCSample] = []
        for key, rows in result.items():
            if key == "last":
                continue
            if not isinstance(rows, list):
                raise DecodeError(f"Kraken OHLC series {key} is not a list", payload=rows, pair=pair)
            samples.extend(self._parse_row(row, pair=pair) for row in rows)

        last_raw = result.get("last")
        try:
            last = int(last_raw) if last_raw is not None else None
        except (TypeError, ValueError) as exc:
            raise DecodeError("Kraken OHLC cursor is not an integer", payload=last_raw, pair=pair) from exc

        return KrakenOHLCPage(
            pair=pair,
            samples=tuple(samples),
            last=last,
        )

    @staticmethod
    def _parse_row(row: Any, *, pair: str) -> OHLCSample:
        # [time, open, high, low, close, vwap, volume, count]
        if not isinstance(row, list) or len(row) < 5:
            raise DecodeError("Kraken OHLC row has unexpected shape", payload=row, pair=pair)
        try:
            return OHLCSample(
                timestamp=int(row[0]),
                open=to_price(row[1]),
                high=to_price(row[2]),
                low=to_price(row[3]),
                close=to_price(row[4]),
            )
        except (InvalidOperation, TypeError, ValueError) as exc:
            raise DecodeError("Kraken OHLC row contains non-numeric values", payload=row, pair=pair) from exc


__all__ = ["KrakenClient"]
