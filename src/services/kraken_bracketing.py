from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Callable

from .errors import BracketNotFoundError, DataUnavailableError, InternalInconsistencyError
from .kraken_client import KrakenClient
from .ohlc_types import KrakenOHLCPage, OHLCSample, PriceBracket
from .retry import BackoffPolicy, retry_unavailable

logger = logging.getLogger(__name__)

DAILY_INTERVAL_MINUTES = 1440


class KrakenTickBracketing:
    """Pages Kraken OHLC data until a sample after the target time shows up.

    The cursor starts at ``since=0`` and moves to the newest sample at or
    before the target on every page. Paging stops after ``max_pages``.
    """

    def __init__(
        self,
        client: KrakenClient,
        *,
        interval_minutes: int = DAILY_INTERVAL_MINUTES,
        max_pages: int = 20,
        retry_attempts: int = 3,
        backoff: BackoffPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be > 0")
        if max_pages <= 0:
            raise ValueError("max_pages must be > 0")

        self.client = client
        self.interval_minutes = interval_minutes
        self.max_pages = max_pages
        self.retry_attempts = retry_attempts
        self.backoff = backoff or BackoffPolicy()
        self._sleep = sleep

    def bracket(self, pair: str, target_ts: int) -> PriceBracket:
        since = 0
        before: OHLCSample | None = None
        seen: dict[int, OHLCSample] = {}

        for page_idx in range(self.max_pages):
            if page_idx:
                self._sleep(self.backoff.delay(page_idx - 1))

            page = self._fetch_page(pair, since, target_ts)
            logger.info("Kraken %s page %d since=%d: %d samples", pair, page_idx + 1, since, len(page.samples))

            after: OHLCSample | None = None
            advanced = False
            for sample in page.samples:
                seen[sample.timestamp] = sample
                if sample.timestamp > target_ts:
                    after = sample
                    break
                before = sample
                if sample.timestamp > since:
                    advanced = True
                since = sample.timestamp

            if after is not None:
                if before is None:
                    raise InternalInconsistencyError(
                        "Kraken history starts after the requested time",
                        stage="kraken-bracket",
                        pair=pair,
                        timestamp=target_ts,
                    )
                window = tuple(seen[ts] for ts in sorted(seen) if ts <= after.timestamp)
                return PriceBracket(before=before, after=after, window=window)

            if not advanced:
                raise BracketNotFoundError(
                    f"Kraken history ends at {since} before the requested time",
                    stage="kraken-bracket",
                    pair=pair,
                    timestamp=target_ts,
                )

        raise BracketNotFoundError(
            f"No Kraken sample after the requested time within {self.max_pages} pages",
            stage="kraken-bracket",
            pair=pair,
            timestamp=target_ts,
        )

    def hop_price(self, pair: str, target_ts: int) -> Decimal:
        """Mid of the extreme low and high over the whole searched window."""
        bracket = self.bracket(pair, target_ts)
        low = min(sample.low for sample in bracket.window)
        high = max(sample.high for sample in bracket.window)
        price = (low + high) / Decimal(2)
        logger.debug(
            "Kraken %s bracket %d..%d over %d samples: low=%s high=%s -> %s",
            pair,
            bracket.before.timestamp,
            bracket.after.timestamp,
            len(bracket.window),
            low,
            high,
            price,
        )
        return price

    def _fetch_page(self, pair: str, since: int, target_ts: int) -> KrakenOHLCPage:
        def fetch() -> KrakenOHLCPage:
            page = self.client.get_ohlc(pair, interval=self.interval_minutes, since=since)
            if not page.samples:
                raise DataUnavailableError(
                    f"Kraken OHLC returned no samples at since={since}",
                    stage="kraken-ohlc",
                    pair=pair,
                    timestamp=target_ts,
                )
            return page

        return retry_unavailable(fetch, attempts=self.retry_attempts, backoff=self.backoff, sleep=self._sleep)


__all__ = ["DAILY_INTERVAL_MINUTES", "KrakenTickBracketing"]
