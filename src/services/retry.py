from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from .errors import DataUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class BackoffPolicy:
    initial_seconds: float = 1.0
    factor: float = 2.0
    max_seconds: float = 30.0

    def __post_init__(self) -> None:
        if self.initial_seconds < 0:
            raise ValueError("initial_seconds must be >= 0")
        if self.factor < 1:
            raise ValueError("factor must be >= 1")

    def delay(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (0-based)."""
        try:
            growth = self.factor**attempt
        except OverflowError:
            return self.max_seconds
        return min(self.initial_seconds * growth, self.max_seconds)


def retry_unavailable(
    operation: Callable[[], T],
    *,
    attempts: int,
    backoff: BackoffPolicy,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``operation``, retrying only on DataUnavailableError.

    ``attempts`` counts the first call; once exhausted the last error propagates.
    """
    if attempts <= 0:
        raise ValueError("attempts must be > 0")

    for attempt in range(attempts):
        try:
            return operation()
        except DataUnavailableError as exc:
            if attempt + 1 >= attempts:
                raise
            delay = backoff.delay(attempt)
            logger.warning("%s; retry %d/%d in %.1fs", exc, attempt + 1, attempts - 1, delay)
            sleep(delay)

    raise AssertionError("unreachable")


__all__ = ["BackoffPolicy", "retry_unavailable"]
