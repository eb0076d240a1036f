from __future__ import annotations

import pytest

from services.errors import DataUnavailableError, TransportError
from services.retry import BackoffPolicy, retry_unavailable
from tests.helpers.stub_clients import SleepRecorder


def test_backoff_grows_exponentially_and_is_capped() -> None:
    policy = BackoffPolicy(initial_seconds=0.5, factor=2.0, max_seconds=3.0)

    assert [policy.delay(n) for n in range(5)] == [0.5, 1.0, 2.0, 3.0, 3.0]


def test_backoff_rejects_shrinking_factor() -> None:
    with pytest.raises(ValueError):
        BackoffPolicy(factor=0.5)


def test_retry_returns_after_transient_unavailability(sleep_recorder: SleepRecorder) -> None:
    outcomes: list[Exception | str] = [DataUnavailableError("empty"), DataUnavailableError("empty"), "ok"]

    def operation() -> str:
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    result = retry_unavailable(operation, attempts=3, backoff=BackoffPolicy(initial_seconds=1), sleep=sleep_recorder)

    assert result == "ok"
    assert sleep_recorder.delays == [1.0, 2.0]


def test_retry_surfaces_last_error_when_exhausted(sleep_recorder: SleepRecorder) -> None:
    calls = 0

    def operation() -> None:
        nonlocal calls
        calls += 1
        raise DataUnavailableError(f"empty #{calls}")

    with pytest.raises(DataUnavailableError, match="empty #2"):
        retry_unavailable(operation, attempts=2, backoff=BackoffPolicy(), sleep=sleep_recorder)

    assert calls == 2
    assert len(sleep_recorder.delays) == 1


def test_retry_does_not_retry_other_errors(sleep_recorder: SleepRecorder) -> None:
    calls = 0

    def operation() -> None:
        nonlocal calls
        calls += 1
        raise TransportError("down")

    with pytest.raises(TransportError):
        retry_unavailable(operation, attempts=5, backoff=BackoffPolicy(), sleep=sleep_recorder)

    assert calls == 1
    assert sleep_recorder.delays == []


def test_backoff_stays_capped_for_very_long_runs() -> None:
    policy = BackoffPolicy(initial_seconds=1.0, factor=2.0, max_seconds=30.0)

    assert policy.delay(1100) == 30.0
    assert policy.delay(100_000) == 30.0
