from __future__ import annotations

from decimal import Decimal
from unittest.mock import Mock

import pytest

from services.errors import DataUnavailableError, DecodeError
from services.kraken_client import KrakenClient


def _fetcher(payload: object) -> Mock:
    fetcher = Mock()
    fetcher.get_json.return_value = payload
    return fetcher


def test_get_ohlc_builds_request_and_parses_rows() -> None:
    payload = {
        "error": [],
        "result": {
            "XXBTZEUR": [
                [1_546_300_800, "3400.0", "3500.5", "3350.1", "3450.2", "3420.0", "120.5", 900],
                [1_546_387_200, "3450.2", "3600.0", "3440.0", "3550.0", "3500.0", "98.1", 850],
            ],
            "last": 1_546_387_200,
        },
    }
    fetcher = _fetcher(payload)

    client = KrakenClient(fetcher=fetcher)
    page = client.get_ohlc("XBTEUR", interval=1440, since=0)

    fetcher.get_json.assert_called_once_with(
        "https://api.kraken.com/0/public/OHLC",
        params={"pair": "XBTEUR", "interval": "1440", "since": "0"},
    )
    assert page.last == 1_546_387_200
    assert [sample.timestamp for sample in page.samples] == [1_546_300_800, 1_546_387_200]
    first = page.samples[0]
    assert first.open == Decimal("3400.0")
    assert first.high == Decimal("3500.5")
    assert first.low == Decimal("3350.1")
    assert first.close == Decimal("3450.2")


def test_get_ohlc_treats_missing_result_as_unavailable() -> None:
    fetcher = _fetcher({"error": ["EQuery:Unknown asset pair"]})

    client = KrakenClient(fetcher=fetcher)
    with pytest.raises(DataUnavailableError) as exc_info:
        client.get_ohlc("FOOEUR", interval=1440, since=0)

    assert "EQuery:Unknown asset pair" in str(exc_info.value)
    assert exc_info.value.pair == "FOOEUR"


def test_get_ohlc_treats_null_result_as_unavailable() -> None:
    client = KrakenClient(fetcher=_fetcher({"error": [], "result": None}))

    with pytest.raises(DataUnavailableError):
        client.get_ohlc("XBTEUR", interval=1440, since=0)


def test_get_ohlc_rejects_malformed_rows() -> None:
    payload = {"error": [], "result": {"XXBTZEUR": [[1_546_300_800, "3400.0"]], "last": 1}}
    client = KrakenClient(fetcher=_fetcher(payload))

    with pytest.raises(DecodeError):
        client.get_ohlc("XBTEUR", interval=1440, since=0)


def test_get_ohlc_rejects_non_numeric_values() -> None:
    payload = {"error": [], "result": {"XXBTZEUR": [[1, "a", "b", "c", "d"]], "last": 1}}
    client = KrakenClient(fetcher=_fetcher(payload))

    with pytest.raises(DecodeError):
        client.get_ohlc("XBTEUR", interval=1440, since=0)


def test_custom_base_url_is_trimmed() -> None:
    fetcher = _fetcher({"error": [], "result": {"XXBTZEUR": [], "last": 0}})

    KrakenClient(base_url="http://localhost:8080/", fetcher=fetcher).get_ohlc("XBTEUR", interval=60, since=5)

    assert fetcher.get_json.call_args.args[0] == "http://localhost:8080/0/public/OHLC"


@pytest.mark.parametrize("bad_value", ["NaN", "Infinity", "-inf", "sNaN"])
def test_get_ohlc_rejects_non_finite_prices(bad_value: str) -> None:
    payload = {"error": [], "result": {"XXBTZEUR": [[100, "1", bad_value, "1", "1"]], "last": 100}}
    client = KrakenClient(fetcher=_fetcher(payload))

    with pytest.raises(DecodeError) as exc_info:
        client.get_ohlc("XBTEUR", interval=1440, since=0)

    assert exc_info.value.pair == "XBTEUR"


def test_get_ohlc_rejects_malformed_cursor() -> None:
    payload = {"error": [], "result": {"XXBTZEUR": [[100, "1", "2", "1", "1"]], "last": "abc"}}
    client = KrakenClient(fetcher=_fetcher(payload))

    with pytest.raises(DecodeError) as exc_info:
        client.get_ohlc("XBTEUR", interval=1440, since=0)

    assert exc_info.value.payload == "abc"


def test_missing_result_does_not_report_cursor_as_timestamp() -> None:
    client = KrakenClient(fetcher=_fetcher({"error": [], "result": None}))

    with pytest.raises(DataUnavailableError) as exc_info:
        client.get_ohlc("XBTEUR", interval=1440, since=1_546_300_800)

    assert exc_info.value.timestamp is None
    assert "since=1546300800" in str(exc_info.value)
