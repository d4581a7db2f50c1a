from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from papertrade.data.alpha_vantage import AlphaVantageClient
from papertrade.domain.models import Instrument
from papertrade.errors import MarketDataError

GLOBAL_QUOTE = {
    "Global Quote": {
        "01. symbol": "AAPL",
        "05. price": "175.2500",
        "06. volume": "51234567",
        "07. latest trading day": "2024-01-02",
        "09. change": "1.2500",
        "10. change percent": "0.7184%",
    }
}


class StubResponse:
    def __init__(self, payload: dict[str, Any]) -> None:
        self._payload = payload

    def raise_for_status(self) -> None:
        return None

    def json(self) -> dict[str, Any]:
        return self._payload


def install_responses(monkeypatch: pytest.MonkeyPatch, payloads: list[dict[str, Any]]) -> list[dict]:
    calls: list[dict] = []

    def fake_get(url: str, params: dict[str, str], timeout: int) -> StubResponse:
        _ = (url, timeout)
        calls.append(params)
        return StubResponse(payloads.pop(0))

    monkeypatch.setattr("papertrade.data.alpha_vantage.requests.get", fake_get)
    monkeypatch.setattr("papertrade.data.alpha_vantage.time.sleep", lambda _seconds: None)
    return calls


def test_get_quote_parses_global_quote(monkeypatch: pytest.MonkeyPatch, apple: Instrument) -> None:
    calls = install_responses(monkeypatch, [GLOBAL_QUOTE])

    quote = AlphaVantageClient(api_key="key").get_quote(apple)

    assert calls[0] == {"function": "GLOBAL_QUOTE", "symbol": "AAPL", "apikey": "key"}
    assert quote.price == Decimal("175.2500")
    assert quote.change == Decimal("1.2500")
    assert quote.change_percent == Decimal("0.7184")
    assert quote.volume == Decimal("51234567")
    assert quote.as_of.date().isoformat() == "2024-01-02"


def test_empty_global_quote_raises(monkeypatch: pytest.MonkeyPatch, apple: Instrument) -> None:
    install_responses(monkeypatch, [{"Global Quote": {}}])

    with pytest.raises(MarketDataError, match="no quote"):
        AlphaVantageClient().get_quote(apple)


def test_rate_limit_note_is_retried(monkeypatch: pytest.MonkeyPatch, apple: Instrument) -> None:
    calls = install_responses(
        monkeypatch,
        [{"Note": "Our standard API call frequency is 5 calls per minute."}, GLOBAL_QUOTE],
    )

    quote = AlphaVantageClient().get_quote(apple)

    assert len(calls) == 2
    assert quote.price == Decimal("175.2500")


def test_error_message_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    install_responses(monkeypatch, [{"Error Message": "Invalid API call."}])

    with pytest.raises(MarketDataError, match="Invalid API call"):
        AlphaVantageClient().fetch_daily("NOPE")


def test_fetch_daily_returns_sorted_ohlcv(monkeypatch: pytest.MonkeyPatch) -> None:
    series = {
        "Time Series (Daily)": {
            "2024-01-03": {
                "1. open": "2", "2. high": "3", "3. low": "1", "4. close": "2.5", "5. volume": "10"
            },
            "2024-01-02": {
                "1. open": "1", "2. high": "2", "3. low": "0.5", "4. close": "1.5", "5. volume": "20"
            },
        }
    }
    install_responses(monkeypatch, [series])

    frame = AlphaVantageClient().fetch_daily("aapl")

    assert list(frame.columns) == ["open", "high", "low", "close", "volume"]
    assert frame.index.is_monotonic_increasing
    assert frame["close"].tolist() == [1.5, 2.5]


def test_popular_stocks_skip_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    install_responses(monkeypatch, [GLOBAL_QUOTE, {"Global Quote": {}}])

    quotes = AlphaVantageClient().get_popular_stocks(["AAPL", "MSFT"])

    assert [quote.symbol for quote in quotes] == ["AAPL"]


def test_information_notice_fails_without_waiting(
    monkeypatch: pytest.MonkeyPatch, apple: Instrument
) -> None:
    notice = {"Information": "The demo API key is for demo purposes only."}
    calls = install_responses(monkeypatch, [notice])
    waits: list[float] = []
    monkeypatch.setattr("papertrade.data.alpha_vantage.time.sleep", waits.append)

    with pytest.raises(MarketDataError, match="demo purposes"):
        AlphaVantageClient().get_quote(apple)

    assert len(calls) == 1
    assert waits == []


def test_popular_stocks_with_information_notices_return_quickly(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    notice = {"Information": "The demo API key is for demo purposes only."}
    calls = install_responses(monkeypatch, [dict(notice) for _ in range(5)])
    waits: list[float] = []
    monkeypatch.setattr("papertrade.data.alpha_vantage.time.sleep", waits.append)

    assert AlphaVantageClient().get_popular_stocks() == []
    assert len(calls) == 5
    assert waits == []
