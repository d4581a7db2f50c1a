from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest
import requests

from papertrade.domain.models import Instrument, OrderIntent, OrderSide, OrderType
from papertrade.errors import ExecutionError
from papertrade.execution.supabase_trades import SupabaseTradesClient


class StubResponse:
    def __init__(self, status_code: int, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        return self._payload


class StubSession:
    def __init__(self, responses: list[Any]) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def request(self, **kwargs: Any) -> StubResponse:
        self.calls.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(session: StubSession) -> SupabaseTradesClient:
    client = SupabaseTradesClient(
        base_url="https://project.supabase.co/",
        anon_key="anon",
        access_token="token",
        user_id="user-1",
    )
    client.session = session  # type: ignore[assignment]
    return client


def make_intent(instrument: Instrument) -> OrderIntent:
    return OrderIntent(
        instrument=instrument,
        side=OrderSide.SELL,
        order_type=OrderType.LIMIT,
        quantity=Decimal("2"),
        price=Decimal("180"),
        notional_total=Decimal("360"),
        client_order_id="c1",
    )


def test_headers_carry_api_key_and_bearer_token() -> None:
    client = SupabaseTradesClient(base_url="https://x.supabase.co", anon_key="anon", user_id="u")

    assert client.session.headers["apikey"] == "anon"
    assert client.session.headers["Authorization"] == "Bearer anon"
    assert client.session.headers["Prefer"] == "return=representation"


def test_execute_inserts_trade_row(apple: Instrument) -> None:
    row = {
        "id": "row-1",
        "user_id": "user-1",
        "symbol": "AAPL",
        "type": "sell",
        "order_type": "limit",
        "quantity": 2,
        "price": 180,
        "total": 360,
        "created_at": "2024-01-02T10:00:00+00:00",
    }
    session = StubSession([StubResponse(201, [row])])
    client = make_client(session)

    record = client.execute(make_intent(apple))

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://project.supabase.co/rest/v1/trades"
    assert call["json"] == {
        "user_id": "user-1",
        "symbol": "AAPL",
        "type": "sell",
        "order_type": "limit",
        "quantity": 2.0,
        "price": 180.0,
        "total": 360.0,
    }
    assert record.id == "row-1"
    assert record.side is OrderSide.SELL
    assert record.order_type is OrderType.LIMIT
    assert record.total == Decimal("360")


def test_execute_is_not_retried_on_server_error(
    apple: Instrument, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("papertrade.execution.supabase_trades.sleep", lambda _seconds: None)
    session = StubSession([StubResponse(503, text="unavailable"), StubResponse(201, [{}])])
    client = make_client(session)

    with pytest.raises(ExecutionError, match="503"):
        client.execute(make_intent(apple))

    assert len(session.calls) == 1


def test_execute_wraps_transport_errors(apple: Instrument) -> None:
    session = StubSession([requests.ConnectionError("connection reset")])
    client = make_client(session)

    with pytest.raises(ExecutionError, match="connection reset"):
        client.execute(make_intent(apple))


def test_list_trades_retries_transient_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("papertrade.execution.supabase_trades.sleep", lambda _seconds: None)
    rows = [
        {"id": "2", "user_id": "user-1", "symbol": "btc", "type": "buy", "order_type": "market",
         "quantity": "0.5", "price": "45000", "total": "22500", "created_at": "2024-01-02"},
    ]
    session = StubSession([StubResponse(502, text="bad gateway"), StubResponse(200, rows)])
    client = make_client(session)

    trades = client.list_trades("user-1")

    assert len(session.calls) == 2
    assert session.calls[1]["params"]["user_id"] == "eq.user-1"
    assert session.calls[1]["params"]["order"] == "created_at.desc"
    assert trades[0].symbol == "BTC"
    assert trades[0].quantity == Decimal("0.5")


def test_list_trades_skips_rows_with_unknown_side() -> None:
    rows = [
        {"id": "3", "user_id": "user-1", "symbol": "eth", "type": "short", "order_type": "market",
         "quantity": "1", "price": "3000", "total": "3000", "created_at": "2024-01-03"},
        {"id": "2", "user_id": "user-1", "symbol": "btc", "type": "buy", "order_type": "stop",
         "quantity": "0.5", "price": "45000", "total": "22500", "created_at": "2024-01-02"},
        {"id": "1", "user_id": "user-1", "symbol": "aapl", "type": "SELL", "order_type": "limit",
         "quantity": "2", "price": "180", "total": "360", "created_at": "2024-01-01"},
    ]
    client = make_client(StubSession([StubResponse(200, rows)]))

    trades = client.list_trades("user-1")

    assert [trade.id for trade in trades] == ["1"]
    assert trades[0].side is OrderSide.SELL
    assert trades[0].order_type is OrderType.LIMIT


def test_execute_rejects_unrecognized_inserted_row(apple: Instrument) -> None:
    row = {"id": "9", "user_id": "user-1", "symbol": "AAPL", "type": "hold"}
    client = make_client(StubSession([StubResponse(201, [row])]))

    with pytest.raises(ExecutionError, match="Unrecognized trade row 9"):
        client.execute(make_intent(apple))
