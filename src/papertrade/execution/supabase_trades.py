"""Execution client that inserts trades into a Supabase ``trades`` table."""

from __future__ import annotations

import logging
from decimal import Decimal
from time import sleep
from typing import Any

import requests

from papertrade.data.base import to_decimal
from papertrade.domain.models import OrderIntent, OrderSide, OrderType, TradeRecord
from papertrade.errors import ExecutionError


class SupabaseTradesClient:
    """PostgREST wrapper for the remote trades table.

    Inserts are sent once and never retried; reads retry transient failures.
    """

    TABLE_PATH = "/rest/v1/trades"

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        user_id: str,
        access_token: str = "",
        timeout: int = 20,
        max_retries: int = 3,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.user_id = user_id
        self.timeout = timeout
        self.max_retries = max_retries
        self.logger = logging.getLogger("papertrade.execution.supabase_trades")
        self.session = requests.Session()
        self.session.headers.update(
            {
                "apikey": anon_key,
                "Authorization": f"Bearer {access_token or anon_key}",
                "Content-Type": "application/json",
                "Prefer": "return=representation",
            }
        )

    def execute(self, intent: OrderIntent) -> TradeRecord:
        body: dict[str, Any] = {
            "user_id": self.user_id,
            "symbol": intent.instrument.symbol,
            "type": intent.side.value,
            "order_type": intent.order_type.value,
            "quantity": float(intent.quantity),
            "price": float(intent.price),
            "total": float(intent.notional_total),
        }
        payload = self._request("POST", self.TABLE_PATH, json=body, attempts=1)
        rows = payload if isinstance(payload, list) else [payload]
        if not rows or not isinstance(rows[0], dict):
            raise ExecutionError("Supabase insert returned no trade row")
        return self._to_trade_record(rows[0], fallback=body)

    def list_trades(self, user_id: str) -> list[TradeRecord]:
        payload = self._request(
            "GET",
            self.TABLE_PATH,
            params={
                "select": "*",
                "user_id": f"eq.{user_id}",
                "order": "created_at.desc",
            },
            attempts=self.max_retries,
        )
        trades: list[TradeRecord] = []
        for item in payload if isinstance(payload, list) else []:
            if not isinstance(item, dict):
                continue
            try:
                trades.append(self._to_trade_record(item))
            except ExecutionError as exc:
                self.logger.warning("Skipping trade row %s: %s", item.get("id"), exc)
        return trades

    def _request(
        self,
        method: str,
        path: str,
        attempts: int,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                response = self.session.request(
                    method=method,
                    url=url,
                    json=json,
                    params=params,
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                last_error = exc
                if attempt == attempts:
                    break
                sleep(float(attempt))
                continue

            if response.status_code >= 500 and attempt < attempts:
                sleep(float(attempt))
                continue

            if response.status_code >= 400:
                detail = response.text.strip() or "Request rejected"
                raise ExecutionError(
                    f"Supabase API error {response.status_code} for {path}: {detail}"
                )

            try:
                return response.json()
            except ValueError as exc:
                raise ExecutionError(f"Supabase response for {path} was not valid JSON") from exc

        if last_error is not None:
            raise ExecutionError(f"Supabase request failed for {path}: {last_error}") from last_error
        raise ExecutionError(f"Supabase request failed for {path}")

    @staticmethod
    def _to_trade_record(
        row: dict[str, Any],
        fallback: dict[str, Any] | None = None,
    ) -> TradeRecord:
        source = {**(fallback or {}), **row}
        try:
            side = OrderSide(str(source.get("type", "buy")).lower())
            order_type = OrderType(str(source.get("order_type", "market")).lower())
        except ValueError as exc:
            raise ExecutionError(f"Unrecognized trade row {source.get('id', '')}: {exc}") from exc
        return TradeRecord(
            id=str(source.get("id", "")),
            user_id=str(source.get("user_id", "")),
            symbol=str(source.get("symbol", "")).upper(),
            side=side,
            order_type=order_type,
            quantity=to_decimal(source.get("quantity")) or Decimal("0"),
            price=to_decimal(source.get("price")) or Decimal("0"),
            total=to_decimal(source.get("total")) or Decimal("0"),
            created_at=str(source.get("created_at", "")),
            raw=row,
        )
