"""Paper execution for local sessions and tests."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any
from uuid import uuid4

from papertrade.domain.models import OrderIntent, OrderSide, OrderType, TradeRecord
from papertrade.errors import ExecutionError
from papertrade.logging.event_sink import load_events

FILLED_EVENT = "order_filled"


def short_trade_id() -> str:
    return uuid4().hex[:7]


class PaperExecutionClient:
    """Records every intent as an immediately confirmed trade.

    Trades live in memory for the current process. When ``journal_dir`` is
    set, ``list_trades`` also reads fills recorded by earlier sessions from
    ``<journal_dir>/<session_id>/events.jsonl``.
    """

    def __init__(
        self,
        user_id: str = "123",
        id_factory: Callable[[], str] | None = None,
        journal_dir: str | None = None,
    ) -> None:
        self.user_id = user_id
        self.journal_dir = journal_dir
        self._id_factory = id_factory or short_trade_id
        self._trades: list[TradeRecord] = []
        self._client_order_ids: set[str] = set()
        self.logger = logging.getLogger("papertrade.execution.paper")

    def execute(self, intent: OrderIntent) -> TradeRecord:
        if intent.client_order_id in self._client_order_ids:
            raise ExecutionError(f"Duplicate client_order_id {intent.client_order_id}")
        record = TradeRecord(
            id=self._id_factory(),
            user_id=self.user_id,
            symbol=intent.instrument.symbol,
            side=intent.side,
            order_type=intent.order_type,
            quantity=intent.quantity,
            price=intent.price,
            total=intent.notional_total,
            created_at=datetime.now(tz=UTC).isoformat(),
            raw={"client_order_id": intent.client_order_id},
        )
        self._client_order_ids.add(intent.client_order_id)
        self._trades.append(record)
        return record

    def list_trades(self, user_id: str) -> list[TradeRecord]:
        """Return the user's trades, newest first."""
        trades: dict[str, TradeRecord] = {}
        for record in [*reversed(self._trades), *self._journal_trades()]:
            if record.user_id == user_id:
                trades.setdefault(record.id, record)
        return sorted(trades.values(), key=lambda record: record.created_at, reverse=True)

    def _journal_trades(self) -> list[TradeRecord]:
        if not self.journal_dir:
            return []
        records: list[TradeRecord] = []
        for events_path in sorted(Path(self.journal_dir).glob("*/events.jsonl")):
            for event in load_events(events_path):
                if event.get("event_type") != FILLED_EVENT:
                    continue
                record = self._journal_record(event.get("payload") or {})
                if record is None:
                    self.logger.warning("Skipping unreadable fill in %s", events_path)
                    continue
                records.append(record)
        return records

    @staticmethod
    def _journal_record(payload: dict[str, Any]) -> TradeRecord | None:
        try:
            return TradeRecord(
                id=str(payload["trade_id"]),
                user_id=str(payload["user_id"]),
                symbol=str(payload["symbol"]),
                side=OrderSide(payload["side"]),
                order_type=OrderType(payload["order_type"]),
                quantity=Decimal(str(payload["quantity"])),
                price=Decimal(str(payload["price"])),
                total=Decimal(str(payload["total"])),
                created_at=str(payload.get("recorded_at", "")),
                raw=payload,
            )
        except (KeyError, ValueError, InvalidOperation):
            return None
