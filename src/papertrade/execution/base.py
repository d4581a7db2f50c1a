"""Execution collaborator contract."""

from __future__ import annotations

from typing import Protocol

from papertrade.domain.models import OrderIntent, TradeRecord


class ExecutionClient(Protocol):
    """Interface for anything that records a finalized order."""

    def execute(self, intent: OrderIntent) -> TradeRecord:
        """Record the intent and return the confirmed transaction, or raise."""

    def list_trades(self, user_id: str) -> list[TradeRecord]:
        """Return a user's recorded trades, newest first."""
