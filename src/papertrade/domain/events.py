"""Structured event stream models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class TradeEvent:
    """Single event written to JSONL."""

    session_id: str
    event_type: str
    symbol: str = ""
    payload: dict[str, Any] = field(default_factory=dict)
    ts: str = field(default_factory=lambda: datetime.now(tz=UTC).isoformat())

    def to_record(self) -> dict[str, Any]:
        """Convert event to serializable dict."""
        return {
            "ts": self.ts,
            "session_id": self.session_id,
            "event_type": self.event_type,
            "symbol": self.symbol,
            "payload": self.payload,
        }
