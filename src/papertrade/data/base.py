"""Market data provider contract."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Protocol

from papertrade.domain.models import Instrument, Quote


class QuoteFeed(Protocol):
    """Interface for current-price retrieval."""

    def get_quote(self, instrument: Instrument) -> Quote:
        """Return the latest quote for an instrument."""


def to_decimal(value: Any) -> Decimal | None:
    """Convert a JSON number or numeric string to Decimal, or None."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    text = str(value).strip().rstrip("%")
    if not text or text.lower() in {"none", "null"}:
        return None
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None
