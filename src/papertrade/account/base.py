"""Balance and holdings provider contract."""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from papertrade.domain.models import AccountSnapshot


class AccountProvider(Protocol):
    """Interface for the cash balance and owned quantities of one user."""

    def snapshot(self) -> AccountSnapshot:
        """Return the current balance and holdings."""

    def available_balance(self) -> Decimal:
        """Return cash available for buy orders."""

    def owned_quantity(self, symbol: str) -> Decimal | None:
        """Return the owned quantity of a symbol, or None when unknown."""
