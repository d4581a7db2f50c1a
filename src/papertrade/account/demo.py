"""Demo account with a fixed balance and seeded holdings."""

from __future__ import annotations

from decimal import Decimal

from papertrade.domain.models import AccountSnapshot, AssetClass, Holding

DEMO_USER_ID = "123"
DEMO_BALANCE = Decimal("100000")

DEMO_HOLDINGS: list[Holding] = [
    Holding(
        symbol="BTC",
        asset_id="bitcoin",
        name="Bitcoin",
        asset_class=AssetClass.CRYPTO,
        quantity=Decimal("0.5"),
        average_buy_price=Decimal("45000"),
    ),
    Holding(
        symbol="AAPL",
        asset_id="aapl",
        name="Apple Inc",
        asset_class=AssetClass.STOCK,
        quantity=Decimal("10"),
        average_buy_price=Decimal("170"),
    ),
]


class DemoAccountProvider:
    """In-memory account used until a real portfolio backend exists.

    Balances are not debited by trades; the provider only reports figures.
    """

    def __init__(
        self,
        user_id: str = DEMO_USER_ID,
        balance: Decimal = DEMO_BALANCE,
        holdings: list[Holding] | None = None,
    ) -> None:
        self.user_id = user_id
        self.balance = balance
        seeded = DEMO_HOLDINGS if holdings is None else holdings
        self.holdings = {holding.symbol.upper(): holding for holding in seeded}

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            user_id=self.user_id,
            balance=self.balance,
            holdings=dict(self.holdings),
        )

    def available_balance(self) -> Decimal:
        return self.balance

    def owned_quantity(self, symbol: str) -> Decimal:
        holding = self.holdings.get(symbol.strip().upper())
        if holding is None:
            return Decimal("0")
        return holding.quantity
