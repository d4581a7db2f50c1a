"""Static demo market data used when live providers are unavailable."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

from papertrade.domain.models import AssetClass, Instrument, Quote
from papertrade.errors import MarketDataError


@dataclass(frozen=True)
class ForexRate:
    """Exchange rate row for the markets overview."""

    from_currency: str
    to_currency: str
    exchange_rate: Decimal
    change: Decimal
    change_percent: Decimal

    @property
    def symbol(self) -> str:
        return f"{self.from_currency}{self.to_currency}"


@dataclass(frozen=True)
class NewsItem:
    """Headline shown in the news feed."""

    title: str
    url: str
    source: str
    summary: str


DEMO_PRICES: dict[str, Decimal] = {
    "BTC": Decimal("50000"),
    "ETH": Decimal("3000"),
    "SOL": Decimal("100"),
    "AAPL": Decimal("175"),
    "MSFT": Decimal("410"),
    "GOOGL": Decimal("140"),
    "AMZN": Decimal("175"),
    "TSLA": Decimal("200"),
}

FOREX_RATES: list[ForexRate] = [
    ForexRate("EUR", "USD", Decimal("1.08"), Decimal("0.002"), Decimal("0.19")),
    ForexRate("GBP", "USD", Decimal("1.27"), Decimal("-0.001"), Decimal("-0.08")),
    ForexRate("USD", "JPY", Decimal("149.8"), Decimal("0.56"), Decimal("0.37")),
    ForexRate("AUD", "USD", Decimal("0.66"), Decimal("-0.003"), Decimal("-0.45")),
    ForexRate("USD", "CAD", Decimal("1.36"), Decimal("0.005"), Decimal("0.37")),
]

NEWS: list[NewsItem] = [
    NewsItem(
        title="Fed signals possibility of rate cuts later this year",
        url="#",
        source="Financial Times",
        summary="Federal Reserve officials indicated they could begin cutting interest "
        "rates in the coming months if inflation continues to cool.",
    ),
    NewsItem(
        title="Bitcoin surpasses $50,000 as institutional demand grows",
        url="#",
        source="Bloomberg",
        summary="Bitcoin has crossed the $50,000 mark for the first time since December, "
        "driven by growing institutional adoption.",
    ),
    NewsItem(
        title="Apple unveils new AI features for upcoming iPhone release",
        url="#",
        source="Reuters",
        summary="Apple announced a suite of new AI capabilities that will be integrated "
        "into its next iPhone operating system.",
    ),
    NewsItem(
        title="Oil prices drop amid concerns over global demand",
        url="#",
        source="CNBC",
        summary="Crude oil prices fell as traders assessed weakening demand in China and "
        "potential increases in global supply.",
    ),
]


class StaticQuoteFeed:
    """Quote feed over the hard-coded demo prices and forex rates."""

    def __init__(
        self,
        prices: dict[str, Decimal] | None = None,
        forex_rates: list[ForexRate] | None = None,
    ) -> None:
        self.prices = dict(DEMO_PRICES if prices is None else prices)
        self.forex_rates = list(FOREX_RATES if forex_rates is None else forex_rates)

    def get_quote(self, instrument: Instrument) -> Quote:
        symbol = instrument.symbol.strip().upper().replace("/", "")
        now = datetime.now(tz=UTC)
        if instrument.asset_class is AssetClass.FOREX:
            for rate in self.forex_rates:
                if rate.symbol == symbol:
                    return Quote(
                        price=rate.exchange_rate,
                        as_of=now,
                        symbol=symbol,
                        change=rate.change,
                        change_percent=rate.change_percent,
                    )
            raise MarketDataError(f"No static forex rate for {symbol}")
        price = self.prices.get(symbol)
        if price is None:
            raise MarketDataError(f"No static price for {symbol}")
        return Quote(price=price, as_of=now, symbol=symbol)


def get_forex_rates() -> list[ForexRate]:
    return list(FOREX_RATES)


def get_financial_news() -> list[NewsItem]:
    return list(NEWS)
