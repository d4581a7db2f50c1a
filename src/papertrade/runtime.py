"""Runtime wiring for quote, order, portfolio, and history actions."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from uuid import uuid4

import pandas as pd

from papertrade.account.base import AccountProvider
from papertrade.account.demo import DemoAccountProvider
from papertrade.config import Settings
from papertrade.data.alpha_vantage import AlphaVantageClient
from papertrade.data.base import QuoteFeed
from papertrade.data.coingecko import CoinGeckoClient
from papertrade.data.fallback import FallbackQuoteFeed
from papertrade.data.static import StaticQuoteFeed, get_financial_news, get_forex_rates
from papertrade.domain.models import AssetClass, Instrument, OrderSide, OrderType
from papertrade.errors import MarketDataError, PaperTradeError
from papertrade.execution.base import ExecutionClient
from papertrade.execution.paper import PaperExecutionClient
from papertrade.execution.supabase_trades import SupabaseTradesClient
from papertrade.logging.event_sink import (
    JsonlEventSink,
    generate_plotly_report,
    write_price_chart,
)
from papertrade.logging.logger import HumanLogger
from papertrade.orders.composer import OrderComposer
from papertrade.orders.sizing import qty_precision_for

KNOWN_CRYPTO: dict[str, tuple[str, str]] = {
    "bitcoin": ("BTC", "Bitcoin"),
    "ethereum": ("ETH", "Ethereum"),
    "solana": ("SOL", "Solana"),
}


def resolve_instrument(asset: str, asset_class: AssetClass | str) -> Instrument:
    """Build an instrument from a CLI asset id or symbol."""
    selected = AssetClass(asset_class)
    text = asset.strip()
    if not text:
        raise ValueError("asset must not be empty")
    if selected is AssetClass.CRYPTO:
        asset_id = text.lower()
        if asset_id in KNOWN_CRYPTO:
            symbol, name = KNOWN_CRYPTO[asset_id]
            return Instrument(symbol=symbol, asset_id=asset_id, name=name, asset_class=selected)
        for known_id, (symbol, name) in KNOWN_CRYPTO.items():
            if symbol == text.upper():
                return Instrument(symbol=symbol, asset_id=known_id, name=name, asset_class=selected)
        return Instrument(symbol=text.upper(), asset_id=asset_id, asset_class=selected)
    symbol = text.upper().replace("/", "")
    return Instrument(symbol=symbol, asset_id=symbol.lower(), asset_class=selected)


def place_order(
    settings: Settings,
    instrument: Instrument,
    side: OrderSide,
    order_type: OrderType = OrderType.MARKET,
    quantity: str = "",
    limit_price: str | None = None,
    percent: Decimal | None = None,
) -> int:
    """Compose, validate, and submit a single order."""
    human_logger = HumanLogger(level=settings.log_level, log_file=settings.log_file)
    quote_feed = build_quote_feed(settings, instrument.asset_class)
    account = build_account_provider(settings)
    executor = build_executor(settings)

    try:
        quote = quote_feed.get_quote(instrument)
    except MarketDataError as exc:
        human_logger.error(str(exc))
        return 1
    human_logger.quote(instrument.symbol, quote.price, quote.as_of, quote.change_percent)

    session_id = uuid4().hex
    session_directory = Path(settings.events_dir) / session_id
    session_directory.mkdir(parents=True, exist_ok=True)
    events_path = session_directory / "events.jsonl"
    event_sink = JsonlEventSink(str(events_path))

    composer = OrderComposer(
        instrument=instrument,
        executor=executor,
        quote=quote,
        available_balance=account.available_balance(),
        owned_quantity=account.owned_quantity(instrument.symbol),
        qty_precision=qty_precision_for(
            instrument.asset_class,
            crypto_precision=settings.crypto_qty_precision,
            default_precision=settings.default_qty_precision,
        ),
        human_logger=human_logger,
        event_sink=event_sink,
        session_id=session_id,
    )
    composer.set_side(side)
    composer.set_order_type(order_type)
    if limit_price is not None:
        composer.set_limit_price(limit_price)
    if percent is not None:
        composer.quick_select(percent)
    else:
        composer.set_quantity(quantity)

    outcome = composer.submit()
    generate_plotly_report(str(events_path), str(session_directory / "report.html"))
    return 0 if outcome.ok else 1


def show_quote(settings: Settings, instrument: Instrument) -> int:
    """Print the latest quote for one instrument."""
    human_logger = HumanLogger(level=settings.log_level, log_file=settings.log_file)
    try:
        quote = build_quote_feed(settings, instrument.asset_class).get_quote(instrument)
    except MarketDataError as exc:
        human_logger.error(str(exc))
        return 1
    human_logger.quote(instrument.symbol, quote.price, quote.as_of, quote.change_percent)
    return 0


def show_portfolio(settings: Settings) -> int:
    """Print cash balance and holdings valued at current quotes."""
    human_logger = HumanLogger(level=settings.log_level, log_file=settings.log_file)
    snapshot = build_account_provider(settings).snapshot()
    human_logger.balance(snapshot.balance)
    for symbol, holding in sorted(snapshot.holdings.items()):
        instrument = Instrument(
            symbol=symbol,
            asset_id=holding.asset_id,
            name=holding.name,
            asset_class=holding.asset_class,
        )
        market_value: Decimal | None = None
        try:
            quote = build_quote_feed(settings, holding.asset_class).get_quote(instrument)
            market_value = holding.quantity * quote.price
        except MarketDataError as exc:
            human_logger.error(str(exc))
        human_logger.holding(
            symbol,
            holding.quantity,
            market_value=market_value,
            cost_basis=holding.cost_basis,
        )
    return 0


def show_markets(settings: Settings) -> int:
    """Print crypto, stock, and forex overview quotes."""
    human_logger = HumanLogger(level=settings.log_level, log_file=settings.log_file)
    exit_code = 0
    coingecko = CoinGeckoClient(
        base_url=settings.coingecko_api_url,
        timeout=settings.request_timeout_seconds,
        max_retries=settings.max_retries,
    )
    try:
        markets = coingecko.get_markets()
    except MarketDataError as exc:
        human_logger.error(str(exc))
        exit_code = 1
    else:
        for row in markets.itertuples(index=False):
            if pd.isna(row.current_price):
                continue
            change = row.price_change_percentage_24h
            human_logger.quote(
                row.symbol,
                Decimal(str(row.current_price)),
                change_percent=None if pd.isna(change) else Decimal(str(change)),
            )

    for quote in build_alpha_vantage(settings).get_popular_stocks():
        human_logger.quote(quote.symbol, quote.price, quote.as_of, quote.change_percent)

    for rate in get_forex_rates():
        human_logger.quote(rate.symbol, rate.exchange_rate, change_percent=rate.change_percent)
    return exit_code


def show_history(settings: Settings) -> int:
    """Print the user's recorded trades, newest first."""
    human_logger = HumanLogger(level=settings.log_level, log_file=settings.log_file)
    try:
        trades = build_executor(settings).list_trades(settings.user_id)
    except PaperTradeError as exc:
        human_logger.error(str(exc))
        return 1
    for record in trades:
        human_logger.trade(record)
    return 0


def show_chart(settings: Settings, instrument: Instrument, days: int = 7) -> int:
    """Write a price-history chart for one instrument under EVENTS_DIR/charts."""
    human_logger = HumanLogger(level=settings.log_level, log_file=settings.log_file)
    try:
        if instrument.asset_class is AssetClass.CRYPTO:
            frame = CoinGeckoClient(
                base_url=settings.coingecko_api_url,
                timeout=settings.request_timeout_seconds,
                max_retries=settings.max_retries,
            ).get_chart(instrument.asset_id, days=days)
            column = "price"
        elif instrument.asset_class is AssetClass.STOCK:
            frame = build_alpha_vantage(settings).fetch_daily(instrument.symbol)
            column = "close"
        else:
            raise MarketDataError(f"No price history source for {instrument.symbol}")
    except MarketDataError as exc:
        human_logger.error(str(exc))
        return 1
    if frame.empty:
        human_logger.error(f"No price history for {instrument.symbol}")
        return 1

    output_path = Path(settings.events_dir) / "charts" / f"{instrument.symbol}.html"
    write_price_chart(frame, column, f"{instrument.display_name} price", str(output_path))
    human_logger.chart(
        instrument.symbol,
        len(frame),
        float(frame[column].iloc[-1]),
        str(output_path),
    )
    return 0


def show_news(settings: Settings) -> int:
    """Print the financial news headlines."""
    human_logger = HumanLogger(level=settings.log_level, log_file=settings.log_file)
    for item in get_financial_news():
        human_logger.news(item.source, item.title)
    return 0


def build_alpha_vantage(settings: Settings) -> AlphaVantageClient:
    return AlphaVantageClient(
        api_key=settings.alpha_vantage_api_key,
        base_url=settings.alpha_vantage_api_url,
        timeout=settings.request_timeout_seconds,
        max_retries=settings.max_retries,
    )


def build_quote_feed(settings: Settings, asset_class: AssetClass) -> QuoteFeed:
    """Select the quote source for an asset class."""
    if asset_class is AssetClass.FOREX:
        return StaticQuoteFeed()
    primary: QuoteFeed
    if asset_class is AssetClass.CRYPTO:
        primary = CoinGeckoClient(
            base_url=settings.coingecko_api_url,
            timeout=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
        )
    else:
        primary = build_alpha_vantage(settings)
    if settings.use_fallback_data:
        return FallbackQuoteFeed(primary=primary, fallback=StaticQuoteFeed())
    return primary


def build_account_provider(settings: Settings) -> AccountProvider:
    return DemoAccountProvider(user_id=settings.user_id, balance=settings.demo_balance)


def build_executor(settings: Settings) -> ExecutionClient:
    """Select execution backend."""
    if settings.execution_backend == "supabase":
        return SupabaseTradesClient(
            base_url=settings.supabase_url,
            anon_key=settings.supabase_anon_key,
            access_token=settings.supabase_access_token,
            user_id=settings.user_id,
            timeout=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
        )
    return PaperExecutionClient(user_id=settings.user_id, journal_dir=settings.events_dir)
