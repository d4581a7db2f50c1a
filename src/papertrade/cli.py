"""Command-line interface for papertrade."""

from __future__ import annotations

import argparse
import sys
from decimal import Decimal

from papertrade.config import Settings
from papertrade.domain.models import AssetClass, OrderSide, OrderType
from papertrade.orders.parsing import parse_decimal
from papertrade.runtime import (
    place_order,
    resolve_instrument,
    show_chart,
    show_history,
    show_markets,
    show_news,
    show_portfolio,
    show_quote,
)

ACTION_FLAGS = ("quote", "chart", "portfolio", "markets", "history", "news")
ASSET_ACTIONS = {"quote", "chart"}


def percent_arg(value: str) -> Decimal:
    parsed = parse_decimal(value)
    if parsed is None or parsed < 0 or parsed > 100:
        raise argparse.ArgumentTypeError("percent must be a number between 0 and 100")
    return parsed


def days_arg(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("days must be a whole number") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("days must be positive")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(description="Paper-trading order entry")
    parser.add_argument("--asset", type=str, help="CoinGecko id or ticker symbol")
    parser.add_argument(
        "--asset-class",
        choices=[item.value for item in AssetClass],
        default=AssetClass.CRYPTO.value,
        help="Instrument class",
    )
    parser.add_argument(
        "--side",
        choices=[item.value for item in OrderSide],
        default=OrderSide.BUY.value,
        help="Order direction",
    )
    parser.add_argument(
        "--order-type",
        choices=[item.value for item in OrderType],
        default=OrderType.MARKET.value,
        help="Order type",
    )
    parser.add_argument("--quantity", type=str, default="", help="Order quantity")
    parser.add_argument("--limit-price", type=str, help="Limit price for limit orders")
    parser.add_argument(
        "--percent",
        type=percent_arg,
        help="Size the order as a percent of the balance (buy) or holding (sell)",
    )
    parser.add_argument("--execution", choices=["paper", "supabase"], help="Execution backend")
    parser.add_argument("--events-dir", type=str, help="Session journal directory")
    parser.add_argument("--quote", action="store_true", help="Show the asset quote, then exit")
    parser.add_argument(
        "--chart",
        action="store_true",
        help="Write a price-history chart for the asset, then exit",
    )
    parser.add_argument(
        "--days",
        type=days_arg,
        default=7,
        help="Days of crypto price history for --chart",
    )
    parser.add_argument(
        "--portfolio",
        action="store_true",
        help="List balance and holdings, then exit",
    )
    parser.add_argument("--markets", action="store_true", help="List market overview, then exit")
    parser.add_argument("--history", action="store_true", help="List recorded trades, then exit")
    parser.add_argument("--news", action="store_true", help="List financial news, then exit")
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    selected_actions = [name for name in ACTION_FLAGS if getattr(args, name)]
    if len(selected_actions) > 1:
        flags = ", ".join(f"--{name}" for name in ACTION_FLAGS)
        raise ValueError(f"Use only one action flag: {flags}")
    needs_asset = not selected_actions or selected_actions[0] in ASSET_ACTIONS
    if needs_asset and not (args.asset or "").strip():
        raise ValueError("--asset is required to quote, chart or trade")
    if args.quantity and args.percent is not None:
        raise ValueError("Use either --quantity or --percent, not both")
    if args.limit_price is not None and args.order_type != OrderType.LIMIT.value:
        raise ValueError("--limit-price requires --order-type limit")

    overrides: dict[str, object] = {}
    if args.execution:
        overrides["execution_backend"] = args.execution
    if args.events_dir:
        overrides["events_dir"] = args.events_dir
    if not overrides:
        return settings
    return settings.with_overrides(**overrides)


def main() -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args()
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    if args.portfolio:
        return show_portfolio(settings)
    if args.markets:
        return show_markets(settings)
    if args.history:
        return show_history(settings)
    if args.news:
        return show_news(settings)
    instrument = resolve_instrument(args.asset, args.asset_class)
    if args.quote:
        return show_quote(settings, instrument)
    if args.chart:
        return show_chart(settings, instrument, days=args.days)
    return place_order(
        settings,
        instrument,
        side=OrderSide(args.side),
        order_type=OrderType(args.order_type),
        quantity=args.quantity,
        limit_price=args.limit_price,
        percent=args.percent,
    )


if __name__ == "__main__":
    sys.exit(main())
