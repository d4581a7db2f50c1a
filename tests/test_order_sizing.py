from __future__ import annotations

from decimal import Decimal

from papertrade.domain.models import AssetClass, OrderSide
from papertrade.orders.sizing import (
    clamp_percent,
    format_quantity,
    qty_precision_for,
    quantize_down,
    quick_select_quantity,
)


def test_full_buy_slider_matches_balance_over_price() -> None:
    balance = Decimal("10000")
    price = Decimal("30000")
    quantity = quick_select_quantity(100, OrderSide.BUY, price, balance, None, precision=6)

    assert quantity == Decimal("0.333333")
    assert abs(quantity - balance / price) < Decimal("0.000001")
    assert quantity * price <= balance


def test_half_buy_slider_for_stock_uses_two_places() -> None:
    quantity = quick_select_quantity(
        50, OrderSide.BUY, Decimal("175"), Decimal("100000"), None, precision=2
    )

    assert quantity == Decimal("285.71")


def test_sell_slider_uses_owned_quantity() -> None:
    quantity = quick_select_quantity(
        25, OrderSide.SELL, Decimal("50000"), Decimal("0"), Decimal("0.5"), precision=6
    )

    assert quantity == Decimal("0.125")


def test_sell_slider_without_holdings_is_zero() -> None:
    quantity = quick_select_quantity(
        100, OrderSide.SELL, Decimal("50000"), Decimal("10000"), None, precision=6
    )

    assert quantity == 0


def test_buy_slider_with_zero_price_is_zero() -> None:
    quantity = quick_select_quantity(100, OrderSide.BUY, Decimal("0"), Decimal("10000"), None, 6)

    assert quantity == 0


def test_percent_is_clamped() -> None:
    assert clamp_percent(150) == Decimal("100")
    assert clamp_percent(-5) == Decimal("0")
    assert clamp_percent(float("nan")) == Decimal("0")
    assert clamp_percent(42.5) == Decimal("42.5")


def test_precision_depends_on_asset_class() -> None:
    assert qty_precision_for(AssetClass.CRYPTO) == 6
    assert qty_precision_for(AssetClass.STOCK) == 2
    assert qty_precision_for(AssetClass.FOREX) == 2
    assert qty_precision_for(AssetClass.CRYPTO, crypto_precision=8) == 8


def test_quantize_down_rounds_toward_zero() -> None:
    assert quantize_down(Decimal("1.999"), 2) == Decimal("1.99")
    assert quantize_down(Decimal("7.9"), 0) == Decimal("7")
    assert quantize_down(Decimal("-1"), 2) == Decimal("0.00")


def test_format_quantity_pads_to_precision() -> None:
    assert format_quantity(Decimal("0.125"), 6) == "0.125000"
    assert format_quantity(Decimal("0"), 2) == "0.00"


def test_slider_outside_range_is_clamped_before_sizing() -> None:
    def size(percent: float) -> Decimal:
        return quick_select_quantity(
            percent, OrderSide.SELL, Decimal("50000"), Decimal("0"), Decimal("0.5"), precision=6
        )

    assert size(150) == Decimal("0.5")
    assert size(-5) == 0
    assert size(float("nan")) == 0


def test_buy_slider_with_negative_price_or_balance_is_zero() -> None:
    assert quick_select_quantity(50, OrderSide.BUY, Decimal("-1"), Decimal("100"), None, 2) == 0
    assert quick_select_quantity(50, OrderSide.BUY, Decimal("10"), Decimal("-100"), None, 2) == 0
