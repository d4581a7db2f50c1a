"""Deterministic quick-quantity sizing utilities."""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal

from papertrade.domain.models import AssetClass, OrderSide

HUNDRED = Decimal("100")
ZERO = Decimal("0")

CRYPTO_QTY_PRECISION = 6
DEFAULT_QTY_PRECISION = 2


def qty_precision_for(
    asset_class: AssetClass,
    crypto_precision: int = CRYPTO_QTY_PRECISION,
    default_precision: int = DEFAULT_QTY_PRECISION,
) -> int:
    """Return decimal places used for quantities of an asset class."""
    if asset_class is AssetClass.CRYPTO:
        return crypto_precision
    return default_precision


def clamp_percent(value: Decimal | float | int) -> Decimal:
    """Clamp a slider percentage within inclusive bounds."""
    percent = Decimal(str(value))
    if not percent.is_finite():
        return ZERO
    return max(ZERO, min(HUNDRED, percent))


def quantize_down(value: Decimal, precision: int) -> Decimal:
    """Round toward zero at fixed precision to avoid oversizing fractional orders."""
    if precision <= 0:
        quantum = Decimal("1")
    else:
        quantum = Decimal("1").scaleb(-precision)
    return max(value, ZERO).quantize(quantum, rounding=ROUND_DOWN)


def quick_select_quantity(
    percent: Decimal | float | int,
    side: OrderSide,
    current_price: Decimal,
    available_balance: Decimal,
    owned_quantity: Decimal | None,
    precision: int,
) -> Decimal:
    """Map a 0-100 slider position to an order quantity.

    Buys size against the cash balance at the current price. Sells size
    against the owned quantity; without one the sellable maximum is zero.
    """
    fraction = clamp_percent(percent) / HUNDRED
    if side is OrderSide.BUY:
        if current_price <= 0 or available_balance <= 0:
            return quantize_down(ZERO, precision)
        maximum = available_balance / current_price
    else:
        if owned_quantity is None or owned_quantity <= 0:
            return quantize_down(ZERO, precision)
        maximum = owned_quantity
    return quantize_down(maximum * fraction, precision)


def format_quantity(value: Decimal, precision: int) -> str:
    """Render a quantity with a fixed number of decimal places."""
    return f"{value:.{max(0, precision)}f}"
