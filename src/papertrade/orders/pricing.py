"""Pure pricing of an order draft."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, Overflow

from papertrade.domain.models import EvaluatedOrder, OrderDraft, OrderSide, OrderType
from papertrade.orders.parsing import parse_price, parse_quantity

ZERO = Decimal("0")


def evaluate_order(
    draft: OrderDraft,
    current_price: Decimal,
    available_balance: Decimal,
) -> EvaluatedOrder:
    """Price a draft against the live quote and the cash available to spend.

    Never raises on partial input: an unparsable quantity counts as zero and
    an unusable limit price falls back to ``current_price``. A quantity whose
    total overflows the decimal range is unusable too and counts as zero.
    Only buy orders are checked against ``available_balance``.
    """
    quantity = parse_quantity(draft.quantity)
    if draft.order_type is OrderType.MARKET:
        effective_price = current_price
    else:
        effective_price = parse_price(draft.limit_price, fallback=current_price)
    try:
        notional_total = quantity * effective_price
    except (Overflow, InvalidOperation):
        quantity = ZERO
        notional_total = ZERO
    is_affordable = draft.side is OrderSide.SELL or notional_total <= available_balance
    return EvaluatedOrder(
        quantity=quantity,
        effective_price=effective_price,
        notional_total=notional_total,
        is_affordable=is_affordable,
        is_positive_quantity=quantity > 0,
    )
