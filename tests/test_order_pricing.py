from __future__ import annotations

from decimal import Decimal

import pytest

from papertrade.domain.models import BlockReason, OrderDraft, OrderSide, OrderType
from papertrade.orders.pricing import evaluate_order

PRICE = Decimal("50000")
BALANCE = Decimal("10000")


@pytest.mark.parametrize("text", ["", "abc", "  ", "-1", "nan"])
def test_unparsable_quantity_cannot_submit(text: str) -> None:
    evaluation = evaluate_order(OrderDraft(quantity=text), PRICE, BALANCE)

    assert evaluation.quantity == 0
    assert evaluation.can_submit is False
    assert evaluation.block_reason is BlockReason.ZERO_QUANTITY


def test_market_buy_within_balance_can_submit() -> None:
    evaluation = evaluate_order(OrderDraft(quantity="0.1"), PRICE, BALANCE)

    assert evaluation.effective_price == PRICE
    assert evaluation.notional_total == Decimal("5000")
    assert evaluation.is_affordable is True
    assert evaluation.can_submit is True
    assert evaluation.block_reason is None


def test_market_buy_over_balance_is_insufficient_funds() -> None:
    evaluation = evaluate_order(OrderDraft(quantity="0.5"), PRICE, BALANCE)

    assert evaluation.notional_total == Decimal("25000")
    assert evaluation.can_submit is False
    assert evaluation.block_reason is BlockReason.INSUFFICIENT_FUNDS


def test_buy_exactly_at_balance_is_affordable() -> None:
    evaluation = evaluate_order(OrderDraft(quantity="0.2"), PRICE, BALANCE)

    assert evaluation.notional_total == BALANCE
    assert evaluation.can_submit is True


def test_sell_is_not_checked_against_balance() -> None:
    draft = OrderDraft(side=OrderSide.SELL, quantity="5")
    evaluation = evaluate_order(draft, PRICE, Decimal("0"))

    assert evaluation.notional_total == Decimal("250000")
    assert evaluation.can_submit is True


def test_limit_order_uses_limit_price() -> None:
    draft = OrderDraft(order_type=OrderType.LIMIT, quantity="0.1", limit_price="48000")
    evaluation = evaluate_order(draft, PRICE, BALANCE)

    assert evaluation.effective_price == Decimal("48000")
    assert evaluation.notional_total == Decimal("4800")


def test_limit_order_with_blank_price_falls_back_to_quote() -> None:
    draft = OrderDraft(order_type=OrderType.LIMIT, quantity="0.1", limit_price="")
    evaluation = evaluate_order(draft, PRICE, BALANCE)

    assert evaluation.effective_price == PRICE
    assert evaluation.notional_total == Decimal("5000")


def test_market_order_ignores_limit_price_text() -> None:
    draft = OrderDraft(order_type=OrderType.MARKET, quantity="0.1", limit_price="1")
    evaluation = evaluate_order(draft, PRICE, BALANCE)

    assert evaluation.effective_price == PRICE


@pytest.mark.parametrize("side", [OrderSide.BUY, OrderSide.SELL])
def test_quantity_whose_total_overflows_counts_as_zero(side: OrderSide) -> None:
    evaluation = evaluate_order(OrderDraft(side=side, quantity="9e999999"), PRICE, BALANCE)

    assert evaluation.quantity == 0
    assert evaluation.notional_total == 0
    assert evaluation.block_reason is BlockReason.ZERO_QUANTITY


def test_tiny_quantity_is_priced_without_raising() -> None:
    evaluation = evaluate_order(OrderDraft(quantity="1e-999999"), PRICE, BALANCE)

    assert evaluation.quantity > 0
    assert evaluation.notional_total == Decimal("5e-999995")
    assert evaluation.can_submit is True


def test_limit_price_that_overflows_total_blocks_order() -> None:
    draft = OrderDraft(order_type=OrderType.LIMIT, quantity="10", limit_price="9e999999")
    evaluation = evaluate_order(draft, PRICE, BALANCE)

    assert evaluation.effective_price == Decimal("9e999999")
    assert evaluation.block_reason is BlockReason.ZERO_QUANTITY


@pytest.mark.parametrize("limit_price", ["0", "-5", "0.00"])
def test_non_positive_limit_price_falls_back_to_quote(limit_price: str) -> None:
    draft = OrderDraft(order_type=OrderType.LIMIT, quantity="0.1", limit_price=limit_price)
    evaluation = evaluate_order(draft, PRICE, BALANCE)

    assert evaluation.effective_price == PRICE
    assert evaluation.notional_total == Decimal("5000")
