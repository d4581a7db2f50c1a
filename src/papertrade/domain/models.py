"""Core order-entry domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from papertrade.errors import (
    ExecutionFailed,
    InsufficientFunds,
    OrderRejected,
    ZeroQuantity,
)

ZERO = Decimal("0")


class OrderSide(StrEnum):
    """Supported order directions."""

    BUY = "buy"
    SELL = "sell"


class OrderType(StrEnum):
    """Supported order types."""

    MARKET = "market"
    LIMIT = "limit"


class AssetClass(StrEnum):
    """Instrument classes shown in the markets views."""

    CRYPTO = "crypto"
    STOCK = "stock"
    FOREX = "forex"


class ComposerState(StrEnum):
    """Submission lifecycle of an order composer."""

    IDLE = "idle"
    SUBMITTING = "submitting"


class BlockReason(StrEnum):
    """Why an evaluated order cannot be submitted."""

    ZERO_QUANTITY = "zero_quantity"
    INSUFFICIENT_FUNDS = "insufficient_funds"


class SubmitStatus(StrEnum):
    """Result of a submit request."""

    SUBMITTED = "submitted"
    BLOCKED = "blocked"
    IGNORED = "ignored"
    FAILED = "failed"


@dataclass(frozen=True)
class Instrument:
    """Tradable instrument identity."""

    symbol: str
    asset_id: str
    name: str = ""
    asset_class: AssetClass = AssetClass.STOCK

    @property
    def display_name(self) -> str:
        return self.name or self.symbol


@dataclass(frozen=True)
class Quote:
    """Externally supplied current price for an instrument."""

    price: Decimal
    as_of: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    symbol: str = ""
    change: Decimal | None = None
    change_percent: Decimal | None = None
    volume: Decimal | None = None


@dataclass(frozen=True)
class OrderDraft:
    """In-progress order parameters kept as the raw text the user typed."""

    side: OrderSide = OrderSide.BUY
    order_type: OrderType = OrderType.MARKET
    quantity: str = ""
    limit_price: str = ""


@dataclass(frozen=True)
class EvaluatedOrder:
    """Priced view of a draft against a quote and an available balance."""

    quantity: Decimal
    effective_price: Decimal
    notional_total: Decimal
    is_affordable: bool
    is_positive_quantity: bool

    @property
    def can_submit(self) -> bool:
        return self.is_positive_quantity and self.is_affordable

    @property
    def block_reason(self) -> BlockReason | None:
        if not self.is_positive_quantity:
            return BlockReason.ZERO_QUANTITY
        if not self.is_affordable:
            return BlockReason.INSUFFICIENT_FUNDS
        return None


@dataclass(frozen=True)
class OrderIntent:
    """Finalized order handed to the execution collaborator."""

    instrument: Instrument
    side: OrderSide
    order_type: OrderType
    quantity: Decimal
    price: Decimal
    notional_total: Decimal
    client_order_id: str
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def to_record(self) -> dict[str, Any]:
        """Convert intent to a serializable dict."""
        return {
            "symbol": self.instrument.symbol,
            "asset_id": self.instrument.asset_id,
            "asset_class": self.instrument.asset_class.value,
            "side": self.side.value,
            "order_type": self.order_type.value,
            "quantity": str(self.quantity),
            "price": str(self.price),
            "notional_total": str(self.notional_total),
            "client_order_id": self.client_order_id,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class TradeRecord:
    """Confirmed transaction as stored in the remote trades table."""

    id: str
    user_id: str
    symbol: str
    side: OrderSide
    order_type: OrderType
    quantity: Decimal
    price: Decimal
    total: Decimal
    created_at: str
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Holding:
    """Owned quantity of a single instrument."""

    symbol: str
    asset_id: str
    name: str
    asset_class: AssetClass
    quantity: Decimal
    average_buy_price: Decimal

    @property
    def cost_basis(self) -> Decimal:
        return self.quantity * self.average_buy_price


@dataclass(frozen=True)
class AccountSnapshot:
    """Cash and holdings supplied by the account provider."""

    user_id: str
    balance: Decimal
    holdings: dict[str, Holding] = field(default_factory=dict)


@dataclass(frozen=True)
class SubmitOutcome:
    """What happened to one submit request."""

    status: SubmitStatus
    intent: OrderIntent | None = None
    record: TradeRecord | None = None
    reason: BlockReason | None = None
    error: ExecutionFailed | None = None

    @property
    def ok(self) -> bool:
        return self.status is SubmitStatus.SUBMITTED

    def raise_for_status(self) -> None:
        """Raise the matching exception for blocked and failed submissions."""
        if self.status is SubmitStatus.FAILED and self.error is not None:
            raise self.error
        if self.status is SubmitStatus.BLOCKED:
            if self.reason is BlockReason.INSUFFICIENT_FUNDS:
                raise InsufficientFunds("Insufficient balance for this trade")
            if self.reason is BlockReason.ZERO_QUANTITY:
                raise ZeroQuantity("Quantity must be greater than zero")
            raise OrderRejected("Order cannot be submitted")
