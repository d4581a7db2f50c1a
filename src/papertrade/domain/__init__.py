"""Domain models and event types."""

from .events import TradeEvent
from .models import (
    AccountSnapshot,
    AssetClass,
    BlockReason,
    ComposerState,
    EvaluatedOrder,
    Holding,
    Instrument,
    OrderDraft,
    OrderIntent,
    OrderSide,
    OrderType,
    Quote,
    SubmitOutcome,
    SubmitStatus,
    TradeRecord,
)

__all__ = [
    "AccountSnapshot",
    "AssetClass",
    "BlockReason",
    "ComposerState",
    "EvaluatedOrder",
    "Holding",
    "Instrument",
    "OrderDraft",
    "OrderIntent",
    "OrderSide",
    "OrderType",
    "Quote",
    "SubmitOutcome",
    "SubmitStatus",
    "TradeEvent",
    "TradeRecord",
]
