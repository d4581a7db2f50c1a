"""Order composer: draft editing, pricing, and guarded submission."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from decimal import Decimal
from uuid import uuid4

from papertrade.domain.events import TradeEvent
from papertrade.domain.models import (
    ComposerState,
    EvaluatedOrder,
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
from papertrade.errors import ExecutionFailed
from papertrade.execution.base import ExecutionClient
from papertrade.logging.event_sink import JsonlEventSink
from papertrade.logging.logger import HumanLogger
from papertrade.orders.pricing import evaluate_order
from papertrade.orders.sizing import (
    format_quantity,
    qty_precision_for,
    quick_select_quantity,
)

DraftEdit = Callable[[OrderDraft], OrderDraft]


class OrderComposer:
    """Turns raw order input plus a live quote into a priced, submittable order.

    The quote, balance and owned quantity are supplied by the caller and may
    be replaced at any time with ``update_quote`` and ``update_account``.
    Pricing always uses the values current at the moment of the call.

    While a submission is in flight the composer is ``SUBMITTING``: further
    submit calls are ignored and draft edits are queued, then applied in
    order once the submission resolves.
    """

    def __init__(
        self,
        instrument: Instrument,
        executor: ExecutionClient,
        quote: Quote,
        available_balance: Decimal,
        owned_quantity: Decimal | None = None,
        qty_precision: int | None = None,
        human_logger: HumanLogger | None = None,
        event_sink: JsonlEventSink | None = None,
        session_id: str | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.instrument = instrument
        self._executor = executor
        self._quote = quote
        self._available_balance = available_balance
        self._owned_quantity = owned_quantity
        self.qty_precision = (
            qty_precision
            if qty_precision is not None
            else qty_precision_for(instrument.asset_class)
        )
        self._human_logger = human_logger
        self._event_sink = event_sink
        self.session_id = session_id or uuid4().hex
        self._id_factory = id_factory or (lambda: uuid4().hex)
        self._state = ComposerState.IDLE
        self._pending_edits: list[DraftEdit] = []
        self._draft = OrderDraft(limit_price=str(quote.price))

    @property
    def draft(self) -> OrderDraft:
        return self._draft

    @property
    def state(self) -> ComposerState:
        return self._state

    @property
    def quote(self) -> Quote:
        return self._quote

    @property
    def available_balance(self) -> Decimal:
        return self._available_balance

    @property
    def owned_quantity(self) -> Decimal | None:
        return self._owned_quantity

    @property
    def pending_edit_count(self) -> int:
        return len(self._pending_edits)

    def update_quote(self, quote: Quote) -> None:
        """Replace the live quote used for pricing."""
        self._quote = quote

    def update_account(
        self,
        available_balance: Decimal,
        owned_quantity: Decimal | None = None,
    ) -> None:
        """Replace the balance and owned quantity used for affordability and sizing."""
        self._available_balance = available_balance
        self._owned_quantity = owned_quantity

    def set_side(self, side: OrderSide | str) -> None:
        selected = OrderSide(side)
        self._edit(lambda draft: replace(draft, side=selected))

    def set_order_type(self, order_type: OrderType | str) -> None:
        selected = OrderType(order_type)
        self._edit(lambda draft: replace(draft, order_type=selected))

    def set_quantity(self, text: str) -> None:
        self._edit(lambda draft: replace(draft, quantity=text))

    def set_limit_price(self, text: str) -> None:
        self._edit(lambda draft: replace(draft, limit_price=text))

    def quick_select(self, percent: Decimal | float | int) -> None:
        """Fill the quantity from a 0-100 slider position."""
        self._edit(lambda draft: replace(draft, quantity=self._quick_select_text(draft, percent)))

    def select_max(self) -> None:
        self.quick_select(100)

    def max_quantity(self) -> Decimal:
        """Largest quantity the quick-select slider can produce for the current side."""
        return quick_select_quantity(
            percent=100,
            side=self._draft.side,
            current_price=self._quote.price,
            available_balance=self._available_balance,
            owned_quantity=self._owned_quantity,
            precision=self.qty_precision,
        )

    def evaluate(self) -> EvaluatedOrder:
        """Price the current draft against the current quote and balance."""
        evaluation = evaluate_order(self._draft, self._quote.price, self._available_balance)
        if self._human_logger is not None:
            self._human_logger.evaluation(
                self.instrument.symbol,
                self._draft.side.value,
                evaluation.quantity,
                evaluation.effective_price,
                evaluation.notional_total,
            )
        return evaluation

    def submit(self) -> SubmitOutcome:
        """Build an intent from the current draft and hand it to the executor.

        Never raises: blocked, ignored and failed submissions are reported
        through the returned outcome.
        """
        symbol = self.instrument.symbol
        if self._state is ComposerState.SUBMITTING:
            if self._human_logger is not None:
                self._human_logger.order_ignored(symbol)
            return SubmitOutcome(status=SubmitStatus.IGNORED)

        evaluation = self.evaluate()
        reason = evaluation.block_reason
        if reason is not None:
            if self._human_logger is not None:
                self._human_logger.order_blocked(symbol, self._draft.side.value, reason.value)
            self._emit(
                "order_blocked",
                {
                    "side": self._draft.side.value,
                    "reason": reason.value,
                    "quantity": str(evaluation.quantity),
                    "notional_total": str(evaluation.notional_total),
                    "available_balance": str(self._available_balance),
                },
            )
            return SubmitOutcome(status=SubmitStatus.BLOCKED, reason=reason)

        intent = self._build_intent(evaluation)
        self._state = ComposerState.SUBMITTING
        try:
            outcome = self._execute(intent)
        finally:
            self._state = ComposerState.IDLE
            self._apply_pending_edits()
        return outcome

    def _execute(self, intent: OrderIntent) -> SubmitOutcome:
        symbol = intent.instrument.symbol
        if self._human_logger is not None:
            self._human_logger.order_submit(
                symbol,
                intent.side.value,
                intent.order_type.value,
                intent.quantity,
                intent.price,
                intent.client_order_id,
            )
        self._emit("order_submitted", intent.to_record())
        try:
            record = self._executor.execute(intent)
        except Exception as exc:
            failure = ExecutionFailed(str(exc) or exc.__class__.__name__)
            failure.__cause__ = exc
            if self._human_logger is not None:
                self._human_logger.order_failed(symbol, str(failure))
            self._emit(
                "order_failed",
                {**intent.to_record(), "error": str(failure)},
            )
            return SubmitOutcome(status=SubmitStatus.FAILED, intent=intent, error=failure)

        self._draft = replace(self._draft, quantity="", limit_price=str(self._quote.price))
        if self._human_logger is not None:
            self._human_logger.order_filled(record.id, symbol, record.side.value, record.total)
        self._emit("order_filled", {**intent.to_record(), **self._record_payload(record)})
        return SubmitOutcome(status=SubmitStatus.SUBMITTED, intent=intent, record=record)

    def _build_intent(self, evaluation: EvaluatedOrder) -> OrderIntent:
        return OrderIntent(
            instrument=self.instrument,
            side=self._draft.side,
            order_type=self._draft.order_type,
            quantity=evaluation.quantity,
            price=evaluation.effective_price,
            notional_total=evaluation.notional_total,
            client_order_id=self._id_factory(),
        )

    def _edit(self, edit: DraftEdit) -> None:
        if self._state is ComposerState.SUBMITTING:
            self._pending_edits.append(edit)
            return
        self._draft = edit(self._draft)

    def _apply_pending_edits(self) -> None:
        while self._pending_edits:
            edit = self._pending_edits.pop(0)
            self._draft = edit(self._draft)

    def _quick_select_text(self, draft: OrderDraft, percent: Decimal | float | int) -> str:
        quantity = quick_select_quantity(
            percent=percent,
            side=draft.side,
            current_price=self._quote.price,
            available_balance=self._available_balance,
            owned_quantity=self._owned_quantity,
            precision=self.qty_precision,
        )
        return format_quantity(quantity, self.qty_precision)

    def _emit(self, event_type: str, payload: dict[str, object]) -> None:
        if self._event_sink is None:
            return
        self._event_sink.emit(
            TradeEvent(
                session_id=self.session_id,
                event_type=event_type,
                symbol=self.instrument.symbol,
                payload=payload,
            )
        )

    @staticmethod
    def _record_payload(record: TradeRecord) -> dict[str, object]:
        return {
            "trade_id": record.id,
            "user_id": record.user_id,
            "total": str(record.total),
            "recorded_at": record.created_at,
        }
