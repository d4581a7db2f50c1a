"""Concise human-readable order-entry logger."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from papertrade.domain.models import TradeRecord


class HumanLogger:
    """Console logger with fixed line types."""

    def __init__(self, level: str = "INFO", log_file: str | None = None) -> None:
        self._logger = logging.getLogger("papertrade")
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False
        if not self._logger.handlers:
            formatter = logging.Formatter("%(asctime)s | %(message)s", "%Y-%m-%d %H:%M:%S")
            handler = logging.StreamHandler()
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)
            if log_file:
                file_handler = logging.FileHandler(log_file)
                file_handler.setFormatter(formatter)
                self._logger.addHandler(file_handler)

    def quote(
        self,
        symbol: str,
        price: Decimal,
        as_of: datetime | None = None,
        change_percent: Decimal | None = None,
    ) -> None:
        parts = [f"quote | {symbol} | ${self._format_money(price, places=3)}"]
        if change_percent is not None:
            parts.append(f"24h {float(change_percent):+.2f}%")
        if as_of is not None:
            parts.append(f"at {as_of.strftime('%H:%M:%S')}")
        self._logger.info(" | ".join(parts))

    def evaluation(
        self,
        symbol: str,
        side: str,
        quantity: Decimal,
        effective_price: Decimal,
        notional_total: Decimal,
    ) -> None:
        self._logger.debug(
            "evaluate | %s | %s %s @ $%s | total $%s",
            symbol,
            side,
            self._format_qty(quantity),
            self._format_money(effective_price, places=3),
            self._format_money(notional_total),
        )

    def order_blocked(self, symbol: str, side: str, reason: str) -> None:
        self._logger.warning("blocked | %s | %s | %s", symbol, side, self._human_reason(reason))

    def order_ignored(self, symbol: str) -> None:
        self._logger.info("ignored | %s | submission already in flight", symbol)

    def order_submit(
        self,
        symbol: str,
        side: str,
        order_type: str,
        quantity: Decimal,
        price: Decimal,
        client_order_id: str,
    ) -> None:
        _ = client_order_id
        self._logger.info(
            "submit | %s | %s %s | qty %s | ref $%s | total $%s",
            symbol,
            order_type,
            side,
            self._format_qty(quantity),
            self._format_money(price, places=3),
            self._format_money(quantity * price),
        )

    def order_filled(self, trade_id: str, symbol: str, side: str, total: Decimal) -> None:
        verb = "bought" if side == "buy" else "sold"
        self._logger.info(
            "filled | %s | %s | %s | $%s",
            self._short_id(trade_id),
            symbol,
            verb,
            self._format_money(total),
        )

    def order_failed(self, symbol: str, message: str) -> None:
        self._logger.error("failed | %s | %s", symbol, message)

    def balance(self, balance: Decimal) -> None:
        self._logger.info("balance | $%s", self._format_money(balance))

    def holding(
        self,
        symbol: str,
        quantity: Decimal,
        market_value: Decimal | None = None,
        cost_basis: Decimal | None = None,
    ) -> None:
        parts = [f"holding | {symbol} | qty {self._format_qty(quantity)}"]
        if market_value is not None:
            parts.append(f"value ${self._format_money(market_value)}")
        if cost_basis is not None:
            parts.append(f"cost ${self._format_money(cost_basis)}")
        if market_value is not None and cost_basis is not None:
            parts.append(f"upl {float(market_value - cost_basis):+,.2f}")
        self._logger.info(" | ".join(parts))

    def trade(self, record: TradeRecord) -> None:
        self._logger.info(
            "trade | %s | %s | %s | qty %s | $%s | %s",
            self._short_ts(str(record.created_at)),
            record.symbol,
            record.side.value,
            self._format_qty(record.quantity),
            self._format_money(record.total),
            self._short_id(record.id),
        )

    def news(self, source: str, title: str) -> None:
        self._logger.info("news | %s | %s", source, title)

    def chart(self, symbol: str, points: int, last_price: float, output_path: str) -> None:
        self._logger.info(
            "chart | %s | %s points | last $%s | %s",
            symbol,
            points,
            f"{last_price:,.3f}",
            output_path,
        )

    def error(self, message: str) -> None:
        self._logger.error("error | %s", message)

    @staticmethod
    def _short_id(value: str | None, head: int = 10, tail: int = 6) -> str:
        if not value:
            return ""
        text = str(value)
        if len(text) <= head + tail + 1:
            return text
        return f"{text[:head]}...{text[-tail:]}"

    @staticmethod
    def _format_money(value: Decimal, places: int = 2) -> str:
        return f"{float(value):,.{places}f}"

    @staticmethod
    def _format_qty(value: Decimal, precision: int = 8) -> str:
        normalized = 0.0 if abs(float(value)) < 1e-9 else float(value)
        text = f"{normalized:.{max(0, precision)}f}".rstrip("0").rstrip(".")
        if text in {"", "-0"}:
            return "0"
        return text

    @staticmethod
    def _short_ts(value: str) -> str:
        text = value.strip()
        if not text:
            return text
        normalized = text.replace("Z", "+00:00")
        try:
            parsed = datetime.fromisoformat(normalized)
        except ValueError:
            return text
        return parsed.strftime("%Y-%m-%d %H:%M")

    @staticmethod
    def _human_reason(reason: str) -> str:
        mapping = {
            "zero_quantity": "quantity must be greater than zero",
            "insufficient_funds": "insufficient balance for this trade",
        }
        return mapping.get(reason, reason)
