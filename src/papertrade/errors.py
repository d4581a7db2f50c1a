"""Custom exceptions for clearer error handling across the app."""

from __future__ import annotations


class PaperTradeError(Exception):
    """Base exception for all app-specific errors."""


class ConfigError(PaperTradeError, ValueError):
    """Raised when environment configuration is invalid or missing."""


class MarketDataError(PaperTradeError):
    """Raised when market data retrieval fails."""


class ExecutionError(PaperTradeError):
    """Raised by execution clients when a trade cannot be recorded."""


class OrderRejected(PaperTradeError):
    """Raised when a draft order cannot be submitted."""


class ZeroQuantity(OrderRejected):
    """Raised when the parsed quantity is not positive."""


class InsufficientFunds(OrderRejected):
    """Raised when a buy order's notional total exceeds the available balance."""


class ExecutionFailed(PaperTradeError):
    """Raised when the execution collaborator fails during submission.

    The collaborator's message is kept verbatim and the original error is
    chained as ``__cause__``.
    """
