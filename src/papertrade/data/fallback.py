"""Quote feed that degrades to static demo data."""

from __future__ import annotations

import logging

from papertrade.data.base import QuoteFeed
from papertrade.domain.models import Instrument, Quote
from papertrade.errors import MarketDataError


class FallbackQuoteFeed:
    """Try the live feed first and fall back to a secondary feed on failure."""

    def __init__(self, primary: QuoteFeed, fallback: QuoteFeed) -> None:
        self.primary = primary
        self.fallback = fallback
        self.logger = logging.getLogger("papertrade.data.fallback")

    def get_quote(self, instrument: Instrument) -> Quote:
        try:
            return self.primary.get_quote(instrument)
        except MarketDataError as exc:
            self.logger.warning(
                "Live quote for %s unavailable (%s); using fallback data.",
                instrument.symbol,
                exc,
            )
            try:
                return self.fallback.get_quote(instrument)
            except MarketDataError:
                raise exc from None
