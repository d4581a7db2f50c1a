"""Market data provider implementations."""

from .alpha_vantage import AlphaVantageClient
from .base import QuoteFeed
from .coingecko import CoinGeckoClient
from .fallback import FallbackQuoteFeed
from .static import StaticQuoteFeed

__all__ = [
    "QuoteFeed",
    "AlphaVantageClient",
    "CoinGeckoClient",
    "FallbackQuoteFeed",
    "StaticQuoteFeed",
]
