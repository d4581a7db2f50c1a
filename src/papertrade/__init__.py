"""Paper-trading order entry over third-party market data."""

__version__ = "0.1.0"
