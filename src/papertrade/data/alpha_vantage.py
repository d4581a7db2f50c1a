"""Alpha Vantage HTTP client for stock quotes and daily OHLCV data."""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime

import pandas as pd
import requests

from papertrade.data.base import to_decimal
from papertrade.domain.models import Instrument, Quote
from papertrade.errors import MarketDataError

POPULAR_STOCKS = ["AAPL", "MSFT", "GOOGL", "AMZN", "TSLA"]


class AlphaVantageClient:
    """Minimal Alpha Vantage client with basic retry/rate-limit handling."""

    BASE_URL = "https://www.alphavantage.co/query"

    def __init__(
        self,
        api_key: str = "demo",
        base_url: str = BASE_URL,
        timeout: int = 15,
        max_retries: int = 3,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.logger = logging.getLogger("papertrade.data.alpha_vantage")

    def get_quote(self, instrument: Instrument) -> Quote:
        """Fetch the latest GLOBAL_QUOTE for a stock symbol."""
        symbol = instrument.symbol.upper()
        payload = self._request_with_retry(
            params={"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": self.api_key}
        )
        data = payload.get("Global Quote")
        if not isinstance(data, dict) or not data:
            raise MarketDataError(f"Alpha Vantage returned no quote for {symbol}")
        price = to_decimal(data.get("05. price"))
        if price is None:
            raise MarketDataError(f"Alpha Vantage quote for {symbol} has no price")
        return Quote(
            price=price,
            as_of=self._trading_day(data.get("07. latest trading day")),
            symbol=symbol,
            change=to_decimal(data.get("09. change")),
            change_percent=to_decimal(data.get("10. change percent")),
            volume=to_decimal(data.get("06. volume")),
        )

    def get_popular_stocks(self, symbols: list[str] | None = None) -> list[Quote]:
        """Quote a fixed list of symbols, skipping any that fail."""
        quotes: list[Quote] = []
        for symbol in symbols or POPULAR_STOCKS:
            try:
                quotes.append(self.get_quote(Instrument(symbol=symbol, asset_id=symbol.lower())))
            except MarketDataError as exc:
                self.logger.warning("Skipping %s: %s", symbol, exc)
        return quotes

    def fetch_daily(self, symbol: str) -> pd.DataFrame:
        """Fetch daily bars and return a normalized OHLCV DataFrame.

        Returns:
            DataFrame with datetime index and columns:
            open, high, low, close, volume
        """
        params = {
            "function": "TIME_SERIES_DAILY",
            "symbol": symbol.upper(),
            "outputsize": "compact",
            "apikey": self.api_key,
        }
        payload = self._request_with_retry(params=params)
        time_series_key = "Time Series (Daily)"
        if time_series_key not in payload:
            raise MarketDataError(
                f"Alpha Vantage response missing daily time series for symbol {symbol}."
            )

        series = payload[time_series_key]
        frame = pd.DataFrame.from_dict(series, orient="index")
        frame.index = pd.to_datetime(frame.index, utc=False)
        frame = frame.sort_index()
        frame = frame.rename(
            columns={
                "1. open": "open",
                "2. high": "high",
                "3. low": "low",
                "4. close": "close",
                "5. volume": "volume",
            }
        )
        required_cols = ["open", "high", "low", "close", "volume"]
        missing_cols = [col for col in required_cols if col not in frame.columns]
        if missing_cols:
            raise MarketDataError(f"Data for {symbol} missing required columns: {missing_cols}")
        return frame[required_cols].apply(pd.to_numeric, errors="coerce").dropna()

    def _request_with_retry(self, params: dict[str, str]) -> dict:
        """Perform GET request with simple backoff on rate-limit/transient failures."""
        for attempt in range(1, self.max_retries + 1):
            try:
                response = requests.get(self.base_url, params=params, timeout=self.timeout)
                response.raise_for_status()
                payload: dict = response.json()
            except requests.RequestException as exc:
                if attempt == self.max_retries:
                    raise MarketDataError(f"Failed to fetch data from Alpha Vantage: {exc}") from exc
                sleep_seconds = attempt * 2
                self.logger.warning(
                    "Alpha Vantage request failed (attempt %s/%s). Retrying in %ss.",
                    attempt,
                    self.max_retries,
                    sleep_seconds,
                )
                time.sleep(sleep_seconds)
                continue

            # Per-minute throttling comes back as HTTP 200 with a Note body.
            if "Note" in payload:
                if attempt == self.max_retries:
                    raise MarketDataError("Alpha Vantage rate limit reached. Try again in a minute.")
                sleep_seconds = attempt * 15
                self.logger.warning(
                    "Alpha Vantage rate limit hit (attempt %s/%s). Waiting %ss.",
                    attempt,
                    self.max_retries,
                    sleep_seconds,
                )
                time.sleep(sleep_seconds)
                continue

            # Information notices (daily quota, demo key limits) do not clear on retry.
            if "Information" in payload:
                raise MarketDataError(f"Alpha Vantage unavailable: {payload['Information']}")

            if "Error Message" in payload:
                raise MarketDataError(f"Alpha Vantage returned an error: {payload['Error Message']}")

            return payload

        raise MarketDataError("Exhausted retries for Alpha Vantage request.")

    @staticmethod
    def _trading_day(value: str | None) -> datetime:
        if value:
            try:
                return datetime.strptime(value.strip(), "%Y-%m-%d").replace(tzinfo=UTC)
            except ValueError:
                pass
        return datetime.now(tz=UTC)
