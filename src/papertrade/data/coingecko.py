"""CoinGecko market data client for crypto quotes, markets, and charts."""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any

import pandas as pd
import requests

from papertrade.data.base import to_decimal
from papertrade.domain.models import Instrument, Quote
from papertrade.errors import MarketDataError

MARKET_COLUMNS = [
    "id",
    "symbol",
    "name",
    "current_price",
    "price_change_percentage_24h",
    "market_cap",
    "total_volume",
]


class CoinGeckoClient:
    """Public CoinGecko REST wrapper with retry and rate-limit handling."""

    BASE_URL = "https://api.coingecko.com/api/v3"

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: int = 20,
        max_retries: int = 3,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.logger = logging.getLogger("papertrade.data.coingecko")

    def get_quote(self, instrument: Instrument) -> Quote:
        asset_id = instrument.asset_id.strip().lower()
        payload = self._request_with_retry(
            "/simple/price",
            params={
                "ids": asset_id,
                "vs_currencies": "usd",
                "include_24hr_change": "true",
                "include_24hr_vol": "true",
                "include_last_updated_at": "true",
            },
        )
        entry = payload.get(asset_id) if isinstance(payload, dict) else None
        if not isinstance(entry, dict):
            raise MarketDataError(f"CoinGecko returned no price for {asset_id}")
        price = to_decimal(entry.get("usd"))
        if price is None:
            raise MarketDataError(f"CoinGecko price for {asset_id} is not numeric")
        updated_at = entry.get("last_updated_at")
        as_of = (
            datetime.fromtimestamp(float(updated_at), tz=UTC)
            if isinstance(updated_at, (int, float))
            else datetime.now(tz=UTC)
        )
        return Quote(
            price=price,
            as_of=as_of,
            symbol=instrument.symbol,
            change_percent=to_decimal(entry.get("usd_24h_change")),
            volume=to_decimal(entry.get("usd_24h_vol")),
        )

    def get_markets(self, per_page: int = 20, page: int = 1) -> pd.DataFrame:
        """Return top coins by market cap, one row per coin."""
        payload = self._request_with_retry(
            "/coins/markets",
            params={
                "vs_currency": "usd",
                "order": "market_cap_desc",
                "per_page": str(per_page),
                "page": str(page),
                "sparkline": "false",
                "price_change_percentage": "24h",
            },
        )
        rows = payload if isinstance(payload, list) else []
        frame = pd.DataFrame(rows)
        for column in MARKET_COLUMNS:
            if column not in frame.columns:
                frame[column] = None
        frame = frame[MARKET_COLUMNS]
        frame["symbol"] = frame["symbol"].astype(str).str.upper()
        return frame

    def get_chart(self, asset_id: str, days: int | str = 7) -> pd.DataFrame:
        """Return USD price history indexed by UTC timestamp."""
        payload = self._request_with_retry(
            f"/coins/{asset_id.strip().lower()}/market_chart",
            params={"vs_currency": "usd", "days": str(days)},
        )
        prices = payload.get("prices") if isinstance(payload, dict) else None
        if not isinstance(prices, list) or not prices:
            raise MarketDataError(f"CoinGecko returned no chart data for {asset_id}")
        frame = pd.DataFrame(prices, columns=["time", "price"])
        frame.index = pd.to_datetime(frame["time"], unit="ms", utc=True)
        frame = frame.sort_index()[["price"]]
        return frame.apply(pd.to_numeric, errors="coerce").dropna()

    def _request_with_retry(self, path: str, params: dict[str, str]) -> Any:
        url = f"{self.base_url}{path}"
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.session.get(url, params=params, timeout=self.timeout)
            except requests.RequestException as exc:
                if attempt == self.max_retries:
                    raise MarketDataError(f"CoinGecko request failed: {exc}") from exc
                self.logger.warning(
                    "CoinGecko request failed (attempt %s/%s). Retrying in %ss.",
                    attempt,
                    self.max_retries,
                    attempt,
                )
                time.sleep(float(attempt))
                continue
            if response.status_code == 429:
                if attempt == self.max_retries:
                    raise MarketDataError("CoinGecko rate limit exceeded")
                wait_seconds = self._retry_after_seconds(response.headers, attempt)
                self.logger.warning(
                    "CoinGecko rate limit hit (attempt %s/%s). Waiting %ss.",
                    attempt,
                    self.max_retries,
                    wait_seconds,
                )
                time.sleep(wait_seconds)
                continue
            if response.status_code >= 500:
                if attempt == self.max_retries:
                    raise MarketDataError(f"CoinGecko server error: {response.status_code}")
                time.sleep(float(attempt))
                continue
            if response.status_code >= 400:
                detail = response.text.strip() or "No response body"
                raise MarketDataError(f"CoinGecko error {response.status_code}: {detail}")
            try:
                return response.json()
            except ValueError as exc:
                raise MarketDataError(f"CoinGecko response for {path} was not valid JSON") from exc
        raise MarketDataError("CoinGecko request exhausted retries")

    @staticmethod
    def _retry_after_seconds(headers: Any, attempt: int) -> float:
        retry_after = headers.get("Retry-After") if headers is not None else None
        if retry_after:
            try:
                return max(float(retry_after), 1.0)
            except ValueError:
                pass
        return max(float(attempt) * 5.0, 1.0)
