"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Self

from dotenv import load_dotenv

from papertrade.errors import ConfigError

EXECUTION_BACKENDS = {"paper", "supabase"}


def parse_bool(value: str | None, default: bool) -> bool:
    """Parse truthy environment strings."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_decimal_env(value: str | None, default: str, *, field_name: str) -> Decimal:
    """Parse a decimal environment value."""
    text = (value or "").strip() or default
    try:
        parsed = Decimal(text)
    except InvalidOperation as exc:
        raise ConfigError(f"{field_name} must be a number") from exc
    if not parsed.is_finite():
        raise ConfigError(f"{field_name} must be a finite number")
    return parsed


def parse_int_env(value: str | None, default: int, *, field_name: str) -> int:
    """Parse an integer environment value."""
    text = (value or "").strip()
    if not text:
        return default
    try:
        return int(text)
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be an integer") from exc


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    log_level: str = "INFO"
    log_file: str | None = None
    events_dir: str = "runs"
    execution_backend: str = "paper"
    coingecko_api_url: str = "https://api.coingecko.com/api/v3"
    alpha_vantage_api_url: str = "https://www.alphavantage.co/query"
    alpha_vantage_api_key: str = "demo"
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_access_token: str = ""
    user_id: str = "123"
    demo_balance: Decimal = Decimal("100000")
    crypto_qty_precision: int = 6
    default_qty_precision: int = 2
    request_timeout_seconds: int = 20
    max_retries: int = 3
    use_fallback_data: bool = True

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        raw = cls(
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
            log_file=str(os.getenv("LOG_FILE", "")).strip() or None,
            events_dir=str(os.getenv("EVENTS_DIR", "runs")).strip(),
            execution_backend=str(os.getenv("EXECUTION_BACKEND", "paper")).strip().lower(),
            coingecko_api_url=str(
                os.getenv("COINGECKO_API_URL", "https://api.coingecko.com/api/v3")
            ).strip(),
            alpha_vantage_api_url=str(
                os.getenv("ALPHA_VANTAGE_API_URL", "https://www.alphavantage.co/query")
            ).strip(),
            alpha_vantage_api_key=str(os.getenv("ALPHA_VANTAGE_API_KEY", "demo")).strip(),
            supabase_url=str(os.getenv("SUPABASE_URL", "")).strip(),
            supabase_anon_key=str(os.getenv("SUPABASE_ANON_KEY", "")).strip(),
            supabase_access_token=str(os.getenv("SUPABASE_ACCESS_TOKEN", "")).strip(),
            user_id=str(os.getenv("USER_ID", "123")).strip(),
            demo_balance=parse_decimal_env(
                os.getenv("DEMO_BALANCE"), "100000", field_name="DEMO_BALANCE"
            ),
            crypto_qty_precision=parse_int_env(
                os.getenv("CRYPTO_QTY_PRECISION"), 6, field_name="CRYPTO_QTY_PRECISION"
            ),
            default_qty_precision=parse_int_env(
                os.getenv("DEFAULT_QTY_PRECISION"), 2, field_name="DEFAULT_QTY_PRECISION"
            ),
            request_timeout_seconds=parse_int_env(
                os.getenv("REQUEST_TIMEOUT_SECONDS"), 20, field_name="REQUEST_TIMEOUT_SECONDS"
            ),
            max_retries=parse_int_env(os.getenv("MAX_RETRIES"), 3, field_name="MAX_RETRIES"),
            use_fallback_data=parse_bool(os.getenv("USE_FALLBACK_DATA"), True),
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        updated = replace(self, **kwargs)
        return updated.validate()

    def validate(self) -> Self:
        """Validate settings fields."""
        if self.execution_backend not in EXECUTION_BACKENDS:
            raise ConfigError("EXECUTION_BACKEND must be one of paper, supabase")
        if self.execution_backend == "supabase" and (
            not self.supabase_url or not self.supabase_anon_key
        ):
            raise ConfigError(
                "SUPABASE_URL and SUPABASE_ANON_KEY are required for the supabase backend"
            )
        if not self.user_id:
            raise ConfigError("USER_ID must not be empty")
        if self.demo_balance < 0:
            raise ConfigError("DEMO_BALANCE cannot be negative")
        for name, precision in (
            ("CRYPTO_QTY_PRECISION", self.crypto_qty_precision),
            ("DEFAULT_QTY_PRECISION", self.default_qty_precision),
        ):
            if precision < 0 or precision > 12:
                raise ConfigError(f"{name} must be between 0 and 12")
        if self.request_timeout_seconds <= 0:
            raise ConfigError("REQUEST_TIMEOUT_SECONDS must be positive")
        if self.max_retries <= 0:
            raise ConfigError("MAX_RETRIES must be positive")
        return self
