"""Parse-or-default handling for free-text numeric fields."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation


def parse_decimal(value: str | None) -> Decimal | None:
    """Parse a finite decimal from user text, or return None."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        return None
    if not parsed.is_finite():
        return None
    return parsed


def parse_quantity(value: str | None) -> Decimal:
    """Parse a non-negative quantity, treating partial or invalid input as zero."""
    parsed = parse_decimal(value)
    if parsed is None or parsed < 0:
        return Decimal("0")
    return parsed


def parse_price(value: str | None, fallback: Decimal) -> Decimal:
    """Parse a positive price, falling back when the field is blank or unusable."""
    parsed = parse_decimal(value)
    if parsed is None or parsed <= 0:
        return fallback
    return parsed
