"""Helpers for Decimal normalization."""

from decimal import Decimal, InvalidOperation


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from callers or storage adapters.

    Returns:
        Decimal: Normalized numeric value.

    Raises:
        ValueError: If the value cannot be read as a number.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Not a numeric value: {value!r}") from exc


__all__ = ["coerce_decimal"]
