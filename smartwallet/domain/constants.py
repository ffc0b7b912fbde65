"""Domain constants for the ledger."""

from decimal import ROUND_HALF_UP, Decimal

MONEY_SCALE = 2
MONEY_QUANTUM = Decimal("0.01")
MONEY_ROUNDING = ROUND_HALF_UP

# Precision used when dividing exchange rates (matches IEEE 754 decimal128).
RATE_PRECISION = 34

DEFAULT_BASE_CURRENCY = ("EUR", "Euro", "€")

DEFAULT_CURRENCIES = (
    ("USD", "US Dollar", "$", Decimal("1.10")),
    ("GBP", "British Pound", "£", Decimal("0.86")),
)


__all__ = [
    "MONEY_SCALE",
    "MONEY_QUANTUM",
    "MONEY_ROUNDING",
    "RATE_PRECISION",
    "DEFAULT_BASE_CURRENCY",
    "DEFAULT_CURRENCIES",
]
