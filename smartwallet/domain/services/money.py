"""Fixed-scale money arithmetic.

Money values carry two fractional digits and are rounded half-up at the end
of every operation. Exchange rates keep full precision and only meet the
money scale when an amount is produced from them.
"""

from decimal import Context, Decimal

from smartwallet.domain.constants import (
    MONEY_QUANTUM,
    MONEY_ROUNDING,
    RATE_PRECISION,
)
from smartwallet.utils.decimal_utils import coerce_decimal


ZERO = Decimal("0.00")

_RATE_CONTEXT = Context(prec=RATE_PRECISION)


def to_money(value) -> Decimal:
    """Return ``value`` as a money amount at the fixed scale.

    Args:
        value: Decimal, int, float or numeric string.

    Returns:
        Decimal: Amount rounded half-up to two decimals.
    """
    return coerce_decimal(value).quantize(MONEY_QUANTUM, rounding=MONEY_ROUNDING)


def to_rate(value) -> Decimal:
    """Return ``value`` as an exchange rate without rounding."""
    return coerce_decimal(value)


def add(a: Decimal, b: Decimal) -> Decimal:
    return to_money(a + b)


def subtract(a: Decimal, b: Decimal) -> Decimal:
    return to_money(a - b)


def multiply(a: Decimal, b: Decimal) -> Decimal:
    return to_money(a * b)


def divide(a: Decimal, b: Decimal) -> Decimal:
    """Divide two money values.

    Raises:
        ZeroDivisionError: If ``b`` is zero.
    """
    if b == 0:
        raise ZeroDivisionError(f"Cannot divide {a} by zero")
    return to_money(_RATE_CONTEXT.divide(a, b))


def divide_rates(a: Decimal, b: Decimal) -> Decimal:
    """Divide two rates keeping full precision.

    Args:
        a: Dividend rate.
        b: Divisor rate.

    Returns:
        Decimal: Quotient computed with 34 significant digits.

    Raises:
        ZeroDivisionError: If ``b`` is zero.
    """
    if b == 0:
        raise ZeroDivisionError(f"Cannot divide rate {a} by zero")
    return _RATE_CONTEXT.divide(a, b)


def multiply_by_rate(amount: Decimal, rate: Decimal) -> Decimal:
    """Convert ``amount`` with ``rate`` and round the result to money scale."""
    return to_money(amount * rate)


def is_positive(amount: Decimal) -> bool:
    return to_money(amount) > ZERO


def is_negative(amount: Decimal) -> bool:
    return to_money(amount) < ZERO


def is_greater_than(a: Decimal, b: Decimal) -> bool:
    return to_money(a) > to_money(b)


def format_money(amount: Decimal, symbol: str = "") -> str:
    """Render an amount with an optional currency symbol (``"100.00 €"``)."""
    text = format(to_money(amount), "f")
    return f"{text} {symbol}".rstrip()


__all__ = [
    "ZERO",
    "to_money",
    "to_rate",
    "add",
    "subtract",
    "multiply",
    "divide",
    "divide_rates",
    "multiply_by_rate",
    "is_positive",
    "is_negative",
    "is_greater_than",
    "format_money",
]
