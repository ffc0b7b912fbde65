"""Domain validation helpers.

Each helper raises :class:`InvalidInputError` and leaves no state behind, so
public operations can call them before any mutation happens.
"""

from datetime import date
from decimal import Decimal

from smartwallet.domain.errors import InvalidInputError
from smartwallet.domain.services.money import to_money


def validate_positive_amount(amount: Decimal | None, field_name: str = "amount") -> None:
    """Require a strictly positive Decimal amount.

    Args:
        amount: Value to check.
        field_name: Name used in the error message.

    Raises:
        InvalidInputError: If the amount is missing, not a Decimal, or <= 0.
    """
    if amount is None:
        raise InvalidInputError(f"'{field_name}' must not be empty")
    if not isinstance(amount, Decimal):
        raise InvalidInputError(f"'{field_name}' must be a Decimal, got {amount!r}")
    if not amount.is_finite():
        raise InvalidInputError(f"'{field_name}' must be a finite number: {amount}")
    if amount <= 0:
        raise InvalidInputError(f"'{field_name}' must be positive: {amount}")


def validate_money_amount(
    amount: Decimal | None, field_name: str = "amount"
) -> Decimal:
    """Return ``amount`` rounded to the money scale.

    Raises:
        InvalidInputError: If the amount is invalid or rounds to zero.
    """
    validate_positive_amount(amount, field_name)
    rounded = to_money(amount)
    if rounded <= 0:
        raise InvalidInputError(f"'{field_name}' rounds to zero: {amount}")
    return rounded


def validate_not_empty(value: str | None, field_name: str) -> None:
    if value is None or not value.strip():
        raise InvalidInputError(f"'{field_name}' must not be empty")


def validate_not_none(value, field_name: str) -> None:
    if value is None:
        raise InvalidInputError(f"'{field_name}' must not be empty")


def validate_id(value: int | None, field_name: str = "id") -> None:
    """Require a positive integer identifier."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"'{field_name}' must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidInputError(f"'{field_name}' must be greater than zero: {value}")


def validate_date(value: date | None, field_name: str = "date") -> None:
    if value is None:
        raise InvalidInputError(f"'{field_name}' must not be empty")
    if not isinstance(value, date):
        raise InvalidInputError(f"'{field_name}' must be a date, got {value!r}")


def validate_decimal(value: Decimal | None, field_name: str) -> None:
    if not isinstance(value, Decimal):
        raise InvalidInputError(f"'{field_name}' must be a Decimal, got {value!r}")
    if not value.is_finite():
        raise InvalidInputError(f"'{field_name}' must be a finite number: {value}")


def validate_positive_rate(
    value: Decimal | None, field_name: str = "exchange_rate"
) -> None:
    """Require a finite, strictly positive exchange rate."""
    validate_decimal(value, field_name)
    if value <= 0:
        raise InvalidInputError(f"'{field_name}' must be positive: {value}")


__all__ = [
    "validate_positive_amount",
    "validate_money_amount",
    "validate_not_empty",
    "validate_not_none",
    "validate_id",
    "validate_date",
    "validate_decimal",
    "validate_positive_rate",
]
