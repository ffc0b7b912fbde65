"""Tests for balance computation and validation helpers."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from smartwallet.domain.errors import InvalidInputError
from smartwallet.domain.models import Account, Transaction, TransactionType
from smartwallet.domain.services import compute_balance
from smartwallet.domain.services import validation


def _tx(tx_id: int, amount: str, tx_type: TransactionType) -> Transaction:
    return Transaction(
        id=tx_id,
        date=date(2024, 1, 1),
        description="entry",
        amount=Decimal(amount),
        type=tx_type,
        category_id=1,
        account_id=1,
    )


def test_compute_balance_adds_credits_and_subtracts_debits() -> None:
    """Balance = initial + incomes + incoming - expenses - outgoing."""
    transactions = [
        _tx(1, "100.00", TransactionType.INCOME),
        _tx(2, "30.50", TransactionType.EXPENSE),
        _tx(3, "20.00", TransactionType.TRANSFER_OUT),
        _tx(4, "5.25", TransactionType.TRANSFER_IN),
    ]

    assert compute_balance(Decimal("10"), transactions) == Decimal("64.75")
    assert compute_balance(Decimal("-5"), []) == Decimal("-5.00")


def test_transaction_type_metadata() -> None:
    """Types expose their code, sign and transfer flag."""
    assert TransactionType.from_code("TRANSFER_IN") is TransactionType.TRANSFER_IN
    assert TransactionType.EXPENSE.sign == -1
    assert TransactionType.INCOME.is_credit
    assert TransactionType.TRANSFER_OUT.is_transfer
    assert not TransactionType.EXPENSE.is_transfer
    with pytest.raises(ValueError):
        TransactionType.from_code("REFUND")


def test_account_transaction_ids_are_immutable_updates() -> None:
    """Account helpers return new values and keep append order."""
    account = Account(id=1, name="Main", currency_id=1, initial_balance=Decimal("0"))

    updated = account.with_transaction(3).with_transaction(1)

    assert account.transaction_ids == ()
    assert updated.transaction_ids == (3, 1)
    assert updated.holds(1)
    assert updated.without_transaction(3).transaction_ids == (1,)


def test_validate_positive_amount() -> None:
    """Only strictly positive Decimals pass."""
    validation.validate_positive_amount(Decimal("0.01"))
    for value in (
        None,
        Decimal("0"),
        Decimal("-1"),
        Decimal("NaN"),
        Decimal("Infinity"),
        1,
        1.5,
    ):
        with pytest.raises(InvalidInputError):
            validation.validate_positive_amount(value)


def test_validate_money_amount_rounds_to_cents() -> None:
    """Amounts are rounded half-up and must stay positive at cent scale."""
    assert validation.validate_money_amount(Decimal("12.345")) == Decimal("12.35")
    assert validation.validate_money_amount(Decimal("0.005")) == Decimal("0.01")
    with pytest.raises(InvalidInputError, match="rounds to zero"):
        validation.validate_money_amount(Decimal("0.004"))


def test_validate_positive_rate_rejects_non_finite_values() -> None:
    """Rates must be finite and above zero."""
    validation.validate_positive_rate(Decimal("1.0912"))
    for value in (Decimal("NaN"), Decimal("Infinity"), Decimal("0"), 2):
        with pytest.raises(InvalidInputError):
            validation.validate_positive_rate(value)


def test_validate_id_rejects_bools_and_non_positive() -> None:
    """Identifiers are positive integers."""
    validation.validate_id(1)
    for value in (0, -3, True, "1", None):
        with pytest.raises(InvalidInputError):
            validation.validate_id(value)


def test_validate_date_and_text() -> None:
    """Dates must be date instances and text must not be blank."""
    validation.validate_date(date(2024, 1, 1))
    validation.validate_date(datetime(2024, 1, 1, 12, 0))
    with pytest.raises(InvalidInputError):
        validation.validate_date("2024-01-01")
    with pytest.raises(InvalidInputError):
        validation.validate_not_empty(" ", "name")
    with pytest.raises(InvalidInputError):
        validation.validate_not_none(None, "value")
