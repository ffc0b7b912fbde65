"""Tests for the TransactionFactory."""

from datetime import date
from decimal import Decimal
from itertools import count

import pytest

from smartwallet.domain.errors import InvalidInputError
from smartwallet.domain.models import ConversionProvenance, TransactionType
from smartwallet.domain.services import TransactionFactory


ON = date(2024, 5, 1)


def test_create_income_and_expense_allocate_increasing_ids() -> None:
    """Each created transaction should get the next identifier."""
    factory = TransactionFactory()

    income = factory.create_income(Decimal("10.00"), "Salary", 1, 7, ON)
    expense = factory.create_expense(Decimal("3.00"), "Coffee", 2, 7, ON)

    assert (income.id, expense.id) == (1, 2)
    assert income.type is TransactionType.INCOME
    assert expense.type is TransactionType.EXPENSE
    assert expense.signed_amount == Decimal("-3.00")
    assert income.provenance is None


def test_reset_counter_and_external_id_source() -> None:
    """The counter can be restarted or replaced by an external sequence."""
    factory = TransactionFactory(start=10)
    assert factory.create_income(Decimal("1"), "a", 1, 1, ON).id == 10

    factory.reset_counter(50)
    assert factory.create_income(Decimal("1"), "b", 1, 1, ON).id == 50

    sequence = count(100)
    external = TransactionFactory(id_source=lambda: next(sequence))
    assert external.create_expense(Decimal("1"), "c", 1, 1, ON).id == 100


@pytest.mark.parametrize(
    "kwargs",
    [
        {"amount": Decimal("0")},
        {"amount": Decimal("-1")},
        {"amount": None},
        {"amount": 5},
        {"description": "  "},
        {"category_id": 0},
        {"account_id": None},
        {"on": None},
        {"on": "2024-05-01"},
    ],
)
def test_create_income_rejects_invalid_fields(kwargs) -> None:
    """Invalid fields should raise before an id is consumed."""
    factory = TransactionFactory()
    fields = {
        "amount": Decimal("10.00"),
        "description": "Salary",
        "category_id": 1,
        "account_id": 1,
        "on": ON,
    }
    fields.update(kwargs)

    with pytest.raises(InvalidInputError):
        factory.create_income(**fields)
    assert factory.create_income(Decimal("1"), "ok", 1, 1, ON).id == 1


def test_create_transfer_links_both_sides() -> None:
    """Transfers produce a linked OUT/IN pair with consecutive ids."""
    factory = TransactionFactory()
    provenance = ConversionProvenance(
        original_amount=Decimal("100.00"),
        original_currency_id=1,
        exchange_rate=Decimal("0.9"),
    )

    pair = factory.create_transfer(
        Decimal("100.00"),
        "Top up",
        source_account_id=1,
        destination_account_id=2,
        category_id=3,
        on=ON,
        destination_amount=Decimal("90.00"),
        provenance=provenance,
    )

    outgoing, incoming = pair.outgoing, pair.incoming
    assert outgoing.type is TransactionType.TRANSFER_OUT
    assert incoming.type is TransactionType.TRANSFER_IN
    assert incoming.id == outgoing.id + 1
    assert outgoing.linked_transaction_id == incoming.id
    assert incoming.linked_transaction_id == outgoing.id
    assert outgoing.amount == Decimal("100.00")
    assert incoming.amount == Decimal("90.00")
    assert outgoing.description == "Top up (outgoing transfer)"
    assert incoming.description == "Top up (incoming transfer)"
    assert outgoing.date == incoming.date == ON
    assert outgoing.category_id == incoming.category_id == 3
    assert outgoing.provenance is None
    assert incoming.provenance == provenance


def test_create_transfer_defaults_destination_amount() -> None:
    """Without a destination amount both sides carry the same amount."""
    pair = TransactionFactory().create_transfer(
        Decimal("25.00"), "Move", 1, 2, 1, ON
    )

    assert pair.incoming.amount == pair.outgoing.amount == Decimal("25.00")


def test_create_transfer_rejects_same_account() -> None:
    """Source and destination must differ."""
    with pytest.raises(InvalidInputError):
        TransactionFactory().create_transfer(Decimal("1"), "Loop", 4, 4, 1, ON)


def test_create_transfer_rejects_invalid_provenance() -> None:
    """Provenance values must be positive."""
    provenance = ConversionProvenance(
        original_amount=Decimal("10"),
        original_currency_id=1,
        exchange_rate=Decimal("0"),
    )

    with pytest.raises(InvalidInputError):
        TransactionFactory().create_transfer(
            Decimal("1"), "Move", 1, 2, 1, ON, provenance=provenance
        )


def test_created_amounts_are_rounded_to_cents() -> None:
    """Stored amounts use the money scale on every side."""
    factory = TransactionFactory()

    income = factory.create_income(Decimal("12.345"), "Refund", 1, 1, ON)
    pair = factory.create_transfer(
        Decimal("10.004"),
        "Move",
        1,
        2,
        1,
        ON,
        destination_amount=Decimal("11.0051"),
    )

    assert str(income.amount) == "12.35"
    assert str(pair.outgoing.amount) == "10.00"
    assert str(pair.incoming.amount) == "11.01"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"amount": Decimal("0.004")},
        {"amount": Decimal("1"), "destination_amount": Decimal("0.001")},
    ],
)
def test_create_transfer_rejects_amounts_below_one_cent(kwargs) -> None:
    """Amounts worth nothing at cent scale are invalid."""
    amount = kwargs.pop("amount")

    with pytest.raises(InvalidInputError):
        TransactionFactory().create_transfer(amount, "Move", 1, 2, 1, ON, **kwargs)


@pytest.mark.parametrize("rate", [Decimal("NaN"), Decimal("Infinity")])
def test_create_income_rejects_non_finite_provenance_rate(rate) -> None:
    """A provenance rate must be a finite number."""
    provenance = ConversionProvenance(
        original_amount=Decimal("10"),
        original_currency_id=1,
        exchange_rate=rate,
    )

    with pytest.raises(InvalidInputError):
        TransactionFactory().create_income(
            Decimal("9"), "Gift", 1, 1, ON, provenance=provenance
        )
