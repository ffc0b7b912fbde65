"""Tests for the Ledger use case."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from smartwallet.application.use_cases.ledger import Ledger
from smartwallet.domain.errors import (
    InvalidInputError,
    ItemNotFoundError,
    StorageError,
)
from smartwallet.domain.models import Account, LedgerEventKind, TransactionType
from smartwallet.domain.services import TransactionFactory
from smartwallet.infrastructure.in_memory_repository import InMemoryRepository


def _build_ledger() -> tuple[Ledger, TransactionFactory]:
    ledger = Ledger(
        InMemoryRepository("Account"),
        InMemoryRepository("Transaction"),
        logger=MagicMock(),
    )
    ledger.add_account(
        Account(id=1, name="Main", currency_id=1, initial_balance=Decimal("100.00"))
    )
    ledger.add_account(
        Account(id=2, name="Cash", currency_id=1, initial_balance=Decimal("0.00"))
    )
    return ledger, TransactionFactory()


def test_append_updates_balance_and_notifies() -> None:
    """Appending a transaction changes the derived balance and emits an event."""
    ledger, factory = _build_ledger()
    events = []
    ledger.subscribe(events.append)

    income = factory.create_income(Decimal("50.00"), "Gift", 1, 1, date(2024, 1, 2))
    ledger.append(income)

    assert ledger.balance(1) == Decimal("150.00")
    assert ledger.get_account(1).transaction_ids == (income.id,)
    assert len(events) == 1
    assert events[0].kind is LedgerEventKind.TRANSACTION_ADDED
    assert events[0].old_balance == Decimal("100.00")
    assert events[0].new_balance == Decimal("150.00")
    assert events[0].account_name == "Main"


def test_append_rejects_duplicates_and_unknown_accounts() -> None:
    """A transaction id can only be recorded once, on an existing account."""
    ledger, factory = _build_ledger()
    expense = factory.create_expense(Decimal("1.00"), "Tea", 1, 1, date(2024, 1, 1))
    ledger.append(expense)

    with pytest.raises(InvalidInputError):
        ledger.append(expense)
    orphan = factory.create_expense(Decimal("1.00"), "Tea", 1, 9, date(2024, 1, 1))
    with pytest.raises(ItemNotFoundError):
        ledger.append(orphan)


def test_remove_reverses_balance() -> None:
    """Removing a transaction restores the previous balance."""
    ledger, factory = _build_ledger()
    expense = factory.create_expense(Decimal("40.00"), "Shoes", 1, 1, date(2024, 1, 1))
    ledger.append(expense)
    events = []
    ledger.subscribe(events.append)

    removed = ledger.remove(expense.id)

    assert removed == expense
    assert ledger.balance(1) == Decimal("100.00")
    assert events[0].kind is LedgerEventKind.TRANSACTION_REMOVED
    assert events[0].new_balance == Decimal("100.00")
    with pytest.raises(ItemNotFoundError):
        ledger.get_transaction(expense.id)
    with pytest.raises(ItemNotFoundError):
        ledger.remove(expense.id)


def test_record_pair_stores_both_sides_then_notifies() -> None:
    """Both sides are stored before any listener runs."""
    ledger, factory = _build_ledger()
    pair = factory.create_transfer(Decimal("30.00"), "Move", 1, 2, 1, date(2024, 1, 1))
    seen_balances = []

    def listener(event):
        seen_balances.append((ledger.balance(1), ledger.balance(2)))

    ledger.subscribe(listener)
    ledger.record_pair(pair.outgoing, pair.incoming)

    assert ledger.balance(1) == Decimal("70.00")
    assert ledger.balance(2) == Decimal("30.00")
    assert seen_balances == [
        (Decimal("70.00"), Decimal("30.00")),
        (Decimal("70.00"), Decimal("30.00")),
    ]


def test_record_pair_rolls_back_outgoing_side() -> None:
    """A failing incoming side leaves the source account unchanged."""
    ledger, factory = _build_ledger()
    pair = factory.create_transfer(Decimal("30.00"), "Move", 1, 9, 1, date(2024, 1, 1))
    listener = MagicMock()
    ledger.subscribe(listener)

    with pytest.raises(ItemNotFoundError):
        ledger.record_pair(pair.outgoing, pair.incoming)

    assert ledger.balance(1) == Decimal("100.00")
    assert ledger.get_account(1).transaction_ids == ()
    assert ledger.all_transactions() == []
    listener.assert_not_called()


class _AccountsFailingOn(InMemoryRepository):
    def __init__(self, failing_id: int) -> None:
        super().__init__("Account")
        self._failing_id = failing_id

    def save(self, entity) -> None:
        if entity.id == self._failing_id and entity.transaction_ids:
            raise StorageError("disk full")
        super().save(entity)


def test_record_pair_discards_incoming_side_when_account_save_fails() -> None:
    """No transaction of the pair survives a failed destination update."""
    transactions = InMemoryRepository("Transaction")
    ledger = Ledger(_AccountsFailingOn(2), transactions, logger=MagicMock())
    ledger.add_account(
        Account(id=1, name="Main", currency_id=1, initial_balance=Decimal("100.00"))
    )
    ledger.add_account(
        Account(id=2, name="Cash", currency_id=1, initial_balance=Decimal("0.00"))
    )
    pair = TransactionFactory().create_transfer(
        Decimal("30.00"), "Move", 1, 2, 1, date(2024, 1, 1)
    )

    with pytest.raises(StorageError):
        ledger.record_pair(pair.outgoing, pair.incoming)

    assert transactions.find_all() == []
    assert ledger.balance(1) == Decimal("100.00")
    assert ledger.get_account(2).transaction_ids == ()


def test_remove_pair_from_either_side() -> None:
    """Both transfer sides are removed whichever id is given."""
    ledger, factory = _build_ledger()
    pair = factory.create_transfer(Decimal("30.00"), "Move", 1, 2, 1, date(2024, 1, 1))
    ledger.record_pair(pair.outgoing, pair.incoming)

    outgoing, incoming = ledger.remove_pair(pair.incoming.id)

    assert outgoing.type is TransactionType.TRANSFER_OUT
    assert incoming.type is TransactionType.TRANSFER_IN
    assert ledger.balance(1) == Decimal("100.00")
    assert ledger.balance(2) == Decimal("0.00")
    assert ledger.all_transactions() == []


def test_remove_pair_rejects_plain_transactions() -> None:
    """Only transfer sides can be removed as a pair."""
    ledger, factory = _build_ledger()
    income = factory.create_income(Decimal("5.00"), "Tip", 1, 1, date(2024, 1, 1))
    ledger.append(income)

    with pytest.raises(InvalidInputError):
        ledger.remove_pair(income.id)


def test_transactions_filters_and_search() -> None:
    """Filters combine and results keep append order."""
    ledger, factory = _build_ledger()
    first = factory.create_expense(Decimal("5.00"), "Bakery", 2, 1, date(2024, 3, 5))
    second = factory.create_income(Decimal("9.00"), "Refund bakery", 3, 1, date(2024, 1, 5))
    third = factory.create_expense(Decimal("7.00"), "Bus", 4, 1, date(2024, 2, 5))
    for transaction in (first, second, third):
        ledger.append(transaction)

    assert ledger.transactions(1) == [first, second, third]
    assert ledger.transactions(1, start=date(2024, 2, 1)) == [first, third]
    assert ledger.transactions(1, end=date(2024, 2, 5)) == [second, third]
    assert ledger.transactions(
        1, transaction_type=TransactionType.EXPENSE, category_id=4
    ) == [third]
    assert ledger.search(1, "BAKERY") == [first, second]
    assert ledger.search(2, "bakery") == []


def test_unsubscribe_stops_notifications() -> None:
    """Unsubscribed listeners are no longer called."""
    ledger, factory = _build_ledger()
    listener = MagicMock()
    ledger.subscribe(listener)
    ledger.unsubscribe(listener)
    ledger.unsubscribe(listener)

    ledger.append(factory.create_income(Decimal("1.00"), "x", 1, 1, date(2024, 1, 1)))

    listener.assert_not_called()
