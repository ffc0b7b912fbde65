"""Tests for the CategoryService use case."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from smartwallet.application.use_cases.categories import CategoryService
from smartwallet.domain.errors import InvalidInputError, ItemNotFoundError
from smartwallet.domain.models import CategoryKind, Transaction, TransactionType
from smartwallet.infrastructure.in_memory_repository import InMemoryRepository


def _build():
    transactions = InMemoryRepository("Transaction")
    service = CategoryService(
        InMemoryRepository("Category"),
        transactions,
        logger=MagicMock(),
    )
    return service, transactions


def test_walk_is_depth_first() -> None:
    """Categories are visited depth first in creation order."""
    service, _ = _build()
    expenses = service.create_macro_category("Expenses")
    home = service.create_macro_category("Home", parent_id=expenses.id)
    service.create_standard_category("Rent", parent_id=home.id)
    service.create_standard_category("Food", parent_id=expenses.id)
    service.create_standard_category("Salary")

    visited = [(node.category.name, node.depth) for node in service.walk()]

    assert visited == [
        ("Expenses", 0),
        ("Home", 1),
        ("Rent", 2),
        ("Food", 1),
        ("Salary", 0),
    ]
    assert [n.category.name for n in service.walk(home.id)] == ["Home", "Rent"]
    assert service.get_category(expenses.id).child_ids == (home.id, 4)


def test_create_rejects_invalid_parents() -> None:
    """Children need an existing macro parent."""
    service, _ = _build()
    leaf = service.create_standard_category("Leaf")

    assert leaf.kind is CategoryKind.STANDARD
    with pytest.raises(InvalidInputError):
        service.create_standard_category("Child", parent_id=leaf.id)
    with pytest.raises(ItemNotFoundError):
        service.create_standard_category("Child", parent_id=42)
    with pytest.raises(InvalidInputError):
        service.create_macro_category("  ")


def test_delete_rules() -> None:
    """Categories with children or transactions cannot be deleted."""
    service, transactions = _build()
    root = service.create_macro_category("Root")
    used = service.create_standard_category("Used", parent_id=root.id)
    free = service.create_standard_category("Free", parent_id=root.id)
    transactions.save(
        Transaction(
            id=1,
            date=date(2024, 1, 1),
            description="Lunch",
            amount=Decimal("9.00"),
            type=TransactionType.EXPENSE,
            category_id=used.id,
            account_id=1,
        )
    )

    assert service.can_delete(root.id).allowed is False
    assert "1 transactions" in service.can_delete(used.id).reason
    assert service.can_delete(999).allowed is False
    with pytest.raises(InvalidInputError):
        service.delete_category(used.id)

    deleted = service.delete_category(free.id)

    assert deleted.name == "Free"
    assert service.get_category(root.id).child_ids == (used.id,)
    with pytest.raises(ItemNotFoundError):
        service.get_category(free.id)
