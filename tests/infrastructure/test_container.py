"""Tests for the composition root and ledger listeners."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from smartwallet.domain.models import (
    LedgerEvent,
    LedgerEventKind,
    Transaction,
    TransactionType,
)
from smartwallet.domain.services import (
    FixedConversionStrategy,
    HistoricalConversionStrategy,
)
from smartwallet.infrastructure import container
from smartwallet.infrastructure.demo_data import seed_demo_data
from smartwallet.infrastructure.ledger_listeners import AuditLedgerListener
from smartwallet.infrastructure.settings import LedgerSettings


class _SqliteDbPort:
    def __init__(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    def get_ledger_engine(self):
        return self.engine


def test_build_in_memory_context_wires_services() -> None:
    """The context seeds the base currency and shares storage."""
    context = container.build_in_memory_context()

    assert context.currency_store.base_currency().code == "EUR"
    assert isinstance(context.strategy, HistoricalConversionStrategy)
    assert context.coordinator.strategy is context.strategy

    account = context.coordinator.create_account("Main", "EUR", Decimal("5"))
    assert context.accounts_repository.find_by_id(account.id) == account


def test_build_strategy_follows_settings() -> None:
    """The fixed strategy uses the configured factor."""
    context = container.build_in_memory_context(
        LedgerSettings(conversion="fixed", fixed_rate=Decimal("0.5"))
    )

    assert isinstance(context.strategy, FixedConversionStrategy)
    assert context.strategy.fixed_rate == Decimal("0.5")


def test_contexts_are_isolated() -> None:
    """Two contexts never share accounts."""
    first = container.build_in_memory_context()
    second = container.build_in_memory_context()

    first.coordinator.create_account("Main", "EUR", Decimal("0"))

    assert second.coordinator.list_accounts() == []


def test_sqlalchemy_context_persists_between_builds() -> None:
    """A second context on the same database sees earlier writes."""
    db_port = _SqliteDbPort()
    first = container.build_sqlalchemy_context(db_port)
    main = first.coordinator.create_account("Main", "EUR", Decimal("100.00"))
    cash = first.coordinator.create_account("Cash", "EUR", Decimal("0"))
    first.coordinator.transfer(main.id, cash.id, Decimal("25.00"), "ATM", 1, date(2024, 1, 1))

    second = container.build_sqlalchemy_context(db_port)

    assert len(second.currency_store.list_currencies()) == 1
    assert second.coordinator.balance(main.id) == Decimal("75.00")
    assert second.coordinator.balance(cash.id) == Decimal("25.00")
    income = second.coordinator.post_income(main.id, Decimal("1"), "x", 1, date(2024, 1, 2))
    assert income.id == 3


def test_default_context_is_lazy_singleton(monkeypatch) -> None:
    """get_default_context builds once until reset."""
    built = []

    def fake_build_context():
        built.append(object())
        return built[-1]

    monkeypatch.setattr(container, "build_context", fake_build_context)
    container.reset_default_context()

    first = container.get_default_context()
    second = container.get_default_context()
    container.reset_default_context()
    third = container.get_default_context()
    container.reset_default_context()

    assert first is second
    assert third is not first
    assert len(built) == 2


def test_demo_data_produces_expected_balances() -> None:
    """The demo seed creates three accounts with converted transfers."""
    context = container.build_in_memory_context()
    today = date(2024, 6, 30)

    seed_demo_data(context, today=today)

    balances = {b.name: b.balance for b in context.coordinator.account_balances()}
    assert balances == {
        "Cash": Decimal("237.50"),
        "Main Account": Decimal("3265.70"),
        "PayPal": Decimal("544.92"),
    }
    assert [n.category.name for n in context.categories.walk()][:2] == [
        "Income",
        "Salary",
    ]


def test_audit_listener_warns_on_negative_balance() -> None:
    """Every event is logged; negative balances add a warning."""
    logger = MagicMock()
    listener = AuditLedgerListener(logger=logger)
    transaction = Transaction(
        id=1,
        date=date(2024, 1, 1),
        description="Rent",
        amount=Decimal("900.00"),
        type=TransactionType.EXPENSE,
        category_id=1,
        account_id=1,
    )

    listener(
        LedgerEvent(
            kind=LedgerEventKind.TRANSACTION_ADDED,
            account_id=1,
            account_name="Main",
            transaction=transaction,
            old_balance=Decimal("100.00"),
            new_balance=Decimal("-800.00"),
        )
    )

    logger.info.assert_called_once()
    assert "Expense added: 900.00" in logger.info.call_args[0][0]
    logger.warning.assert_called_once_with(
        "Negative balance on account Main: -800.00"
    )
