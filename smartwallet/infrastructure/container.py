"""Composition root for wiring the ledger services."""

from dataclasses import dataclass
import threading
from typing import Optional

from smartwallet.application.ports.database import DatabaseEnginePort
from smartwallet.application.ports.repository import RepositoryPort
from smartwallet.application.use_cases.categories import CategoryService
from smartwallet.application.use_cases.currency_store import CurrencyStore
from smartwallet.application.use_cases.ledger import Ledger
from smartwallet.application.use_cases.reports import ReportService
from smartwallet.application.use_cases.transfer_coordinator import (
    TransferCoordinator,
)
from smartwallet.domain.models.accounts import Account
from smartwallet.domain.models.categories import Category
from smartwallet.domain.models.currency import Currency
from smartwallet.domain.models.transactions import Transaction
from smartwallet.domain.services.conversion import (
    ConversionStrategy,
    FixedConversionStrategy,
    HistoricalConversionStrategy,
)
from smartwallet.domain.services.transaction_factory import TransactionFactory
from smartwallet.infrastructure.codecs import (
    ACCOUNT_CODEC,
    CATEGORY_CODEC,
    CURRENCY_CODEC,
    TRANSACTION_CODEC,
)
from smartwallet.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from smartwallet.infrastructure.in_memory_repository import InMemoryRepository
from smartwallet.infrastructure.ledger_listeners import AuditLedgerListener
from smartwallet.infrastructure.logging.logger import get_app_logger
from smartwallet.infrastructure.settings import LedgerSettings
from smartwallet.infrastructure.sqlalchemy_repository import SqlAlchemyRepository


@dataclass(frozen=True)
class LedgerContext:
    """Every service of one ledger instance, sharing the same storage."""

    settings: LedgerSettings
    currencies_repository: RepositoryPort[Currency]
    accounts_repository: RepositoryPort[Account]
    transactions_repository: RepositoryPort[Transaction]
    categories_repository: RepositoryPort[Category]
    currency_store: CurrencyStore
    strategy: ConversionStrategy
    factory: TransactionFactory
    ledger: Ledger
    coordinator: TransferCoordinator
    reports: ReportService
    categories: CategoryService


def build_strategy(
    settings: LedgerSettings,
    currency_store: CurrencyStore,
) -> ConversionStrategy:
    """Return the conversion strategy selected by ``settings``."""
    if settings.conversion == "fixed":
        return FixedConversionStrategy(settings.fixed_rate, logger=get_app_logger())
    return HistoricalConversionStrategy(currency_store, logger=get_app_logger())


def build_in_memory_context(
    settings: LedgerSettings | None = None,
) -> LedgerContext:
    """Return a ledger kept entirely in process memory."""
    resolved = settings or LedgerSettings()
    return _assemble(
        resolved,
        currencies=InMemoryRepository("Currency"),
        accounts=InMemoryRepository("Account"),
        transactions=InMemoryRepository("Transaction"),
        categories=InMemoryRepository("Category"),
    )


def build_sqlalchemy_context(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> LedgerContext:
    """Return a ledger persisted through SQLAlchemy.

    Args:
        db_port: Port providing the engine; built from ``settings.db_url``
            (or ``LEDGER_DB_URL``) when omitted.
        settings: Wiring settings; defaults apply when omitted.
    """
    resolved = settings or LedgerSettings(storage="sqlalchemy")
    resolved_db = db_port or SqlAlchemyDatabaseEngineAdapter(resolved.db_url)
    return _assemble(
        resolved,
        currencies=SqlAlchemyRepository(resolved_db, CURRENCY_CODEC),
        accounts=SqlAlchemyRepository(resolved_db, ACCOUNT_CODEC),
        transactions=SqlAlchemyRepository(resolved_db, TRANSACTION_CODEC),
        categories=SqlAlchemyRepository(resolved_db, CATEGORY_CODEC),
    )


def build_context(settings: LedgerSettings | None = None) -> LedgerContext:
    """Return the ledger selected by ``settings`` (environment by default)."""
    resolved = settings or LedgerSettings.from_env()
    if resolved.storage == "sqlalchemy":
        return build_sqlalchemy_context(settings=resolved)
    return build_in_memory_context(resolved)


_default_context: Optional[LedgerContext] = None
_context_lock = threading.Lock()


def get_default_context() -> LedgerContext:
    """Return the process-wide ledger, building it on first use."""
    global _default_context
    with _context_lock:
        if _default_context is None:
            _default_context = build_context()
    return _default_context


def reset_default_context() -> None:
    """Drop the process-wide ledger so the next call rebuilds it."""
    global _default_context
    with _context_lock:
        _default_context = None


def _assemble(
    settings: LedgerSettings,
    currencies: RepositoryPort[Currency],
    accounts: RepositoryPort[Account],
    transactions: RepositoryPort[Transaction],
    categories: RepositoryPort[Category],
) -> LedgerContext:
    logger = get_app_logger()
    currency_store = CurrencyStore(
        currencies,
        base_currency_code=settings.base_currency,
        logger=logger,
    )
    currency_store.ensure_base_currency()
    strategy = build_strategy(settings, currency_store)
    factory = TransactionFactory(
        id_source=transactions.generate_next_id,
        logger=logger,
    )
    ledger = Ledger(accounts, transactions, logger=logger)
    ledger.subscribe(AuditLedgerListener())
    coordinator = TransferCoordinator(
        ledger,
        currency_store,
        factory,
        strategy,
        logger=logger,
        enforce_expense_funds=settings.enforce_expense_funds,
    )
    logger.info(
        f"Ledger ready (storage={settings.storage}, "
        f"conversion={settings.conversion}, base={settings.base_currency})"
    )
    return LedgerContext(
        settings=settings,
        currencies_repository=currencies,
        accounts_repository=accounts,
        transactions_repository=transactions,
        categories_repository=categories,
        currency_store=currency_store,
        strategy=strategy,
        factory=factory,
        ledger=ledger,
        coordinator=coordinator,
        reports=ReportService(ledger, currency_store, logger=logger),
        categories=CategoryService(categories, transactions, logger=logger),
    )


__all__ = [
    "LedgerContext",
    "build_strategy",
    "build_in_memory_context",
    "build_sqlalchemy_context",
    "build_context",
    "get_default_context",
    "reset_default_context",
]
