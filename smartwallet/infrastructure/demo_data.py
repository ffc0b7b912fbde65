"""Sample data for trying the ledger out."""

from datetime import date, timedelta
from decimal import Decimal

from smartwallet.infrastructure.container import LedgerContext
from smartwallet.infrastructure.logging.logger import get_app_logger


DEMO_RATES = (
    ("USD", "US Dollar", "$", Decimal("1.08"), Decimal("1.10")),
    ("GBP", "British Pound", "£", Decimal("0.85"), Decimal("0.86")),
)

def seed_demo_data(context: LedgerContext, today: date | None = None) -> None:
    """Populate ``context`` with currencies, categories, accounts and postings.

    Args:
        context: Ledger to populate; expected to be empty.
        today: Reference date for rates and postings; defaults to today.
    """
    logger = get_app_logger()
    today = today or date.today()
    month_ago = today - timedelta(days=30)
    store = context.currency_store

    for code, name, symbol, older, latest in DEMO_RATES:
        if code == store.base_currency_code:
            continue
        if store.find_by_code(code) is None:
            store.add_currency(code, name, symbol)
        store.add_rate(code, month_ago, older)
        store.add_rate(code, today, latest)

    categories = context.categories
    income_root = categories.create_macro_category("Income", "Money coming in")
    salary = categories.create_standard_category(
        "Salary", "Monthly salary", income_root.id
    )
    expenses_root = categories.create_macro_category("Expenses", "Money going out")
    groceries = categories.create_standard_category(
        "Groceries", "Food and household", expenses_root.id
    )
    transport = categories.create_standard_category(
        "Transport", "Public transport and fuel", expenses_root.id
    )
    transfers = categories.create_standard_category(
        "Transfers", "Moves between own accounts"
    )

    coordinator = context.coordinator
    base_code = store.base_currency_code
    main = coordinator.create_account("Main Account", base_code, Decimal("1000"))
    paypal = coordinator.create_account("PayPal", "USD", Decimal("500"))
    cash = coordinator.create_account("Cash", base_code, Decimal("200"))

    coordinator.post_income(
        main.id, Decimal("2500.00"), "Salary", salary.id, month_ago
    )
    coordinator.post_expense(
        main.id, Decimal("84.30"), "Supermarket", groceries.id, month_ago
    )
    coordinator.post_expense(
        cash.id, Decimal("12.50"), "Bus tickets", transport.id, today
    )
    coordinator.post_expense(
        paypal.id, Decimal("45.99"), "Online order", groceries.id, today
    )
    coordinator.transfer(
        main.id, paypal.id, Decimal("100.00"), "Top up PayPal", transfers.id, today
    )
    coordinator.transfer(
        main.id, cash.id, Decimal("50.00"), "ATM withdrawal", transfers.id, today
    )
    logger.info("Demo data seeded")


__all__ = ["seed_demo_data"]
