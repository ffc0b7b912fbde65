"""CLI adapter printing account balances and the total net position.

This module wires the configured ledger (see ``LEDGER_*`` environment
variables) and prints one line per account followed by the total converted
to the base currency.
"""

from datetime import date

from smartwallet.domain.errors import WalletError
from smartwallet.domain.services.money import format_money
from smartwallet.infrastructure.container import get_default_context
from smartwallet.infrastructure.demo_data import seed_demo_data
from smartwallet.infrastructure.logging.logger import get_app_logger
from smartwallet.infrastructure.settings import env_flag


def main() -> None:
    """Print the balance of every account and the total in base currency."""
    logger = get_app_logger()
    try:
        context = get_default_context()
        if env_flag("LEDGER_SEED_DEMO"):
            seed_demo_data(context)

        coordinator = context.coordinator
        base_code = context.currency_store.base_currency_code
        balances = coordinator.account_balances()
        total = coordinator.total_balance(base_code, date.today())
    except WalletError as exc:
        logger.error(f"Ledger summary failed: {exc}")
        raise SystemExit(1) from exc

    if not balances:
        print("No accounts found.")
    for item in balances:
        print(f"{item.name}: {format_money(item.balance)} {item.currency_code}")
    print(f"Total: {format_money(total)} {base_code}")


if __name__ == "__main__":  # pragma: no cover
    main()
