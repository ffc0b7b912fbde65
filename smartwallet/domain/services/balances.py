"""Balance computation over an account's transaction set."""

from collections.abc import Iterable
from decimal import Decimal

from smartwallet.domain.models.transactions import Transaction
from smartwallet.domain.services.money import add, subtract, to_money


def compute_balance(
    initial_balance: Decimal,
    transactions: Iterable[Transaction],
) -> Decimal:
    """Compute a balance from the initial amount and a transaction set.

    Income and incoming transfers add to the balance; expenses and outgoing
    transfers subtract from it.

    Args:
        initial_balance: Signed opening balance of the account.
        transactions: Transactions currently held by the account.

    Returns:
        Decimal: Balance at money scale.
    """
    balance = to_money(initial_balance)
    for transaction in transactions:
        if transaction.type.is_credit:
            balance = add(balance, transaction.amount)
        else:
            balance = subtract(balance, transaction.amount)
    return balance


__all__ = ["compute_balance"]
