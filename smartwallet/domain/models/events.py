"""Events emitted by ledger mutations."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from smartwallet.domain.models.transactions import Transaction


class LedgerEventKind(str, Enum):
    TRANSACTION_ADDED = "TRANSACTION_ADDED"
    TRANSACTION_REMOVED = "TRANSACTION_REMOVED"


@dataclass(frozen=True)
class LedgerEvent:
    """Change applied to one account.

    Attributes:
        kind: Whether the transaction was added or removed.
        account_id: Account whose history changed.
        account_name: Display name of the account.
        transaction: Transaction added or removed.
        old_balance: Balance before the change.
        new_balance: Balance after the change.
    """

    kind: LedgerEventKind
    account_id: int
    account_name: str
    transaction: Transaction
    old_balance: Decimal
    new_balance: Decimal


__all__ = ["LedgerEventKind", "LedgerEvent"]
