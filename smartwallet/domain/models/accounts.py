"""Account model."""

from dataclasses import dataclass, field, replace
from decimal import Decimal


@dataclass(frozen=True)
class Account:
    """Account denominated in a single currency.

    The balance is never stored: it is derived from ``initial_balance`` and
    the transactions referenced by ``transaction_ids`` (append order).
    """

    id: int
    name: str
    currency_id: int
    initial_balance: Decimal
    transaction_ids: tuple[int, ...] = field(default_factory=tuple)

    def with_transaction(self, transaction_id: int) -> "Account":
        """Return a copy with ``transaction_id`` appended."""
        return replace(
            self,
            transaction_ids=self.transaction_ids + (transaction_id,),
        )

    def without_transaction(self, transaction_id: int) -> "Account":
        """Return a copy without ``transaction_id``."""
        return replace(
            self,
            transaction_ids=tuple(
                tx_id for tx_id in self.transaction_ids if tx_id != transaction_id
            ),
        )

    def holds(self, transaction_id: int) -> bool:
        return transaction_id in self.transaction_ids


@dataclass(frozen=True)
class AccountBalance:
    """Balance of an account at query time."""

    account_id: int
    name: str
    currency_code: str
    balance: Decimal


__all__ = ["Account", "AccountBalance"]
