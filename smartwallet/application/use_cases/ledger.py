"""Ledger of accounts and their transactions.

Balances are derived on demand from an account's initial balance and the
transactions it currently references; nothing is cached. Every append or
removal publishes a :class:`LedgerEvent` to the subscribed listeners.
"""

from collections.abc import Callable
from datetime import date
from decimal import Decimal

from smartwallet.application.ports.repository import RepositoryPort
from smartwallet.domain.errors import InvalidInputError, ItemNotFoundError
from smartwallet.domain.models.accounts import Account
from smartwallet.domain.models.events import LedgerEvent, LedgerEventKind
from smartwallet.domain.models.transactions import Transaction, TransactionType
from smartwallet.domain.services.balances import compute_balance
from smartwallet.infrastructure.logging.logger import get_app_logger


LedgerListener = Callable[[LedgerEvent], None]


class Ledger:
    """Append, remove and query transactions per account."""

    def __init__(
        self,
        account_repository: RepositoryPort[Account],
        transaction_repository: RepositoryPort[Transaction],
        logger=None,
    ) -> None:
        """Initialize the ledger.

        Args:
            account_repository: Storage for accounts.
            transaction_repository: Storage for transactions.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._accounts = account_repository
        self._transactions = transaction_repository
        self._logger = logger or get_app_logger()
        self._listeners: list[LedgerListener] = []

    def subscribe(self, listener: LedgerListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: LedgerListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def get_account(self, account_id: int) -> Account:
        """Return the account with ``account_id``.

        Raises:
            ItemNotFoundError: If the account does not exist.
        """
        account = self._accounts.find_by_id(account_id)
        if account is None:
            raise ItemNotFoundError(f"Account with ID {account_id} not found")
        return account

    def get_transaction(self, transaction_id: int) -> Transaction:
        """Return the transaction with ``transaction_id``.

        Raises:
            ItemNotFoundError: If the transaction does not exist.
        """
        transaction = self._transactions.find_by_id(transaction_id)
        if transaction is None:
            raise ItemNotFoundError(
                f"Transaction with ID {transaction_id} not found"
            )
        return transaction

    def list_accounts(self) -> list[Account]:
        return self._accounts.find_all()

    def add_account(self, account: Account) -> Account:
        self._accounts.save(account)
        return account

    def next_account_id(self) -> int:
        return self._accounts.generate_next_id()

    def append(self, transaction: Transaction) -> Account:
        """Append ``transaction`` to the history of its account.

        Args:
            transaction: Transaction built by the factory.

        Returns:
            Account: The updated account.

        Raises:
            ItemNotFoundError: If the owning account does not exist.
            InvalidInputError: If the transaction id is already recorded.
        """
        updated, old_balance = self._store(transaction)
        self._publish(
            LedgerEventKind.TRANSACTION_ADDED,
            updated,
            transaction,
            old_balance,
        )
        return updated

    def record_pair(self, outgoing: Transaction, incoming: Transaction) -> None:
        """Append both sides of a transfer.

        If the incoming side cannot be stored the outgoing side is taken out
        again before the error propagates. Listeners are notified only once
        both sides are recorded.
        """
        source, source_old_balance = self._store(outgoing)
        try:
            destination, destination_old_balance = self._store(incoming)
        except Exception:
            self._logger.error(
                f"Rolling back transfer side {outgoing.id} after failed append "
                f"of {incoming.id}"
            )
            self._unstore(outgoing)
            raise
        self._publish(
            LedgerEventKind.TRANSACTION_ADDED,
            source,
            outgoing,
            source_old_balance,
        )
        self._publish(
            LedgerEventKind.TRANSACTION_ADDED,
            destination,
            incoming,
            destination_old_balance,
        )

    def remove(self, transaction_id: int) -> Transaction:
        """Remove a transaction from its owning account.

        Args:
            transaction_id: Identifier of the transaction.

        Returns:
            Transaction: The removed transaction.

        Raises:
            ItemNotFoundError: If the transaction or its account is missing,
                or the account does not reference the transaction.
        """
        transaction = self.get_transaction(transaction_id)
        updated, old_balance = self._unstore(transaction)
        self._publish(
            LedgerEventKind.TRANSACTION_REMOVED,
            updated,
            transaction,
            old_balance,
        )
        return transaction

    def remove_pair(self, transaction_id: int) -> tuple[Transaction, Transaction]:
        """Remove both sides of the transfer containing ``transaction_id``.

        Returns:
            tuple[Transaction, Transaction]: The outgoing and incoming sides.

        Raises:
            InvalidInputError: If the transaction is not a transfer side.
            ItemNotFoundError: If either side or its account is missing.
        """
        first = self.get_transaction(transaction_id)
        if not first.type.is_transfer or first.linked_transaction_id is None:
            raise InvalidInputError(
                f"Transaction {transaction_id} is not part of a transfer"
            )
        second = self.get_transaction(first.linked_transaction_id)
        if first.type is TransactionType.TRANSFER_OUT:
            outgoing, incoming = first, second
        else:
            outgoing, incoming = second, first
        for side in (outgoing, incoming):
            if not self.get_account(side.account_id).holds(side.id):
                raise ItemNotFoundError(
                    f"Transaction {side.id} not found in account {side.account_id}"
                )

        source, source_old_balance = self._unstore(outgoing)
        destination, destination_old_balance = self._unstore(incoming)
        self._publish(
            LedgerEventKind.TRANSACTION_REMOVED,
            source,
            outgoing,
            source_old_balance,
        )
        self._publish(
            LedgerEventKind.TRANSACTION_REMOVED,
            destination,
            incoming,
            destination_old_balance,
        )
        return outgoing, incoming

    def balance(self, account_id: int) -> Decimal:
        """Return the current balance of ``account_id``."""
        return self.balance_of(self.get_account(account_id))

    def balance_of(self, account: Account) -> Decimal:
        return compute_balance(
            account.initial_balance,
            self._resolve(account),
        )

    def transactions(
        self,
        account_id: int,
        start: date | None = None,
        end: date | None = None,
        transaction_type: TransactionType | None = None,
        category_id: int | None = None,
    ) -> list[Transaction]:
        """List an account's transactions in append order.

        Args:
            account_id: Account to read.
            start: Optional inclusive lower bound on the transaction date.
            end: Optional inclusive upper bound on the transaction date.
            transaction_type: Optional type filter.
            category_id: Optional category filter.

        Returns:
            list[Transaction]: Matching transactions.
        """
        account = self.get_account(account_id)
        return [
            transaction
            for transaction in self._resolve(account)
            if _in_period(transaction.date, start, end)
            and (transaction_type is None or transaction.type is transaction_type)
            and (category_id is None or transaction.category_id == category_id)
        ]

    def search(self, account_id: int, keyword: str) -> list[Transaction]:
        """Return the account's transactions whose description has ``keyword``."""
        needle = (keyword or "").lower()
        return [
            transaction
            for transaction in self.transactions(account_id)
            if needle in transaction.description.lower()
        ]

    def all_transactions(self) -> list[Transaction]:
        return self._transactions.find_all()

    def _store(self, transaction: Transaction) -> tuple[Account, Decimal]:
        account = self.get_account(transaction.account_id)
        if self._transactions.exists(transaction.id):
            raise InvalidInputError(
                f"Transaction {transaction.id} is already recorded"
            )
        old_balance = self.balance_of(account)

        self._transactions.save(transaction)
        updated = account.with_transaction(transaction.id)
        try:
            self._accounts.save(updated)
        except Exception:
            self._transactions.delete(transaction.id)
            raise

        self._logger.info(
            f"{transaction.type.code} {transaction.id} appended to account "
            f"{account.id}"
        )
        return updated, old_balance

    def _unstore(self, transaction: Transaction) -> tuple[Account, Decimal]:
        account = self.get_account(transaction.account_id)
        if not account.holds(transaction.id):
            raise ItemNotFoundError(
                f"Transaction {transaction.id} not found in account {account.name}"
            )
        old_balance = self.balance_of(account)

        updated = account.without_transaction(transaction.id)
        self._accounts.save(updated)
        self._transactions.delete(transaction.id)

        self._logger.info(
            f"Removed transaction {transaction.id} from account {account.name}"
        )
        return updated, old_balance

    def _resolve(self, account: Account) -> list[Transaction]:
        resolved = []
        for transaction_id in account.transaction_ids:
            transaction = self._transactions.find_by_id(transaction_id)
            if transaction is None:
                self._logger.warning(
                    f"Account {account.id} references missing transaction "
                    f"{transaction_id}"
                )
                continue
            resolved.append(transaction)
        return resolved

    def _publish(
        self,
        kind: LedgerEventKind,
        account: Account,
        transaction: Transaction,
        old_balance: Decimal,
    ) -> None:
        if not self._listeners:
            return
        event = LedgerEvent(
            kind=kind,
            account_id=account.id,
            account_name=account.name,
            transaction=transaction,
            old_balance=old_balance,
            new_balance=self.balance_of(account),
        )
        for listener in list(self._listeners):
            listener(event)


def _in_period(value: date, start: date | None, end: date | None) -> bool:
    if start is not None and value < start:
        return False
    if end is not None and value > end:
        return False
    return True


__all__ = ["Ledger", "LedgerListener"]
