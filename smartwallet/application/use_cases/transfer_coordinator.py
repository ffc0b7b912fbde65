"""Entry point for postings and transfers between accounts.

A transfer goes through these steps:

* resolve both accounts;
* check the source balance against the source-side amount;
* resolve the destination amount (explicit amount, configured strategy, or
  the same amount when both accounts share a currency);
* build the linked TRANSFER_OUT / TRANSFER_IN pair;
* record both sides together in the ledger.

Validation happens before any mutation, so a failed request leaves every
account untouched.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
import threading

from smartwallet.application.use_cases.currency_store import CurrencyStore
from smartwallet.application.use_cases.ledger import Ledger
from smartwallet.domain.errors import (
    InsufficientFundsError,
    InvalidInputError,
)
from smartwallet.domain.models.accounts import Account, AccountBalance
from smartwallet.domain.models.currency import Currency
from smartwallet.domain.models.transactions import (
    ConversionProvenance,
    Transaction,
    TransactionType,
)
from smartwallet.domain.services.conversion import ConversionStrategy
from smartwallet.domain.services.money import (
    ZERO,
    add,
    divide_rates,
    is_greater_than,
    to_money,
)
from smartwallet.domain.services.transaction_factory import TransactionFactory
from smartwallet.domain.services.validation import (
    validate_date,
    validate_decimal,
    validate_money_amount,
    validate_not_empty,
    validate_positive_amount,
)
from smartwallet.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class TransferReceipt:
    """Result of a recorded transfer.

    Attributes:
        outgoing: TRANSFER_OUT on the source account.
        incoming: TRANSFER_IN on the destination account.
        converted: Whether a currency conversion took place.
    """

    outgoing: Transaction
    incoming: Transaction
    converted: bool


class TransferCoordinator:
    """Orchestrate postings, transfers and account lifecycle."""

    def __init__(
        self,
        ledger: Ledger,
        currency_store: CurrencyStore,
        factory: TransactionFactory,
        strategy: ConversionStrategy,
        logger=None,
        enforce_expense_funds: bool = False,
    ) -> None:
        """Initialize the coordinator.

        Args:
            ledger: Ledger holding accounts and transactions.
            currency_store: Registry resolving account currencies.
            factory: Factory building validated transactions.
            strategy: Conversion strategy for cross-currency operations.
            logger: Optional logger compatible with logging.Logger-like API.
            enforce_expense_funds: Reject expenses larger than the balance.
        """
        self._ledger = ledger
        self._currencies = currency_store
        self._factory = factory
        self._strategy = strategy
        self._logger = logger or get_app_logger()
        self._enforce_expense_funds = enforce_expense_funds
        self._lock = threading.RLock()

    @property
    def strategy(self) -> ConversionStrategy:
        return self._strategy

    def create_account(
        self,
        name: str,
        currency_code: str,
        initial_balance: Decimal,
    ) -> Account:
        """Open a new account.

        Args:
            name: Display name.
            currency_code: ISO code of an existing currency.
            initial_balance: Signed opening balance.

        Returns:
            Account: The stored account.

        Raises:
            InvalidInputError: If a field is missing or malformed.
            ItemNotFoundError: If the currency does not exist.
        """
        validate_not_empty(name, "account name")
        validate_not_empty(currency_code, "currency code")
        validate_decimal(initial_balance, "initial_balance")
        currency = self._currencies.get_by_code(currency_code)
        with self._lock:
            account = Account(
                id=self._ledger.next_account_id(),
                name=name.strip(),
                currency_id=currency.id,
                initial_balance=to_money(initial_balance),
            )
            self._ledger.add_account(account)
        self._logger.info(f"Created account {account.name} (ID: {account.id})")
        return account

    def get_account(self, account_id: int) -> Account:
        return self._ledger.get_account(account_id)

    def list_accounts(self) -> list[Account]:
        return self._ledger.list_accounts()

    def get_transaction(self, transaction_id: int) -> Transaction:
        return self._ledger.get_transaction(transaction_id)

    def balance(self, account_id: int) -> Decimal:
        return self._ledger.balance(account_id)

    def account_balances(self) -> list[AccountBalance]:
        """Return the balance of every account, sorted by name."""
        balances = [
            AccountBalance(
                account_id=account.id,
                name=account.name,
                currency_code=self._currency_of(account).code,
                balance=self._ledger.balance_of(account),
            )
            for account in self._ledger.list_accounts()
        ]
        return sorted(balances, key=lambda item: (item.name.lower(), item.account_id))

    def post_income(
        self,
        account_id: int,
        amount: Decimal | None,
        description: str,
        category_id: int,
        on: date,
        original_amount: Decimal | None = None,
        original_currency_code: str | None = None,
    ) -> Transaction:
        """Record an income on ``account_id``.

        ``amount`` is expressed in the account currency. When the income was
        received in another currency pass ``original_amount`` and
        ``original_currency_code``; ``amount`` may then be omitted and is
        computed with the configured strategy.

        Returns:
            Transaction: The recorded INCOME transaction.

        Raises:
            InvalidInputError: If a field is invalid.
            ItemNotFoundError: If the account or currency does not exist.
            RateNotFoundError: If a conversion has no usable rate.
        """
        return self._post(
            TransactionType.INCOME,
            account_id,
            amount,
            description,
            category_id,
            on,
            original_amount,
            original_currency_code,
        )

    def post_expense(
        self,
        account_id: int,
        amount: Decimal | None,
        description: str,
        category_id: int,
        on: date,
        original_amount: Decimal | None = None,
        original_currency_code: str | None = None,
    ) -> Transaction:
        """Record an expense on ``account_id`` (see :meth:`post_income`).

        Raises:
            InsufficientFundsError: If funds are enforced for expenses and
                the amount exceeds the balance.
        """
        return self._post(
            TransactionType.EXPENSE,
            account_id,
            amount,
            description,
            category_id,
            on,
            original_amount,
            original_currency_code,
        )

    def transfer(
        self,
        source_account_id: int,
        destination_account_id: int,
        amount: Decimal,
        description: str,
        category_id: int,
        on: date,
        destination_amount: Decimal | None = None,
    ) -> TransferReceipt:
        """Move funds between two accounts.

        Args:
            source_account_id: Account debited.
            destination_account_id: Account credited.
            amount: Amount in the source currency.
            description: Free-text description.
            category_id: Opaque category identifier.
            on: Transfer date, also used for rate resolution.
            destination_amount: Explicit amount in the destination currency;
                only used when the currencies differ.

        Returns:
            TransferReceipt: Both recorded sides.

        Raises:
            ItemNotFoundError: If either account is missing.
            InsufficientFundsError: If ``amount`` exceeds the source balance.
            RateNotFoundError: If the strategy has no usable rate.
            InvalidInputError: If a field is invalid.
        """
        amount = validate_money_amount(amount)
        validate_date(on)
        if source_account_id == destination_account_id:
            raise InvalidInputError(
                "Source and destination accounts must be different"
            )
        with self._lock:
            source = self._ledger.get_account(source_account_id)
            destination = self._ledger.get_account(destination_account_id)

            available = self._ledger.balance_of(source)
            if is_greater_than(amount, available):
                raise InsufficientFundsError(
                    f"Insufficient funds on account {source.name}. "
                    f"Available: {available}, requested: {amount}"
                )

            source_currency = self._currency_of(source)
            destination_currency = self._currency_of(destination)
            credited, provenance = self._resolve_transfer_amount(
                amount,
                destination_amount,
                source_currency,
                destination_currency,
                on,
            )

            pair = self._factory.create_transfer(
                amount,
                description,
                source.id,
                destination.id,
                category_id,
                on,
                destination_amount=credited,
                provenance=provenance,
            )
            self._ledger.record_pair(pair.outgoing, pair.incoming)

        self._logger.info(
            f"Transfer completed: {amount} {source_currency.code} -> "
            f"{credited} {destination_currency.code}"
        )
        return TransferReceipt(
            outgoing=pair.outgoing,
            incoming=pair.incoming,
            converted=provenance is not None,
        )

    def delete_transaction(self, transaction_id: int) -> Transaction:
        """Delete an income or expense entry.

        Raises:
            ItemNotFoundError: If the transaction does not exist.
            InvalidInputError: If the transaction is one side of a transfer.
        """
        with self._lock:
            transaction = self._ledger.get_transaction(transaction_id)
            if transaction.type.is_transfer:
                raise InvalidInputError(
                    f"Transaction {transaction_id} belongs to a transfer with "
                    f"transaction {transaction.linked_transaction_id}; "
                    "delete the transfer instead"
                )
            removed = self._ledger.remove(transaction_id)
        self._logger.info(f"Deleted transaction {transaction_id}")
        return removed

    def delete_transfer(self, transaction_id: int) -> tuple[Transaction, Transaction]:
        """Delete both sides of the transfer containing ``transaction_id``."""
        with self._lock:
            outgoing, incoming = self._ledger.remove_pair(transaction_id)
        self._logger.info(f"Deleted transfer {outgoing.id}/{incoming.id}")
        return outgoing, incoming

    def total_balance(self, target_currency_code: str, on: date) -> Decimal:
        """Return the sum of all balances converted to one currency.

        Raises:
            ItemNotFoundError: If a currency does not exist.
            RateNotFoundError: If a conversion has no usable rate.
        """
        target = self._currencies.get_by_code(target_currency_code)
        total = ZERO
        for account in self._ledger.list_accounts():
            converted = self._strategy.convert(
                self._ledger.balance_of(account),
                self._currency_of(account),
                target,
                on,
            )
            total = add(total, converted)
        self._logger.info(f"Total balance in {target.code}: {total}")
        return total

    def _post(
        self,
        transaction_type: TransactionType,
        account_id: int,
        amount: Decimal | None,
        description: str,
        category_id: int,
        on: date,
        original_amount: Decimal | None,
        original_currency_code: str | None,
    ) -> Transaction:
        with self._lock:
            account = self._ledger.get_account(account_id)
            amount, provenance = self._resolve_posting_amount(
                account,
                amount,
                original_amount,
                original_currency_code,
                on,
            )
            amount = validate_money_amount(amount)
            if transaction_type is TransactionType.INCOME:
                transaction = self._factory.create_income(
                    amount, description, category_id, account.id, on, provenance
                )
            else:
                self._check_expense_funds(account, amount)
                transaction = self._factory.create_expense(
                    amount, description, category_id, account.id, on, provenance
                )
            self._ledger.append(transaction)
        return transaction

    def _check_expense_funds(self, account: Account, amount: Decimal | None) -> None:
        if not self._enforce_expense_funds or not isinstance(amount, Decimal):
            return
        available = self._ledger.balance_of(account)
        if is_greater_than(amount, available):
            raise InsufficientFundsError(
                f"Insufficient funds on account {account.name}. "
                f"Available: {available}, requested: {amount}"
            )

    def _resolve_posting_amount(
        self,
        account: Account,
        amount: Decimal | None,
        original_amount: Decimal | None,
        original_currency_code: str | None,
        on: date,
    ) -> tuple[Decimal | None, ConversionProvenance | None]:
        if original_amount is None and original_currency_code is None:
            return amount, None
        if original_amount is None or not original_currency_code:
            raise InvalidInputError(
                "Both original_amount and original_currency_code are required "
                "for a foreign-currency posting"
            )
        validate_positive_amount(original_amount, "original_amount")
        validate_date(on)
        original_currency = self._currencies.get_by_code(original_currency_code)
        account_currency = self._currency_of(account)
        if original_currency.code == account_currency.code:
            return (original_amount if amount is None else amount), None

        if amount is None:
            amount = self._strategy.convert(
                original_amount, original_currency, account_currency, on
            )
            rate = self._strategy.exchange_rate(
                original_currency, account_currency, on
            )
        else:
            amount = validate_money_amount(amount)
            rate = divide_rates(amount, original_amount)
        return amount, ConversionProvenance(
            original_amount=original_amount,
            original_currency_id=original_currency.id,
            exchange_rate=rate,
        )

    def _resolve_transfer_amount(
        self,
        amount: Decimal,
        destination_amount: Decimal | None,
        source_currency: Currency,
        destination_currency: Currency,
        on: date,
    ) -> tuple[Decimal, ConversionProvenance | None]:
        if source_currency.code == destination_currency.code:
            if destination_amount is not None and destination_amount != amount:
                self._logger.warning(
                    f"Ignoring destination amount {destination_amount}: both "
                    f"accounts use {source_currency.code}"
                )
            return amount, None

        if destination_amount is not None:
            credited = validate_money_amount(
                destination_amount, "destination_amount"
            )
            rate = divide_rates(credited, amount)
        else:
            credited = self._strategy.convert(
                amount, source_currency, destination_currency, on
            )
            rate = self._strategy.exchange_rate(
                source_currency, destination_currency, on
            )
        return credited, ConversionProvenance(
            original_amount=amount,
            original_currency_id=source_currency.id,
            exchange_rate=rate,
        )

    def _currency_of(self, account: Account) -> Currency:
        return self._currencies.get_by_id(account.currency_id)


__all__ = ["TransferCoordinator", "TransferReceipt"]
