"""Use case computing income and expense reports in the base currency."""

from datetime import date
from decimal import Decimal

from smartwallet.application.use_cases.currency_store import CurrencyStore
from smartwallet.application.use_cases.ledger import Ledger
from smartwallet.domain.errors import RateNotFoundError
from smartwallet.domain.models.currency import Currency
from smartwallet.domain.models.transactions import Transaction, TransactionType
from smartwallet.domain.services.money import ZERO, add, multiply_by_rate
from smartwallet.infrastructure.logging.logger import get_app_logger


class ReportService:
    """Aggregate account activity into base-currency totals.

    Each transaction is converted with the rate effective at its own date.
    When that rate is missing the latest known rate is used and a warning is
    logged.
    """

    def __init__(
        self,
        ledger: Ledger,
        currency_store: CurrencyStore,
        logger=None,
    ) -> None:
        """Initialize the service.

        Args:
            ledger: Ledger providing accounts and transactions.
            currency_store: Registry resolving currencies and rates.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._ledger = ledger
        self._currencies = currency_store
        self._logger = logger or get_app_logger()

    def total_income(
        self,
        account_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> Decimal:
        """Return total income in the base currency.

        Args:
            account_id: Account to report on; all accounts when None.
            start: Optional inclusive lower date bound.
            end: Optional inclusive upper date bound.

        Returns:
            Decimal: Sum of converted income amounts.
        """
        return self._total(TransactionType.INCOME, account_id, start, end)

    def total_expenses(
        self,
        account_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> Decimal:
        """Return total expenses in the base currency (see total_income)."""
        return self._total(TransactionType.EXPENSE, account_id, start, end)

    def expenses_by_category(
        self,
        account_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> dict[int, Decimal]:
        """Return base-currency expense totals keyed by category id."""
        totals: dict[int, Decimal] = {}
        for account_id_, currency in self._accounts(account_id):
            for transaction in self._ledger.transactions(
                account_id_,
                start=start,
                end=end,
                transaction_type=TransactionType.EXPENSE,
            ):
                converted = self._to_base(transaction, currency)
                totals[transaction.category_id] = add(
                    totals.get(transaction.category_id, ZERO),
                    converted,
                )
        return dict(sorted(totals.items()))

    def transactions_by_period(
        self,
        account_id: int,
        start: date | None = None,
        end: date | None = None,
    ) -> list[Transaction]:
        """Return an account's transactions in the period, sorted by date."""
        transactions = self._ledger.transactions(account_id, start=start, end=end)
        return sorted(transactions, key=lambda item: (item.date, item.id))

    def _total(
        self,
        transaction_type: TransactionType,
        account_id: int | None,
        start: date | None,
        end: date | None,
    ) -> Decimal:
        total = ZERO
        for account_id_, currency in self._accounts(account_id):
            for transaction in self._ledger.transactions(
                account_id_,
                start=start,
                end=end,
                transaction_type=transaction_type,
            ):
                total = add(total, self._to_base(transaction, currency))
        scope = "all accounts" if account_id is None else f"account {account_id}"
        self._logger.info(
            f"Total {transaction_type.code} ({scope}): "
            f"{total} {self._currencies.base_currency_code}"
        )
        return total

    def _accounts(self, account_id: int | None) -> list[tuple[int, Currency]]:
        if account_id is not None:
            accounts = [self._ledger.get_account(account_id)]
        else:
            accounts = self._ledger.list_accounts()
        return [
            (account.id, self._currencies.get_by_id(account.currency_id))
            for account in accounts
        ]

    def _to_base(self, transaction: Transaction, currency: Currency) -> Decimal:
        if currency.code == self._currencies.base_currency_code:
            return transaction.amount
        try:
            rate = currency.rate_on(transaction.date)
        except RateNotFoundError:
            self._logger.warning(
                f"Missing rate for {currency.code} on {transaction.date}; "
                "using latest available rate"
            )
            rate = currency.latest_rate()
        return multiply_by_rate(transaction.amount, rate)


__all__ = ["ReportService"]
