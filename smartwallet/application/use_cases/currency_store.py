"""Currency registry with historical exchange rates."""

from datetime import date
from decimal import Decimal

from smartwallet.application.ports.repository import RepositoryPort
from smartwallet.domain.constants import DEFAULT_BASE_CURRENCY, DEFAULT_CURRENCIES
from smartwallet.domain.errors import (
    InvalidInputError,
    ItemNotFoundError,
)
from smartwallet.domain.models.currency import Currency
from smartwallet.domain.services.money import to_rate
from smartwallet.domain.services.validation import (
    validate_date,
    validate_id,
    validate_not_empty,
)
from smartwallet.infrastructure.logging.logger import get_app_logger


BASE_RATE = Decimal("1")


class CurrencyStore:
    """Look up currencies and resolve their rates at a date.

    All rates are expressed against one base currency, whose timeline holds
    a rate of 1 from ``date.min`` so that it resolves for every date.
    """

    def __init__(
        self,
        currency_repository: RepositoryPort[Currency],
        base_currency_code: str = DEFAULT_BASE_CURRENCY[0],
        logger=None,
    ) -> None:
        """Initialize the store.

        Args:
            currency_repository: Storage for currencies.
            base_currency_code: ISO code of the base currency.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._repository = currency_repository
        self._base_code = base_currency_code.strip().upper()
        self._logger = logger or get_app_logger()

    @property
    def base_currency_code(self) -> str:
        return self._base_code

    def ensure_base_currency(self) -> Currency:
        """Create the base currency if missing and guarantee its unit rate."""
        existing = self.find_by_code(self._base_code)
        if existing is None:
            name, symbol = self._base_display()
            return self.add_currency(
                self._base_code,
                name,
                symbol,
                initial_rate=BASE_RATE,
                as_of=date.min,
            )
        if not existing.rate_timeline or existing.rate_timeline[0].date != date.min:
            existing = existing.with_rate(date.min, BASE_RATE)
            self._repository.save(existing)
        return existing

    def base_currency(self) -> Currency:
        return self.get_by_code(self._base_code)

    def initialize_default_currencies(self, as_of: date) -> list[Currency]:
        """Create the base currency plus USD and GBP when absent.

        Args:
            as_of: Date of the initial rate observation for new currencies.

        Returns:
            list[Currency]: Every currency in the store afterwards.
        """
        self.ensure_base_currency()
        for code, name, symbol, rate in DEFAULT_CURRENCIES:
            if code == self._base_code or self.find_by_code(code) is not None:
                continue
            self.add_currency(code, name, symbol, initial_rate=rate, as_of=as_of)
        self._logger.info("Default currencies initialized")
        return self.list_currencies()

    def add_currency(
        self,
        code: str,
        name: str,
        symbol: str,
        initial_rate: Decimal | None = None,
        as_of: date | None = None,
    ) -> Currency:
        """Register a new currency.

        Args:
            code: ISO code, stored upper-case.
            name: Display name.
            symbol: Display symbol.
            initial_rate: Optional first rate observation.
            as_of: Date of ``initial_rate``; required when a rate is given.

        Returns:
            Currency: The stored currency.

        Raises:
            InvalidInputError: If a field is invalid or the code is taken.
        """
        validate_not_empty(code, "currency code")
        validate_not_empty(name, "currency name")
        normalized = code.strip().upper()
        if self.find_by_code(normalized) is not None:
            raise InvalidInputError(f"Currency {normalized} already exists")

        currency = Currency(
            id=self._repository.generate_next_id(),
            code=normalized,
            name=name.strip(),
            symbol=(symbol or "").strip(),
        )
        if initial_rate is not None:
            validate_date(as_of, "as_of")
            currency = currency.with_rate(as_of, self._checked_rate(initial_rate))
        self._repository.save(currency)
        self._logger.info(f"Added currency {normalized} (ID: {currency.id})")
        return currency

    def add_rate(self, code: str, on: date, rate) -> Currency:
        """Record ``rate`` for currency ``code`` at ``on``.

        Raises:
            ItemNotFoundError: If the currency does not exist.
            InvalidInputError: If the rate is not positive or the date is
                missing, or a non-unit rate targets the base currency.
        """
        validate_date(on)
        checked = self._checked_rate(rate)
        currency = self.get_by_code(code)
        if currency.code == self._base_code and checked != BASE_RATE:
            raise InvalidInputError(
                f"The base currency {self._base_code} always has rate 1"
            )
        updated = currency.with_rate(on, checked)
        self._repository.save(updated)
        self._logger.info(f"Rate for {updated.code} on {on}: {checked}")
        return updated

    def get_by_code(self, code: str) -> Currency:
        """Return the currency with ``code``.

        Raises:
            ItemNotFoundError: If no currency has that code.
        """
        currency = self.find_by_code(code)
        if currency is None:
            raise ItemNotFoundError(f"Currency with code {code} not found")
        return currency

    def find_by_code(self, code: str | None) -> Currency | None:
        if not code:
            return None
        normalized = code.strip().upper()
        for currency in self._repository.find_all():
            if currency.code == normalized:
                return currency
        return None

    def get_by_id(self, currency_id: int) -> Currency:
        """Return the currency with ``currency_id``.

        Raises:
            ItemNotFoundError: If no currency has that id.
        """
        validate_id(currency_id, "currency_id")
        currency = self._repository.find_by_id(currency_id)
        if currency is None:
            raise ItemNotFoundError(f"Currency with ID {currency_id} not found")
        return currency

    def list_currencies(self) -> list[Currency]:
        return self._repository.find_all()

    def rate_on(self, code: str, on: date) -> Decimal:
        """Return the rate of ``code`` effective at ``on``.

        Raises:
            ItemNotFoundError: If the currency does not exist.
            RateNotFoundError: If no observation exists at or before ``on``.
        """
        return self.get_by_code(code).rate_on(on)

    def latest_rate(self, code: str) -> Decimal:
        """Return the most recent rate of ``code`` regardless of date."""
        return self.get_by_code(code).latest_rate()

    def _base_display(self) -> tuple[str, str]:
        code, name, symbol = DEFAULT_BASE_CURRENCY
        if code == self._base_code:
            return name, symbol
        return self._base_code, self._base_code

    @staticmethod
    def _checked_rate(rate) -> Decimal:
        try:
            value = to_rate(rate)
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc
        if not value.is_finite() or value <= 0:
            raise InvalidInputError(f"Exchange rate must be positive: {value}")
        return value


__all__ = ["CurrencyStore"]
