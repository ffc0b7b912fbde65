"""Currency conversion strategies.

Both strategies share the same signature and short-circuit conversions
between identical currencies, so callers never need to know which one is
configured.
"""

from datetime import date
from decimal import Decimal
import logging
from logging import Logger
from typing import Protocol

from smartwallet.domain.models.currency import Currency
from smartwallet.domain.services.money import (
    divide_rates,
    multiply_by_rate,
    to_rate,
)


PARITY = Decimal("1")


class RateSource(Protocol):
    """Anything able to resolve a currency rate at a date."""

    def rate_on(self, code: str, on: date) -> Decimal:
        """Return the rate of ``code`` against the base currency at ``on``."""


class ConversionStrategy(Protocol):
    """Algorithm converting an amount between two currencies."""

    def exchange_rate(self, source: Currency, target: Currency, on: date) -> Decimal:
        """Return the factor turning a ``source`` amount into ``target``."""

    def convert(
        self,
        amount: Decimal,
        source: Currency,
        target: Currency,
        on: date,
    ) -> Decimal:
        """Return ``amount`` expressed in ``target`` at money scale."""


def _same_currency(source: Currency, target: Currency) -> bool:
    return source.code == target.code


class HistoricalConversionStrategy:
    """Convert with the rates effective at the conversion date.

    The factor is ``rate(source, on) / rate(target, on)`` with both rates
    expressed against the same base currency.
    """

    def __init__(self, rate_source: RateSource, logger: Logger | None = None) -> None:
        """Initialize the strategy.

        Args:
            rate_source: Store resolving rates by currency code and date.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._rate_source = rate_source
        self._logger = logger or logging.getLogger(__name__)

    def exchange_rate(self, source: Currency, target: Currency, on: date) -> Decimal:
        """Return the full-precision conversion factor.

        Raises:
            RateNotFoundError: If either currency has no usable observation.
        """
        if _same_currency(source, target):
            return PARITY
        source_rate = self._rate_source.rate_on(source.code, on)
        target_rate = self._rate_source.rate_on(target.code, on)
        return divide_rates(source_rate, target_rate)

    def convert(
        self,
        amount: Decimal,
        source: Currency,
        target: Currency,
        on: date,
    ) -> Decimal:
        if _same_currency(source, target):
            return amount
        rate = self.exchange_rate(source, target, on)
        result = multiply_by_rate(amount, rate)
        self._logger.debug(
            f"Converted {amount} {source.code} -> {result} {target.code} "
            f"(rate {rate} on {on})"
        )
        return result


class FixedConversionStrategy:
    """Convert with one constant factor, ignoring dates and rate data."""

    def __init__(self, fixed_rate=PARITY, logger: Logger | None = None) -> None:
        """Initialize the strategy.

        Args:
            fixed_rate: Factor applied to every cross-currency conversion.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._fixed_rate = to_rate(fixed_rate)
        self._logger = logger or logging.getLogger(__name__)

    @property
    def fixed_rate(self) -> Decimal:
        return self._fixed_rate

    def exchange_rate(self, source: Currency, target: Currency, on: date) -> Decimal:
        if _same_currency(source, target):
            return PARITY
        return self._fixed_rate

    def convert(
        self,
        amount: Decimal,
        source: Currency,
        target: Currency,
        on: date,
    ) -> Decimal:
        if _same_currency(source, target):
            return amount
        result = multiply_by_rate(amount, self._fixed_rate)
        self._logger.debug(
            f"Converted {amount} {source.code} -> {result} {target.code} "
            f"(fixed rate {self._fixed_rate})"
        )
        return result


__all__ = [
    "RateSource",
    "ConversionStrategy",
    "HistoricalConversionStrategy",
    "FixedConversionStrategy",
    "PARITY",
]
