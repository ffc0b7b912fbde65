"""Currency model with a time-indexed rate history."""

from bisect import bisect_right
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal

from smartwallet.domain.errors import RateNotFoundError


@dataclass(frozen=True)
class RateObservation:
    """Rate of a currency against the base currency from a given date."""

    date: date
    rate: Decimal


@dataclass(frozen=True)
class Currency:
    """Currency with its rate timeline.

    Attributes:
        id: Storage identifier.
        code: ISO 4217 code (e.g., EUR).
        name: Display name.
        symbol: Display symbol.
        rate_timeline: Observations sorted strictly by date, all expressed
            against the base currency.
    """

    id: int
    code: str
    name: str
    symbol: str
    rate_timeline: tuple[RateObservation, ...] = field(default_factory=tuple)

    def with_rate(self, on: date, rate: Decimal) -> "Currency":
        """Return a copy with ``rate`` observed at ``on``.

        An observation already recorded for the same date is replaced.
        """
        dates = [obs.date for obs in self.rate_timeline]
        index = bisect_right(dates, on)
        timeline = list(self.rate_timeline)
        if index and dates[index - 1] == on:
            timeline[index - 1] = RateObservation(on, rate)
        else:
            timeline.insert(index, RateObservation(on, rate))
        return replace(self, rate_timeline=tuple(timeline))

    def rate_on(self, on: date) -> Decimal:
        """Return the rate effective at ``on`` (floor lookup).

        Raises:
            RateNotFoundError: If no observation exists at or before ``on``.
        """
        dates = [obs.date for obs in self.rate_timeline]
        index = bisect_right(dates, on)
        if index == 0:
            raise RateNotFoundError(
                f"No exchange rate for {self.code} on or before {on}"
            )
        return self.rate_timeline[index - 1].rate

    def latest_rate(self) -> Decimal:
        """Return the most recent rate regardless of date.

        Raises:
            RateNotFoundError: If the timeline is empty.
        """
        if not self.rate_timeline:
            raise RateNotFoundError(f"No exchange rate recorded for {self.code}")
        return self.rate_timeline[-1].rate

    @property
    def latest_rate_date(self) -> date | None:
        if not self.rate_timeline:
            return None
        return self.rate_timeline[-1].date


__all__ = ["Currency", "RateObservation"]
