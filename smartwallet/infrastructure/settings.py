"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import os
from typing import Optional

import dotenv


STORAGE_BACKENDS = ("memory", "sqlalchemy")
CONVERSION_STRATEGIES = ("historical", "fixed")
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class LedgerSettings:
    """Settings for wiring the ledger.

    Attributes:
        storage: Storage backend identifier (memory or sqlalchemy).
        db_url: Database URL, required by the sqlalchemy backend.
        base_currency: ISO code of the base currency.
        conversion: Conversion strategy (historical or fixed).
        fixed_rate: Factor used by the fixed strategy.
        enforce_expense_funds: Reject expenses larger than the balance.
    """

    storage: str = "memory"
    db_url: Optional[str] = None
    base_currency: str = "EUR"
    conversion: str = "historical"
    fixed_rate: Decimal = Decimal("1")
    enforce_expense_funds: bool = False

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Build settings from environment variables (and a ``.env`` file).

        Returns:
            LedgerSettings: Settings sourced from environment variables.

        Raises:
            ValueError: If a variable holds an unsupported value.
        """
        dotenv.load_dotenv()
        storage = os.getenv("LEDGER_STORAGE", "memory").strip().lower()
        if storage not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unsupported LEDGER_STORAGE: {storage}. "
                f"Expected one of {', '.join(STORAGE_BACKENDS)}."
            )
        db_url = os.getenv("LEDGER_DB_URL") or None
        if storage == "sqlalchemy" and db_url is None:
            raise ValueError("LEDGER_STORAGE=sqlalchemy requires LEDGER_DB_URL.")

        conversion = os.getenv("LEDGER_CONVERSION", "historical").strip().lower()
        if conversion not in CONVERSION_STRATEGIES:
            raise ValueError(
                f"Unsupported LEDGER_CONVERSION: {conversion}. "
                f"Expected one of {', '.join(CONVERSION_STRATEGIES)}."
            )

        return cls(
            storage=storage,
            db_url=db_url,
            base_currency=os.getenv("LEDGER_BASE_CURRENCY", "EUR").strip().upper(),
            conversion=conversion,
            fixed_rate=cls._parse_rate(os.getenv("LEDGER_FIXED_RATE", "1")),
            enforce_expense_funds=cls._parse_flag(
                "LEDGER_ENFORCE_EXPENSE_FUNDS",
                os.getenv("LEDGER_ENFORCE_EXPENSE_FUNDS", "false"),
            ),
        )

    @staticmethod
    def _parse_rate(raw: str) -> Decimal:
        try:
            rate = Decimal(raw.strip())
        except InvalidOperation as exc:
            raise ValueError(f"Invalid LEDGER_FIXED_RATE: {raw}") from exc
        if not rate.is_finite() or rate <= 0:
            raise ValueError(f"LEDGER_FIXED_RATE must be positive: {raw}")
        return rate

    @staticmethod
    def _parse_flag(name: str, raw: str) -> bool:
        value = raw.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ValueError(f"Invalid boolean for {name}: {raw}")


def env_flag(name: str) -> bool:
    """Return whether environment variable ``name`` holds a truthy value."""
    return os.getenv(name, "").strip().lower() in _TRUE_VALUES


__all__ = ["LedgerSettings", "env_flag"]
