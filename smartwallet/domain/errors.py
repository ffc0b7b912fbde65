"""Error taxonomy for the ledger.

All domain errors derive from :class:`WalletError` and are recoverable by
the caller. Arithmetic preconditions (division by zero) are not part of this
hierarchy and propagate as ``ZeroDivisionError``.
"""


class WalletError(Exception):
    """Base class for recoverable ledger errors."""


class InvalidInputError(WalletError):
    """Raised when an argument is malformed or out of range."""


class ItemNotFoundError(WalletError):
    """Raised when an account, transaction, currency or category is missing."""


class RateNotFoundError(WalletError):
    """Raised when no rate observation exists at or before a date."""


class InsufficientFundsError(WalletError):
    """Raised when a debit exceeds the computed balance of an account."""


class StorageError(WalletError):
    """Raised when the storage collaborator cannot complete an operation."""


__all__ = [
    "WalletError",
    "InvalidInputError",
    "ItemNotFoundError",
    "RateNotFoundError",
    "InsufficientFundsError",
    "StorageError",
]
