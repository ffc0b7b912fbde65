"""Domain package for ledger rules and core models."""

from .errors import (
    InsufficientFundsError,
    InvalidInputError,
    ItemNotFoundError,
    RateNotFoundError,
    StorageError,
    WalletError,
)
from .models import (
    Account,
    AccountBalance,
    Category,
    CategoryKind,
    CategoryNode,
    ConversionProvenance,
    Currency,
    LedgerEvent,
    LedgerEventKind,
    RateObservation,
    Transaction,
    TransactionType,
)
from .services import (
    ConversionStrategy,
    FixedConversionStrategy,
    HistoricalConversionStrategy,
    TransactionFactory,
    TransferPair,
    compute_balance,
)

__all__ = [
    "WalletError",
    "InvalidInputError",
    "ItemNotFoundError",
    "RateNotFoundError",
    "InsufficientFundsError",
    "StorageError",
    "Account",
    "AccountBalance",
    "Category",
    "CategoryKind",
    "CategoryNode",
    "ConversionProvenance",
    "Currency",
    "LedgerEvent",
    "LedgerEventKind",
    "RateObservation",
    "Transaction",
    "TransactionType",
    "ConversionStrategy",
    "FixedConversionStrategy",
    "HistoricalConversionStrategy",
    "TransactionFactory",
    "TransferPair",
    "compute_balance",
]
