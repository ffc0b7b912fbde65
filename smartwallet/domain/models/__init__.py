"""Domain models package."""

from .accounts import Account, AccountBalance
from .categories import Category, CategoryKind, CategoryNode
from .currency import Currency, RateObservation
from .events import LedgerEvent, LedgerEventKind
from .transactions import ConversionProvenance, Transaction, TransactionType

__all__ = [
    "Account",
    "AccountBalance",
    "Category",
    "CategoryKind",
    "CategoryNode",
    "Currency",
    "RateObservation",
    "LedgerEvent",
    "LedgerEventKind",
    "ConversionProvenance",
    "Transaction",
    "TransactionType",
]
