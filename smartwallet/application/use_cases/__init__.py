"""Application use cases package."""

from .categories import CategoryService, DeleteCheck
from .currency_store import CurrencyStore
from .ledger import Ledger, LedgerListener
from .reports import ReportService
from .transfer_coordinator import TransferCoordinator, TransferReceipt

__all__ = [
    "CategoryService",
    "DeleteCheck",
    "CurrencyStore",
    "Ledger",
    "LedgerListener",
    "ReportService",
    "TransferCoordinator",
    "TransferReceipt",
]
