"""Domain services package."""

from .balances import compute_balance
from .conversion import (
    ConversionStrategy,
    FixedConversionStrategy,
    HistoricalConversionStrategy,
    RateSource,
)
from .transaction_factory import TransactionFactory, TransferPair

__all__ = [
    "compute_balance",
    "ConversionStrategy",
    "FixedConversionStrategy",
    "HistoricalConversionStrategy",
    "RateSource",
    "TransactionFactory",
    "TransferPair",
]
