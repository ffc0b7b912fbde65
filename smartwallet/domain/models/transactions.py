"""Transaction model."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class TransactionType(Enum):
    """Direction of a transaction relative to its account."""

    INCOME = ("INCOME", "Income", 1)
    EXPENSE = ("EXPENSE", "Expense", -1)
    TRANSFER_OUT = ("TRANSFER_OUT", "Outgoing transfer", -1)
    TRANSFER_IN = ("TRANSFER_IN", "Incoming transfer", 1)

    def __init__(self, code: str, label: str, sign: int) -> None:
        self.code = code
        self.label = label
        self.sign = sign

    @property
    def is_credit(self) -> bool:
        return self.sign > 0

    @property
    def is_transfer(self) -> bool:
        return self in (TransactionType.TRANSFER_OUT, TransactionType.TRANSFER_IN)

    @classmethod
    def from_code(cls, code: str) -> "TransactionType":
        for member in cls:
            if member.code == code:
                return member
        raise ValueError(f"Unknown transaction type: {code}")


@dataclass(frozen=True)
class ConversionProvenance:
    """Source of an amount produced by a currency conversion.

    Attributes:
        original_amount: Amount in the original currency.
        original_currency_id: Identifier of the original currency.
        exchange_rate: Rate applied (account amount / original amount).
    """

    original_amount: Decimal
    original_currency_id: int
    exchange_rate: Decimal


@dataclass(frozen=True)
class Transaction:
    """Immutable ledger entry.

    The amount is always strictly positive; the type carries the direction.
    ``linked_transaction_id`` names the opposite side of a transfer.
    """

    id: int
    date: date
    description: str
    amount: Decimal
    type: TransactionType
    category_id: int
    account_id: int
    provenance: ConversionProvenance | None = None
    linked_transaction_id: int | None = None

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign of its effect on the account balance."""
        return self.amount if self.type.is_credit else -self.amount


__all__ = ["TransactionType", "ConversionProvenance", "Transaction"]
