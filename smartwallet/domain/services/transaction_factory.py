"""Validated construction of ledger transactions."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
import itertools
import logging
from logging import Logger

from smartwallet.domain.errors import InvalidInputError
from smartwallet.domain.models.transactions import (
    ConversionProvenance,
    Transaction,
    TransactionType,
)
from smartwallet.domain.services.validation import (
    validate_date,
    validate_id,
    validate_money_amount,
    validate_not_empty,
    validate_positive_amount,
    validate_positive_rate,
)


@dataclass(frozen=True)
class TransferPair:
    """Both sides of a transfer, created together."""

    outgoing: Transaction
    incoming: Transaction


class TransactionFactory:
    """Build immutable transactions with unique, increasing identifiers.

    Identifiers come from an internal counter unless ``id_source`` is given
    (e.g. a storage sequence), in which case the factory asks it for every
    new transaction.
    """

    def __init__(
        self,
        id_source: Callable[[], int] | None = None,
        logger: Logger | None = None,
        start: int = 1,
    ) -> None:
        self._id_source = id_source
        self._counter = itertools.count(start)
        self._logger = logger or logging.getLogger(__name__)

    def reset_counter(self, start: int = 1) -> None:
        """Restart the internal counter at ``start``."""
        self._counter = itertools.count(start)
        self._logger.debug(f"Transaction id counter reset to {start}")

    def create_income(
        self,
        amount: Decimal,
        description: str,
        category_id: int,
        account_id: int,
        on: date,
        provenance: ConversionProvenance | None = None,
    ) -> Transaction:
        """Create an INCOME transaction.

        Args:
            amount: Positive amount in the account currency.
            description: Free-text description.
            category_id: Opaque category identifier.
            account_id: Receiving account.
            on: Transaction date.
            provenance: Optional conversion provenance.

        Returns:
            Transaction: The validated transaction.

        Raises:
            InvalidInputError: If any field is invalid.
        """
        return self._create_single(
            TransactionType.INCOME,
            amount,
            description,
            category_id,
            account_id,
            on,
            provenance,
        )

    def create_expense(
        self,
        amount: Decimal,
        description: str,
        category_id: int,
        account_id: int,
        on: date,
        provenance: ConversionProvenance | None = None,
    ) -> Transaction:
        """Create an EXPENSE transaction (see :meth:`create_income`)."""
        return self._create_single(
            TransactionType.EXPENSE,
            amount,
            description,
            category_id,
            account_id,
            on,
            provenance,
        )

    def create_transfer(
        self,
        amount: Decimal,
        description: str,
        source_account_id: int,
        destination_account_id: int,
        category_id: int,
        on: date,
        destination_amount: Decimal | None = None,
        provenance: ConversionProvenance | None = None,
    ) -> TransferPair:
        """Create the TRANSFER_OUT / TRANSFER_IN pair of a transfer.

        Args:
            amount: Amount leaving the source account (source currency).
            description: Free-text description shared by both sides.
            source_account_id: Account debited.
            destination_account_id: Account credited.
            category_id: Opaque category identifier.
            on: Transfer date.
            destination_amount: Amount credited in the destination currency;
                defaults to ``amount``.
            provenance: Conversion provenance, attached to the incoming side.

        Returns:
            TransferPair: Linked outgoing and incoming transactions.

        Raises:
            InvalidInputError: If any field is invalid or both accounts match.
        """
        amount = validate_money_amount(amount)
        credited = validate_money_amount(
            amount if destination_amount is None else destination_amount,
            "destination_amount",
        )
        validate_not_empty(description, "description")
        validate_id(source_account_id, "source_account_id")
        validate_id(destination_account_id, "destination_account_id")
        validate_id(category_id, "category_id")
        validate_date(on)
        self._validate_provenance(provenance)
        if source_account_id == destination_account_id:
            raise InvalidInputError(
                "Source and destination accounts must be different"
            )

        outgoing_id = self._next_id()
        incoming_id = self._next_id()
        outgoing = Transaction(
            id=outgoing_id,
            date=on,
            description=f"{description} (outgoing transfer)",
            amount=amount,
            type=TransactionType.TRANSFER_OUT,
            category_id=category_id,
            account_id=source_account_id,
            linked_transaction_id=incoming_id,
        )
        incoming = Transaction(
            id=incoming_id,
            date=on,
            description=f"{description} (incoming transfer)",
            amount=credited,
            type=TransactionType.TRANSFER_IN,
            category_id=category_id,
            account_id=destination_account_id,
            provenance=provenance,
            linked_transaction_id=outgoing_id,
        )
        self._logger.info(
            f"Created transfer {outgoing_id}/{incoming_id}: {amount} from "
            f"account {source_account_id} to account {destination_account_id}"
        )
        return TransferPair(outgoing=outgoing, incoming=incoming)

    def _create_single(
        self,
        transaction_type: TransactionType,
        amount: Decimal,
        description: str,
        category_id: int,
        account_id: int,
        on: date,
        provenance: ConversionProvenance | None,
    ) -> Transaction:
        amount = validate_money_amount(amount)
        validate_not_empty(description, "description")
        validate_id(category_id, "category_id")
        validate_id(account_id, "account_id")
        validate_date(on)
        self._validate_provenance(provenance)

        transaction = Transaction(
            id=self._next_id(),
            date=on,
            description=description,
            amount=amount,
            type=transaction_type,
            category_id=category_id,
            account_id=account_id,
            provenance=provenance,
        )
        self._logger.info(
            f"Created {transaction_type.code} transaction "
            f"{transaction.id}: {amount}"
        )
        return transaction

    @staticmethod
    def _validate_provenance(provenance: ConversionProvenance | None) -> None:
        if provenance is None:
            return
        validate_positive_amount(provenance.original_amount, "original_amount")
        validate_id(provenance.original_currency_id, "original_currency_id")
        validate_positive_rate(provenance.exchange_rate)

    def _next_id(self) -> int:
        if self._id_source is not None:
            return self._id_source()
        return next(self._counter)


__all__ = ["TransactionFactory", "TransferPair"]
