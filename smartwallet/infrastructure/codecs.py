"""JSON payload encoding of ledger entities for SQL storage."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Generic, TypeVar

from smartwallet.domain.models.accounts import Account
from smartwallet.domain.models.categories import Category, CategoryKind
from smartwallet.domain.models.currency import Currency, RateObservation
from smartwallet.domain.models.transactions import (
    ConversionProvenance,
    Transaction,
    TransactionType,
)


T = TypeVar("T")


@dataclass(frozen=True)
class EntityCodec(Generic[T]):
    """Pair of functions mapping an entity to and from a JSON object.

    Attributes:
        kind: Storage discriminator for the entity type.
        encode: Entity to JSON-compatible dictionary.
        decode: JSON-compatible dictionary to entity.
    """

    kind: str
    encode: Callable[[T], dict[str, Any]]
    decode: Callable[[dict[str, Any]], T]


def _encode_currency(currency: Currency) -> dict[str, Any]:
    return {
        "id": currency.id,
        "code": currency.code,
        "name": currency.name,
        "symbol": currency.symbol,
        "rates": [
            [obs.date.isoformat(), str(obs.rate)] for obs in currency.rate_timeline
        ],
    }


def _decode_currency(payload: dict[str, Any]) -> Currency:
    return Currency(
        id=payload["id"],
        code=payload["code"],
        name=payload["name"],
        symbol=payload["symbol"],
        rate_timeline=tuple(
            RateObservation(date.fromisoformat(day), Decimal(rate))
            for day, rate in payload.get("rates", [])
        ),
    )


def _encode_account(account: Account) -> dict[str, Any]:
    return {
        "id": account.id,
        "name": account.name,
        "currency_id": account.currency_id,
        "initial_balance": str(account.initial_balance),
        "transaction_ids": list(account.transaction_ids),
    }


def _decode_account(payload: dict[str, Any]) -> Account:
    return Account(
        id=payload["id"],
        name=payload["name"],
        currency_id=payload["currency_id"],
        initial_balance=Decimal(payload["initial_balance"]),
        transaction_ids=tuple(payload.get("transaction_ids", [])),
    )


def _encode_transaction(transaction: Transaction) -> dict[str, Any]:
    provenance = transaction.provenance
    return {
        "id": transaction.id,
        "date": transaction.date.isoformat(),
        "description": transaction.description,
        "amount": str(transaction.amount),
        "type": transaction.type.code,
        "category_id": transaction.category_id,
        "account_id": transaction.account_id,
        "linked_transaction_id": transaction.linked_transaction_id,
        "provenance": None
        if provenance is None
        else {
            "original_amount": str(provenance.original_amount),
            "original_currency_id": provenance.original_currency_id,
            "exchange_rate": str(provenance.exchange_rate),
        },
    }


def _decode_transaction(payload: dict[str, Any]) -> Transaction:
    raw_provenance = payload.get("provenance")
    provenance = None
    if raw_provenance:
        provenance = ConversionProvenance(
            original_amount=Decimal(raw_provenance["original_amount"]),
            original_currency_id=raw_provenance["original_currency_id"],
            exchange_rate=Decimal(raw_provenance["exchange_rate"]),
        )
    return Transaction(
        id=payload["id"],
        date=date.fromisoformat(payload["date"]),
        description=payload["description"],
        amount=Decimal(payload["amount"]),
        type=TransactionType.from_code(payload["type"]),
        category_id=payload["category_id"],
        account_id=payload["account_id"],
        provenance=provenance,
        linked_transaction_id=payload.get("linked_transaction_id"),
    )


def _encode_category(category: Category) -> dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "kind": category.kind.value,
        "description": category.description,
        "parent_id": category.parent_id,
        "child_ids": list(category.child_ids),
    }


def _decode_category(payload: dict[str, Any]) -> Category:
    return Category(
        id=payload["id"],
        name=payload["name"],
        kind=CategoryKind(payload["kind"]),
        description=payload.get("description", ""),
        parent_id=payload.get("parent_id"),
        child_ids=tuple(payload.get("child_ids", [])),
    )


CURRENCY_CODEC = EntityCodec("currency", _encode_currency, _decode_currency)
ACCOUNT_CODEC = EntityCodec("account", _encode_account, _decode_account)
TRANSACTION_CODEC = EntityCodec(
    "transaction", _encode_transaction, _decode_transaction
)
CATEGORY_CODEC = EntityCodec("category", _encode_category, _decode_category)


__all__ = [
    "EntityCodec",
    "CURRENCY_CODEC",
    "ACCOUNT_CODEC",
    "TRANSACTION_CODEC",
    "CATEGORY_CODEC",
]
