"""Ledger event listeners."""

from smartwallet.domain.models.events import LedgerEvent, LedgerEventKind
from smartwallet.domain.services.money import format_money, is_negative
from smartwallet.infrastructure.logging.logger import get_audit_logger


class AuditLedgerListener:
    """Record every ledger mutation in the audit log.

    A warning is written whenever a mutation leaves an account with a
    negative balance.
    """

    def __init__(self, logger=None) -> None:
        self._logger = logger or get_audit_logger()

    def __call__(self, event: LedgerEvent) -> None:
        transaction = event.transaction
        verb = "added" if event.kind is LedgerEventKind.TRANSACTION_ADDED else "removed"
        self._logger.info(
            f"[{event.account_name}] {transaction.type.label} {verb}: "
            f"{format_money(transaction.amount)} - {transaction.description} "
            f"(balance {format_money(event.old_balance)} -> "
            f"{format_money(event.new_balance)})"
        )
        if is_negative(event.new_balance):
            self._logger.warning(
                f"Negative balance on account {event.account_name}: "
                f"{format_money(event.new_balance)}"
            )


__all__ = ["AuditLedgerListener"]
