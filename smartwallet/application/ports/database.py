"""Database port for SQL-backed ledger storage.

Infrastructure implementations provide the concrete engine; the storage
adapters depend only on this protocol.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the SQLAlchemy engine holding ledger data."""

    def get_ledger_engine(self) -> Engine:
        """Get the engine for the ledger database.

        Returns:
            Engine: SQLAlchemy engine connected to the ledger storage.
        """


__all__ = ["DatabaseEnginePort"]
