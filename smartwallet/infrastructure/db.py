"""Database infrastructure for the ledger.

This module exposes helpers to create and reuse the SQLAlchemy engine
holding ledger data. It belongs to the infrastructure layer because it
deals with external systems (SQLite, PostgreSQL).
"""

import os
import threading
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool, StaticPool

from smartwallet.application.ports.database import DatabaseEnginePort


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine.

    SQLite URLs share a single connection so in-memory databases survive
    between calls; other backends get a small pool with health checks.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: A SQLAlchemy engine instance.
    """
    if db_url.startswith("sqlite"):
        return create_engine(
            db_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            future=True,
        )
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_ledger_engine: Optional[Engine] = None
_engine_lock = threading.Lock()


def get_ledger_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the ledger database.

    Returns:
        Engine: Lazily initialized engine built from ``LEDGER_DB_URL``.
    """
    global _ledger_engine
    with _engine_lock:
        if _ledger_engine is None:
            db_url = _get_env_var("LEDGER_DB_URL")
            _ledger_engine = _create_engine(db_url)
    return _ledger_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by a SQLAlchemy engine.

    The adapter hides configuration details (environment variables, pooling)
    behind the port. An explicit URL bypasses the process-wide engine.
    """

    def __init__(self, db_url: str | None = None) -> None:
        self._db_url = db_url
        self._engine: Optional[Engine] = None

    def get_ledger_engine(self) -> Engine:
        """Get the engine for the ledger database.

        Returns:
            Engine: SQLAlchemy engine connected to the ledger storage.
        """
        if self._db_url is None:
            return get_ledger_engine()
        if self._engine is None:
            self._engine = _create_engine(self._db_url)
        return self._engine


__all__ = [
    "get_ledger_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
