"""SQLAlchemy-backed implementation of the storage port.

Entities of every kind share one table and are stored as JSON payloads
produced by an :class:`EntityCodec`. A second table keeps a per-kind id
sequence so generated ids keep increasing after deletions.
"""

import json
from typing import TypeVar

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from smartwallet.application.ports.database import DatabaseEnginePort
from smartwallet.application.ports.repository import RepositoryPort
from smartwallet.domain.errors import ItemNotFoundError, StorageError
from smartwallet.infrastructure.codecs import EntityCodec


T = TypeVar("T")

CREATE_ENTITIES_SQL = """
CREATE TABLE IF NOT EXISTS ledger_entities (
    kind TEXT NOT NULL,
    id INTEGER NOT NULL,
    position INTEGER NOT NULL,
    payload TEXT NOT NULL,
    PRIMARY KEY (kind, id)
)
"""

CREATE_SEQUENCES_SQL = """
CREATE TABLE IF NOT EXISTS ledger_sequences (
    kind TEXT PRIMARY KEY,
    next_id INTEGER NOT NULL
)
"""

SELECT_ONE_SQL = text(
    "SELECT payload FROM ledger_entities WHERE kind = :kind AND id = :id"
)
SELECT_ALL_SQL = text(
    "SELECT payload FROM ledger_entities WHERE kind = :kind ORDER BY position"
)
UPDATE_SQL = text(
    "UPDATE ledger_entities SET payload = :payload WHERE kind = :kind AND id = :id"
)
INSERT_SQL = text(
    """
    INSERT INTO ledger_entities (kind, id, position, payload)
    SELECT :kind, :id, COALESCE(MAX(position), 0) + 1, :payload
    FROM ledger_entities
    WHERE kind = :kind
    """
)
DELETE_SQL = text("DELETE FROM ledger_entities WHERE kind = :kind AND id = :id")
CLEAR_SQL = text("DELETE FROM ledger_entities WHERE kind = :kind")
COUNT_SQL = text("SELECT COUNT(*) FROM ledger_entities WHERE kind = :kind")
MAX_ID_SQL = text(
    "SELECT COALESCE(MAX(id), 0) FROM ledger_entities WHERE kind = :kind"
)
SELECT_SEQUENCE_SQL = text(
    "SELECT next_id FROM ledger_sequences WHERE kind = :kind"
)
INSERT_SEQUENCE_SQL = text(
    "INSERT INTO ledger_sequences (kind, next_id) VALUES (:kind, :next_id)"
)
UPDATE_SEQUENCE_SQL = text(
    "UPDATE ledger_sequences SET next_id = :next_id WHERE kind = :kind"
)
BUMP_SEQUENCE_SQL = text(
    """
    UPDATE ledger_sequences SET next_id = :next_id
    WHERE kind = :kind AND next_id < :next_id
    """
)


class SqlAlchemyRepository(RepositoryPort[T]):
    """Repository persisting one entity kind through SQLAlchemy."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        codec: EntityCodec[T],
    ) -> None:
        """Initialize the repository and create its tables if needed.

        Args:
            db_port: Port providing the ledger engine.
            codec: Encoder/decoder for the stored entity kind.
        """
        self._db_port = db_port
        self._codec = codec
        self._ensure_schema()

    def save(self, entity: T) -> None:
        params = {
            "kind": self._codec.kind,
            "id": entity.id,
            "payload": json.dumps(self._codec.encode(entity)),
        }
        try:
            with self._engine().begin() as conn:
                updated = conn.execute(UPDATE_SQL, params)
                if updated.rowcount == 0:
                    conn.execute(INSERT_SQL, params)
                self._advance_sequence(conn, entity.id + 1)
        except SQLAlchemyError as exc:
            raise StorageError(
                f"Could not save {self._codec.kind} {entity.id}: {exc}"
            ) from exc

    def find_by_id(self, entity_id: int) -> T | None:
        row = self._fetch_one(SELECT_ONE_SQL, {"id": entity_id})
        if row is None:
            return None
        return self._codec.decode(json.loads(row.payload))

    def find_all(self) -> list[T]:
        try:
            with self._engine().connect() as conn:
                rows = conn.execute(
                    SELECT_ALL_SQL, {"kind": self._codec.kind}
                ).all()
        except SQLAlchemyError as exc:
            raise StorageError(
                f"Could not read {self._codec.kind} entities: {exc}"
            ) from exc
        return [self._codec.decode(json.loads(row.payload)) for row in rows]

    def delete(self, entity_id: int) -> None:
        try:
            with self._engine().begin() as conn:
                result = conn.execute(
                    DELETE_SQL, {"kind": self._codec.kind, "id": entity_id}
                )
        except SQLAlchemyError as exc:
            raise StorageError(
                f"Could not delete {self._codec.kind} {entity_id}: {exc}"
            ) from exc
        if result.rowcount == 0:
            raise ItemNotFoundError(
                f"{self._codec.kind} with ID {entity_id} not found"
            )

    def exists(self, entity_id: int) -> bool:
        return self._fetch_one(SELECT_ONE_SQL, {"id": entity_id}) is not None

    def count(self) -> int:
        try:
            with self._engine().connect() as conn:
                return conn.execute(COUNT_SQL, {"kind": self._codec.kind}).scalar_one()
        except SQLAlchemyError as exc:
            raise StorageError(
                f"Could not count {self._codec.kind} entities: {exc}"
            ) from exc

    def clear(self) -> None:
        try:
            with self._engine().begin() as conn:
                conn.execute(CLEAR_SQL, {"kind": self._codec.kind})
        except SQLAlchemyError as exc:
            raise StorageError(
                f"Could not clear {self._codec.kind} entities: {exc}"
            ) from exc

    def generate_next_id(self) -> int:
        params = {"kind": self._codec.kind}
        try:
            with self._engine().begin() as conn:
                current = conn.execute(SELECT_SEQUENCE_SQL, params).scalar()
                if current is None:
                    current = conn.execute(MAX_ID_SQL, params).scalar_one() + 1
                    conn.execute(
                        INSERT_SEQUENCE_SQL,
                        {**params, "next_id": current + 1},
                    )
                else:
                    conn.execute(
                        UPDATE_SEQUENCE_SQL,
                        {**params, "next_id": current + 1},
                    )
        except SQLAlchemyError as exc:
            raise StorageError(
                f"Could not generate {self._codec.kind} id: {exc}"
            ) from exc
        return current

    def _advance_sequence(self, conn, next_id: int) -> None:
        params = {"kind": self._codec.kind, "next_id": next_id}
        current = conn.execute(SELECT_SEQUENCE_SQL, params).scalar()
        if current is None:
            conn.execute(INSERT_SEQUENCE_SQL, params)
        else:
            conn.execute(BUMP_SEQUENCE_SQL, params)

    def _fetch_one(self, query, params: dict):
        try:
            with self._engine().connect() as conn:
                return conn.execute(
                    query, {"kind": self._codec.kind, **params}
                ).first()
        except SQLAlchemyError as exc:
            raise StorageError(
                f"Could not read {self._codec.kind} entity: {exc}"
            ) from exc

    def _ensure_schema(self) -> None:
        try:
            with self._engine().begin() as conn:
                conn.exec_driver_sql(CREATE_ENTITIES_SQL)
                conn.exec_driver_sql(CREATE_SEQUENCES_SQL)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not create ledger tables: {exc}") from exc

    def _engine(self):
        return self._db_port.get_ledger_engine()


__all__ = ["SqlAlchemyRepository"]
