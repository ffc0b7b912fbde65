"""Storage port used by the ledger core.

The ledger only relies on this protocol; it never knows how or where
entities are persisted.
"""

from typing import Protocol, TypeVar


T = TypeVar("T")


class RepositoryPort(Protocol[T]):
    """Port exposing id-keyed storage for one entity type."""

    def save(self, entity: T) -> None:
        """Insert or replace ``entity`` under its ``id``."""

    def find_by_id(self, entity_id: int) -> T | None:
        """Return the entity with ``entity_id`` or None."""

    def find_all(self) -> list[T]:
        """Return every stored entity in insertion order."""

    def delete(self, entity_id: int) -> None:
        """Delete the entity.

        Raises:
            ItemNotFoundError: If no entity has ``entity_id``.
        """

    def exists(self, entity_id: int) -> bool:
        """Return whether an entity with ``entity_id`` is stored."""

    def count(self) -> int:
        """Return the number of stored entities."""

    def clear(self) -> None:
        """Remove every entity."""

    def generate_next_id(self) -> int:
        """Return a new identifier, greater than any previously issued."""


__all__ = ["RepositoryPort"]
