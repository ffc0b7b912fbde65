"""In-memory implementation of the storage port."""

from typing import TypeVar

from smartwallet.application.ports.repository import RepositoryPort
from smartwallet.domain.errors import ItemNotFoundError


T = TypeVar("T")


class InMemoryRepository(RepositoryPort[T]):
    """Dictionary-backed repository keeping insertion order.

    Saving an entity with id N moves the id counter to at least N + 1, so
    ids loaded from elsewhere never collide with generated ones.
    """

    def __init__(self, name: str = "entity") -> None:
        """Initialize the repository.

        Args:
            name: Entity label used in error messages.
        """
        self._name = name
        self._storage: dict[int, T] = {}
        self._next_id = 1

    def save(self, entity: T) -> None:
        self._storage[entity.id] = entity
        self._next_id = max(self._next_id, entity.id + 1)

    def find_by_id(self, entity_id: int) -> T | None:
        return self._storage.get(entity_id)

    def find_all(self) -> list[T]:
        return list(self._storage.values())

    def delete(self, entity_id: int) -> None:
        if entity_id not in self._storage:
            raise ItemNotFoundError(f"{self._name} with ID {entity_id} not found")
        del self._storage[entity_id]

    def exists(self, entity_id: int) -> bool:
        return entity_id in self._storage

    def count(self) -> int:
        return len(self._storage)

    def clear(self) -> None:
        self._storage.clear()

    def generate_next_id(self) -> int:
        next_id = self._next_id
        self._next_id += 1
        return next_id


__all__ = ["InMemoryRepository"]
