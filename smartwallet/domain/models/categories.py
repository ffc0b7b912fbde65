"""Category nodes stored in a flat arena indexed by id."""

from dataclasses import dataclass, field, replace
from enum import Enum


class CategoryKind(str, Enum):
    MACRO = "MACRO"
    STANDARD = "STANDARD"


@dataclass(frozen=True)
class Category:
    """Category node.

    Macro categories group children; standard categories are leaves. Links
    are ids into the category storage, never object references.
    """

    id: int
    name: str
    kind: CategoryKind
    description: str = ""
    parent_id: int | None = None
    child_ids: tuple[int, ...] = field(default_factory=tuple)

    @property
    def is_leaf(self) -> bool:
        return self.kind is CategoryKind.STANDARD

    def with_child(self, child_id: int) -> "Category":
        return replace(self, child_ids=self.child_ids + (child_id,))

    def without_child(self, child_id: int) -> "Category":
        return replace(
            self,
            child_ids=tuple(c for c in self.child_ids if c != child_id),
        )


@dataclass(frozen=True)
class CategoryNode:
    """Category visited during a depth-first walk."""

    category: Category
    depth: int


__all__ = ["CategoryKind", "Category", "CategoryNode"]
