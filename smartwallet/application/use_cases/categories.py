"""Use case managing the category hierarchy.

Categories live in a flat storage indexed by id; parents and children refer
to each other by id only. The ledger never reads this structure, it only
carries the category id on each transaction.
"""

from dataclasses import dataclass

from smartwallet.application.ports.repository import RepositoryPort
from smartwallet.domain.errors import InvalidInputError, ItemNotFoundError
from smartwallet.domain.models.categories import Category, CategoryKind, CategoryNode
from smartwallet.domain.models.transactions import Transaction
from smartwallet.domain.services.validation import validate_not_empty
from smartwallet.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class DeleteCheck:
    """Outcome of a deletion pre-check."""

    allowed: bool
    reason: str | None = None


class CategoryService:
    """Create, walk and delete categories."""

    def __init__(
        self,
        category_repository: RepositoryPort[Category],
        transaction_repository: RepositoryPort[Transaction],
        logger=None,
    ) -> None:
        """Initialize the service.

        Args:
            category_repository: Storage for categories.
            transaction_repository: Storage used to detect categories in use.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._categories = category_repository
        self._transactions = transaction_repository
        self._logger = logger or get_app_logger()

    def create_macro_category(
        self,
        name: str,
        description: str = "",
        parent_id: int | None = None,
    ) -> Category:
        """Create a category that can hold children."""
        return self._create(CategoryKind.MACRO, name, description, parent_id)

    def create_standard_category(
        self,
        name: str,
        description: str = "",
        parent_id: int | None = None,
    ) -> Category:
        """Create a leaf category."""
        return self._create(CategoryKind.STANDARD, name, description, parent_id)

    def get_category(self, category_id: int) -> Category:
        category = self._categories.find_by_id(category_id)
        if category is None:
            raise ItemNotFoundError(f"Category with ID {category_id} not found")
        return category

    def list_categories(self) -> list[Category]:
        return self._categories.find_all()

    def walk(self, root_id: int | None = None) -> list[CategoryNode]:
        """Return categories in depth-first order.

        Args:
            root_id: Category to start from; every top-level category when
                None.

        Returns:
            list[CategoryNode]: Visited categories with their depth.
        """
        if root_id is not None:
            roots = [self.get_category(root_id)]
        else:
            roots = [c for c in self._categories.find_all() if c.parent_id is None]

        visited: list[CategoryNode] = []
        stack = [(category.id, 0) for category in reversed(roots)]
        while stack:
            category_id, depth = stack.pop()
            category = self._categories.find_by_id(category_id)
            if category is None:
                self._logger.warning(f"Dangling category reference {category_id}")
                continue
            visited.append(CategoryNode(category=category, depth=depth))
            for child_id in reversed(category.child_ids):
                stack.append((child_id, depth + 1))
        return visited

    def can_delete(self, category_id: int) -> DeleteCheck:
        """Check whether a category can be deleted.

        A category cannot be deleted while it has children or while any
        transaction references it.
        """
        category = self._categories.find_by_id(category_id)
        if category is None:
            return DeleteCheck(False, "Category not found")
        if category.child_ids:
            return DeleteCheck(
                False,
                f"Category has {len(category.child_ids)} subcategories",
            )
        in_use = sum(
            1
            for transaction in self._transactions.find_all()
            if transaction.category_id == category_id
        )
        if in_use:
            return DeleteCheck(False, f"Category is used by {in_use} transactions")
        return DeleteCheck(True)

    def delete_category(self, category_id: int) -> Category:
        """Delete a category and unlink it from its parent.

        Raises:
            ItemNotFoundError: If the category does not exist.
            InvalidInputError: If the category has children or is in use.
        """
        category = self.get_category(category_id)
        check = self.can_delete(category_id)
        if not check.allowed:
            raise InvalidInputError(f"Cannot delete category: {check.reason}")

        if category.parent_id is not None:
            parent = self._categories.find_by_id(category.parent_id)
            if parent is not None:
                self._categories.save(parent.without_child(category_id))
        self._categories.delete(category_id)
        self._logger.info(f"Deleted category {category.name} (ID: {category_id})")
        return category

    def _create(
        self,
        kind: CategoryKind,
        name: str,
        description: str,
        parent_id: int | None,
    ) -> Category:
        validate_not_empty(name, "category name")
        parent = None
        if parent_id is not None:
            parent = self._categories.find_by_id(parent_id)
            if parent is None:
                raise ItemNotFoundError(
                    f"Parent category with ID {parent_id} not found"
                )
            if parent.is_leaf:
                raise InvalidInputError(
                    f"Category {parent.name} is a leaf and cannot have children"
                )

        category = Category(
            id=self._categories.generate_next_id(),
            name=name.strip(),
            kind=kind,
            description=(description or "").strip(),
            parent_id=parent_id,
        )
        self._categories.save(category)
        if parent is not None:
            self._categories.save(parent.with_child(category.id))
        self._logger.info(
            f"Created {kind.value.lower()} category {category.name} "
            f"(ID: {category.id})"
        )
        return category


__all__ = ["CategoryService", "DeleteCheck"]
