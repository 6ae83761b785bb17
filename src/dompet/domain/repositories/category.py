"""Category repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for managing category entities."""

    def get_by_id(self, category_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        ...

    def list_all(self, category_type: Optional[str] = None) -> list[Category]:
        """List categories, optionally filtered by type (income/expense)."""
        ...

    def create(self, category: Category) -> Category:
        """Create a new category."""
        ...

    def delete(self, category: Category) -> None:
        """Delete a category; its transactions become uncategorized."""
        ...
