"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ...models.category import Category


class SQLModelCategoryRepository:
    """SQLModel-based category repository bound to an open session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, category_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        return self.session.get(Category, category_id)

    def list_all(self, category_type: Optional[str] = None) -> list[Category]:
        """List categories, optionally filtered by type (income/expense)."""
        statement = select(Category)
        if category_type:
            statement = statement.where(Category.type == category_type)
        statement = statement.order_by(Category.name, Category.id)  # type: ignore[arg-type]
        return list(self.session.exec(statement).all())

    def create(self, category: Category) -> Category:
        """Create a new category."""
        self.session.add(category)
        self.session.flush()
        self.session.refresh(category)
        return category

    def delete(self, category: Category) -> None:
        """Delete a category; ON DELETE SET NULL orphans its transactions."""
        self.session.delete(category)
        self.session.flush()
