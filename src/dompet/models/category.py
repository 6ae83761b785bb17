"""Ledger category definitions."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import CheckConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from .base import NaiveDateTime, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .transaction import Transaction


class Category(SQLModel, table=True):
    """User-defined label for income or expense transactions."""

    __tablename__: ClassVar[str] = "category"
    __table_args__ = (
        CheckConstraint("type IN ('expense', 'income')", name="category_type_valid"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, nullable=False, max_length=255)
    type: str = Field(default="expense", nullable=False, max_length=16)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveDateTime)

    # Deleting a category leaves its transactions uncategorized (ON DELETE SET NULL).
    transactions: list["Transaction"] = Relationship(
        back_populates="category",
        sa_relationship=relationship(
            "Transaction", back_populates="category", passive_deletes=True
        ),
    )

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
