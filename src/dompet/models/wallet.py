"""Wallet model: an account holding a balance in one currency."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from .base import NaiveDateTime, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .transaction import Transaction


class Wallet(SQLModel, table=True):
    __tablename__: ClassVar[str] = "wallet"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=255)
    currency: str = Field(default="IDR", nullable=False, max_length=3)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveDateTime)

    # Rows go away through ON DELETE CASCADE; the ORM must not null them out.
    transactions: list["Transaction"] = Relationship(
        back_populates="wallet",
        sa_relationship=relationship(
            "Transaction",
            back_populates="wallet",
            cascade="all, delete",
            passive_deletes=True,
        ),
    )

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "currency": self.currency,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
