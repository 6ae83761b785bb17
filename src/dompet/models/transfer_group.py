"""Transfer groups link the two rows of one wallet-to-wallet transfer."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from .base import NaiveDateTime, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .transaction import Transaction


class TransferGroup(SQLModel, table=True):
    __tablename__: ClassVar[str] = "transfer_group"

    id: Optional[int] = Field(default=None, primary_key=True)
    note: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveDateTime)

    legs: list["Transaction"] = Relationship(
        back_populates="transfer_group",
        sa_relationship=relationship(
            "Transaction",
            back_populates="transfer_group",
            cascade="all, delete",
            passive_deletes=True,
            order_by="Transaction.id",
        ),
    )

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "note": self.note,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
