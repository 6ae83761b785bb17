"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import CheckConstraint, Index
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from .base import NaiveDateTime, utcnow

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .category import Category
    from .transfer_group import TransferGroup
    from .wallet import Wallet


class Transaction(SQLModel, table=True):
    """A single ledger row: an income, an expense, or one leg of a transfer.

    Amounts are whole numbers of the smallest currency unit and always
    positive; the sign of a row is derived from ``type`` and, for transfers,
    from the leg's position inside its transfer group.
    """

    __tablename__: ClassVar[str] = "transaction"
    __table_args__ = (
        CheckConstraint("amount > 0", name="amount_positive"),
        CheckConstraint(
            "type IN ('expense', 'income', 'transfer')", name="transaction_type_valid"
        ),
        CheckConstraint(
            "(type = 'transfer' AND category_id IS NULL) OR (type != 'transfer')",
            name="transfer_no_category",
        ),
        CheckConstraint(
            "(type = 'transfer' AND transfer_group_id IS NOT NULL)"
            " OR (type != 'transfer' AND transfer_group_id IS NULL)",
            name="transfer_group_matches_type",
        ),
        Index("idx_tx_wallet_created", "wallet_id", "created_at"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    wallet_id: int = Field(
        foreign_key="wallet.id", ondelete="CASCADE", nullable=False, index=True
    )
    category_id: Optional[int] = Field(
        default=None, foreign_key="category.id", ondelete="SET NULL", index=True
    )
    type: str = Field(nullable=False, max_length=16)
    amount: int = Field(nullable=False)
    note: Optional[str] = Field(default=None)
    occurred_at: datetime = Field(nullable=False, index=True, sa_type=NaiveDateTime)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveDateTime)
    transfer_group_id: Optional[int] = Field(
        default=None, foreign_key="transfer_group.id", ondelete="CASCADE", index=True
    )

    wallet: "Wallet" = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Wallet", back_populates="transactions"),
    )
    category: "Category | None" = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Category", back_populates="transactions"),
    )
    transfer_group: "TransferGroup | None" = Relationship(
        back_populates="legs",
        sa_relationship=relationship("TransferGroup", back_populates="legs"),
    )

    def to_dict(self) -> dict[str, object]:
        """Serialize the stored columns using the public camelCase contract."""

        return {
            "id": self.id,
            "walletId": self.wallet_id,
            "categoryId": self.category_id,
            "type": self.type,
            "amount": self.amount,
            "note": self.note,
            "occurredAt": self.occurred_at.isoformat() if self.occurred_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "transferGroupId": self.transfer_group_id,
        }
