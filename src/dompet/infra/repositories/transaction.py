"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import func, or_
from sqlmodel import Session, select

from ...models.category import Category
from ...models.transaction import Transaction
from ...models.transfer_group import TransferGroup
from ...models.wallet import Wallet

SORT_ORDERS = {
    "newest": (Transaction.occurred_at.desc(), Transaction.id.desc()),  # type: ignore[union-attr]
    "oldest": (Transaction.occurred_at.asc(), Transaction.id.asc()),  # type: ignore[union-attr]
    "highest": (Transaction.amount.desc(), Transaction.id.desc()),  # type: ignore[attr-defined]
    "lowest": (Transaction.amount.asc(), Transaction.id.asc()),  # type: ignore[attr-defined]
}


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository bound to an open session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        return self.session.get(Transaction, transaction_id)

    def search(
        self,
        *,
        txn_type: Optional[str] = None,
        wallet_id: Optional[int] = None,
        category_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        text: Optional[str] = None,
        sort: str = "newest",
    ) -> list[tuple[Transaction, Wallet, Optional[Category]]]:
        """Advanced search with multiple filters, joined with wallet and category."""
        statement = (
            select(Transaction, Wallet, Category)
            .join(Wallet, Transaction.wallet_id == Wallet.id)  # type: ignore[arg-type]
            .outerjoin(Category, Transaction.category_id == Category.id)  # type: ignore[arg-type]
        )

        if txn_type:
            statement = statement.where(Transaction.type == txn_type)
        if wallet_id:
            statement = statement.where(Transaction.wallet_id == wallet_id)
        if category_id:
            statement = statement.where(Transaction.category_id == category_id)
        if start_date:
            statement = statement.where(Transaction.occurred_at >= start_date)
        if end_date:
            statement = statement.where(Transaction.occurred_at <= end_date)
        if text:
            pattern = f"%{text}%"
            statement = statement.where(
                or_(
                    Wallet.name.ilike(pattern),  # type: ignore[attr-defined]
                    Category.name.ilike(pattern),  # type: ignore[attr-defined]
                    Transaction.note.ilike(pattern),  # type: ignore[union-attr]
                )
            )

        statement = statement.order_by(*SORT_ORDERS.get(sort, SORT_ORDERS["newest"]))
        return [tuple(row) for row in self.session.exec(statement).all()]  # type: ignore[misc]

    def add(self, transaction: Transaction) -> Transaction:
        """Insert a transaction; the flush assigns its id immediately."""
        self.session.add(transaction)
        self.session.flush()
        self.session.refresh(transaction)
        return transaction

    def update(self, transaction: Transaction) -> Transaction:
        """Persist changes made to a transaction."""
        self.session.add(transaction)
        self.session.flush()
        self.session.refresh(transaction)
        return transaction

    def delete(self, transaction: Transaction) -> None:
        """Delete a single row."""
        self.session.delete(transaction)
        self.session.flush()

    def create_group(self, note: Optional[str] = None) -> TransferGroup:
        """Insert an empty transfer group."""
        group = TransferGroup(note=note)
        self.session.add(group)
        self.session.flush()
        self.session.refresh(group)
        return group

    def get_group(self, group_id: int) -> Optional[TransferGroup]:
        """Retrieve a transfer group by ID."""
        return self.session.get(TransferGroup, group_id)

    def delete_group(self, group: TransferGroup) -> None:
        """Delete a transfer group; ON DELETE CASCADE removes both legs."""
        self.session.delete(group)
        self.session.flush()

    def list_legs(self, group_id: int) -> list[Transaction]:
        """Rows of a transfer group ordered by id, outgoing leg first."""
        statement = (
            select(Transaction)
            .where(Transaction.transfer_group_id == group_id)
            .order_by(Transaction.id)  # type: ignore[arg-type]
        )
        return list(self.session.exec(statement).all())

    def leg_statistics(self, group_ids: Iterable[int]) -> dict[int, tuple[int, int]]:
        """Map each group id to (minimum row id, row count) in one grouped query."""
        ids = sorted(set(group_ids))
        if not ids:
            return {}
        statement = (
            select(
                Transaction.transfer_group_id,
                func.min(Transaction.id),
                func.count(Transaction.id),
            )
            .where(Transaction.transfer_group_id.in_(ids))  # type: ignore[union-attr]
            .group_by(Transaction.transfer_group_id)
        )
        return {
            int(group_id): (int(min_id), int(count))
            for group_id, min_id, count in self.session.exec(statement).all()
        }
