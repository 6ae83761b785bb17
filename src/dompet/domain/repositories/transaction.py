"""Transaction and transfer group repository protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol

from ...models.category import Category
from ...models.transaction import Transaction
from ...models.transfer_group import TransferGroup
from ...models.wallet import Wallet


class TransactionRepository(Protocol):
    """Repository for ledger rows and the transfer groups linking them."""

    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        ...

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
        """Filtered listing joined with wallet and category."""
        ...

    def add(self, transaction: Transaction) -> Transaction:
        """Insert a transaction and assign its id."""
        ...

    def update(self, transaction: Transaction) -> Transaction:
        """Persist changes made to a transaction."""
        ...

    def delete(self, transaction: Transaction) -> None:
        """Delete a single non-transfer row."""
        ...

    def create_group(self, note: Optional[str] = None) -> TransferGroup:
        """Insert an empty transfer group."""
        ...

    def get_group(self, group_id: int) -> Optional[TransferGroup]:
        """Retrieve a transfer group by ID."""
        ...

    def delete_group(self, group: TransferGroup) -> None:
        """Delete a transfer group; both legs cascade."""
        ...

    def list_legs(self, group_id: int) -> list[Transaction]:
        """Rows of a transfer group ordered by id (outgoing first)."""
        ...

    def leg_statistics(self, group_ids: Iterable[int]) -> dict[int, tuple[int, int]]:
        """Map group id to (minimum row id, row count)."""
        ...
