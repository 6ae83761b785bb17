"""SQLModel implementation of Wallet repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ...models.transaction import Transaction
from ...models.transfer_group import TransferGroup
from ...models.wallet import Wallet


class SQLModelWalletRepository:
    """SQLModel-based wallet repository bound to an open session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, wallet_id: int) -> Optional[Wallet]:
        """Retrieve a wallet by ID."""
        return self.session.get(Wallet, wallet_id)

    def list_all(self) -> list[Wallet]:
        """List all wallets in creation order."""
        statement = select(Wallet).order_by(Wallet.id)  # type: ignore[arg-type]
        return list(self.session.exec(statement).all())

    def create(self, wallet: Wallet) -> Wallet:
        """Create a new wallet."""
        self.session.add(wallet)
        self.session.flush()
        self.session.refresh(wallet)
        return wallet

    def update(self, wallet: Wallet) -> Wallet:
        """Update an existing wallet."""
        self.session.add(wallet)
        self.session.flush()
        self.session.refresh(wallet)
        return wallet

    def delete(self, wallet: Wallet) -> list[int]:
        """Delete a wallet and everything hanging off it.

        The wallet's own rows go through ON DELETE CASCADE. Transfer groups it
        takes part in are deleted first so the sibling leg, which lives in
        another wallet, disappears with them.
        """
        group_ids = list(
            self.session.exec(
                select(Transaction.transfer_group_id)
                .where(Transaction.wallet_id == wallet.id)
                .where(Transaction.transfer_group_id.is_not(None))  # type: ignore[union-attr]
                .distinct()
            ).all()
        )
        if group_ids:
            groups = self.session.exec(
                select(TransferGroup).where(TransferGroup.id.in_(group_ids))  # type: ignore[union-attr]
            ).all()
            for group in groups:
                self.session.delete(group)
            self.session.flush()

        self.session.delete(wallet)
        self.session.flush()
        return sorted(group_ids)
