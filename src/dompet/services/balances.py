"""Wallet balance aggregation.

Each row contributes to its own wallet's balance:

* income: ``+amount``
* expense: ``-amount``
* transfer, outgoing leg (``id = MIN(id)`` of its group): ``-amount``
* transfer, incoming leg: ``+amount``

All wallets are computed in one grouped query; there is no per-row loop and
no cache, so every call reflects the rows as currently committed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import and_, case, func
from sqlmodel import Session, select

from ..models.base import TransactionType
from ..models.transaction import Transaction
from ..models.wallet import Wallet
from .direction import LEGS_PER_TRANSFER, broken_group


@dataclass(frozen=True)
class WalletBalance:
    wallet_id: int
    wallet_name: str
    currency: str
    balance: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "walletId": self.wallet_id,
            "walletName": self.wallet_name,
            "currency": self.currency,
            "balance": self.balance,
        }


def _outgoing_legs():
    """Subquery mapping every transfer group to its outgoing (minimum) row id and leg count."""

    return (
        select(
            Transaction.transfer_group_id.label("group_id"),  # type: ignore[union-attr]
            func.min(Transaction.id).label("outgoing_id"),
            func.count(Transaction.id).label("leg_count"),
        )
        .where(Transaction.transfer_group_id.is_not(None))  # type: ignore[union-attr]
        .group_by(Transaction.transfer_group_id)
        .subquery("outgoing_legs")
    )


def _require_intact_groups(session: Session, outgoing_legs) -> None:
    """MIN(id) only names the outgoing leg of a group holding exactly two rows."""

    broken = session.exec(
        select(outgoing_legs.c.group_id, outgoing_legs.c.leg_count)
        .where(outgoing_legs.c.leg_count != LEGS_PER_TRANSFER)
        .order_by(outgoing_legs.c.group_id)
        .limit(1)
    ).first()
    if broken is not None:
        raise broken_group(int(broken[0]), int(broken[1]))


def signed_amount_expression(outgoing_legs):
    """CASE expression giving a row's signed contribution to its wallet."""

    amount = Transaction.amount
    is_transfer = Transaction.type == TransactionType.TRANSFER.value
    return case(
        (Transaction.type == TransactionType.INCOME.value, amount),
        (Transaction.type == TransactionType.EXPENSE.value, -amount),  # type: ignore[operator]
        (and_(is_transfer, Transaction.id == outgoing_legs.c.outgoing_id), -amount),  # type: ignore[operator]
        (is_transfer, amount),
        else_=0,
    )


def wallet_balances(session: Session, wallet_id: Optional[int] = None) -> list[WalletBalance]:
    """Return the balance of every wallet, or of ``wallet_id`` only.

    Wallets without transactions report 0. An unknown ``wallet_id`` yields an
    empty list.
    """

    outgoing_legs = _outgoing_legs()
    _require_intact_groups(session, outgoing_legs)
    balance = func.coalesce(func.sum(signed_amount_expression(outgoing_legs)), 0)

    statement = (
        select(Wallet.id, Wallet.name, Wallet.currency, balance.label("balance"))
        .select_from(Wallet)
        .outerjoin(Transaction, Transaction.wallet_id == Wallet.id)  # type: ignore[arg-type]
        .outerjoin(outgoing_legs, outgoing_legs.c.group_id == Transaction.transfer_group_id)
        .group_by(Wallet.id, Wallet.name, Wallet.currency)
        .order_by(Wallet.id)  # type: ignore[arg-type]
    )
    if wallet_id is not None:
        statement = statement.where(Wallet.id == wallet_id)

    return [
        WalletBalance(
            wallet_id=int(row_id),
            wallet_name=name,
            currency=currency,
            # Some backends hand SUM back as Decimal or str.
            balance=int(total or 0),
        )
        for row_id, name, currency, total in session.exec(statement).all()
    ]


def balance_of(session: Session, wallet_id: int) -> int:
    """Convenience accessor for a single wallet's balance (0 when unknown)."""

    rows = wallet_balances(session, wallet_id=wallet_id)
    return rows[0].balance if rows else 0
