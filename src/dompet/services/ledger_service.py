"""Ledger operations on transactions: create, update, delete and list.

Expense and income rows are single-row writes. Anything touching a transfer
row is routed through :mod:`dompet.services.transfers` so that both legs
change together inside the caller's session scope.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Mapping, Optional, Union

from sqlmodel import Session

from ..domain.repositories import TransactionRepository
from ..errors import NotFound, ValidationError
from ..infra.repositories.transaction import SORT_ORDERS, SQLModelTransactionRepository
from ..logging_config import get_logger
from ..models.base import TransactionType
from ..models.transaction import Transaction
from . import direction, transfers
from .rules import (
    require_category_for,
    require_entry_type,
    require_positive_amount,
    require_wallet,
)
from .transfers import TransferResult

logger = get_logger(__name__)

ENTRY_FIELDS = frozenset({"wallet_id", "category_id", "amount", "occurred_at", "note"})


def _repository(session: Session) -> TransactionRepository:
    return SQLModelTransactionRepository(session)


@dataclass
class LedgerFilters:
    """Filters applied to ledger listings."""

    txn_type: Optional[str] = None  # expense | income | transfer
    wallet_id: Optional[int] = None
    category_id: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search: Optional[str] = None
    sort: str = "newest"  # newest | oldest | highest | lowest

    def __post_init__(self) -> None:
        if self.sort not in SORT_ORDERS:
            raise ValidationError(f"Unknown sort order: {self.sort!r}", errors={"sort": ["Invalid choice."]})
        if self.txn_type is not None:
            try:
                TransactionType(self.txn_type)
            except ValueError:
                raise ValidationError(
                    f"Unknown transaction type: {self.txn_type!r}", errors={"type": ["Invalid choice."]}
                ) from None


@dataclass(frozen=True)
class LedgerEntry:
    """A transaction row annotated for display."""

    transaction: Transaction
    wallet_name: str
    category_name: Optional[str]
    category_type: Optional[str]
    transfer_direction: Optional[str]

    def to_dict(self) -> dict[str, Any]:
        payload = self.transaction.to_dict()
        payload.update(
            {
                "walletName": self.wallet_name,
                "categoryName": self.category_name,
                "categoryType": self.category_type,
                "transferDirection": self.transfer_direction,
            }
        )
        return payload


def get_transaction(session: Session, transaction_id: int) -> Transaction:
    transaction = _repository(session).get_by_id(transaction_id)
    if transaction is None:
        raise NotFound("Transaction", transaction_id)
    return transaction


def list_transactions(session: Session, filters: Optional[LedgerFilters] = None) -> list[LedgerEntry]:
    """Fetch filtered rows and annotate transfer legs with their direction."""

    filters = filters or LedgerFilters()
    rows = _repository(session).search(
        txn_type=filters.txn_type,
        wallet_id=filters.wallet_id,
        category_id=filters.category_id,
        start_date=datetime.combine(filters.date_from, time.min) if filters.date_from else None,
        end_date=datetime.combine(filters.date_to, time.max) if filters.date_to else None,
        text=filters.search,
        sort=filters.sort,
    )
    kinds = direction.classify_many(session, (tx for tx, _, _ in rows))

    return [
        LedgerEntry(
            transaction=tx,
            wallet_name=wallet.name,
            category_name=category.name if category else None,
            category_type=category.type if category else None,
            transfer_direction=kinds[tx.id].direction,  # type: ignore[index]
        )
        for tx, wallet, category in rows
    ]


def create_transaction(
    session: Session,
    *,
    wallet_id: int,
    category_id: Optional[int],
    txn_type: str,
    amount: int,
    occurred_at: datetime,
    note: Optional[str] = None,
) -> Transaction:
    """Record a single expense or income row."""

    entry_type = require_entry_type(txn_type)
    require_positive_amount(amount)
    require_wallet(session, wallet_id)
    require_category_for(session, category_id, entry_type)

    transaction = _repository(session).add(
        Transaction(
            wallet_id=wallet_id,
            category_id=category_id,
            type=entry_type.value,
            amount=amount,
            occurred_at=occurred_at,
            note=note,
        )
    )
    logger.info(
        "Transaction created",
        extra={"transaction_id": transaction.id, "wallet_id": wallet_id, "type": entry_type.value},
    )
    return transaction


def update_transaction(
    session: Session, transaction_id: int, changes: Mapping[str, Any]
) -> Union[Transaction, TransferResult]:
    """Update a row in place, or both legs when the row belongs to a transfer.

    The type of a row is fixed once recorded. Keys absent from ``changes``
    keep their stored values.
    """

    repo = _repository(session)
    transaction = get_transaction(session, transaction_id)

    if "type" in changes and changes["type"] != transaction.type:
        raise ValidationError("The type of a transaction cannot be changed.", errors={"type": ["Immutable."]})
    fields = {key: value for key, value in changes.items() if key != "type"}

    if transaction.transfer_group_id is not None:
        _reject_unknown(fields, transfers.TRANSFER_FIELDS)
        return transfers.update_transfer_pair(session, transaction.transfer_group_id, fields)

    _reject_unknown(fields, ENTRY_FIELDS)
    entry_type = TransactionType(transaction.type)
    if "wallet_id" in fields:
        require_wallet(session, fields["wallet_id"])
    if "category_id" in fields:
        require_category_for(session, fields["category_id"], entry_type)
    if "amount" in fields:
        require_positive_amount(fields["amount"])

    for key, value in fields.items():
        setattr(transaction, key, value)
    transaction = repo.update(transaction)
    logger.info(
        "Transaction updated",
        extra={"transaction_id": transaction_id, "fields": sorted(fields)},
    )
    return transaction


def delete_transaction(session: Session, transaction_id: int) -> list[int]:
    """Delete a row; a transfer leg takes its whole group with it.

    Returns the ids of every row removed.
    """

    repo = _repository(session)
    transaction = get_transaction(session, transaction_id)

    if transaction.transfer_group_id is not None:
        group_id = transaction.transfer_group_id
        removed = [leg.id for leg in repo.list_legs(group_id)]
        transfers.delete_transfer_group(session, group_id)
        return removed  # type: ignore[return-value]

    repo.delete(transaction)
    logger.info("Transaction deleted", extra={"transaction_id": transaction_id})
    return [transaction_id]


def _reject_unknown(fields: Mapping[str, Any], allowed: frozenset[str]) -> None:
    unknown = sorted(set(fields) - allowed)
    if unknown:
        raise ValidationError(
            f"Unsupported fields for this transaction: {', '.join(unknown)}",
            errors={key: ["Not allowed for this transaction type."] for key in unknown},
        )
