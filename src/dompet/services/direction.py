"""Transfer direction resolution.

A transfer is stored as two rows sharing a ``transfer_group_id``. The
outgoing leg is always inserted first, so within a group the row with the
smallest id debits its wallet and the other row credits its wallet. The role
is derived here and never stored.

Known fragility: if a migration ever re-inserts rows out of order the roles
flip. Persisting an explicit per-leg direction would remove that dependency.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from sqlmodel import Session

from ..domain.kinds import Expense, Income, TransactionKind, TransferLeg, TransferRole
from ..errors import InvariantViolation, NotFound
from ..infra.repositories.transaction import SQLModelTransactionRepository
from ..logging_config import get_logger
from ..models.base import TransactionType
from ..models.transaction import Transaction

logger = get_logger(__name__)

LEGS_PER_TRANSFER = 2


@dataclass(frozen=True)
class TransferLegs:
    """Both rows of one transfer, already assigned to their roles."""

    group_id: int
    outgoing: Transaction
    incoming: Transaction


def broken_group(group_id: int, count: int) -> InvariantViolation:
    """Log a transfer group with the wrong number of legs and build the error."""

    logger.error(
        "Transfer group does not have exactly two legs",
        extra={"transfer_group_id": group_id, "leg_count": count},
    )
    return InvariantViolation(
        f"transfer group {group_id} has {count} legs; expected {LEGS_PER_TRANSFER}"
    )


def outgoing_ids(session: Session, group_ids: Iterable[int]) -> dict[int, int]:
    """Return ``{group_id: outgoing row id}`` for the given groups.

    Computed with one ``MIN(id)`` grouped query. Any group that does not hold
    exactly two rows raises ``InvariantViolation``.
    """

    stats = SQLModelTransactionRepository(session).leg_statistics(group_ids)
    result: dict[int, int] = {}
    for group_id, (min_id, count) in stats.items():
        if count != LEGS_PER_TRANSFER:
            raise broken_group(group_id, count)
        result[group_id] = min_id
    return result


def resolve(session: Session, group_id: int) -> TransferLegs:
    """Split a transfer group into its outgoing and incoming legs."""

    repo = SQLModelTransactionRepository(session)
    legs = repo.list_legs(group_id)
    if not legs and repo.get_group(group_id) is None:
        raise NotFound("Transfer group", group_id)
    if len(legs) != LEGS_PER_TRANSFER:
        raise broken_group(group_id, len(legs))

    # list_legs orders by id, so the first row is MIN(id).
    outgoing, incoming = legs
    return TransferLegs(group_id=group_id, outgoing=outgoing, incoming=incoming)


def classify(transaction: Transaction, outgoing_id: Optional[int] = None) -> TransactionKind:
    """Map a stored row onto its ``TransactionKind``.

    ``outgoing_id`` is the minimum row id of the row's transfer group and is
    required for transfer rows.
    """

    if transaction.type == TransactionType.EXPENSE.value:
        return Expense()
    if transaction.type == TransactionType.INCOME.value:
        return Income()
    if transaction.transfer_group_id is None or outgoing_id is None:
        raise InvariantViolation(
            f"transfer row {transaction.id} cannot be classified without its group"
        )
    role = TransferRole.OUTGOING if transaction.id == outgoing_id else TransferRole.INCOMING
    return TransferLeg(group_id=transaction.transfer_group_id, role=role)


def classify_many(
    session: Session, transactions: Iterable[Transaction]
) -> Mapping[int, TransactionKind]:
    """Classify a batch of rows, resolving every transfer group in one query."""

    rows = list(transactions)
    minimums = outgoing_ids(
        session, (tx.transfer_group_id for tx in rows if tx.transfer_group_id is not None)
    )
    kinds: dict[int, TransactionKind] = {}
    for tx in rows:
        outgoing_id = minimums.get(tx.transfer_group_id) if tx.transfer_group_id else None
        kinds[tx.id] = classify(tx, outgoing_id)  # type: ignore[index]
    return kinds
