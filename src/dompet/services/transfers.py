"""Transfer protocol: one logical transfer, two linked ledger rows.

Every function here expects to run inside a single ``session_scope`` so
that both legs are written, changed or removed together. The outgoing row is
flushed before the incoming row, which gives it the smaller id that the
direction resolver relies on.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from sqlmodel import Session

from ..errors import NotFound
from ..infra.repositories.transaction import SQLModelTransactionRepository
from ..logging_config import get_logger
from ..models.base import TransactionType
from ..models.transaction import Transaction
from . import direction
from .rules import require_distinct_wallets, require_positive_amount, require_wallet

logger = get_logger(__name__)

TRANSFER_FIELDS = frozenset({"from_wallet_id", "to_wallet_id", "amount", "occurred_at", "note"})


@dataclass(frozen=True)
class TransferResult:
    """The created or updated transfer with both of its legs."""

    transfer_group_id: int
    outgoing: Transaction
    incoming: Transaction

    def to_dict(self) -> dict[str, Any]:
        return {
            "transferGroupId": self.transfer_group_id,
            "outgoing": self.outgoing.to_dict(),
            "incoming": self.incoming.to_dict(),
        }


def create_transfer_pair(
    session: Session,
    *,
    from_wallet_id: int,
    to_wallet_id: int,
    amount: int,
    occurred_at: datetime,
    note: Optional[str] = None,
) -> TransferResult:
    """Create a transfer group and its outgoing and incoming rows."""

    require_positive_amount(amount)
    require_distinct_wallets(from_wallet_id, to_wallet_id)
    require_wallet(session, from_wallet_id)
    require_wallet(session, to_wallet_id)

    repo = SQLModelTransactionRepository(session)
    group = repo.create_group(note=note)

    legs = []
    for wallet_id in (from_wallet_id, to_wallet_id):
        legs.append(
            repo.add(
                Transaction(
                    wallet_id=wallet_id,
                    category_id=None,
                    type=TransactionType.TRANSFER.value,
                    amount=amount,
                    occurred_at=occurred_at,
                    note=note,
                    transfer_group_id=group.id,
                )
            )
        )
    outgoing, incoming = legs

    logger.info(
        "Transfer created",
        extra={
            "transfer_group_id": group.id,
            "from_wallet_id": from_wallet_id,
            "to_wallet_id": to_wallet_id,
            "amount": amount,
        },
    )
    return TransferResult(transfer_group_id=group.id, outgoing=outgoing, incoming=incoming)  # type: ignore[arg-type]


def update_transfer_pair(
    session: Session, group_id: int, changes: Mapping[str, Any]
) -> TransferResult:
    """Apply ``changes`` to both legs of a transfer.

    Recognised keys are ``from_wallet_id``, ``to_wallet_id``, ``amount``,
    ``occurred_at`` and ``note``; missing keys keep the stored value. Amount,
    timestamp and note are always written to both rows so the legs cannot
    drift apart.
    """

    legs = direction.resolve(session, group_id)
    outgoing, incoming = legs.outgoing, legs.incoming

    from_wallet_id = changes.get("from_wallet_id", outgoing.wallet_id)
    to_wallet_id = changes.get("to_wallet_id", incoming.wallet_id)
    require_distinct_wallets(from_wallet_id, to_wallet_id)
    if from_wallet_id != outgoing.wallet_id:
        require_wallet(session, from_wallet_id)
    if to_wallet_id != incoming.wallet_id:
        require_wallet(session, to_wallet_id)

    amount = require_positive_amount(changes.get("amount", outgoing.amount))
    occurred_at = changes.get("occurred_at", outgoing.occurred_at)
    note = changes["note"] if "note" in changes else outgoing.note

    for leg, wallet_id in ((outgoing, from_wallet_id), (incoming, to_wallet_id)):
        leg.wallet_id = wallet_id
        leg.amount = amount
        leg.occurred_at = occurred_at
        leg.note = note
        session.add(leg)

    repo = SQLModelTransactionRepository(session)
    group = repo.get_group(group_id)
    if group is not None:
        group.note = note
        session.add(group)
    session.flush()
    session.refresh(outgoing)
    session.refresh(incoming)

    logger.info(
        "Transfer updated",
        extra={"transfer_group_id": group_id, "fields": sorted(changes)},
    )
    return TransferResult(transfer_group_id=group_id, outgoing=outgoing, incoming=incoming)


def delete_transfer_group(session: Session, group_id: int) -> None:
    """Delete a transfer by its group; both legs go with it."""

    repo = SQLModelTransactionRepository(session)
    group = repo.get_group(group_id)
    if group is None:
        raise NotFound("Transfer group", group_id)
    repo.delete_group(group)
    logger.info("Transfer deleted", extra={"transfer_group_id": group_id})


def get_transfer_legs(session: Session, group_id: int) -> list[Transaction]:
    """Rows of a transfer group ordered by id; the first one is outgoing."""

    repo = SQLModelTransactionRepository(session)
    if repo.get_group(group_id) is None:
        raise NotFound("Transfer group", group_id)
    return repo.list_legs(group_id)
