"""Semantic view of ledger rows.

Rows are stored flat; whether a transfer row debits or credits its wallet is
never persisted. ``TransactionKind`` is computed from the stored rows by the
direction resolver (the lower id of a transfer group is the outgoing leg).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class TransferRole(str, Enum):
    """Position of a row inside its transfer group."""

    OUTGOING = "out"
    INCOMING = "in"


@dataclass(frozen=True, slots=True)
class Expense:
    sign = -1
    direction = None


@dataclass(frozen=True, slots=True)
class Income:
    sign = 1
    direction = None


@dataclass(frozen=True, slots=True)
class TransferLeg:
    group_id: int
    role: TransferRole

    @property
    def sign(self) -> int:
        return -1 if self.role is TransferRole.OUTGOING else 1

    @property
    def direction(self) -> str:
        return self.role.value


TransactionKind = Union[Expense, Income, TransferLeg]
