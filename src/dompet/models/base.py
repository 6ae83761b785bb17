"""Shared column helpers and enumerations for ledger tables."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import DateTime

# Timestamps are stored as naive UTC.
NaiveDateTime = DateTime(timezone=False)

# Largest value a signed 64-bit INTEGER column accepts.
MAX_INTEGER = 2**63 - 1


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo so rows compare consistently."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


class CategoryType(str, Enum):
    """Kinds of category a user can define."""

    EXPENSE = "expense"
    INCOME = "income"


class TransactionType(str, Enum):
    """Kinds of ledger row."""

    EXPENSE = "expense"
    INCOME = "income"
    TRANSFER = "transfer"

    @property
    def is_transfer(self) -> bool:
        return self is TransactionType.TRANSFER
