"""Income/expense summaries per wallet and per calendar month.

Transfers move money between wallets without being income or spending, so
every summary here works on non-transfer rows only. Sums are computed in SQL
with ``CASE`` expressions and normalized to ``int`` before leaving this module.
"""

from __future__ import annotations

import re
from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

from sqlalchemy import and_, case, func
from sqlmodel import Session, select

from ..errors import ValidationError
from ..models.base import TransactionType
from ..models.category import Category
from ..models.transaction import Transaction
from ..models.wallet import Wallet
from .rules import require_wallet

_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def _as_int(value: Any) -> int:
    """Aggregation results may come back as Decimal, str or None."""

    return int(value or 0)


def _sum_when(condition) -> Any:
    return func.coalesce(func.sum(case((condition, Transaction.amount), else_=0)), 0)


def _summary_columns():
    return (
        _sum_when(Transaction.type == TransactionType.INCOME.value).label("income"),
        _sum_when(Transaction.type == TransactionType.EXPENSE.value).label("expense"),
        _sum_when(Transaction.category_id.is_(None)).label("uncategorized"),  # type: ignore[union-attr]
    )


@dataclass(frozen=True)
class WalletSummary:
    wallet_id: int
    income: int
    expense: int
    uncategorized: int
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @property
    def net(self) -> int:
        return self.income - self.expense

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "walletId": self.wallet_id,
            "income": self.income,
            "expense": self.expense,
            "net": self.net,
            "uncategorized": self.uncategorized,
        }
        if self.date_from is not None:
            payload["from"] = self.date_from.isoformat()
        if self.date_to is not None:
            payload["to"] = self.date_to.isoformat()
        return payload


@dataclass(frozen=True)
class CategoryTotal:
    category_id: Optional[int]
    category_name: Optional[str]
    category_type: Optional[str]
    type: str
    total: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "categoryId": self.category_id,
            "categoryName": self.category_name,
            "categoryType": self.category_type,
            "type": self.type,
            "total": self.total,
        }


@dataclass(frozen=True)
class MonthlySummary:
    month: str
    start: datetime
    end: datetime
    total_income: int
    total_expense: int
    by_category: list[CategoryTotal] = field(default_factory=list)

    @property
    def net(self) -> int:
        return self.total_income - self.total_expense

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "period": {"start": _iso_utc(self.start), "end": _iso_utc(self.end)},
            "summary": {
                "totalExpense": self.total_expense,
                "totalIncome": self.total_income,
                "net": self.net,
            },
            "byCategory": [item.to_dict() for item in self.by_category],
        }


def _iso_utc(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds") + "Z"


def month_bounds(month: str) -> tuple[datetime, datetime]:
    """Return the first and last instant (millisecond precision) of a ``YYYY-MM`` month."""

    match = _MONTH_PATTERN.match(month or "")
    if not match:
        raise ValidationError("Month must use the YYYY-MM format.", errors={"month": ["Invalid format."]})
    year, month_number = int(match.group(1)), int(match.group(2))
    if not 1 <= month_number <= 12 or year < 1:
        raise ValidationError("Month must use the YYYY-MM format.", errors={"month": ["Invalid month."]})

    last_day = monthrange(year, month_number)[1]
    start = datetime(year, month_number, 1, 0, 0, 0, 0)
    end = datetime(year, month_number, last_day, 23, 59, 59, 999000)
    return start, end


def wallet_summary(
    session: Session,
    wallet_id: int,
    *,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> WalletSummary:
    """Income, expense and uncategorized totals of one wallet.

    The optional bounds apply to ``created_at``: rows recorded on or after
    ``date_from`` and before the day following ``date_to``.
    """

    require_wallet(session, wallet_id)

    statement = (
        select(*_summary_columns())
        .select_from(Transaction)
        .where(Transaction.wallet_id == wallet_id)
        .where(Transaction.transfer_group_id.is_(None))  # type: ignore[union-attr]
    )
    if date_from is not None:
        statement = statement.where(Transaction.created_at >= datetime.combine(date_from, time.min))
    if date_to is not None:
        statement = statement.where(
            Transaction.created_at < datetime.combine(date_to + timedelta(days=1), time.min)
        )

    income, expense, uncategorized = session.exec(statement).one()
    return WalletSummary(
        wallet_id=wallet_id,
        income=_as_int(income),
        expense=_as_int(expense),
        uncategorized=_as_int(uncategorized),
        date_from=date_from,
        date_to=date_to,
    )


def wallet_summaries(session: Session) -> list[WalletSummary]:
    """Summaries of every wallet in a single grouped query."""

    statement = (
        select(Wallet.id, *_summary_columns())
        .select_from(Wallet)
        .outerjoin(
            Transaction,
            and_(
                Transaction.wallet_id == Wallet.id,
                # Filtering in the join keeps wallets that only hold transfers.
                Transaction.transfer_group_id.is_(None),  # type: ignore[union-attr]
            ),
        )
        .group_by(Wallet.id)
        .order_by(Wallet.id)  # type: ignore[arg-type]
    )
    return [
        WalletSummary(
            wallet_id=int(wallet_id),
            income=_as_int(income),
            expense=_as_int(expense),
            uncategorized=_as_int(uncategorized),
        )
        for wallet_id, income, expense, uncategorized in session.exec(statement).all()
    ]


def monthly_summary(session: Session, month: str) -> MonthlySummary:
    """Income and expense totals for a UTC calendar month, broken down by category."""

    start, end = month_bounds(month)
    total = func.sum(Transaction.amount)
    statement = (
        select(
            Transaction.category_id,
            Category.name,
            Category.type,
            Transaction.type,
            total.label("total"),
        )
        .select_from(Transaction)
        .outerjoin(Category, Transaction.category_id == Category.id)  # type: ignore[arg-type]
        .where(Transaction.occurred_at >= start)
        .where(Transaction.occurred_at <= end)
        .where(
            Transaction.type.in_(  # type: ignore[attr-defined]
                [TransactionType.INCOME.value, TransactionType.EXPENSE.value]
            )
        )
        .group_by(Transaction.category_id, Category.name, Category.type, Transaction.type)
        .order_by(Transaction.type, total.desc(), Transaction.category_id)
    )

    by_category = [
        CategoryTotal(
            category_id=category_id,
            category_name=category_name,
            category_type=category_type,
            type=txn_type,
            total=_as_int(amount),
        )
        for category_id, category_name, category_type, txn_type, amount in session.exec(statement).all()
    ]
    total_income = sum(item.total for item in by_category if item.type == TransactionType.INCOME.value)
    total_expense = sum(item.total for item in by_category if item.type == TransactionType.EXPENSE.value)

    return MonthlySummary(
        month=month,
        start=start,
        end=end,
        total_income=total_income,
        total_expense=total_expense,
        by_category=by_category,
    )
