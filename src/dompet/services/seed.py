"""Demo data seeding for a fresh ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ..logging_config import get_logger
from ..models.base import utcnow
from ..models.category import Category
from ..models.transaction import Transaction
from ..models.wallet import Wallet
from . import categories, ledger_service, transfers, wallets

logger = get_logger(__name__)

DEMO_WALLETS = ("BCA", "Cash")
DEMO_CATEGORIES = (
    ("Makan & Minum", "expense"),
    ("Transport", "expense"),
    ("Belanja Rumah", "expense"),
    ("Gaji", "income"),
    ("Lain-lain", "income"),
)


@dataclass(frozen=True)
class SeedSummary:
    """Row counts after seeding; ``skipped`` is set when data already existed."""

    wallets: int
    categories: int
    transactions: int
    skipped: bool = False


def _count(session: Session, model) -> int:
    return int(session.exec(select(func.count()).select_from(model)).one())


def _summary(session: Session, *, skipped: bool) -> SeedSummary:
    return SeedSummary(
        wallets=_count(session, Wallet),
        categories=_count(session, Category),
        transactions=_count(session, Transaction),
        skipped=skipped,
    )


def run_demo_seed(session: Session, *, currency: str, now: Optional[datetime] = None) -> SeedSummary:
    """Create demo wallets, categories and a few transactions.

    Does nothing when any wallet already exists, so it is safe to re-run.
    """

    if session.exec(select(Wallet.id)).first() is not None:
        logger.info("Demo seed skipped; wallets already present")
        return _summary(session, skipped=True)

    now = now or utcnow()
    bca, cash = (wallets.create_wallet(session, name, currency) for name in DEMO_WALLETS)
    created = {name: categories.create_category(session, name, kind) for name, kind in DEMO_CATEGORIES}

    ledger_service.create_transaction(
        session,
        wallet_id=bca.id,  # type: ignore[arg-type]
        category_id=created["Gaji"].id,
        txn_type="income",
        amount=5_000_000,
        occurred_at=now.replace(day=1, hour=9, minute=0, second=0, microsecond=0),
        note="Gaji bulan ini",
    )
    ledger_service.create_transaction(
        session,
        wallet_id=bca.id,  # type: ignore[arg-type]
        category_id=created["Makan & Minum"].id,
        txn_type="expense",
        amount=50_000,
        occurred_at=(now - timedelta(days=1)).replace(hour=12, minute=30, second=0, microsecond=0),
        note="Makan siang di warteg",
    )
    ledger_service.create_transaction(
        session,
        wallet_id=cash.id,  # type: ignore[arg-type]
        category_id=created["Transport"].id,
        txn_type="expense",
        amount=20_000,
        occurred_at=(now - timedelta(days=2)).replace(hour=8, minute=15, second=0, microsecond=0),
        note="Ojek online",
    )
    transfers.create_transfer_pair(
        session,
        from_wallet_id=bca.id,  # type: ignore[arg-type]
        to_wallet_id=cash.id,  # type: ignore[arg-type]
        amount=500_000,
        occurred_at=(now - timedelta(days=3)).replace(hour=14, minute=0, second=0, microsecond=0),
        note="Ambil tunai untuk jajan",
    )

    summary = _summary(session, skipped=False)
    logger.info(
        "Demo seed completed",
        extra={"wallets": summary.wallets, "categories": summary.categories, "transactions": summary.transactions},
    )
    return summary
