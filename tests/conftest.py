"""Pytest configuration and shared fixtures for Dompet tests.

Every test gets its own SQLite file inside ``tmp_path`` with foreign keys
switched on, so cascades behave exactly as they do in the app.
"""

from __future__ import annotations

from datetime import datetime

import pytest
from sqlmodel import Session

from dompet import create_app
from dompet.config import TestConfig
from dompet.infra.database import bootstrap_database, create_session_factory
from dompet.models import Category, Transaction, Wallet
from dompet.services import categories, ledger_service, transfers, wallets

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture()
def ledger_config(tmp_path, monkeypatch: pytest.MonkeyPatch) -> TestConfig:
    """Configuration pointing at a throwaway data directory."""

    monkeypatch.setenv("DOMPET_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DOMPET_DATABASE_URL", f"sqlite:///{tmp_path / 'ledger.db'}")
    monkeypatch.delenv("DOMPET_DEFAULT_CURRENCY", raising=False)
    monkeypatch.delenv("DOMPET_DEV_MODE", raising=False)
    return TestConfig()


@pytest.fixture()
def db_engine(ledger_config):
    """Engine with schema created and SQLite pragmas applied."""

    engine, _ = bootstrap_database(ledger_config)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(db_engine):
    """Factory returning commit-or-rollback session scopes."""

    return create_session_factory(db_engine)


@pytest.fixture()
def db_session(db_engine):
    """A raw session for tests that poke at the schema directly."""

    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def wallet_factory(session_factory):
    """Create and commit a wallet."""

    def _create_wallet(name: str = "BCA", currency: str = "IDR") -> Wallet:
        with session_factory() as session:
            return wallets.create_wallet(session, name, currency)

    return _create_wallet


@pytest.fixture
def category_factory(session_factory):
    """Create and commit a category."""

    def _create_category(name: str = "Makan & Minum", category_type: str = "expense") -> Category:
        with session_factory() as session:
            return categories.create_category(session, name, category_type)

    return _create_category


@pytest.fixture
def entry_factory(session_factory):
    """Create and commit an expense or income row."""

    def _create_entry(
        wallet: Wallet,
        amount: int,
        *,
        txn_type: str = "expense",
        category: Category | None = None,
        occurred_at: datetime = datetime(2024, 1, 15, 12, 0),
        note: str | None = None,
    ) -> Transaction:
        with session_factory() as session:
            return ledger_service.create_transaction(
                session,
                wallet_id=wallet.id,  # type: ignore[arg-type]
                category_id=category.id if category else None,
                txn_type=txn_type,
                amount=amount,
                occurred_at=occurred_at,
                note=note,
            )

    return _create_entry


@pytest.fixture
def transfer_factory(session_factory):
    """Create and commit a transfer between two wallets."""

    def _create_transfer(
        source: Wallet,
        destination: Wallet,
        amount: int,
        *,
        occurred_at: datetime = datetime(2024, 1, 16, 9, 0),
        note: str | None = None,
    ) -> transfers.TransferResult:
        with session_factory() as session:
            return transfers.create_transfer_pair(
                session,
                from_wallet_id=source.id,  # type: ignore[arg-type]
                to_wallet_id=destination.id,  # type: ignore[arg-type]
                amount=amount,
                occurred_at=occurred_at,
                note=note,
            )

    return _create_transfer


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DOMPET_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DOMPET_DATABASE_URL", f"sqlite:///{tmp_path / 'api.db'}")
    monkeypatch.delenv("DOMPET_DEFAULT_CURRENCY", raising=False)
    monkeypatch.delenv("DOMPET_DEV_MODE", raising=False)
    app = create_app("testing")
    yield app
    app.extensions["dompet"]["engine"].dispose()


@pytest.fixture()
def client(app):
    with app.test_client() as test_client:
        yield test_client
