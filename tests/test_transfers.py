"""Transfer protocol: paired legs created, updated and deleted together."""

from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import func
from sqlmodel import select

from dompet.errors import NotFound, ValidationError
from dompet.infra.repositories.transaction import SQLModelTransactionRepository
from dompet.models import Transaction, TransferGroup
from dompet.services import balances, transfers


def _counts(session_factory) -> tuple[int, int]:
    with session_factory() as session:
        groups = session.exec(select(func.count()).select_from(TransferGroup)).one()
        rows = session.exec(select(func.count()).select_from(Transaction)).one()
    return groups, rows


def test_transfer_moves_money_between_wallets(session_factory, wallet_factory, transfer_factory):
    source = wallet_factory("A")
    destination = wallet_factory("B")

    result = transfer_factory(source, destination, 500_000, note="Tarik tunai")

    assert result.outgoing.wallet_id == source.id
    assert result.incoming.wallet_id == destination.id
    assert result.outgoing.id < result.incoming.id
    for leg in (result.outgoing, result.incoming):
        assert leg.type == "transfer"
        assert leg.amount == 500_000
        assert leg.category_id is None
        assert leg.transfer_group_id == result.transfer_group_id
        assert leg.note == "Tarik tunai"

    with session_factory() as session:
        assert balances.balance_of(session, source.id) == -500_000
        assert balances.balance_of(session, destination.id) == 500_000
        assert session.get(TransferGroup, result.transfer_group_id).note == "Tarik tunai"


def test_transfer_result_payload(wallet_factory, transfer_factory):
    result = transfer_factory(wallet_factory("A"), wallet_factory("B"), 1000)

    payload = result.to_dict()

    assert payload["transferGroupId"] == result.transfer_group_id
    assert payload["outgoing"]["id"] == result.outgoing.id
    assert payload["incoming"]["id"] == result.incoming.id


def test_same_wallet_rejected(session_factory, wallet_factory):
    wallet = wallet_factory()

    with pytest.raises(ValidationError):
        with session_factory() as session:
            transfers.create_transfer_pair(
                session,
                from_wallet_id=wallet.id,
                to_wallet_id=wallet.id,
                amount=1000,
                occurred_at=datetime(2024, 1, 1),
            )

    assert _counts(session_factory) == (0, 0)


def test_missing_wallet_leaves_nothing_behind(session_factory, wallet_factory):
    wallet = wallet_factory()

    with pytest.raises(NotFound):
        with session_factory() as session:
            transfers.create_transfer_pair(
                session,
                from_wallet_id=wallet.id,
                to_wallet_id=404,
                amount=1000,
                occurred_at=datetime(2024, 1, 1),
            )

    assert _counts(session_factory) == (0, 0)


def test_failure_between_legs_rolls_back_everything(
    session_factory, wallet_factory, monkeypatch: pytest.MonkeyPatch
):
    source = wallet_factory("A")
    destination = wallet_factory("B")
    original_add = SQLModelTransactionRepository.add
    calls = {"count": 0}

    def flaky_add(self, transaction):
        calls["count"] += 1
        if calls["count"] == 2:
            raise RuntimeError("connection lost")
        return original_add(self, transaction)

    monkeypatch.setattr(SQLModelTransactionRepository, "add", flaky_add)

    with pytest.raises(RuntimeError):
        with session_factory() as session:
            transfers.create_transfer_pair(
                session,
                from_wallet_id=source.id,
                to_wallet_id=destination.id,
                amount=1000,
                occurred_at=datetime(2024, 1, 1),
            )

    assert _counts(session_factory) == (0, 0)


def test_update_applies_to_both_legs(session_factory, wallet_factory, transfer_factory):
    source = wallet_factory("A")
    destination = wallet_factory("B")
    third = wallet_factory("C")
    created = transfer_factory(source, destination, 1000, note="lama")

    with session_factory() as session:
        updated = transfers.update_transfer_pair(
            session,
            created.transfer_group_id,
            {"amount": 2500, "to_wallet_id": third.id, "note": "baru"},
        )

    assert updated.outgoing.id == created.outgoing.id
    assert updated.outgoing.wallet_id == source.id
    assert updated.incoming.wallet_id == third.id
    assert updated.outgoing.amount == updated.incoming.amount == 2500
    assert updated.outgoing.occurred_at == created.outgoing.occurred_at

    with session_factory() as session:
        assert session.get(TransferGroup, created.transfer_group_id).note == "baru"
        assert balances.balance_of(session, source.id) == -2500
        assert balances.balance_of(session, destination.id) == 0
        assert balances.balance_of(session, third.id) == 2500


def test_update_rejects_collapsed_wallets(session_factory, wallet_factory, transfer_factory):
    source = wallet_factory("A")
    created = transfer_factory(source, wallet_factory("B"), 1000)

    with pytest.raises(ValidationError):
        with session_factory() as session:
            transfers.update_transfer_pair(
                session, created.transfer_group_id, {"to_wallet_id": source.id}
            )


def test_delete_group_and_legs(session_factory, wallet_factory, transfer_factory):
    created = transfer_factory(wallet_factory("A"), wallet_factory("B"), 1000)

    with session_factory() as session:
        transfers.delete_transfer_group(session, created.transfer_group_id)

    assert _counts(session_factory) == (0, 0)

    with pytest.raises(NotFound):
        with session_factory() as session:
            transfers.delete_transfer_group(session, created.transfer_group_id)


def test_get_transfer_legs_orders_outgoing_first(session_factory, wallet_factory, transfer_factory):
    created = transfer_factory(wallet_factory("A"), wallet_factory("B"), 1000)

    with session_factory() as session:
        legs = transfers.get_transfer_legs(session, created.transfer_group_id)
        assert [leg.id for leg in legs] == [created.outgoing.id, created.incoming.id]

        with pytest.raises(NotFound):
            transfers.get_transfer_legs(session, 12345)
