"""Transaction and transfer group routes."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import ValidationError
from ...extensions import session_scope
from ...services import ledger_service, transfers
from ..fields import json_mapping
from . import bp
from .forms import TransactionForm, TransactionQueryForm


def _invalid(errors: dict[str, list[str]]) -> ValidationError:
    return ValidationError("Invalid transaction input.", errors=errors)


@bp.get("/transactions")
def list_transactions():
    form = TransactionQueryForm.from_args(request.args)
    if not form.validate():
        raise ValidationError("Invalid transaction filters.", errors=form.errors)

    with session_scope() as session:
        entries = ledger_service.list_transactions(session, form.to_filters())
        return jsonify([entry.to_dict() for entry in entries])


@bp.post("/transactions")
def create_transaction():
    form = TransactionForm.from_mapping(json_mapping(request.get_json(silent=True)))
    if not form.validate():
        raise _invalid(form.errors)

    data = form.cleaned
    with session_scope() as session:
        if form.is_transfer:
            result = transfers.create_transfer_pair(
                session,
                from_wallet_id=data["from_wallet_id"],
                to_wallet_id=data["to_wallet_id"],
                amount=data["amount"],
                occurred_at=data["occurred_at"],
                note=data.get("note"),
            )
            return jsonify(result.to_dict()), 201

        transaction = ledger_service.create_transaction(
            session,
            wallet_id=data["wallet_id"],
            category_id=data.get("category_id"),
            txn_type=form.txn_type,  # type: ignore[arg-type]
            amount=data["amount"],
            occurred_at=data["occurred_at"],
            note=data.get("note"),
        )
        return jsonify(transaction.to_dict()), 201


@bp.get("/transactions/<id:transaction_id>")
def get_transaction(transaction_id: int):
    with session_scope() as session:
        return jsonify(ledger_service.get_transaction(session, transaction_id).to_dict())


@bp.patch("/transactions/<id:transaction_id>")
def update_transaction(transaction_id: int):
    form = TransactionForm.from_mapping(json_mapping(request.get_json(silent=True)), partial=True)
    if not form.validate():
        raise _invalid(form.errors)

    with session_scope() as session:
        updated = ledger_service.update_transaction(session, transaction_id, form.changes())
        return jsonify(updated.to_dict())


@bp.delete("/transactions/<id:transaction_id>")
def delete_transaction(transaction_id: int):
    with session_scope() as session:
        removed = ledger_service.delete_transaction(session, transaction_id)
    return jsonify({"success": True, "deletedIds": removed})


@bp.get("/transfer-groups/<id:group_id>")
def transfer_group_legs(group_id: int):
    with session_scope() as session:
        legs = transfers.get_transfer_legs(session, group_id)
        return jsonify([leg.to_dict() for leg in legs])
