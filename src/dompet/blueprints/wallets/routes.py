"""Wallet routes."""

from __future__ import annotations

from flask import current_app, jsonify, request

from ...errors import ValidationError
from ...extensions import session_scope
from ...services import reports, wallets
from ..fields import json_mapping
from . import bp
from .forms import SummaryRangeForm, WalletForm


def _invalid(errors: dict[str, list[str]]) -> ValidationError:
    return ValidationError("Invalid wallet input.", errors=errors)


@bp.get("")
def list_wallets():
    with session_scope() as session:
        return jsonify([wallet.to_dict() for wallet in wallets.list_wallets(session)])


@bp.post("")
def create_wallet():
    form = WalletForm.from_mapping(json_mapping(request.get_json(silent=True)))
    if not form.validate():
        raise _invalid(form.errors)

    currency = form.currency or current_app.config["DOMPET_CONFIG"].DEFAULT_CURRENCY
    with session_scope() as session:
        wallet = wallets.create_wallet(session, form.name, currency)
        return jsonify(wallet.to_dict()), 201


@bp.get("/summaries")
def wallet_summaries():
    with session_scope() as session:
        return jsonify([summary.to_dict() for summary in reports.wallet_summaries(session)])


@bp.get("/<id:wallet_id>")
def get_wallet(wallet_id: int):
    with session_scope() as session:
        return jsonify(wallets.get_wallet(session, wallet_id).to_dict())


@bp.patch("/<id:wallet_id>")
def rename_wallet(wallet_id: int):
    form = WalletForm.from_mapping(json_mapping(request.get_json(silent=True)), partial=True)
    if not form.validate():
        raise _invalid(form.errors)

    with session_scope() as session:
        wallet = wallets.rename_wallet(session, wallet_id, form.name)
        return jsonify(wallet.to_dict())


@bp.delete("/<id:wallet_id>")
def delete_wallet(wallet_id: int):
    with session_scope() as session:
        wallet = wallets.delete_wallet(session, wallet_id)
    return jsonify({"success": True, "message": f"Wallet {wallet.name!r} deleted."})


@bp.get("/<id:wallet_id>/summary")
def wallet_summary(wallet_id: int):
    form = SummaryRangeForm.from_args(request.args)
    if not form.validate():
        raise ValidationError("Invalid summary range.", errors=form.errors)

    with session_scope() as session:
        summary = reports.wallet_summary(
            session, wallet_id, date_from=form.date_from, date_to=form.date_to
        )
    return jsonify(summary.to_dict())
