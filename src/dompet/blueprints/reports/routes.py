"""Balance and report routes."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import NotFound, ValidationError
from ...extensions import session_scope
from ...services import balances, reports
from ..fields import is_blank, parse_id
from . import bp


@bp.get("/balances")
def wallet_balances():
    raw_wallet_id = request.args.get("wallet_id")
    wallet_id = None
    if not is_blank(raw_wallet_id):
        try:
            wallet_id = parse_id(raw_wallet_id)
        except ValueError:
            raise ValidationError(
                "wallet_id must be a positive whole number.",
                errors={"wallet_id": ["Must be a positive whole number."]},
            ) from None

    with session_scope() as session:
        rows = balances.wallet_balances(session, wallet_id=wallet_id)
    if wallet_id is not None and not rows:
        raise NotFound("Wallet", wallet_id)
    return jsonify([row.to_dict() for row in rows])


@bp.get("/reports/monthly-summary")
def monthly_summary():
    month = request.args.get("month", "")
    with session_scope() as session:
        summary = reports.monthly_summary(session, month.strip())
    return jsonify(summary.to_dict())
