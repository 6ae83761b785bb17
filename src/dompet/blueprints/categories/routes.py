"""Category routes."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import ValidationError
from ...extensions import session_scope
from ...services import categories
from ..fields import json_mapping
from . import bp
from .forms import CategoryForm


@bp.get("")
def list_categories():
    category_type = request.args.get("type") or None
    with session_scope() as session:
        rows = categories.list_categories(session, category_type)
        return jsonify([category.to_dict() for category in rows])


@bp.post("")
def create_category():
    form = CategoryForm.from_mapping(json_mapping(request.get_json(silent=True)))
    if not form.validate():
        raise ValidationError("Invalid category input.", errors=form.errors)

    with session_scope() as session:
        category = categories.create_category(session, form.name, form.category_type)
        return jsonify(category.to_dict()), 201


@bp.get("/<id:category_id>")
def get_category(category_id: int):
    with session_scope() as session:
        return jsonify(categories.get_category(session, category_id).to_dict())


@bp.delete("/<id:category_id>")
def delete_category(category_id: int):
    with session_scope() as session:
        category = categories.delete_category(session, category_id)
    return jsonify({"success": True, "message": f"Category {category.name!r} deleted."})
