"""Wallets blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("wallets", __name__, url_prefix="/wallets")

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
