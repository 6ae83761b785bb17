"""Transactions blueprint package.

Serves ``/transactions`` and ``/transfer-groups``.
"""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("transactions", __name__)

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
