"""Blueprint exports."""

from . import categories, reports, transactions, wallets

__all__ = [
    "categories",
    "reports",
    "transactions",
    "wallets",
]
