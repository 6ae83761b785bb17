"""SQLModel table exports."""

from .base import MAX_INTEGER, CategoryType, TransactionType, utcnow
from .category import Category
from .transaction import Transaction
from .transfer_group import TransferGroup
from .wallet import Wallet

__all__ = [
    "MAX_INTEGER",
    "Category",
    "CategoryType",
    "Transaction",
    "TransactionType",
    "TransferGroup",
    "Wallet",
    "utcnow",
]
