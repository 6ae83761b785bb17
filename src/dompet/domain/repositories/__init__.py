"""Repository protocol definitions for domain layer."""

from .category import CategoryRepository
from .transaction import TransactionRepository
from .wallet import WalletRepository

__all__ = [
    "CategoryRepository",
    "TransactionRepository",
    "WalletRepository",
]
