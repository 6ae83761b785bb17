"""Concrete repository implementations using SQLModel."""

from .category import SQLModelCategoryRepository
from .transaction import SQLModelTransactionRepository
from .wallet import SQLModelWalletRepository

__all__ = [
    "SQLModelCategoryRepository",
    "SQLModelTransactionRepository",
    "SQLModelWalletRepository",
]
