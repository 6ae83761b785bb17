"""Checks applied before anything is written to the ledger."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session

from ..errors import NotFound, ValidationError
from ..infra.repositories.category import SQLModelCategoryRepository
from ..infra.repositories.wallet import SQLModelWalletRepository
from ..models.base import MAX_INTEGER, CategoryType, TransactionType
from ..models.category import Category
from ..models.wallet import Wallet


def require_positive_amount(amount: object) -> int:
    """Amounts are whole, strictly positive numbers of the smallest currency unit."""

    # bool is an int subclass; True must not pass as an amount of 1.
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError("Amount must be a whole number.", errors={"amount": ["Must be an integer."]})
    if amount <= 0:
        raise ValidationError("Amount must be greater than zero.", errors={"amount": ["Must be > 0."]})
    if amount > MAX_INTEGER:
        raise ValidationError("Amount is too large.", errors={"amount": ["Out of range."]})
    return amount


def require_entry_type(value: str) -> TransactionType:
    """Only expense and income rows are created one at a time."""

    try:
        txn_type = TransactionType(value)
    except ValueError:
        raise ValidationError(f"Unknown transaction type: {value!r}") from None
    if txn_type.is_transfer:
        raise ValidationError("Transfers are created as a pair, not as a single row.")
    return txn_type


def require_category_type(value: str) -> CategoryType:
    try:
        return CategoryType(value)
    except ValueError:
        raise ValidationError(
            "Category type must be expense or income.", errors={"type": ["Invalid choice."]}
        ) from None


def require_wallet(session: Session, wallet_id: int) -> Wallet:
    wallet = SQLModelWalletRepository(session).get_by_id(wallet_id)
    if wallet is None:
        raise NotFound("Wallet", wallet_id)
    return wallet


def require_category_for(
    session: Session, category_id: Optional[int], txn_type: TransactionType
) -> Optional[Category]:
    """Resolve an optional category and check it matches the row's type."""

    if category_id is None:
        return None
    category = SQLModelCategoryRepository(session).get_by_id(category_id)
    if category is None:
        raise NotFound("Category", category_id)
    if category.type != txn_type.value:
        raise ValidationError(
            f"Category {category.name!r} is a {category.type} category and cannot be "
            f"used on a {txn_type.value} transaction.",
            errors={"category_id": ["Category type does not match transaction type."]},
        )
    return category


def require_distinct_wallets(from_wallet_id: int, to_wallet_id: int) -> None:
    if from_wallet_id == to_wallet_id:
        raise ValidationError(
            "Source and destination wallets must differ.",
            errors={"to_wallet_id": ["Must differ from from_wallet_id."]},
        )
