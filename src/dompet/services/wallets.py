"""Wallet lifecycle: create, rename, delete."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session

from ..domain.repositories import WalletRepository
from ..errors import ValidationError
from ..infra.repositories.wallet import SQLModelWalletRepository
from ..logging_config import get_logger
from ..models.wallet import Wallet
from .rules import require_wallet

logger = get_logger(__name__)


def _repository(session: Session) -> WalletRepository:
    return SQLModelWalletRepository(session)


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Wallet name is required.", errors={"name": ["Required."]})
    if len(cleaned) > 255:
        raise ValidationError("Wallet name must be 255 characters or fewer.", errors={"name": ["Too long."]})
    return cleaned


def _clean_currency(currency: Optional[str]) -> str:
    code = (currency or "").strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValidationError("Currency must be a 3-letter ISO 4217 code.", errors={"currency": ["Invalid."]})
    return code


def list_wallets(session: Session) -> list[Wallet]:
    return _repository(session).list_all()


def get_wallet(session: Session, wallet_id: int) -> Wallet:
    return require_wallet(session, wallet_id)


def create_wallet(session: Session, name: str, currency: str) -> Wallet:
    """Create a wallet; callers pass the configured default when none was given."""

    wallet = _repository(session).create(
        Wallet(name=_clean_name(name), currency=_clean_currency(currency))
    )
    logger.info("Wallet created", extra={"wallet_id": wallet.id})
    return wallet


def rename_wallet(session: Session, wallet_id: int, name: str) -> Wallet:
    wallet = require_wallet(session, wallet_id)
    wallet.name = _clean_name(name)
    return _repository(session).update(wallet)


def delete_wallet(session: Session, wallet_id: int) -> Wallet:
    """Hard-delete a wallet, its rows, and every transfer it took part in."""

    wallet = require_wallet(session, wallet_id)
    removed_groups = _repository(session).delete(wallet)
    logger.info(
        "Wallet deleted",
        extra={"wallet_id": wallet_id, "transfer_group_ids": removed_groups},
    )
    return wallet
