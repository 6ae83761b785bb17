"""Service module exports."""

from . import (
    balances,
    categories,
    direction,
    ledger_service,
    reports,
    rules,
    seed,
    transfers,
    wallets,
)

__all__ = [
    "balances",
    "categories",
    "direction",
    "ledger_service",
    "reports",
    "rules",
    "seed",
    "transfers",
    "wallets",
]
