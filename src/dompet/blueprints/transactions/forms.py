"""Transaction form validation helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Optional

from ...infra.repositories.transaction import SORT_ORDERS
from ...models.base import TransactionType
from ...services.ledger_service import LedgerFilters
from ..fields import clean_text, is_blank, parse_amount, parse_date, parse_datetime, parse_id

ENTRY_KEYS = ("wallet_id", "category_id", "amount", "occurred_at", "note")
TRANSFER_KEYS = ("from_wallet_id", "to_wallet_id", "amount", "occurred_at", "note")

_REQUIRED = {
    TransactionType.EXPENSE.value: ("wallet_id", "amount", "occurred_at"),
    TransactionType.INCOME.value: ("wallet_id", "amount", "occurred_at"),
    TransactionType.TRANSFER.value: ("from_wallet_id", "to_wallet_id", "amount", "occurred_at"),
}
_TYPES = frozenset(_REQUIRED)


def _positive_amount(value: Any) -> int:
    amount = parse_amount(value)
    if amount <= 0:
        raise ValueError("amount must be positive")
    return amount


def _optional_id(value: Any) -> Optional[int]:
    return None if value is None else parse_id(value)


_PARSERS: dict[str, tuple[Callable[[Any], Any], str]] = {
    "wallet_id": (parse_id, "Wallet must be a positive whole number."),
    "from_wallet_id": (parse_id, "Source wallet must be a positive whole number."),
    "to_wallet_id": (parse_id, "Destination wallet must be a positive whole number."),
    "category_id": (_optional_id, "Category must be a positive whole number or null."),
    "amount": (_positive_amount, "Amount must be a whole number greater than zero."),
    "occurred_at": (parse_datetime, "Enter a valid date and time (YYYY-MM-DD HH:mm)."),
    "note": (clean_text, "Note must be text."),
}


@dataclass(slots=True)
class TransactionForm:
    """Expense, income or transfer input prior to validation.

    The accepted keys depend on ``type``. With ``partial=True`` (updates)
    every key is optional and ``type`` may be omitted; the service decides
    which keys apply to the stored row.
    """

    txn_type: Optional[str] = None
    partial: bool = False
    cleaned: dict[str, Any] = field(default_factory=dict, init=False)
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, partial: bool = False) -> TransactionForm:
        form = cls(partial=partial)
        form.load(data)
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        self.raw_data = dict(data)

    def validate(self) -> bool:
        self.errors.clear()
        self.cleaned = {}

        type_raw = self.raw_data.get("type")
        self.txn_type = None
        if type_raw is None and self.partial:
            keys: tuple[str, ...] = tuple(dict.fromkeys(ENTRY_KEYS + TRANSFER_KEYS))
        elif not isinstance(type_raw, str) or type_raw not in _TYPES:
            self._add_error("type", "Type must be expense, income or transfer.")
            return False
        else:
            self.txn_type = type_raw
            is_transfer = type_raw == TransactionType.TRANSFER.value
            keys = TRANSFER_KEYS if is_transfer else ENTRY_KEYS

        for key in sorted(set(self.raw_data) - set(keys) - {"type"}):
            self._add_error(key, "Not allowed for this transaction type.")

        required = () if self.partial or self.txn_type is None else _REQUIRED[self.txn_type]
        for key in keys:
            if key not in self.raw_data:
                if key in required:
                    self._add_error(key, "This field is required.")
                continue
            raw = self.raw_data[key]
            if key in required and is_blank(raw):
                self._add_error(key, "This field is required.")
                continue
            parser, message = _PARSERS[key]
            try:
                self.cleaned[key] = parser(raw)
            except (TypeError, ValueError):
                self._add_error(key, message)

        source = self.cleaned.get("from_wallet_id")
        if source is not None and source == self.cleaned.get("to_wallet_id"):
            self._add_error("to_wallet_id", "Source and destination wallets must differ.")

        return not self.errors

    @property
    def is_transfer(self) -> bool:
        return self.txn_type == TransactionType.TRANSFER.value

    def changes(self) -> dict[str, Any]:
        """Parsed fields for an update, including ``type`` when it was sent."""

        payload = dict(self.cleaned)
        if self.txn_type is not None:
            payload["type"] = self.txn_type
        return payload

    def _add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)


@dataclass(slots=True)
class TransactionQueryForm:
    """Query-string filters for the transaction listing."""

    txn_type: Optional[str] = None
    wallet_id: Optional[int] = None
    category_id: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search: Optional[str] = None
    sort: str = "newest"
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> TransactionQueryForm:
        form = cls()
        form.load(args)
        return form

    def load(self, args: Mapping[str, Any]) -> None:
        self.errors.clear()

        type_raw = args.get("type")
        if not is_blank(type_raw):
            if isinstance(type_raw, str) and type_raw in _TYPES:
                self.txn_type = type_raw
            else:
                self._add_error("type", "Type must be expense, income or transfer.")

        for key in ("wallet_id", "category_id"):
            raw = args.get(key)
            if is_blank(raw):
                continue
            try:
                setattr(self, key, parse_id(raw))
            except ValueError:
                self._add_error(key, "Must be a positive whole number.")

        for key in ("date_from", "date_to"):
            raw = args.get(key)
            if is_blank(raw):
                continue
            try:
                setattr(self, key, parse_date(raw))
            except ValueError:
                self._add_error(key, "Enter a valid date (YYYY-MM-DD).")

        self.search = clean_text(args.get("search"))

        sort_raw = args.get("sort")
        if not is_blank(sort_raw):
            if sort_raw in SORT_ORDERS:
                self.sort = sort_raw
            else:
                self._add_error("sort", f"Sort must be one of: {', '.join(SORT_ORDERS)}.")

    def validate(self) -> bool:
        return not self.errors

    def to_filters(self) -> LedgerFilters:
        return LedgerFilters(
            txn_type=self.txn_type,
            wallet_id=self.wallet_id,
            category_id=self.category_id,
            date_from=self.date_from,
            date_to=self.date_to,
            search=self.search,
            sort=self.sort,
        )

    def _add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)
