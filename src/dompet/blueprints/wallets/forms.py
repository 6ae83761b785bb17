"""Wallet form validation helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ..fields import is_blank, parse_date


@dataclass(slots=True)
class WalletForm:
    """Wallet create/rename input prior to validation.

    With ``partial=True`` (rename) only ``name`` is read.
    """

    name: str = ""
    currency: Optional[str] = None
    partial: bool = False
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, partial: bool = False) -> WalletForm:
        form = cls(partial=partial)
        form.load(data)
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        self.raw_data = {key: data.get(key) for key in ("name", "currency")}

    def validate(self) -> bool:
        self.errors.clear()

        name_raw = self.raw_data.get("name")
        if is_blank(name_raw) or not isinstance(name_raw, str):
            self._add_error("name", "Name is required.")
        else:
            self.name = name_raw.strip()
            if len(self.name) > 255:
                self._add_error("name", "Name must be 255 characters or fewer.")

        if not self.partial:
            currency_raw = self.raw_data.get("currency")
            self.currency = None
            if not is_blank(currency_raw):
                code = str(currency_raw).strip().upper()
                if len(code) != 3 or not code.isalpha():
                    self._add_error("currency", "Currency must be a 3-letter ISO 4217 code.")
                else:
                    self.currency = code

        return not self.errors

    def _add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)


@dataclass(slots=True)
class SummaryRangeForm:
    """Optional ``from``/``to`` day bounds for a wallet summary."""

    date_from: Optional[date] = None
    date_to: Optional[date] = None
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> SummaryRangeForm:
        form = cls()
        for key, attr in (("from", "date_from"), ("to", "date_to")):
            raw = args.get(key)
            if is_blank(raw):
                continue
            try:
                setattr(form, attr, parse_date(raw))
            except ValueError:
                form.errors.setdefault(key, []).append("Enter a valid date (YYYY-MM-DD).")
        if form.date_from and form.date_to and form.date_from > form.date_to:
            form.errors.setdefault("to", []).append("End date must not precede start date.")
        return form

    def validate(self) -> bool:
        return not self.errors
