"""Category form validation helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ...models.base import CategoryType
from ..fields import is_blank

_CATEGORY_TYPES = {choice.value for choice in CategoryType}


@dataclass(slots=True)
class CategoryForm:
    """Represents category input prior to validation."""

    name: str = ""
    category_type: str = ""
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CategoryForm:
        form = cls()
        form.load(data)
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        self.raw_data = {key: data.get(key) for key in ("name", "type")}

    def validate(self) -> bool:
        self.errors.clear()

        name_raw = self.raw_data.get("name")
        if is_blank(name_raw) or not isinstance(name_raw, str):
            self._add_error("name", "Name is required.")
        else:
            self.name = name_raw.strip()
            if len(self.name) > 255:
                self._add_error("name", "Name must be 255 characters or fewer.")

        type_raw = self.raw_data.get("type")
        if type_raw not in _CATEGORY_TYPES:
            self._add_error("type", "Type must be expense or income.")
        else:
            self.category_type = type_raw

        return not self.errors

    def _add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)
