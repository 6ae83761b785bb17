"""Parsing helpers shared by the blueprint form objects."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Mapping

from werkzeug.routing import IntegerConverter

from ..models.base import MAX_INTEGER

DATETIME_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S")


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_id(value: Any) -> int:
    """Accept a JSON integer or a digit string (query parameters)."""

    if isinstance(value, bool):
        raise ValueError("boolean is not an id")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.strip().isdigit():
        parsed = int(value.strip())
    else:
        raise ValueError(f"not an id: {value!r}")
    if parsed <= 0:
        raise ValueError("ids are positive")
    if parsed > MAX_INTEGER:
        raise ValueError(f"id out of range: {parsed}")
    return parsed


def parse_amount(value: Any) -> int:
    """Amounts travel as JSON integers; booleans and floats are refused."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"not a whole number: {value!r}")
    if abs(value) > MAX_INTEGER:
        raise ValueError(f"amount out of range: {value}")
    return value


def parse_datetime(value: Any) -> datetime:
    """Parse ``YYYY-MM-DD HH:mm`` (or ISO-8601) into a naive UTC datetime."""

    if not isinstance(value, str):
        raise ValueError(f"not a datetime string: {value!r}")
    raw = value.strip()
    for fmt in DATETIME_FORMATS:
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    if len(raw) == 10:
        return datetime.strptime(raw, "%Y-%m-%d")
    parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_date(value: Any) -> date:
    if not isinstance(value, str):
        raise ValueError(f"not a date string: {value!r}")
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def clean_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def json_mapping(value: Any) -> Mapping[str, Any]:
    """Request bodies must be JSON objects; anything else reads as empty."""

    return value if isinstance(value, Mapping) else {}


class IdConverter(IntegerConverter):
    """``<id:name>`` URL segment: a positive integer that fits an id column."""

    def __init__(self, map: Any, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("min", 1)
        kwargs.setdefault("max", MAX_INTEGER)
        super().__init__(map, *args, **kwargs)
