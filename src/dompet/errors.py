"""Error kinds raised by the ledger services.

Services raise these; the HTTP layer maps them onto status codes via
``LedgerError.status_code`` and ``LedgerError.code``.
"""

from __future__ import annotations

from typing import Mapping, Optional


class LedgerError(Exception):
    """Base class for every ledger failure."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, object]:
        return {"error": self.code, "message": self.message}


class NotFound(LedgerError):
    """A wallet, category, transaction or transfer group id does not exist."""

    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(f"{entity} {entity_id} was not found")
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(LedgerError):
    """Client input that cannot be applied to the ledger."""

    status_code = 400
    code = "validation_error"

    def __init__(
        self, message: str, *, errors: Optional[Mapping[str, list[str]]] = None
    ) -> None:
        super().__init__(message)
        self.errors = dict(errors or {})

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        if self.errors:
            payload["errors"] = self.errors
        return payload


class InvariantViolation(LedgerError):
    """Stored rows break a ledger invariant (e.g. a transfer without two legs)."""

    code = "invariant_violation"


class StoreError(LedgerError):
    """The persistence layer rejected a write (constraint failure, lost connection)."""

    code = "store_error"
