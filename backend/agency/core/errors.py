"""
Domain exception hierarchy for the agency services.

All service exceptions inherit from AgencyError so callers can catch
broadly or narrowly as needed. Each exception carries structured
context (entity kind, id, extra details) for logging and for the
HTTP error payload built in `agency.main`.

Authorization checks return booleans; the API layer turns a False
into HTTP 403 (see `agency.api.deps.ensure_allowed`).
"""

from __future__ import annotations


class AgencyError(Exception):
    """Base exception for all domain errors."""

    def __init__(
        self,
        message: str,
        *,
        entity: str | None = None,
        entity_id: object | None = None,
        details: dict | None = None,
    ) -> None:
        self.message = message
        self.entity = entity
        self.entity_id = entity_id
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"error": type(self).__name__, "detail": self.message}
        if self.entity is not None:
            payload["entity"] = self.entity
        if self.entity_id is not None:
            payload["entity_id"] = self.entity_id
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(AgencyError):
    """A referenced person, policy, claim or account does not exist."""

    def __init__(self, entity: str, entity_id: object, **kwargs) -> None:
        super().__init__(f"{entity} {entity_id} not found", entity=entity, entity_id=entity_id, **kwargs)


class ConflictError(AgencyError):
    """Duplicate role binding or duplicate username."""
    pass


class ValidationError(AgencyError):
    """Malformed input, rejected before any write happens."""
    pass
