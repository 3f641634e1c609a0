"""Account administration and profile schemas."""

from __future__ import annotations

from pydantic import BaseModel

from agency.api.schemas.persons import PersonResponse
from agency.core.constants import ProfileSaveResult


class AccountSummary(BaseModel):
    """Roles are flattened to their names."""

    id: int
    username: str
    enabled: bool
    roles: list[str]
    person_id: int | None


class EnabledUpdate(BaseModel):
    enabled: bool


class ProfileResponse(BaseModel):
    """The caller's own person, or null before the first profile save."""

    person: PersonResponse | None


class ProfileSaveResponse(BaseModel):
    result: ProfileSaveResult
    person: PersonResponse
