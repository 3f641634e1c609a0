"""Person request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from agency.api.schemas.policies import PolicyResponse
from agency.services.drafts import PersonDraft


class PersonResponse(PersonDraft):
    model_config = ConfigDict(from_attributes=True)

    id: int


class PersonDetailResponse(BaseModel):
    """Person plus every policy they originated or are bound to."""

    person: PersonResponse
    policies: list[PolicyResponse]


class PersonDeleteResponse(BaseModel):
    person_id: int
    policies_removed: int
    bindings_removed: int
    claims_removed: int
    accounts_unlinked: int
