"""Policy and role-binding request/response schemas."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from agency.api.schemas.claims import ClaimResponse
from agency.core.constants import BindingRole
from agency.services.drafts import PolicyDraft


class PolicyCreateRequest(PolicyDraft):
    """New policy for a person; the contract holder defaults to that person."""

    contract_holder_id: int | None = None


class PolicyEditRequest(PolicyDraft):
    """Edit; a supplied contract holder replaces the current one."""

    contract_holder_id: int | None = None


class PolicyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    person_id: int
    product_name: str
    coverage_amount: Decimal
    valid_from: date
    valid_to: date


class ParticipantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    person_id: int
    first_name: str
    last_name: str
    role: BindingRole


class BindingRequest(BaseModel):
    person_id: int
    # checked against BindingRole by the binding manager
    role: str = Field(..., min_length=1, max_length=20)


class BindingRemoveResponse(BaseModel):
    removed: int


class PolicyDeleteResponse(BaseModel):
    policy_id: int
    bindings_removed: int
    claims_removed: int


class PolicyDetailResponse(BaseModel):
    """Policy with its participants and claims (newest first)."""

    policy: PolicyResponse
    participants: list[ParticipantResponse]
    claims: list[ClaimResponse]
