"""Claim request/response schemas."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from agency.core.constants import ClaimQueryKind, ClaimState


class ClaimResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    policy_id: int | None
    person_id: int | None
    occurred_on: date
    description: str
    amount: Decimal
    state: ClaimState


class ClaimSaveResponse(BaseModel):
    claim: ClaimResponse
    created: bool


class ClaimListResponse(BaseModel):
    """Claim list plus how the search text was interpreted."""

    query_kind: ClaimQueryKind
    data: list[ClaimResponse]
    total: int
