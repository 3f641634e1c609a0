"""
Editable field sets accepted by the services.

The API request schemas extend these; services, scripts and tests build
them directly.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from agency.core.constants import ClaimState


class PersonDraft(BaseModel):
    """Editable person fields (create, update and "my profile")."""

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    phone: str = Field(..., min_length=1, max_length=50)
    age: int = Field(..., ge=0, le=150)
    email: str | None = Field(default=None, max_length=255)
    gender: str | None = Field(default=None, max_length=20)
    city: str | None = Field(default=None, max_length=100)
    street: str | None = Field(default=None, max_length=120)
    house_number: str | None = Field(default=None, max_length=20)
    postal_code: str | None = Field(default=None, max_length=10)


class PolicyDraft(BaseModel):
    """
    Editable policy fields.

    `person_id` is optional on edit: when omitted the stored originating
    person is kept.
    """

    product_name: str = Field(..., min_length=1, max_length=100)
    coverage_amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    valid_from: date
    valid_to: date
    person_id: int | None = None

    @model_validator(mode="after")
    def _check_interval(self) -> "PolicyDraft":
        if self.valid_from > self.valid_to:
            raise ValueError("valid_from must not be after valid_to")
        return self


class ClaimDraft(BaseModel):
    """
    Create-or-update payload for a claim.

    `id` set means update. `policy_id` is required for a new claim;
    `person_id` is optional and, when given, must match the policy's
    person.
    """

    id: int | None = None
    policy_id: int | None = None
    person_id: int | None = None
    occurred_on: date
    description: str = Field(..., min_length=1, max_length=1000)
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    state: ClaimState = ClaimState.NEW
