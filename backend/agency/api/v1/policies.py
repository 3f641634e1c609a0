"""Policy lifecycle and role-binding endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from agency.api.deps import ensure_allowed, get_caller, get_db, require_admin
from agency.api.schemas.claims import ClaimResponse
from agency.api.schemas.policies import (
    BindingRemoveResponse,
    BindingRequest,
    ParticipantResponse,
    PolicyCreateRequest,
    PolicyDeleteResponse,
    PolicyDetailResponse,
    PolicyEditRequest,
    PolicyResponse,
)
from agency.core.errors import ValidationError
from agency.services import access, role_bindings
from agency.services import policies as policy_service
from agency.services.access import Caller

router = APIRouter(prefix="/policies", tags=["Policies"])


@router.get("/", response_model=list[PolicyResponse])
async def list_policies(
    q: str | None = Query(None, max_length=100),
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> list[PolicyResponse]:
    """Admins see every policy; other callers only the ones they take part in."""
    if caller.privileged:
        policies = await policy_service.list_policies(db, q)
    elif caller.person_id is None:
        policies = []
    else:
        policies = await policy_service.list_for_person(db, caller.person_id)
        if q and q.strip():
            matching = {p.id for p in await policy_service.list_policies(db, q)}
            policies = [p for p in policies if p.id in matching]
    return [PolicyResponse.model_validate(p) for p in policies]


@router.post(
    "/",
    response_model=PolicyResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_policy(payload: PolicyCreateRequest, db: AsyncSession = Depends(get_db)) -> PolicyResponse:
    """Create a policy for `person_id`; the holder defaults to that person."""
    if payload.person_id is None:
        raise ValidationError("person_id is required", entity="Policy")
    policy = await policy_service.create_for(db, payload.person_id, payload, payload.contract_holder_id)
    return PolicyResponse.model_validate(policy)


@router.get("/{policy_id}", response_model=PolicyDetailResponse)
async def read_policy(
    policy_id: int,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> PolicyDetailResponse:
    ensure_allowed(await access.can_see_policy(db, caller, policy_id))
    detail = await policy_service.get_detail(db, policy_id)
    return PolicyDetailResponse(
        policy=PolicyResponse.model_validate(detail.policy),
        participants=[ParticipantResponse.model_validate(row) for row in detail.participants],
        claims=[ClaimResponse.model_validate(c) for c in detail.claims],
    )


@router.put("/{policy_id}", response_model=PolicyResponse)
async def edit_policy(
    policy_id: int,
    payload: PolicyEditRequest,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> PolicyResponse:
    """Update fields; a supplied contract holder replaces the current one."""
    ensure_allowed(await access.can_edit_policy(db, caller, policy_id))
    policy = await policy_service.save_edit(db, policy_id, payload, payload.contract_holder_id)
    return PolicyResponse.model_validate(policy)


@router.delete("/{policy_id}", response_model=PolicyDeleteResponse, dependencies=[Depends(require_admin)])
async def delete_policy(policy_id: int, db: AsyncSession = Depends(get_db)) -> PolicyDeleteResponse:
    summary = await policy_service.delete(db, policy_id)
    return PolicyDeleteResponse(
        policy_id=summary.policy_id,
        bindings_removed=summary.bindings_removed,
        claims_removed=summary.claims_removed,
    )


@router.post(
    "/{policy_id}/bindings",
    response_model=list[ParticipantResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def add_binding(
    policy_id: int,
    payload: BindingRequest,
    db: AsyncSession = Depends(get_db),
) -> list[ParticipantResponse]:
    """Add a participant; returns the updated participant list."""
    await role_bindings.add(db, policy_id, payload.person_id, payload.role)
    rows = await role_bindings.bindings_for(db, policy_id)
    return [ParticipantResponse.model_validate(row) for row in rows]


@router.delete(
    "/{policy_id}/bindings/{person_id}/{role}",
    response_model=BindingRemoveResponse,
    dependencies=[Depends(require_admin)],
)
async def remove_binding(
    policy_id: int,
    person_id: int,
    role: str,
    db: AsyncSession = Depends(get_db),
) -> BindingRemoveResponse:
    removed = await role_bindings.remove(db, policy_id, person_id, role)
    return BindingRemoveResponse(removed=removed)
