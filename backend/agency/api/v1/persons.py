"""Person CRUD, search and account linking."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from agency.api.deps import ensure_allowed, get_caller, get_db, require_admin
from agency.api.schemas.accounts import AccountSummary
from agency.api.schemas.persons import (
    PersonDeleteResponse,
    PersonDetailResponse,
    PersonResponse,
)
from agency.api.schemas.policies import PolicyResponse
from agency.services import access
from agency.services import accounts as account_service
from agency.services import persons as person_service
from agency.services.access import Caller
from agency.services.drafts import PersonDraft

router = APIRouter(prefix="/persons", tags=["Persons"])


@router.get("/", response_model=list[PersonResponse], dependencies=[Depends(require_admin)])
async def list_persons(
    q: str | None = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
) -> list[PersonResponse]:
    """All persons, or those matching `q` (id, name, city or phone)."""
    return [PersonResponse.model_validate(p) for p in await person_service.search(db, q)]


@router.post(
    "/",
    response_model=PersonResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_person(payload: PersonDraft, db: AsyncSession = Depends(get_db)) -> PersonResponse:
    return PersonResponse.model_validate(await person_service.create(db, payload))


@router.get("/{person_id}", response_model=PersonDetailResponse)
async def read_person(
    person_id: int,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> PersonDetailResponse:
    """Person with every policy they originated or are bound to."""
    ensure_allowed(access.can_see_person(caller, person_id))
    person, policies = await person_service.get_detail(db, person_id)
    return PersonDetailResponse(
        person=PersonResponse.model_validate(person),
        policies=[PolicyResponse.model_validate(p) for p in policies],
    )


@router.put("/{person_id}", response_model=PersonResponse)
async def update_person(
    person_id: int,
    payload: PersonDraft,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> PersonResponse:
    ensure_allowed(access.can_edit_person(caller, person_id))
    return PersonResponse.model_validate(await person_service.update(db, person_id, payload))


@router.delete("/{person_id}", response_model=PersonDeleteResponse, dependencies=[Depends(require_admin)])
async def delete_person(person_id: int, db: AsyncSession = Depends(get_db)) -> PersonDeleteResponse:
    """Delete the person with their policies, bindings and claims."""
    summary = await person_service.delete(db, person_id)
    return PersonDeleteResponse(
        person_id=summary.person_id,
        policies_removed=summary.policies_removed,
        bindings_removed=summary.bindings_removed,
        claims_removed=summary.claims_removed,
        accounts_unlinked=summary.accounts_unlinked,
    )


@router.put(
    "/{person_id}/account/{account_id}",
    response_model=AccountSummary,
    dependencies=[Depends(require_admin)],
)
async def link_account(
    person_id: int,
    account_id: int,
    db: AsyncSession = Depends(get_db),
) -> AccountSummary:
    """Point an account's profile at this person."""
    account = await account_service.link_person(db, account_id, person_id)
    return AccountSummary(
        id=account.id,
        username=account.username,
        enabled=account.enabled,
        roles=sorted(account.role_names),
        person_id=account.person_id,
    )
