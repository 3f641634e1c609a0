"""Claim search, detail, create-or-update and delete."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from agency.api.deps import ensure_allowed, get_caller, get_db
from agency.api.schemas.claims import ClaimListResponse, ClaimResponse, ClaimSaveResponse
from agency.services import access
from agency.services import claims as claim_service
from agency.services.access import Caller
from agency.services.claim_search import parse_query
from agency.services.drafts import ClaimDraft

router = APIRouter(prefix="/claims", tags=["Claims"])


@router.get("/", response_model=ClaimListResponse)
async def list_claims(
    q: str | None = Query(None, max_length=200, description="Day, month or description text"),
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> ClaimListResponse:
    """Search claims, newest first. Non-admin callers only see their own."""
    if caller.privileged:
        query, claims = await claim_service.search(db, q)
    elif caller.person_id is None:
        query, claims = parse_query(q), []
    else:
        query, claims = await claim_service.search_for_owner(db, caller.person_id, q)
    return ClaimListResponse(
        query_kind=query.kind,
        data=[ClaimResponse.model_validate(c) for c in claims],
        total=len(claims),
    )


@router.get("/{claim_id}", response_model=ClaimResponse)
async def read_claim(
    claim_id: int,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> ClaimResponse:
    ensure_allowed(await access.can_see_claim(db, caller, claim_id))
    return ClaimResponse.model_validate(await claim_service.get(db, claim_id))


@router.post("/", response_model=ClaimSaveResponse)
async def save_claim(
    payload: ClaimDraft,
    response: Response,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> ClaimSaveResponse:
    """Create (no `id`) or update a claim; 201 on create."""
    if payload.id is not None:
        ensure_allowed(await access.can_edit_claim(db, caller, payload.id))
    ensure_allowed(await access.can_save_claim(db, caller, payload))

    claim, created = await claim_service.save(db, payload)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return ClaimSaveResponse(claim=ClaimResponse.model_validate(claim), created=created)


@router.delete("/{claim_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_claim(
    claim_id: int,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> Response:
    ensure_allowed(await access.can_edit_claim(db, caller, claim_id))
    await claim_service.delete(db, claim_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
