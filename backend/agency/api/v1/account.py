"""The caller's own profile ("my person")."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from agency.api.deps import get_caller, get_db
from agency.api.schemas.accounts import ProfileResponse, ProfileSaveResponse
from agency.api.schemas.persons import PersonResponse
from agency.services import accounts as account_service
from agency.services.access import Caller
from agency.services.drafts import PersonDraft

router = APIRouter(prefix="/account", tags=["Account"])


@router.get("/profile", response_model=ProfileResponse)
async def read_profile(
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    person = await account_service.load_profile(db, caller.username)
    return ProfileResponse(person=PersonResponse.model_validate(person) if person else None)


@router.put("/profile", response_model=ProfileSaveResponse)
async def save_profile(
    payload: PersonDraft,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
) -> ProfileSaveResponse:
    """Create and link the profile on first save, update it afterwards."""
    result, person = await account_service.save_profile(db, caller.username, payload)
    return ProfileSaveResponse(result=result, person=PersonResponse.model_validate(person))
