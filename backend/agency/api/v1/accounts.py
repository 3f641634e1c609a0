"""Account administration (ROLE_ADMIN only)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from agency.api.deps import get_db, require_admin
from agency.api.schemas.accounts import AccountSummary, EnabledUpdate
from agency.db.models.account import Account
from agency.services import accounts as account_service

router = APIRouter(
    prefix="/accounts",
    tags=["Accounts"],
    dependencies=[Depends(require_admin)],
)


def _summary(account: Account) -> AccountSummary:
    return AccountSummary(
        id=account.id,
        username=account.username,
        enabled=account.enabled,
        roles=sorted(account.role_names),
        person_id=account.person_id,
    )


@router.get("/", response_model=list[AccountSummary])
async def list_accounts(
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
) -> list[AccountSummary]:
    return [_summary(a) for a in await account_service.list_accounts(db, offset=offset, limit=limit)]


@router.put("/{account_id}/enabled", response_model=AccountSummary)
async def set_enabled(
    account_id: int,
    payload: EnabledUpdate,
    db: AsyncSession = Depends(get_db),
) -> AccountSummary:
    """Enable or disable login for an account."""
    return _summary(await account_service.set_enabled(db, account_id, payload.enabled))
