"""Claim repository — data access for the claims table.

Every listing is ordered newest first (date desc, id desc).
"""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agency.db.models.claim import Claim
from agency.db.models.policy import Policy

CLAIM_FIELDS = {"policy_id", "person_id", "occurred_on", "description", "amount", "state"}

_NEWEST_FIRST = (Claim.occurred_on.desc(), Claim.id.desc())


async def create_claim(db: AsyncSession, **fields: Any) -> Claim:
    claim = Claim(**{k: v for k, v in fields.items() if k in CLAIM_FIELDS})
    db.add(claim)
    await db.flush()
    return claim


async def get_claim(db: AsyncSession, claim_id: int) -> Claim | None:
    return await db.get(Claim, claim_id)


async def update_claim(db: AsyncSession, claim: Claim, **fields: Any) -> Claim:
    for key, value in fields.items():
        if key in CLAIM_FIELDS:
            setattr(claim, key, value)
    await db.flush()
    return claim


async def delete_claim(db: AsyncSession, claim_id: int) -> int:
    result = await db.execute(delete(Claim).where(Claim.id == claim_id))
    await db.flush()
    return result.rowcount or 0


async def delete_for_policy(db: AsyncSession, policy_id: int) -> int:
    result = await db.execute(delete(Claim).where(Claim.policy_id == policy_id))
    await db.flush()
    return result.rowcount or 0


async def delete_for_person(db: AsyncSession, person_id: int) -> int:
    """Delete policy-less claims whose denormalized owner is the person."""
    result = await db.execute(
        delete(Claim).where(Claim.person_id == person_id, Claim.policy_id.is_(None))
    )
    await db.flush()
    return result.rowcount or 0


async def reassign_person(db: AsyncSession, policy_id: int, person_id: int) -> int:
    """Point the denormalized owner of every claim on the policy at `person_id`."""
    result = await db.execute(
        update(Claim).where(Claim.policy_id == policy_id).values(person_id=person_id)
    )
    await db.flush()
    return result.rowcount or 0


async def owner_person_id(db: AsyncSession, claim_id: int) -> tuple[bool, int | None]:
    """
    Resolve who owns a claim.

    Returns (found, person_id). The owner is the person referenced by
    the claim's policy; when the claim no longer has a policy the
    denormalized `claims.person_id` is used instead.
    """
    stmt = (
        select(Claim.person_id, Policy.person_id)
        .outerjoin(Policy, Policy.id == Claim.policy_id)
        .where(Claim.id == claim_id)
    )
    row = (await db.execute(stmt)).first()
    if row is None:
        return False, None
    denormalized, via_policy = row
    return True, via_policy if via_policy is not None else denormalized


async def list_all(db: AsyncSession) -> list[Claim]:
    result = await db.execute(select(Claim).order_by(*_NEWEST_FIRST))
    return list(result.scalars().all())


async def list_for_policy(db: AsyncSession, policy_id: int) -> list[Claim]:
    stmt = select(Claim).where(Claim.policy_id == policy_id).order_by(*_NEWEST_FIRST)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_for_owner(db: AsyncSession, person_id: int) -> list[Claim]:
    """Claims owned by the person (policy owner first, denormalized id as fallback)."""
    owner = func.coalesce(Policy.person_id, Claim.person_id)
    stmt = (
        select(Claim)
        .outerjoin(Policy, Policy.id == Claim.policy_id)
        .where(owner == person_id)
        .order_by(*_NEWEST_FIRST)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def find_by_day(db: AsyncSession, day: date) -> list[Claim]:
    stmt = select(Claim).where(Claim.occurred_on == day).order_by(*_NEWEST_FIRST)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def find_by_date_range(db: AsyncSession, start: date, end: date) -> list[Claim]:
    """Claims with start <= date < end."""
    stmt = (
        select(Claim)
        .where(Claim.occurred_on >= start, Claim.occurred_on < end)
        .order_by(*_NEWEST_FIRST)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def search_by_text(db: AsyncSession, text: str) -> list[Claim]:
    """Case-insensitive substring match over descriptions."""
    stmt = (
        select(Claim)
        .where(func.lower(Claim.description).contains(text.lower(), autoescape=True))
        .order_by(*_NEWEST_FIRST)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
