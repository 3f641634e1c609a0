"""Policy repository — data access for the policies table."""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import String, cast, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from agency.db.models.policy import Policy
from agency.db.models.policy_binding import PolicyBinding

POLICY_FIELDS = {"product_name", "coverage_amount", "valid_from", "valid_to", "person_id"}


async def create_policy(db: AsyncSession, *, person_id: int, **fields: Any) -> Policy:
    policy = Policy(person_id=person_id, **{k: v for k, v in fields.items() if k in POLICY_FIELDS})
    db.add(policy)
    await db.flush()
    return policy


async def get_policy(db: AsyncSession, policy_id: int) -> Policy | None:
    return await db.get(Policy, policy_id)


async def update_policy(db: AsyncSession, policy: Policy, **fields: Any) -> Policy:
    for key, value in fields.items():
        if key in POLICY_FIELDS:
            setattr(policy, key, value)
    await db.flush()
    return policy


async def delete_policy(db: AsyncSession, policy_id: int) -> int:
    result = await db.execute(delete(Policy).where(Policy.id == policy_id))
    await db.flush()
    return result.rowcount or 0


async def list_policies(db: AsyncSession) -> list[Policy]:
    stmt = select(Policy).order_by(Policy.id.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def search_policies(db: AsyncSession, q: str) -> list[Policy]:
    """Substring match on product name, id or coverage amount."""
    needle = q.lower()
    stmt = (
        select(Policy)
        .where(
            or_(
                func.lower(Policy.product_name).contains(needle, autoescape=True),
                cast(Policy.id, String).contains(needle, autoescape=True),
                cast(Policy.coverage_amount, String).contains(needle, autoescape=True),
            )
        )
        .order_by(Policy.id.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_originated_by(db: AsyncSession, person_id: int) -> list[Policy]:
    """Policies whose direct (originating) reference is the person."""
    stmt = select(Policy).where(Policy.person_id == person_id).order_by(Policy.id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_bound_to(db: AsyncSession, person_id: int) -> list[Policy]:
    """Policies where the person appears in any role binding."""
    member_ids = select(PolicyBinding.policy_id).where(PolicyBinding.person_id == person_id)
    stmt = select(Policy).where(Policy.id.in_(member_ids)).order_by(Policy.id.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_active(db: AsyncSession, on: date) -> int:
    stmt = select(func.count()).select_from(Policy).where(Policy.valid_from <= on, Policy.valid_to >= on)
    return await db.scalar(stmt) or 0


async def count_expired(db: AsyncSession, on: date) -> int:
    stmt = select(func.count()).select_from(Policy).where(Policy.valid_to < on)
    return await db.scalar(stmt) or 0
