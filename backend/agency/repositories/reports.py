"""
Report repository — read-only aggregate queries for dashboards.

Month/year bucketing is done in Python so the same queries run on
PostgreSQL and SQLite.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from agency.db.models.claim import Claim
from agency.db.models.person import Person
from agency.db.models.policy import Policy


async def claim_amount_between(db: AsyncSession, start: date, end: date) -> Decimal:
    stmt = select(func.coalesce(func.sum(Claim.amount), 0)).where(
        Claim.occurred_on >= start, Claim.occurred_on < end
    )
    return Decimal(str(await db.scalar(stmt) or 0))


async def active_policies_by_product(db: AsyncSession, on: date) -> list[tuple[str, int]]:
    total = func.count().label("total")
    stmt = (
        select(Policy.product_name, total)
        .where(Policy.valid_from <= on, Policy.valid_to >= on)
        .group_by(Policy.product_name)
        .order_by(total.desc(), Policy.product_name)
    )
    result = await db.execute(stmt)
    return [(name, count) for name, count in result.all()]


async def policy_start_dates(db: AsyncSession) -> list[date]:
    result = await db.execute(select(Policy.valid_from).order_by(Policy.valid_from))
    return list(result.scalars().all())


async def claim_dates(db: AsyncSession) -> list[date]:
    result = await db.execute(select(Claim.occurred_on).order_by(Claim.occurred_on))
    return list(result.scalars().all())


async def claims_by_state(db: AsyncSession) -> list[tuple[str, int, Decimal, Decimal]]:
    count = func.count().label("count")
    stmt = (
        select(
            Claim.state,
            count,
            func.coalesce(func.sum(Claim.amount), 0),
            func.coalesce(func.avg(Claim.amount), 0),
        )
        .group_by(Claim.state)
        .order_by(count.desc(), Claim.state)
    )
    result = await db.execute(stmt)
    return [
        (state, n, Decimal(str(total)), Decimal(str(avg)))
        for state, n, total, avg in result.all()
    ]


async def top_cities(db: AsyncSession, limit: int) -> list[tuple[str, int]]:
    count = func.count().label("count")
    stmt = (
        select(Person.city, count)
        .where(Person.city.is_not(None), Person.city != "")
        .group_by(Person.city)
        .order_by(count.desc(), Person.city)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return [(city, n) for city, n in result.all()]
