"""Read-only dashboard aggregates."""

from __future__ import annotations

from collections import Counter
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from agency.core.config import settings
from agency.repositories import persons as person_repository
from agency.repositories import policies as policy_repository
from agency.repositories import reports as report_repository

_CENT = Decimal("0.01")


class Snapshot(BaseModel):
    """Dashboard summary."""

    persons: int
    active_policies: int
    expired_policies: int
    claims_amount_ytd: Decimal


class LabelValue(BaseModel):
    label: str
    value: int


class SeriesPoint(BaseModel):
    period: str  # "2024-03" for months, "2024" for years
    count: int


class ClaimStateStats(BaseModel):
    state: str
    count: int
    total: Decimal
    average: Decimal


class CityCount(BaseModel):
    city: str
    count: int


def _money(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


async def snapshot(db: AsyncSession, on: date | None = None) -> Snapshot:
    today = on or date.today()
    return Snapshot(
        persons=await person_repository.count_persons(db),
        active_policies=await policy_repository.count_active(db, today),
        expired_policies=await policy_repository.count_expired(db, today),
        claims_amount_ytd=_money(
            await report_repository.claim_amount_between(
                db, date(today.year, 1, 1), date(today.year + 1, 1, 1)
            )
        ),
    )


async def active_products(db: AsyncSession, on: date | None = None) -> list[LabelValue]:
    rows = await report_repository.active_policies_by_product(db, on or date.today())
    return [LabelValue(label=name, value=count) for name, count in rows]


async def monthly_new_policies(db: AsyncSession) -> list[SeriesPoint]:
    """Policies per start month, oldest month first."""
    buckets = Counter(f"{d.year:04d}-{d.month:02d}" for d in await report_repository.policy_start_dates(db))
    return [SeriesPoint(period=period, count=n) for period, n in sorted(buckets.items())]


async def claims_by_year(db: AsyncSession) -> list[SeriesPoint]:
    buckets = Counter(f"{d.year:04d}" for d in await report_repository.claim_dates(db))
    return [SeriesPoint(period=period, count=n) for period, n in sorted(buckets.items())]


async def claims_by_state(db: AsyncSession) -> list[ClaimStateStats]:
    return [
        ClaimStateStats(state=state, count=n, total=_money(total), average=_money(avg))
        for state, n, total, avg in await report_repository.claims_by_state(db)
    ]


async def top_cities(db: AsyncSession, limit: int | None = None) -> list[CityCount]:
    rows = await report_repository.top_cities(db, limit or settings.TOP_CITIES_LIMIT)
    return [CityCount(city=city, count=n) for city, n in rows]
