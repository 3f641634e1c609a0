"""Dashboard reports (ROLE_ADMIN only)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from agency.api.deps import get_db, require_admin
from agency.api.schemas.reports import CityCount, ClaimStateStats, LabelValue, SeriesPoint, Snapshot
from agency.services import reports as report_service

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
    dependencies=[Depends(require_admin)],
)


@router.get("/snapshot", response_model=Snapshot)
async def get_snapshot(db: AsyncSession = Depends(get_db)) -> Snapshot:
    """Persons, active/expired policies and claim amount this year."""
    return await report_service.snapshot(db)


@router.get("/active-products", response_model=list[LabelValue])
async def get_active_products(db: AsyncSession = Depends(get_db)) -> list[LabelValue]:
    return await report_service.active_products(db)


@router.get("/monthly-new-policies", response_model=list[SeriesPoint])
async def get_monthly_new_policies(db: AsyncSession = Depends(get_db)) -> list[SeriesPoint]:
    return await report_service.monthly_new_policies(db)


@router.get("/claims-by-state", response_model=list[ClaimStateStats])
async def get_claims_by_state(db: AsyncSession = Depends(get_db)) -> list[ClaimStateStats]:
    return await report_service.claims_by_state(db)


@router.get("/claims-by-year", response_model=list[SeriesPoint])
async def get_claims_by_year(db: AsyncSession = Depends(get_db)) -> list[SeriesPoint]:
    return await report_service.claims_by_year(db)


@router.get("/top-cities", response_model=list[CityCount])
async def get_top_cities(
    limit: int | None = Query(None, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
) -> list[CityCount]:
    return await report_service.top_cities(db, limit)
