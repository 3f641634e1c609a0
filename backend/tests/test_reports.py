"""Dashboard aggregates."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from agency.core.constants import ClaimState
from agency.services import reports as report_service

TODAY = date(2026, 6, 30)


async def _seed(make_person, make_policy, make_claim):
    brno_a = await make_person("Jana", "Novakova", city="Brno")
    await make_person("Eva", "Mala", city="Brno")
    praha = await make_person("Petr", "Svoboda", city="Praha")
    await make_person("Karel", "Dvorak")

    home = await make_policy(brno_a.id, product_name="Home", valid_from=date(2026, 1, 10), valid_to=date(2026, 12, 31))
    await make_policy(praha.id, product_name="Home", valid_from=date(2026, 1, 20), valid_to=date(2027, 1, 1))
    await make_policy(praha.id, product_name="Car", valid_from=date(2026, 3, 1), valid_to=date(2026, 12, 31))
    await make_policy(praha.id, product_name="Travel", valid_from=date(2025, 7, 1), valid_to=date(2025, 7, 14))

    await make_claim(home.id, brno_a.id, occurred_on=date(2026, 2, 1), amount=Decimal("100.00"))
    await make_claim(home.id, brno_a.id, occurred_on=date(2026, 3, 1), amount=Decimal("50.00"))
    await make_claim(
        home.id, brno_a.id, occurred_on=date(2025, 12, 24), amount=Decimal("10.00"), state=ClaimState.CLOSED
    )


async def test_snapshot(make_person, make_policy, make_claim, db):
    await _seed(make_person, make_policy, make_claim)

    snapshot = await report_service.snapshot(db, on=TODAY)

    assert snapshot.persons == 4
    assert snapshot.active_policies == 3
    assert snapshot.expired_policies == 1
    assert snapshot.claims_amount_ytd == Decimal("150.00")


async def test_active_products(make_person, make_policy, make_claim, db):
    await _seed(make_person, make_policy, make_claim)

    products = await report_service.active_products(db, on=TODAY)

    assert [(p.label, p.value) for p in products] == [("Home", 2), ("Car", 1)]


async def test_monthly_new_policies_and_claims_by_year(make_person, make_policy, make_claim, db):
    await _seed(make_person, make_policy, make_claim)

    months = await report_service.monthly_new_policies(db)
    years = await report_service.claims_by_year(db)

    assert [(m.period, m.count) for m in months] == [("2025-07", 1), ("2026-01", 2), ("2026-03", 1)]
    assert [(y.period, y.count) for y in years] == [("2025", 1), ("2026", 2)]


async def test_claims_by_state(make_person, make_policy, make_claim, db):
    await _seed(make_person, make_policy, make_claim)

    stats = {s.state: s for s in await report_service.claims_by_state(db)}

    assert stats["NEW"].count == 2
    assert stats["NEW"].total == Decimal("150.00")
    assert stats["NEW"].average == Decimal("75.00")
    assert stats["CLOSED"].count == 1


async def test_top_cities_skips_empty(make_person, make_policy, make_claim, db):
    await _seed(make_person, make_policy, make_claim)

    cities = await report_service.top_cities(db, limit=5)

    assert [(c.city, c.count) for c in cities] == [("Brno", 2), ("Praha", 1)]
