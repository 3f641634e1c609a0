"""HTTP surface: auth, ownership-scoped access and error translation."""

from __future__ import annotations

import pytest_asyncio

from agency.core.config import settings
from agency.main import app

PERSON = {"first_name": "Jana", "last_name": "Novakova", "phone": "601000000", "age": 30, "city": "Brno"}
POLICY = {
    "product_name": "Home insurance",
    "coverage_amount": "250000.00",
    "valid_from": "2025-01-01",
    "valid_to": "2027-12-31",
}


@pytest_asyncio.fixture
async def admin_headers(seed_account, login):
    await seed_account("admin", admin=True)
    return await login("admin")


async def _create_person(client, headers, **overrides):
    response = await client.post("/api/v1/persons/", json={**PERSON, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def _create_policy(client, headers, person_id, **overrides):
    response = await client.post(
        "/api/v1/policies/", json={**POLICY, "person_id": person_id, **overrides}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_requires_token(client):
    assert (await client.get("/api/v1/policies/")).status_code == 401
    bad = await client.get("/api/v1/policies/", headers={"Authorization": "Bearer nonsense"})
    assert bad.status_code == 401


async def test_login_and_me(client, seed_account, login):
    await seed_account("jana")

    wrong = await client.post("/api/v1/auth/login", json={"username": "jana", "password": "nope"})
    assert wrong.status_code == 401

    headers = await login("jana")
    me = (await client.get("/api/v1/auth/me", headers=headers)).json()
    assert me["username"] == "jana"
    assert me["roles"] == ["ROLE_USER"]
    assert me["last_login_at"] is not None


async def test_register_and_duplicate(client):
    payload = {"username": "novak", "password": "heslo", "password_again": "heslo"}

    created = await client.post("/api/v1/auth/register", json=payload)
    duplicate = await client.post("/api/v1/auth/register", json={**payload, "username": "NOVAK"})
    mismatch = await client.post("/api/v1/auth/register", json={**payload, "username": "other", "password_again": "x"})

    assert created.status_code == 201
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "ConflictError"
    assert mismatch.status_code == 422


async def test_forgot_and_reset_password(client, seed_account, login, monkeypatch):
    monkeypatch.setattr(settings, "APP_ENV", "development")
    await seed_account("jana")

    issued = await client.post("/api/v1/auth/forgot-password", json={"username": "jana"})
    unknown = await client.post("/api/v1/auth/forgot-password", json={"username": "ghost"})
    assert issued.status_code == unknown.status_code == 202
    assert issued.json()["message"] == unknown.json()["message"]

    token = issued.json()["reset_token"]
    reset = await client.post(
        "/api/v1/auth/reset-password", json={"token": token, "password": "nove", "confirm": "nove"}
    )
    assert reset.status_code == 200
    await login("jana", "nove")

    reused = await client.post(
        "/api/v1/auth/reset-password", json={"token": token, "password": "nove", "confirm": "nove"}
    )
    assert reused.status_code == 422


async def test_forgot_password_withholds_token_outside_development(client, seed_account, monkeypatch):
    monkeypatch.setattr(settings, "APP_ENV", "production")
    await seed_account("admin", admin=True)

    response = await client.post("/api/v1/auth/forgot-password", json={"username": "admin"})

    assert response.status_code == 202
    assert response.json()["reset_token"] is None
    assert len(app.state.reset_tokens) == 1


async def test_admin_policy_lifecycle(client, admin_headers):
    jana = await _create_person(client, admin_headers)
    petr = await _create_person(client, admin_headers, first_name="Petr", last_name="Svoboda")
    policy = await _create_policy(client, admin_headers, jana["id"], contract_holder_id=petr["id"])

    detail = (await client.get(f"/api/v1/policies/{policy['id']}", headers=admin_headers)).json()
    assert {(p["person_id"], p["role"]) for p in detail["participants"]} == {
        (jana["id"], "INSURED"),
        (petr["id"], "CONTRACT_HOLDER"),
    }

    duplicate = await client.post(
        f"/api/v1/policies/{policy['id']}/bindings",
        json={"person_id": jana["id"], "role": "INSURED"},
        headers=admin_headers,
    )
    assert duplicate.status_code == 409

    bad_role = await client.post(
        f"/api/v1/policies/{policy['id']}/bindings",
        json={"person_id": jana["id"], "role": "OWNER"},
        headers=admin_headers,
    )
    assert bad_role.status_code == 422

    claim = await client.post(
        "/api/v1/claims/",
        json={"policy_id": policy["id"], "occurred_on": "2026-03-15", "description": "Crash", "amount": "10.00"},
        headers=admin_headers,
    )
    assert claim.status_code == 201

    deleted = await client.delete(f"/api/v1/policies/{policy['id']}", headers=admin_headers)
    assert deleted.json() == {"policy_id": policy["id"], "bindings_removed": 2, "claims_removed": 1}
    missing = await client.get(f"/api/v1/policies/{policy['id']}", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["entity"] == "Policy"


async def test_self_service_isolation(client, admin_headers, seed_account, login):
    jana = await _create_person(client, admin_headers)
    petr = await _create_person(client, admin_headers, first_name="Petr", last_name="Svoboda")
    janas = await _create_policy(client, admin_headers, jana["id"])
    petrs = await _create_policy(client, admin_headers, petr["id"])
    await seed_account("jana", person_id=jana["id"])
    headers = await login("jana")

    listed = (await client.get("/api/v1/policies/", headers=headers)).json()
    assert [p["id"] for p in listed] == [janas["id"]]
    assert (await client.get(f"/api/v1/policies/{petrs['id']}", headers=headers)).status_code == 403
    assert (await client.get(f"/api/v1/persons/{petr['id']}", headers=headers)).status_code == 403
    assert (await client.get(f"/api/v1/persons/{jana['id']}", headers=headers)).status_code == 200
    assert (await client.get("/api/v1/persons/", headers=headers)).status_code == 403
    assert (await client.get("/api/v1/reports/snapshot", headers=headers)).status_code == 403

    foreign_claim = await client.post(
        "/api/v1/claims/",
        json={"policy_id": petrs["id"], "occurred_on": "2026-03-15", "description": "x", "amount": "1.00"},
        headers=headers,
    )
    own_claim = await client.post(
        "/api/v1/claims/",
        json={"policy_id": janas["id"], "occurred_on": "2026-03-15", "description": "Hail", "amount": "1.00"},
        headers=headers,
    )
    assert foreign_claim.status_code == 403
    assert own_claim.status_code == 201

    claims = (await client.get("/api/v1/claims/", params={"q": "3/2026"}, headers=headers)).json()
    assert claims["query_kind"] == "MONTH"
    assert [c["id"] for c in claims["data"]] == [own_claim.json()["claim"]["id"]]


async def test_account_without_person_sees_nothing(client, admin_headers, seed_account, login):
    jana = await _create_person(client, admin_headers)
    await _create_policy(client, admin_headers, jana["id"])
    await seed_account("nobody")
    headers = await login("nobody")

    assert (await client.get("/api/v1/policies/", headers=headers)).json() == []
    claims = (await client.get("/api/v1/claims/", headers=headers)).json()
    assert claims["total"] == 0


async def test_profile_flow(client, seed_account, login):
    await seed_account("jana")
    headers = await login("jana")

    empty = (await client.get("/api/v1/account/profile", headers=headers)).json()
    created = (await client.put("/api/v1/account/profile", json=PERSON, headers=headers)).json()
    updated = (
        await client.put("/api/v1/account/profile", json={**PERSON, "city": "Praha"}, headers=headers)
    ).json()

    assert empty == {"person": None}
    assert created["result"] == "CREATED"
    assert updated["result"] == "UPDATED"
    assert updated["person"]["id"] == created["person"]["id"]
    me = (await client.get("/api/v1/auth/me", headers=headers)).json()
    assert me["person_id"] == created["person"]["id"]


async def test_person_delete_and_account_admin(client, admin_headers, seed_account):
    jana = await _create_person(client, admin_headers)
    account_id = await seed_account("jana")

    linked = await client.put(f"/api/v1/persons/{jana['id']}/account/{account_id}", headers=admin_headers)
    assert linked.json()["person_id"] == jana["id"]

    disabled = await client.put(
        f"/api/v1/accounts/{account_id}/enabled", json={"enabled": False}, headers=admin_headers
    )
    assert disabled.json()["enabled"] is False
    refused = await client.post("/api/v1/auth/login", json={"username": "jana", "password": "secret1"})
    assert refused.status_code == 401

    summary = (await client.delete(f"/api/v1/persons/{jana['id']}", headers=admin_headers)).json()
    assert summary["accounts_unlinked"] == 1
    accounts = (await client.get("/api/v1/accounts/", headers=admin_headers)).json()
    assert {a["username"]: a["person_id"] for a in accounts}["jana"] is None


async def test_reports_for_admin(client, admin_headers):
    jana = await _create_person(client, admin_headers)
    await _create_policy(client, admin_headers, jana["id"])

    snapshot = await client.get("/api/v1/reports/snapshot", headers=admin_headers)
    cities = await client.get("/api/v1/reports/top-cities", headers=admin_headers)

    assert snapshot.status_code == 200
    assert snapshot.json()["persons"] == 1
    assert cities.json() == [{"city": "Brno", "count": 1}]
