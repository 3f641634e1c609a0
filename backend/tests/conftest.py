"""Pytest configuration and shared fixtures.

Every test gets its own in-memory SQLite database (aiosqlite) with
foreign keys enforced and real SAVEPOINT support.
"""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")

from datetime import date
from decimal import Decimal
from typing import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from agency.api.deps import get_db
from agency.core.constants import AccountRole, ClaimState
from agency.db.session import create_schema
from agency.main import app
from agency.repositories import accounts as account_repository
from agency.repositories import claims as claim_repository
from agency.services import persons as person_service
from agency.services import policies as policy_service
from agency.services.access import Caller
from agency.services.drafts import PersonDraft, PolicyDraft
from agency.services.password_reset import InMemoryResetTokenStore


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _sqlite_pragmas(dbapi_conn, _):
        # SQLAlchemy emits BEGIN itself (see "begin" below) so SAVEPOINT works
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _sqlite_begin(conn):
        conn.exec_driver_sql("BEGIN")

    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


# ─── Factories ────────────────────────────────
@pytest.fixture
def make_person(db: AsyncSession):
    async def _make(first_name: str = "Jana", last_name: str = "Novakova", **fields):
        draft = PersonDraft(
            first_name=first_name,
            last_name=last_name,
            phone=fields.pop("phone", "+420 601 000 000"),
            age=fields.pop("age", 40),
            **fields,
        )
        return await person_service.create(db, draft)

    return _make


@pytest.fixture
def policy_draft():
    def _draft(**overrides) -> PolicyDraft:
        values = {
            "product_name": "Home insurance",
            "coverage_amount": Decimal("100000.00"),
            "valid_from": date(2025, 1, 1),
            "valid_to": date(2027, 12, 31),
        }
        values.update(overrides)
        return PolicyDraft(**values)

    return _draft


@pytest.fixture
def make_policy(db: AsyncSession, policy_draft):
    async def _make(person_id: int, contract_holder_id: int | None = None, **overrides):
        return await policy_service.create_for(db, person_id, policy_draft(**overrides), contract_holder_id)

    return _make


@pytest.fixture
def make_claim(db: AsyncSession):
    async def _make(
        policy_id: int | None,
        person_id: int | None,
        occurred_on: date = date(2026, 3, 15),
        description: str = "Water damage",
        amount: Decimal = Decimal("1000.00"),
        state: ClaimState = ClaimState.NEW,
    ):
        return await claim_repository.create_claim(
            db,
            policy_id=policy_id,
            person_id=person_id,
            occurred_on=occurred_on,
            description=description,
            amount=amount,
            state=state.value,
        )

    return _make


# ─── Callers ──────────────────────────────────
@pytest.fixture
def admin_caller() -> Caller:
    return Caller(account_id=1, username="admin", privileged=True, person_id=None)


@pytest.fixture
def user_caller():
    def _caller(person_id: int | None) -> Caller:
        return Caller(account_id=2, username="user", privileged=False, person_id=person_id)

    return _caller


# ─── API ──────────────────────────────────────
@pytest_asyncio.fixture
async def client(session_factory) -> AsyncIterator[AsyncClient]:
    """HTTP client against the app, wired to the per-test database."""

    async def _override_get_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    app.state.reset_tokens = InMemoryResetTokenStore()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http
    app.dependency_overrides = {}


@pytest.fixture
def seed_account(session_factory):
    """Create a committed account (optionally admin, optionally linked)."""

    async def _seed(username: str, password: str = "secret1", *, admin: bool = False, person_id=None):
        roles = (AccountRole.ADMIN.value, AccountRole.USER.value) if admin else (AccountRole.USER.value,)
        async with session_factory() as session:
            account = await account_repository.create_account(
                session, username=username, password=password, roles=roles, person_id=person_id
            )
            await session.commit()
            return account.id

    return _seed


@pytest.fixture
def login(client: AsyncClient):
    async def _login(username: str, password: str = "secret1") -> dict[str, str]:
        response = await client.post("/api/v1/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login
