"""
Seed an admin, a self-service user and a few demo records for development.
Run: python -m scripts.seed  (from backend/)
"""

import asyncio
from datetime import date
from decimal import Decimal

from agency.core.constants import AccountRole, ClaimState
from agency.db.session import async_session, create_schema
from agency.repositories.accounts import create_account, get_account_by_username
from agency.services import claims as claim_service
from agency.services import persons as person_service
from agency.services import policies as policy_service
from agency.services.drafts import ClaimDraft, PersonDraft, PolicyDraft

SEED_ACCOUNTS = [
    {
        "username": "admin",
        "password": "admin123",  # Change in production!
        "roles": (AccountRole.ADMIN.value, AccountRole.USER.value),
    },
    {
        "username": "jana",
        "password": "jana123",
        "roles": (AccountRole.USER.value,),
    },
]

SEED_PERSONS = [
    PersonDraft(first_name="Jana", last_name="Novakova", phone="+420 601 111 222", age=34, city="Brno"),
    PersonDraft(first_name="Petr", last_name="Svoboda", phone="+420 602 333 444", age=51, city="Praha"),
]


async def seed():
    """Insert seed accounts and demo data; skips when the admin already exists."""
    await create_schema()
    async with async_session() as session:
        if await get_account_by_username(session, "admin") is not None:
            print("Seed data already present.")
            return

        jana, petr = [await person_service.create(session, draft) for draft in SEED_PERSONS]
        for data in SEED_ACCOUNTS:
            person_id = jana.id if data["username"] == "jana" else None
            account = await create_account(db=session, person_id=person_id, **data)
            print(f"  Created account: {account.username} ({', '.join(sorted(account.role_names))})")

        home = await policy_service.create_for(
            session,
            jana.id,
            PolicyDraft(
                product_name="Home insurance",
                coverage_amount=Decimal("2500000.00"),
                valid_from=date(2025, 1, 1),
                valid_to=date(2027, 12, 31),
            ),
            contract_holder_id=petr.id,
        )
        await claim_service.save(
            session,
            ClaimDraft(
                policy_id=home.id,
                occurred_on=date(2026, 3, 15),
                description="Water damage in the kitchen",
                amount=Decimal("18500.00"),
                state=ClaimState.NEW,
            ),
        )
        await session.commit()
    print(f"Seeded {len(SEED_ACCOUNTS)} accounts, {len(SEED_PERSONS)} persons and demo policies.")


if __name__ == "__main__":
    asyncio.run(seed())
