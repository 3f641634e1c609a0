"""
Person service — CRUD, search and the cascading delete.

Deleting a person removes, in one SAVEPOINT:
    1. every policy the person originated (through the policy lifecycle)
    2. the person's remaining role bindings on other policies
    3. claims whose denormalized owner is the person
    4. the profile link of any account pointing at the person
    5. the person row
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from agency.core.errors import NotFoundError
from agency.core.logging import get_logger
from agency.db.models.person import Person
from agency.db.models.policy import Policy
from agency.db.session import atomic
from agency.repositories import accounts as account_repository
from agency.repositories import bindings as binding_repository
from agency.repositories import claims as claim_repository
from agency.repositories import persons as person_repository
from agency.repositories import policies as policy_repository
from agency.services import policies as policy_service
from agency.services.drafts import PersonDraft

logger = get_logger(__name__)


@dataclass(frozen=True)
class PersonDeleteSummary:
    person_id: int
    policies_removed: int
    bindings_removed: int
    claims_removed: int
    accounts_unlinked: int


async def get(db: AsyncSession, person_id: int) -> Person:
    person = await person_repository.get_person(db, person_id)
    if person is None:
        raise NotFoundError("Person", person_id)
    return person


async def list_persons(db: AsyncSession) -> list[Person]:
    return await person_repository.list_persons(db)


async def search(db: AsyncSession, q: str | None) -> list[Person]:
    """Digits only -> id lookup; anything else -> name, city or phone match."""
    if q is None or not q.strip():
        return await person_repository.list_persons(db)
    text = q.strip()
    if text.isdigit():
        person = await person_repository.get_person(db, int(text))
        return [person] if person is not None else []
    return await person_repository.search_persons(db, text)


async def create(db: AsyncSession, draft: PersonDraft) -> Person:
    person = await person_repository.create_person(db, **draft.model_dump())
    logger.info("Person created", person_id=person.id)
    return person


async def update(db: AsyncSession, person_id: int, draft: PersonDraft) -> Person:
    person = await get(db, person_id)
    await person_repository.update_person(db, person, **draft.model_dump())
    logger.info("Person updated", person_id=person_id)
    return person


async def policies_of(db: AsyncSession, person_id: int) -> list[Policy]:
    """Policies the person originated or is bound to, newest first."""
    originated = await policy_repository.list_originated_by(db, person_id)
    bound = await policy_repository.list_bound_to(db, person_id)
    merged = {policy.id: policy for policy in [*originated, *bound]}
    return sorted(merged.values(), key=lambda policy: policy.id, reverse=True)


async def get_detail(db: AsyncSession, person_id: int) -> tuple[Person, list[Policy]]:
    person = await get(db, person_id)
    return person, await policies_of(db, person_id)


async def delete(db: AsyncSession, person_id: int) -> PersonDeleteSummary:
    await get(db, person_id)

    bindings_removed = 0
    claims_removed = 0
    async with atomic(db):
        originated = await policy_repository.list_originated_by(db, person_id)
        for policy in originated:
            summary = await policy_service.delete(db, policy.id)
            bindings_removed += summary.bindings_removed
            claims_removed += summary.claims_removed
        bindings_removed += await binding_repository.delete_for_person(db, person_id)
        claims_removed += await claim_repository.delete_for_person(db, person_id)
        accounts_unlinked = await account_repository.unlink_person(db, person_id)
        await person_repository.delete_person(db, person_id)

    logger.info(
        "Person deleted",
        person_id=person_id,
        policies=len(originated),
        bindings=bindings_removed,
        claims=claims_removed,
        accounts=accounts_unlinked,
    )
    return PersonDeleteSummary(
        person_id=person_id,
        policies_removed=len(originated),
        bindings_removed=bindings_removed,
        claims_removed=claims_removed,
        accounts_unlinked=accounts_unlinked,
    )
