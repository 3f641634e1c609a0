"""
Binding repository — raw access to the policy_persons join table.

Uniqueness of (policy, person, role) is guaranteed by the composite
primary key; the duplicate check and the single-contract-holder rule
live in `agency.services.role_bindings`.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from agency.db.models.person import Person
from agency.db.models.policy_binding import PolicyBinding


@dataclass(frozen=True)
class BindingRow:
    """A participant of a policy as rendered in lists."""

    person_id: int
    first_name: str
    last_name: str
    role: str


async def list_for_policy(db: AsyncSession, policy_id: int) -> list[BindingRow]:
    """Participants of a policy with their role, ordered by display name."""
    stmt = (
        select(PolicyBinding.person_id, Person.first_name, Person.last_name, PolicyBinding.role)
        .join(Person, Person.id == PolicyBinding.person_id)
        .where(PolicyBinding.policy_id == policy_id)
        .order_by(Person.last_name, Person.first_name, PolicyBinding.person_id, PolicyBinding.role)
    )
    result = await db.execute(stmt)
    return [BindingRow(*row) for row in result.all()]


async def person_ids_with_role(db: AsyncSession, policy_id: int, role: str) -> set[int]:
    stmt = select(PolicyBinding.person_id).where(
        PolicyBinding.policy_id == policy_id,
        PolicyBinding.role == role,
    )
    result = await db.execute(stmt)
    return set(result.scalars().all())


async def exists_binding(db: AsyncSession, policy_id: int, person_id: int, role: str) -> bool:
    stmt = select(
        exists().where(
            PolicyBinding.policy_id == policy_id,
            PolicyBinding.person_id == person_id,
            PolicyBinding.role == role,
        )
    )
    return bool(await db.scalar(stmt))


async def exists_member(db: AsyncSession, policy_id: int, person_id: int) -> bool:
    """True when the person is bound to the policy in any role."""
    stmt = select(
        exists().where(
            PolicyBinding.policy_id == policy_id,
            PolicyBinding.person_id == person_id,
        )
    )
    return bool(await db.scalar(stmt))


async def insert_binding(db: AsyncSession, policy_id: int, person_id: int, role: str) -> PolicyBinding:
    """Insert one row; raises IntegrityError on flush if the triple exists."""
    binding = PolicyBinding(policy_id=policy_id, person_id=person_id, role=role)
    db.add(binding)
    await db.flush()
    return binding


async def delete_binding(db: AsyncSession, policy_id: int, person_id: int, role: str) -> int:
    stmt = delete(PolicyBinding).where(
        PolicyBinding.policy_id == policy_id,
        PolicyBinding.person_id == person_id,
        PolicyBinding.role == role,
    )
    result = await db.execute(stmt)
    await db.flush()
    return result.rowcount or 0


async def delete_for_policy(db: AsyncSession, policy_id: int) -> int:
    result = await db.execute(delete(PolicyBinding).where(PolicyBinding.policy_id == policy_id))
    await db.flush()
    return result.rowcount or 0


async def delete_for_person(db: AsyncSession, person_id: int) -> int:
    result = await db.execute(delete(PolicyBinding).where(PolicyBinding.person_id == person_id))
    await db.flush()
    return result.rowcount or 0


async def policy_ids_for_person(db: AsyncSession, person_id: int) -> set[int]:
    """Every policy the person is bound to, in any role."""
    stmt = select(PolicyBinding.policy_id).where(PolicyBinding.person_id == person_id)
    result = await db.execute(stmt)
    return set(result.scalars().all())
