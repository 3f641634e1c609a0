"""
Role-binding manager — the person ↔ policy relation with a role.

Rules enforced here (the table itself only guarantees the composite key):
    - role is a BindingRole; any other string is a ValidationError
    - adding an existing (policy, person, role) triple is a ConflictError
      and leaves the table unchanged
    - a policy has at most one CONTRACT_HOLDER; replacing it happens in
      one SAVEPOINT so no reader of the committed state ever sees a
      policy with zero or two holders
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from agency.core.constants import BindingRole
from agency.core.errors import ConflictError, NotFoundError, ValidationError
from agency.core.logging import get_logger
from agency.db.models.policy_binding import PolicyBinding
from agency.db.session import atomic
from agency.repositories import bindings as binding_repository
from agency.repositories import persons as person_repository
from agency.repositories import policies as policy_repository
from agency.repositories.bindings import BindingRow

logger = get_logger(__name__)


def parse_role(value: str | BindingRole) -> BindingRole:
    """Map a role string onto the closed BindingRole enum."""
    if isinstance(value, BindingRole):
        return value
    try:
        return BindingRole(str(value).strip().upper())
    except ValueError:
        raise ValidationError(
            f"Unknown policy role {value!r}",
            details={"allowed": [r.value for r in BindingRole]},
        ) from None


async def _require_policy(db: AsyncSession, policy_id: int) -> None:
    if await policy_repository.get_policy(db, policy_id) is None:
        raise NotFoundError("Policy", policy_id)


async def _require_person(db: AsyncSession, person_id: int) -> None:
    if await person_repository.get_person(db, person_id) is None:
        raise NotFoundError("Person", person_id)


async def bindings_for(db: AsyncSession, policy_id: int) -> list[BindingRow]:
    """Participants of a policy, ordered by last name then first name."""
    return await binding_repository.list_for_policy(db, policy_id)


async def person_ids_with_role(db: AsyncSession, policy_id: int, role: str | BindingRole) -> set[int]:
    return await binding_repository.person_ids_with_role(db, policy_id, parse_role(role).value)


async def is_member(db: AsyncSession, policy_id: int, person_id: int) -> bool:
    """True when the person holds any role in the policy."""
    return await binding_repository.exists_member(db, policy_id, person_id)


async def add(
    db: AsyncSession,
    policy_id: int,
    person_id: int,
    role: str | BindingRole,
) -> PolicyBinding:
    """Insert one binding. Duplicate triple -> ConflictError, state unchanged."""
    parsed = parse_role(role)
    await _require_policy(db, policy_id)
    await _require_person(db, person_id)

    if await binding_repository.exists_binding(db, policy_id, person_id, parsed.value):
        raise ConflictError(
            "Person already has this role in the policy",
            entity="PolicyBinding",
            details={"policy_id": policy_id, "person_id": person_id, "role": parsed.value},
        )

    try:
        async with atomic(db):
            binding = await binding_repository.insert_binding(db, policy_id, person_id, parsed.value)
    except IntegrityError:
        # concurrent insert of the same triple won the race
        raise ConflictError(
            "Person already has this role in the policy",
            entity="PolicyBinding",
            details={"policy_id": policy_id, "person_id": person_id, "role": parsed.value},
        ) from None

    logger.info("Binding added", policy_id=policy_id, person_id=person_id, role=parsed.value)
    return binding


async def remove(
    db: AsyncSession,
    policy_id: int,
    person_id: int,
    role: str | BindingRole,
) -> int:
    """Delete the binding if present. Returns affected rows (0 is fine)."""
    parsed = parse_role(role)
    removed = await binding_repository.delete_binding(db, policy_id, person_id, parsed.value)
    if removed:
        logger.info("Binding removed", policy_id=policy_id, person_id=person_id, role=parsed.value)
    return removed


async def remove_all_for_policy(db: AsyncSession, policy_id: int) -> int:
    """Bulk delete used by policy deletion."""
    return await binding_repository.delete_for_policy(db, policy_id)


async def replace_contract_holder(db: AsyncSession, policy_id: int, person_id: int) -> set[int]:
    """
    Make `person_id` the single contract holder of the policy.

    Reads the current holders, removes each, inserts the new one, all
    inside one SAVEPOINT. INSURED bindings are not touched. Returns the
    ids of the previous holders.
    """
    await _require_policy(db, policy_id)
    await _require_person(db, person_id)

    holder = BindingRole.CONTRACT_HOLDER.value
    async with atomic(db):
        previous = await binding_repository.person_ids_with_role(db, policy_id, holder)
        for old_id in sorted(previous):
            await binding_repository.delete_binding(db, policy_id, old_id, holder)
        await binding_repository.insert_binding(db, policy_id, person_id, holder)

    logger.info(
        "Contract holder replaced",
        policy_id=policy_id,
        previous=sorted(previous),
        holder=person_id,
    )
    return previous
