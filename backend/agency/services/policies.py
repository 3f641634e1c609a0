"""
Policy lifecycle — create, edit and delete policies together with their
role bindings and claims.

Every multi-step write runs in one SAVEPOINT. Deletion order is fixed:
bindings, then claims, then the policy row.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from agency.core.constants import BindingRole
from agency.core.errors import NotFoundError
from agency.core.logging import get_logger
from agency.db.models.claim import Claim
from agency.db.models.policy import Policy
from agency.db.session import atomic
from agency.repositories import bindings as binding_repository
from agency.repositories import claims as claim_repository
from agency.repositories import persons as person_repository
from agency.repositories import policies as policy_repository
from agency.repositories.bindings import BindingRow
from agency.services import role_bindings
from agency.services.drafts import PolicyDraft

logger = get_logger(__name__)


@dataclass
class PolicyDetail:
    policy: Policy
    participants: list[BindingRow] = field(default_factory=list)
    claims: list[Claim] = field(default_factory=list)


@dataclass(frozen=True)
class DeleteSummary:
    policy_id: int
    bindings_removed: int
    claims_removed: int


def _scalar_fields(draft: PolicyDraft) -> dict[str, object]:
    return draft.model_dump(include={"product_name", "coverage_amount", "valid_from", "valid_to"})


async def _require_person(db: AsyncSession, person_id: int) -> None:
    if await person_repository.get_person(db, person_id) is None:
        raise NotFoundError("Person", person_id)


async def get(db: AsyncSession, policy_id: int) -> Policy:
    policy = await policy_repository.get_policy(db, policy_id)
    if policy is None:
        raise NotFoundError("Policy", policy_id)
    return policy


async def get_detail(db: AsyncSession, policy_id: int) -> PolicyDetail:
    policy = await get(db, policy_id)
    return PolicyDetail(
        policy=policy,
        participants=await binding_repository.list_for_policy(db, policy_id),
        claims=await claim_repository.list_for_policy(db, policy_id),
    )


async def list_policies(db: AsyncSession, q: str | None = None) -> list[Policy]:
    """All policies newest first, optionally filtered by a search text."""
    if q is None or not q.strip():
        return await policy_repository.list_policies(db)
    return await policy_repository.search_policies(db, q.strip())


async def list_for_person(db: AsyncSession, person_id: int) -> list[Policy]:
    """Policies where the person holds any role."""
    return await policy_repository.list_bound_to(db, person_id)


async def create_for(
    db: AsyncSession,
    person_id: int,
    draft: PolicyDraft,
    contract_holder_id: int | None = None,
) -> Policy:
    """
    Create a policy for `person_id`.

    The person becomes the policy's direct reference and its INSURED
    participant; the contract holder is `contract_holder_id` or, when
    omitted, the same person.
    """
    holder_id = contract_holder_id if contract_holder_id is not None else person_id
    await _require_person(db, person_id)
    if holder_id != person_id:
        await _require_person(db, holder_id)

    async with atomic(db):
        policy = await policy_repository.create_policy(db, person_id=person_id, **_scalar_fields(draft))
        await binding_repository.insert_binding(db, policy.id, person_id, BindingRole.INSURED.value)
        await binding_repository.insert_binding(db, policy.id, holder_id, BindingRole.CONTRACT_HOLDER.value)

    logger.info(
        "Policy created",
        policy_id=policy.id,
        person_id=person_id,
        contract_holder_id=holder_id,
        product=policy.product_name,
    )
    return policy


async def save_edit(
    db: AsyncSession,
    policy_id: int,
    draft: PolicyDraft,
    contract_holder_id: int | None = None,
) -> Policy:
    """
    Apply an edit. A missing `draft.person_id` keeps the stored direct
    reference; a supplied `contract_holder_id` replaces the holder.
    """
    policy = await get(db, policy_id)
    fields = _scalar_fields(draft)
    if draft.person_id is not None and draft.person_id != policy.person_id:
        await _require_person(db, draft.person_id)
        fields["person_id"] = draft.person_id

    async with atomic(db):
        await policy_repository.update_policy(db, policy, **fields)
        if "person_id" in fields:
            await claim_repository.reassign_person(db, policy_id, fields["person_id"])
        if contract_holder_id is not None:
            await role_bindings.replace_contract_holder(db, policy_id, contract_holder_id)

    logger.info(
        "Policy updated",
        policy_id=policy_id,
        person_id=policy.person_id,
        contract_holder_id=contract_holder_id,
    )
    return policy


async def delete(db: AsyncSession, policy_id: int) -> DeleteSummary:
    """Remove bindings, then claims, then the policy; all or nothing."""
    await get(db, policy_id)

    async with atomic(db):
        bindings_removed = await role_bindings.remove_all_for_policy(db, policy_id)
        claims_removed = await claim_repository.delete_for_policy(db, policy_id)
        await policy_repository.delete_policy(db, policy_id)

    logger.info(
        "Policy deleted",
        policy_id=policy_id,
        bindings=bindings_removed,
        claims=claims_removed,
    )
    return DeleteSummary(
        policy_id=policy_id,
        bindings_removed=bindings_removed,
        claims_removed=claims_removed,
    )
