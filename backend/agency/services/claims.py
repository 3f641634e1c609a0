"""Claim service — reads, search and create-or-update of claims."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from agency.core.constants import ClaimQueryKind
from agency.core.errors import NotFoundError, ValidationError
from agency.core.logging import get_logger
from agency.db.models.claim import Claim
from agency.repositories import claims as claim_repository
from agency.repositories import policies as policy_repository
from agency.services.claim_search import ClaimQuery, parse_query
from agency.services.drafts import ClaimDraft

logger = get_logger(__name__)


async def get(db: AsyncSession, claim_id: int) -> Claim:
    claim = await claim_repository.get_claim(db, claim_id)
    if claim is None:
        raise NotFoundError("Claim", claim_id)
    return claim


async def list_all(db: AsyncSession) -> list[Claim]:
    return await claim_repository.list_all(db)


async def list_for_owner(db: AsyncSession, person_id: int) -> list[Claim]:
    return await claim_repository.list_for_owner(db, person_id)


async def search(db: AsyncSession, q: str | None) -> tuple[ClaimQuery, list[Claim]]:
    """Interpret `q` and run the matching query. Results are newest first."""
    query = parse_query(q)
    if query.kind is ClaimQueryKind.DAY:
        claims = await claim_repository.find_by_day(db, query.start)
    elif query.kind is ClaimQueryKind.MONTH:
        claims = await claim_repository.find_by_date_range(db, query.start, query.end)
    elif query.kind is ClaimQueryKind.TEXT:
        claims = await claim_repository.search_by_text(db, query.text)
    else:
        claims = await claim_repository.list_all(db)
    return query, claims


async def search_for_owner(
    db: AsyncSession,
    person_id: int,
    q: str | None,
) -> tuple[ClaimQuery, list[Claim]]:
    """Same as `search`, restricted to claims owned by `person_id`."""
    query, claims = await search(db, q)
    owned = {claim.id for claim in await claim_repository.list_for_owner(db, person_id)}
    return query, [claim for claim in claims if claim.id in owned]


async def _resolve_person_id(
    db: AsyncSession,
    draft: ClaimDraft,
    policy_id: int | None,
    fallback_person_id: int | None,
) -> int | None:
    if policy_id is None:
        return draft.person_id if draft.person_id is not None else fallback_person_id

    policy = await policy_repository.get_policy(db, policy_id)
    if policy is None:
        raise NotFoundError("Policy", policy_id)
    if draft.person_id is not None and draft.person_id != policy.person_id:
        raise ValidationError(
            "Claim person does not match the policy's person",
            entity="Claim",
            entity_id=draft.id,
            details={"policy_id": policy_id, "person_id": draft.person_id},
        )
    return policy.person_id


async def save(db: AsyncSession, draft: ClaimDraft) -> tuple[Claim, bool]:
    """
    Create (no `draft.id`) or update a claim. Returns (claim, created).

    A new claim needs a policy. The stored person is always the policy's
    person; an update without a policy keeps the denormalized owner.
    """
    fields = draft.model_dump(include={"occurred_on", "description", "amount", "state"})

    if draft.id is None:
        if draft.policy_id is None:
            raise ValidationError("A new claim must reference a policy", entity="Claim")
        person_id = await _resolve_person_id(db, draft, draft.policy_id, None)
        claim = await claim_repository.create_claim(
            db, policy_id=draft.policy_id, person_id=person_id, **fields
        )
        logger.info("Claim created", claim_id=claim.id, policy_id=claim.policy_id, person_id=person_id)
        return claim, True

    claim = await get(db, draft.id)
    policy_id = draft.policy_id if draft.policy_id is not None else claim.policy_id
    person_id = await _resolve_person_id(db, draft, policy_id, claim.person_id)
    await claim_repository.update_claim(db, claim, policy_id=policy_id, person_id=person_id, **fields)
    logger.info("Claim updated", claim_id=claim.id, policy_id=policy_id, state=claim.state)
    return claim, False


async def delete(db: AsyncSession, claim_id: int) -> None:
    if not await claim_repository.delete_claim(db, claim_id):
        raise NotFoundError("Claim", claim_id)
    logger.info("Claim deleted", claim_id=claim_id)
