"""
Authorization resolver — who may see or change which record.

Two tiers:
    privileged caller (ROLE_ADMIN)  -> everything
    self-service caller (ROLE_USER) -> only data reachable from the
                                       person linked to the account

Ownership is transitive: the account owns its person, every policy the
person is bound to (either role), and every claim whose owning person
is that person. "Edit" is the same predicate as "see".

Every predicate only reads and never raises for unknown ids (they are
simply not visible). A caller without a linked person owns nothing.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from agency.db.models.account import Account
from agency.repositories import bindings as binding_repository
from agency.repositories import claims as claim_repository
from agency.repositories import policies as policy_repository
from agency.services.drafts import ClaimDraft


@dataclass(frozen=True)
class Caller:
    """Identity resolved for one request."""

    account_id: int | None
    username: str
    privileged: bool
    person_id: int | None = None

    @classmethod
    def from_account(cls, account: Account) -> "Caller":
        return cls(
            account_id=account.id,
            username=account.username,
            privileged=account.is_admin,
            person_id=account.person_id,
        )


# ─── Person ───────────────────────────────────
def can_see_person(caller: Caller, person_id: int) -> bool:
    if caller.privileged:
        return True
    return caller.person_id is not None and caller.person_id == person_id


def can_edit_person(caller: Caller, person_id: int) -> bool:
    return can_see_person(caller, person_id)


# ─── Policy ───────────────────────────────────
async def can_see_policy(db: AsyncSession, caller: Caller, policy_id: int) -> bool:
    if caller.privileged:
        return True
    if caller.person_id is None:
        return False
    return await binding_repository.exists_member(db, policy_id, caller.person_id)


async def can_edit_policy(db: AsyncSession, caller: Caller, policy_id: int) -> bool:
    return await can_see_policy(db, caller, policy_id)


# ─── Claim ────────────────────────────────────
async def can_see_claim(db: AsyncSession, caller: Caller, claim_id: int) -> bool:
    if caller.privileged:
        return True
    if caller.person_id is None:
        return False
    found, owner_id = await claim_repository.owner_person_id(db, claim_id)
    return found and owner_id == caller.person_id


async def can_edit_claim(db: AsyncSession, caller: Caller, claim_id: int) -> bool:
    return await can_see_claim(db, caller, claim_id)


async def draft_owner_id(db: AsyncSession, draft: ClaimDraft) -> int | None:
    """Owner of a claim draft: its policy's person, else the draft's person_id."""
    if draft.policy_id is not None:
        policy = await policy_repository.get_policy(db, draft.policy_id)
        if policy is not None:
            return policy.person_id
    return draft.person_id


async def can_save_claim(db: AsyncSession, caller: Caller, draft: ClaimDraft) -> bool:
    """Create and update go through this one check."""
    if caller.privileged:
        return True
    if caller.person_id is None:
        return False
    return await draft_owner_id(db, draft) == caller.person_id
