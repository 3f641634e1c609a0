"""Policy lifecycle: create, edit, delete ordering and rollback."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from agency.core.constants import BindingRole
from agency.core.errors import NotFoundError
from agency.repositories import claims as claim_repository
from agency.services import persons as person_service
from agency.services import policies as policy_service
from agency.services import role_bindings
from agency.services.drafts import PolicyDraft


async def test_create_requires_existing_person_and_holder(make_person, policy_draft, db):
    person = await make_person()

    with pytest.raises(NotFoundError):
        await policy_service.create_for(db, 9999, policy_draft())
    with pytest.raises(NotFoundError):
        await policy_service.create_for(db, person.id, policy_draft(), contract_holder_id=9999)

    assert await policy_service.list_policies(db) == []


async def test_create_with_separate_holder(make_person, make_policy, db):
    insured = await make_person()
    holder = await make_person("Petr", "Svoboda")

    policy = await make_policy(insured.id, contract_holder_id=holder.id)

    assert policy.person_id == insured.id
    assert await role_bindings.person_ids_with_role(db, policy.id, BindingRole.INSURED) == {insured.id}
    assert await role_bindings.person_ids_with_role(db, policy.id, BindingRole.CONTRACT_HOLDER) == {holder.id}


def test_draft_rejects_inverted_interval():
    with pytest.raises(PydanticValidationError):
        PolicyDraft(
            product_name="Travel",
            coverage_amount=Decimal("10.00"),
            valid_from=date(2026, 5, 1),
            valid_to=date(2026, 4, 1),
        )


async def test_edit_keeps_person_when_draft_omits_it(make_person, make_policy, policy_draft, db):
    person = await make_person()
    policy = await make_policy(person.id)

    edited = await policy_service.save_edit(
        db, policy.id, policy_draft(product_name="Car insurance", coverage_amount=Decimal("5.00"))
    )

    assert edited.person_id == person.id
    assert edited.product_name == "Car insurance"
    assert edited.coverage_amount == Decimal("5.00")


async def test_edit_moving_person_carries_claims(make_person, make_policy, make_claim, policy_draft, db):
    jana = await make_person()
    petr = await make_person("Petr", "Svoboda")
    policy = await make_policy(jana.id)
    claim = await make_claim(policy.id, jana.id)

    await policy_service.save_edit(db, policy.id, policy_draft(person_id=petr.id))
    await db.refresh(claim)

    assert claim.person_id == petr.id == policy.person_id

    await person_service.delete(db, jana.id)

    assert [c.id for c in await claim_repository.list_for_policy(db, policy.id)] == [claim.id]


async def test_edit_with_holder_replaces_it(make_person, make_policy, policy_draft, db):
    person = await make_person()
    new_holder = await make_person("Petr", "Svoboda")
    policy = await make_policy(person.id)

    await policy_service.save_edit(db, policy.id, policy_draft(), contract_holder_id=new_holder.id)

    assert await role_bindings.person_ids_with_role(db, policy.id, BindingRole.CONTRACT_HOLDER) == {
        new_holder.id
    }
    assert await role_bindings.person_ids_with_role(db, policy.id, BindingRole.INSURED) == {person.id}


async def test_edit_missing_policy(policy_draft, db):
    with pytest.raises(NotFoundError):
        await policy_service.save_edit(db, 404, policy_draft())


async def test_delete_removes_bindings_claims_and_policy(make_person, make_policy, make_claim, db):
    person = await make_person()
    policy = await make_policy(person.id)
    await make_claim(policy.id, person.id)
    await make_claim(policy.id, person.id, description="Second")

    summary = await policy_service.delete(db, policy.id)

    assert (summary.bindings_removed, summary.claims_removed) == (2, 2)
    assert await role_bindings.bindings_for(db, policy.id) == []
    assert await claim_repository.list_for_policy(db, policy.id) == []
    with pytest.raises(NotFoundError):
        await policy_service.get(db, policy.id)


async def test_delete_missing_policy(db):
    with pytest.raises(NotFoundError):
        await policy_service.delete(db, 77)


async def test_delete_rolls_back_when_a_step_fails(make_person, make_policy, make_claim, db, monkeypatch):
    person = await make_person()
    policy = await make_policy(person.id)
    await make_claim(policy.id, person.id)

    async def _fail(*args, **kwargs):
        raise RuntimeError("claims table locked")

    monkeypatch.setattr(claim_repository, "delete_for_policy", _fail)

    with pytest.raises(RuntimeError):
        await policy_service.delete(db, policy.id)

    monkeypatch.undo()
    assert len(await role_bindings.bindings_for(db, policy.id)) == 2
    assert len(await claim_repository.list_for_policy(db, policy.id)) == 1
    assert (await policy_service.get(db, policy.id)).id == policy.id


async def test_detail_lists_participants_and_claims(make_person, make_policy, make_claim, db):
    person = await make_person()
    policy = await make_policy(person.id)
    await make_claim(policy.id, person.id, occurred_on=date(2026, 1, 1), description="old")
    await make_claim(policy.id, person.id, occurred_on=date(2026, 6, 1), description="new")

    detail = await policy_service.get_detail(db, policy.id)

    assert detail.policy.id == policy.id
    assert len(detail.participants) == 2
    assert [c.description for c in detail.claims] == ["new", "old"]


async def test_list_and_search(make_person, make_policy, db):
    person = await make_person()
    home = await make_policy(person.id, product_name="Home insurance")
    car = await make_policy(person.id, product_name="Car insurance")

    assert [p.id for p in await policy_service.list_policies(db)] == [car.id, home.id]
    assert [p.id for p in await policy_service.list_policies(db, "home")] == [home.id]
    assert [p.id for p in await policy_service.list_policies(db, "   ")] == [car.id, home.id]
    assert await policy_service.list_policies(db, "%") == []
    assert await policy_service.list_policies(db, "car_") == []


async def test_list_for_person_covers_any_role(make_person, make_policy, db):
    insured = await make_person()
    holder = await make_person("Petr", "Svoboda")
    policy = await make_policy(insured.id, contract_holder_id=holder.id)

    assert [p.id for p in await policy_service.list_for_person(db, holder.id)] == [policy.id]
    assert [p.id for p in await policy_service.list_for_person(db, insured.id)] == [policy.id]
