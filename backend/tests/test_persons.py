"""Person service: search and the cascading delete."""

from __future__ import annotations

import pytest

from agency.core.constants import BindingRole
from agency.core.errors import NotFoundError
from agency.repositories import accounts as account_repository
from agency.repositories import bindings as binding_repository
from agency.repositories import claims as claim_repository
from agency.services import persons as person_service
from agency.services import policies as policy_service
from agency.services import role_bindings


async def test_search_numeric_is_id_lookup(make_person, db):
    person = await make_person()
    await make_person("Petr", "Svoboda", phone=f"{person.id}{person.id}")

    assert [p.id for p in await person_service.search(db, str(person.id))] == [person.id]
    assert await person_service.search(db, "99999") == []


async def test_search_text_matches_name_city_and_phone(make_person, db):
    jana = await make_person("Jana", "Novakova", city="Brno")
    petr = await make_person("Petr", "Svoboda", city="Praha", phone="+420 777 123")
    await make_person("Karel", "Dvorak", city="Ostrava")

    assert [p.id for p in await person_service.search(db, "brno")] == [jana.id]
    assert [p.id for p in await person_service.search(db, "SVOB")] == [petr.id]
    assert [p.id for p in await person_service.search(db, "777 1")] == [petr.id]


async def test_search_treats_wildcards_literally(make_person, db):
    await make_person("Jana", "Novakova", city="Brno")
    under = await make_person("Petr", "Svoboda_Dvorak")

    assert await person_service.search(db, "%") == []
    assert await person_service.search(db, "n_v") == []
    assert [p.id for p in await person_service.search(db, "a_d")] == [under.id]


async def test_blank_search_lists_sorted_by_name(make_person, db):
    await make_person("Zdenek", "Zeman")
    await make_person("Alena", "Adamova")
    await make_person("Adam", "Adamova")

    names = [(p.last_name, p.first_name) for p in await person_service.search(db, " ")]

    assert names == [("Adamova", "Adam"), ("Adamova", "Alena"), ("Zeman", "Zdenek")]


async def test_detail_includes_originated_and_bound_policies(make_person, make_policy, db):
    jana = await make_person()
    petr = await make_person("Petr", "Svoboda")
    own = await make_policy(jana.id)
    held = await make_policy(petr.id, contract_holder_id=jana.id)
    await make_policy(petr.id)

    person, policies = await person_service.get_detail(db, jana.id)

    assert person.id == jana.id
    assert [p.id for p in policies] == [held.id, own.id]


async def test_delete_cascades_everything(make_person, make_policy, make_claim, db):
    jana = await make_person()
    petr = await make_person("Petr", "Svoboda")
    own = await make_policy(jana.id)
    petrs = await make_policy(petr.id)
    await role_bindings.add(db, petrs.id, jana.id, BindingRole.INSURED)
    await make_claim(own.id, jana.id)
    await make_claim(None, jana.id, description="orphaned")
    kept = await make_claim(petrs.id, petr.id)
    account = await account_repository.create_account(db, username="jana", password="secret", person_id=jana.id)

    summary = await person_service.delete(db, jana.id)

    assert summary.policies_removed == 1
    assert summary.bindings_removed == 3
    assert summary.claims_removed == 2
    assert summary.accounts_unlinked == 1
    with pytest.raises(NotFoundError):
        await person_service.get(db, jana.id)
    with pytest.raises(NotFoundError):
        await policy_service.get(db, own.id)
    assert await binding_repository.policy_ids_for_person(db, jana.id) == set()
    assert [c.id for c in await claim_repository.list_all(db)] == [kept.id]
    assert (await policy_service.get(db, petrs.id)).person_id == petr.id
    assert (await account_repository.get_account_by_id(db, account.id)).person_id is None


async def test_delete_missing_person(db):
    with pytest.raises(NotFoundError):
        await person_service.delete(db, 5)
