"""Person repository — data access for the persons table."""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from agency.db.models.person import Person

PERSON_FIELDS = {
    "first_name",
    "last_name",
    "phone",
    "age",
    "email",
    "gender",
    "city",
    "street",
    "house_number",
    "postal_code",
}


async def create_person(db: AsyncSession, **fields: Any) -> Person:
    """Insert a person built from the known columns in `fields`."""
    person = Person(**{k: v for k, v in fields.items() if k in PERSON_FIELDS})
    db.add(person)
    await db.flush()
    return person


async def get_person(db: AsyncSession, person_id: int) -> Person | None:
    return await db.get(Person, person_id)


async def list_persons(db: AsyncSession) -> list[Person]:
    """All persons ordered by last name, first name, id."""
    stmt = select(Person).order_by(Person.last_name, Person.first_name, Person.id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_person(db: AsyncSession, person: Person, **fields: Any) -> Person:
    """Overwrite the given columns on an already loaded person."""
    for key, value in fields.items():
        if key in PERSON_FIELDS:
            setattr(person, key, value)
    await db.flush()
    return person


async def delete_person(db: AsyncSession, person_id: int) -> int:
    """Hard-delete the person row. Returns affected rows."""
    result = await db.execute(delete(Person).where(Person.id == person_id))
    await db.flush()
    return result.rowcount or 0


async def count_persons(db: AsyncSession) -> int:
    return await db.scalar(select(func.count()).select_from(Person)) or 0


async def search_persons(db: AsyncSession, q: str) -> list[Person]:
    """Case-insensitive substring match on first/last name, city or phone."""
    needle = q.lower()
    stmt = (
        select(Person)
        .where(
            or_(
                func.lower(Person.first_name).contains(needle, autoescape=True),
                func.lower(Person.last_name).contains(needle, autoescape=True),
                func.lower(Person.city).contains(needle, autoescape=True),
                Person.phone.contains(needle, autoescape=True),
            )
        )
        .order_by(Person.last_name, Person.first_name, Person.id)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
