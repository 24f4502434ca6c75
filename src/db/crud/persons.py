"""CRUD operations for person details."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.errors import NotFoundError
from src.models.person import Person
from src.utils.idhash import id_hash


async def get_person_by_name(db: AsyncSession, name: str, user_id: str) -> Person:
    """Get person details by name, case-insensitive.

    user_id is accepted for per-user visibility rules; all users currently
    share one person table.
    """
    result = await db.execute(
        select(Person).where(func.lower(Person.name) == name.lower()).limit(1)
    )
    person = result.scalar_one_or_none()
    if person is None:
        raise NotFoundError(f"person {name} not found")
    return person


async def upsert_person(db: AsyncSession, person: Person) -> Person:
    """Insert or update person details. The ID is derived from the name."""
    if not person.id:
        person.id = id_hash(person.name)
    person = await db.merge(person)
    await db.flush()
    return person
