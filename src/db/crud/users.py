"""CRUD operations for users."""

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.errors import NotFoundError
from src.models.user import User


async def get_user(db: AsyncSession, username: str) -> User:
    """Get a user by name, case-insensitive."""
    result = await db.execute(
        select(User).where(func.lower(User.username) == username.lower())
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError(f"user {username} not found")
    return user


async def get_user_by_id(db: AsyncSession, user_id: str) -> User:
    """Get a user by ID."""
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"user {user_id} not found")
    return user


async def get_users(db: AsyncSession) -> Sequence[User]:
    """Get all users ordered by username."""
    result = await db.execute(select(User).order_by(User.username))
    return result.scalars().all()


async def upsert_user(db: AsyncSession, user: User) -> User:
    """Insert or update a user."""
    user = await db.merge(user)
    await db.flush()
    return user


async def delete_user(db: AsyncSession, user_id: str) -> None:
    """Delete a user and everything owned by it."""
    user = await get_user_by_id(db, user_id)
    await db.delete(user)
    await db.flush()