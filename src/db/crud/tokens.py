"""CRUD operations for access tokens."""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.errors import NotFoundError
from src.models.user import AccessToken


async def get_access_token(db: AsyncSession, token: str) -> AccessToken:
    """Look up an access token."""
    access_token = await db.get(AccessToken, token)
    if access_token is None:
        raise NotFoundError("access token not found")
    return access_token


async def get_access_token_by_device_id(
    db: AsyncSession,
    device_id: str,
    user_id: str | None = None,
) -> AccessToken:
    """Look up the token issued to a device, optionally scoped to one user."""
    if not device_id:
        raise NotFoundError("no device id provided")
    query = select(AccessToken).where(AccessToken.device_id == device_id)
    if user_id is not None:
        query = query.where(AccessToken.user_id == user_id)
    result = await db.execute(query.order_by(AccessToken.last_used.desc()).limit(1))
    access_token = result.scalar_one_or_none()
    if access_token is None:
        raise NotFoundError(f"no access token for device {device_id}")
    return access_token


async def get_access_tokens(db: AsyncSession, user_id: str) -> Sequence[AccessToken]:
    """Get all tokens of a user, most recently used first."""
    result = await db.execute(
        select(AccessToken)
        .where(AccessToken.user_id == user_id)
        .order_by(AccessToken.last_used.desc())
    )
    return result.scalars().all()


async def upsert_access_token(db: AsyncSession, token: AccessToken) -> AccessToken:
    """Insert or update an access token."""
    token = await db.merge(token)
    await db.flush()
    return token


async def delete_access_token(db: AsyncSession, token: str) -> None:
    """Revoke an access token."""
    access_token = await get_access_token(db, token)
    await db.delete(access_token)
    await db.flush()
