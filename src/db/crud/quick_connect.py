"""CRUD operations for QuickConnect codes."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.errors import NotFoundError
from src.models.quick_connect import QuickConnectCode


async def get_quick_connect_code_by_secret(db: AsyncSession, secret: str) -> QuickConnectCode:
    """Get a pairing request by its secret."""
    code = await db.get(QuickConnectCode, secret)
    if code is None:
        raise NotFoundError("quick connect secret not found")
    return code


async def get_quick_connect_code_by_code(db: AsyncSession, code: str) -> QuickConnectCode:
    """Get the most recent pairing request with the given code."""
    result = await db.execute(
        select(QuickConnectCode)
        .where(QuickConnectCode.code == code)
        .order_by(QuickConnectCode.created.desc())
        .limit(1)
    )
    entry = result.scalar_one_or_none()
    if entry is None:
        raise NotFoundError("quick connect code not found")
    return entry


async def upsert_quick_connect_code(db: AsyncSession, code: QuickConnectCode) -> QuickConnectCode:
    """Insert or update a pairing request."""
    code = await db.merge(code)
    await db.flush()
    return code
