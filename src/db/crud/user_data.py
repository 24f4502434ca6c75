"""CRUD operations for per-user item play state."""

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.errors import NotFoundError
from src.models.user_data import UserData


async def get_user_data(db: AsyncSession, user_id: str, item_id: str) -> UserData:
    """Get the play state of an item for a user."""
    data = await db.get(UserData, (user_id, item_id))
    if data is None:
        raise NotFoundError(f"no user data for item {item_id}")
    return data


async def update_user_data(
    db: AsyncSession,
    user_id: str,
    item_id: str,
    *,
    position: int | None = None,
    played_percentage: int | None = None,
    played: bool | None = None,
    favorite: bool | None = None,
    play_count: int | None = None,
) -> UserData:
    """Upsert the play state of an item, stamping it with the current time.

    Fields left as None keep their stored value.
    """
    data = await db.get(UserData, (user_id, item_id))
    if data is None:
        data = UserData(
            user_id=user_id,
            item_id=item_id,
            position=0,
            played_percentage=0,
            play_count=0,
            played=False,
            favorite=False,
        )
        db.add(data)

    if position is not None:
        data.position = position
    if played_percentage is not None:
        data.played_percentage = played_percentage
    if played is not None:
        data.played = played
    if favorite is not None:
        data.favorite = favorite
    if play_count is not None:
        data.play_count = play_count
    data.timestamp = datetime.now(UTC)

    await db.flush()
    return data


async def get_favorites(db: AsyncSession, user_id: str) -> list[str]:
    """Get IDs of all favorite items of a user, most recently changed first."""
    result = await db.execute(
        select(UserData.item_id)
        .where(UserData.user_id == user_id, UserData.favorite.is_(True))
        .order_by(UserData.timestamp.desc())
    )
    return list(result.scalars().all())


async def get_recently_watched(
    db: AsyncSession,
    user_id: str,
    limit: int,
    played_only: bool,
) -> list[str]:
    """Get item IDs ordered by most recent play state update.

    With played_only, returns fully played items (input for next-up).
    Otherwise returns unplayed items with a stored position (input for
    resume).
    """
    query = select(UserData.item_id).where(UserData.user_id == user_id)
    if played_only:
        query = query.where(UserData.played.is_(True))
    else:
        query = query.where(
            UserData.played.is_(False),
            UserData.position > 0,
        )
    result = await db.execute(
        query.order_by(UserData.timestamp.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def get_all_user_data(db: AsyncSession, user_id: str) -> dict[str, UserData]:
    """Get every play state record of a user, keyed by item ID."""
    result = await db.execute(select(UserData).where(UserData.user_id == user_id))
    return {data.item_id: data for data in result.scalars().all()}
