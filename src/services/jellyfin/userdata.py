"""Played, position and favorite state of items per user."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.constants import DEFAULT_DURATION_SECONDS, PLAYED_THRESHOLD_PERCENT, TICKS_PER_SECOND
from src.db import crud
from src.db.errors import NotFoundError
from src.models.user_data import UserData

logger = logging.getLogger(__name__)


def compute_play_state(
    position_ticks: int, duration_seconds: int, mark_played: bool
) -> tuple[int, int, bool]:
    """Turn a reported playback position into (position, percentage, played).

    An item counts as played when explicitly marked, or when playback got
    past 98% of its duration. Played items are reset to the start.
    """
    duration = duration_seconds or DEFAULT_DURATION_SECONDS
    position = max(0, position_ticks // TICKS_PER_SECOND)
    percentage = 100 * position // duration
    if mark_played or percentage >= PLAYED_THRESHOLD_PERCENT:
        return 0, 0, True
    return position, percentage, False


async def update_play_state(
    db: AsyncSession,
    user_id: str,
    item_id: str,
    position_ticks: int,
    duration_seconds: int,
    mark_played: bool = False,
) -> UserData:
    """Record a playback event for a raw item ID.

    PlayCount goes up each time the item moves from unplayed to played.
    """
    position, percentage, played = compute_play_state(
        position_ticks, duration_seconds, mark_played
    )
    play_count = None
    if played:
        try:
            current = await crud.get_user_data(db, user_id, item_id)
            if not current.played:
                play_count = current.play_count + 1
        except NotFoundError:
            play_count = 1

    logger.debug(
        f"Play state user={user_id} item={item_id} position={position}s "
        f"percentage={percentage} played={played}"
    )
    return await crud.update_user_data(
        db,
        user_id,
        item_id,
        position=position,
        played_percentage=percentage,
        played=played,
        play_count=play_count,
    )


async def set_played(
    db: AsyncSession, user_id: str, item_id: str, played: bool
) -> UserData:
    """Mark an item played or unplayed. Both reset the playback position."""
    if played:
        return await update_play_state(db, user_id, item_id, 0, 0, mark_played=True)
    return await crud.update_user_data(
        db, user_id, item_id, position=0, played_percentage=0, played=False
    )


async def set_favorite(
    db: AsyncSession, user_id: str, item_id: str, favorite: bool
) -> UserData:
    return await crud.update_user_data(db, user_id, item_id, favorite=favorite)
