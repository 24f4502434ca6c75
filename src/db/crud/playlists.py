"""CRUD operations for user playlists."""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.errors import ConflictError, NotFoundError
from src.models.playlist import Playlist
from src.utils.idhash import new_random_id


async def get_playlists(db: AsyncSession, user_id: str) -> Sequence[Playlist]:
    """Get all playlists of a user in creation order."""
    result = await db.execute(
        select(Playlist)
        .where(Playlist.user_id == user_id)
        .order_by(Playlist.created_at, Playlist.id)
    )
    return result.scalars().all()


async def get_playlist(db: AsyncSession, user_id: str, playlist_id: str) -> Playlist:
    """Get one playlist owned by a user."""
    playlist = await db.get(Playlist, playlist_id)
    if playlist is None or playlist.user_id != user_id:
        raise NotFoundError(f"playlist {playlist_id} not found")
    return playlist


async def create_playlist(
    db: AsyncSession,
    user_id: str,
    name: str,
    item_ids: list[str] | None = None,
) -> Playlist:
    """Create a playlist, raising ConflictError if the user already has one with that name."""
    existing = await db.execute(
        select(Playlist.id).where(Playlist.user_id == user_id, Playlist.name == name)
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError(f"playlist {name} already exists")

    playlist = Playlist(
        id=new_random_id(),
        user_id=user_id,
        name=name,
        item_ids=_dedupe(item_ids or []),
    )
    db.add(playlist)
    await db.flush()
    return playlist


async def rename_playlist(
    db: AsyncSession, user_id: str, playlist_id: str, name: str
) -> Playlist:
    """Change the name of a playlist."""
    playlist = await get_playlist(db, user_id, playlist_id)
    playlist.name = name
    await db.flush()
    return playlist


async def set_playlist_items(
    db: AsyncSession, user_id: str, playlist_id: str, item_ids: list[str]
) -> Playlist:
    """Replace the contents of a playlist."""
    playlist = await get_playlist(db, user_id, playlist_id)
    playlist.item_ids = _dedupe(item_ids)
    await db.flush()
    return playlist


async def add_items_to_playlist(
    db: AsyncSession, user_id: str, playlist_id: str, item_ids: list[str]
) -> Playlist:
    """Append items to a playlist. Items already present move to the end."""
    playlist = await get_playlist(db, user_id, playlist_id)
    additions = _dedupe(item_ids)
    kept = [i for i in playlist.item_ids or [] if i not in additions]
    # Reassign so the JSON column is flagged as modified
    playlist.item_ids = kept + additions
    await db.flush()
    return playlist


async def delete_items_from_playlist(
    db: AsyncSession, user_id: str, playlist_id: str, item_ids: list[str]
) -> Playlist:
    """Remove items from a playlist."""
    playlist = await get_playlist(db, user_id, playlist_id)
    remove = set(item_ids)
    playlist.item_ids = [i for i in playlist.item_ids or [] if i not in remove]
    await db.flush()
    return playlist


async def move_playlist_item(
    db: AsyncSession, user_id: str, playlist_id: str, item_id: str, new_index: int
) -> Playlist:
    """Move one item of a playlist to a new position, clamped to the list bounds."""
    playlist = await get_playlist(db, user_id, playlist_id)
    items = list(playlist.item_ids or [])
    if item_id not in items:
        raise NotFoundError(f"item {item_id} not in playlist")
    items.remove(item_id)
    new_index = max(0, min(new_index, len(items)))
    items.insert(new_index, item_id)
    playlist.item_ids = items
    await db.flush()
    return playlist


def _dedupe(item_ids: list[str]) -> list[str]:
    """Drop empty and repeated IDs, keeping first occurrence order."""
    return list(dict.fromkeys(i for i in item_ids if i))
