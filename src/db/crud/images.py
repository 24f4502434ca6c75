"""CRUD operations for uploaded images."""

from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.errors import NotFoundError
from src.models.image import Image


async def has_image(db: AsyncSession, owner_id: str, image_type: str) -> Image | None:
    """Return the stored image record if present, else None."""
    return await db.get(Image, (owner_id, image_type))


async def get_image(db: AsyncSession, owner_id: str, image_type: str) -> Image:
    """Get a stored image."""
    image = await db.get(Image, (owner_id, image_type))
    if image is None:
        raise NotFoundError(f"no {image_type} image for {owner_id}")
    return image


async def store_image(
    db: AsyncSession,
    owner_id: str,
    image_type: str,
    mime_type: str,
    etag: str,
    data: bytes,
) -> Image:
    """Store or replace an image."""
    image = await db.get(Image, (owner_id, image_type))
    if image is None:
        image = Image(owner_id=owner_id, type=image_type)
        db.add(image)
    image.mime_type = mime_type
    image.etag = etag
    image.size = len(data)
    image.data = data
    image.updated = datetime.now(UTC)
    await db.flush()
    return image


async def delete_image(db: AsyncSession, owner_id: str, image_type: str) -> None:
    """Delete a stored image."""
    image = await get_image(db, owner_id, image_type)
    await db.delete(image)
    await db.flush()
