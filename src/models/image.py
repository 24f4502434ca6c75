"""Uploaded image blobs."""

from datetime import datetime

from sqlalchemy import DateTime, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base


class Image(Base):
    """An uploaded image, keyed by owner (user or collection) and image type."""

    __tablename__ = "images"

    owner_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    type: Mapped[str] = mapped_column(String(50), primary_key=True)
    mime_type: Mapped[str] = mapped_column(String(100))
    etag: Mapped[str] = mapped_column(String(64))
    size: Mapped[int] = mapped_column(default=0)
    updated: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    data: Mapped[bytes] = mapped_column(LargeBinary)

    def __repr__(self) -> str:
        return f"<Image(owner_id={self.owner_id}, type={self.type}, size={self.size})>"
