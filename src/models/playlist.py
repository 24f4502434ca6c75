"""User playlist model."""

from typing import TYPE_CHECKING

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.user import User


class Playlist(Base, TimestampMixin):
    """An ordered list of library item IDs owned by one user."""

    __tablename__ = "playlists"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(255))
    item_ids: Mapped[list] = mapped_column(JSON, default=list)

    user: Mapped["User"] = relationship("User", back_populates="playlists")

    def __repr__(self) -> str:
        return f"<Playlist(id={self.id}, name={self.name}, items={len(self.item_ids or [])})>"
