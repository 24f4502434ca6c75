"""Per-user play state of library items."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base


class UserData(Base):
    """Play position, played and favorite state of one item for one user.

    Item IDs are stored without their wire prefix.
    """

    __tablename__ = "user_data"
    __table_args__ = (
        Index("ix_user_data_user_timestamp", "user_id", "timestamp"),
    )

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    item_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    position: Mapped[int] = mapped_column(default=0)  # seconds
    played_percentage: Mapped[int] = mapped_column(default=0)
    play_count: Mapped[int] = mapped_column(default=0)
    played: Mapped[bool] = mapped_column(default=False)
    favorite: Mapped[bool] = mapped_column(default=False)
    timestamp: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<UserData(user_id={self.user_id}, item_id={self.item_id}, played={self.played})>"
