"""User and access token models."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.playlist import Playlist


class User(Base, TimestampMixin):
    """A user that can log in with a username and password."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password: Mapped[str] = mapped_column(String(255))
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_used: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Policy and configuration flags (admin, hidden, disabled, ...)
    properties: Mapped[dict] = mapped_column(JSON, default=dict)

    tokens: Mapped[list["AccessToken"]] = relationship(
        "AccessToken",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select",
    )
    playlists: Mapped[list["Playlist"]] = relationship(
        "Playlist",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select",
    )

    @property
    def is_admin(self) -> bool:
        return bool((self.properties or {}).get("IsAdministrator", False))

    @property
    def is_hidden(self) -> bool:
        return bool((self.properties or {}).get("IsHidden", False))

    @property
    def is_disabled(self) -> bool:
        return bool((self.properties or {}).get("IsDisabled", False))

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"


class AccessToken(Base):
    """Opaque access token bound to a user and one client device."""

    __tablename__ = "access_tokens"

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    device_id: Mapped[str] = mapped_column(String(255), default="", index=True)
    device_name: Mapped[str] = mapped_column(String(255), default="")
    application_name: Mapped[str] = mapped_column(String(255), default="")
    application_version: Mapped[str] = mapped_column(String(100), default="")
    remote_address: Mapped[str] = mapped_column(String(100), default="")
    created: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    last_used: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    user: Mapped["User"] = relationship("User", back_populates="tokens")

    def __repr__(self) -> str:
        return f"<AccessToken(user_id={self.user_id}, device_id={self.device_id})>"
