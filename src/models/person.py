"""Person (cast and crew) details."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class Person(Base, TimestampMixin):
    """Biographical details of an actor, director or writer."""

    __tablename__ = "persons"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    date_of_birth: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    place_of_birth: Mapped[str] = mapped_column(String(255), default="")
    poster_url: Mapped[str] = mapped_column(String(2000), default="")
    bio: Mapped[str] = mapped_column(Text, default="")

    def __repr__(self) -> str:
        return f"<Person(name={self.name})>"
