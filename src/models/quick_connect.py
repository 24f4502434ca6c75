"""QuickConnect pairing codes."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base


class QuickConnectCode(Base):
    """A pending or authorized device pairing request."""

    __tablename__ = "quick_connect_codes"

    secret: Mapped[str] = mapped_column(String(64), primary_key=True)
    code: Mapped[str] = mapped_column(String(16), index=True)
    user_id: Mapped[str] = mapped_column(String(32), default="")
    device_id: Mapped[str] = mapped_column(String(255), default="")
    device_name: Mapped[str] = mapped_column(String(255), default="")
    application_name: Mapped[str] = mapped_column(String(255), default="")
    application_version: Mapped[str] = mapped_column(String(100), default="")
    authorized: Mapped[bool] = mapped_column(default=False)
    created: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<QuickConnectCode(code={self.code}, authorized={self.authorized})>"
