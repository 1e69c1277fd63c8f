"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBMessage(Base):
    """A chat message. Game messages keep their state as marked-up JSON in `text`."""

    __tablename__ = "messages"
    id: Mapped[str] = mapped_column(primary_key=True)
    chat_id: Mapped[Optional[str]] = mapped_column(index=True)
    sender_id: Mapped[str]
    text: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
