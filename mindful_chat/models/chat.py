from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Index,
)
from .base import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Message(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False, index=True)
    role = Column(String(16), nullable=False)  # user or assistant
    content = Column(Text, nullable=False)
    language = Column(String(16), nullable=False, default="en")
    # Assigned client side for sub-second precision; id breaks ties.
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        Index("idx_chat_messages_user_created", "user_id", "created_at"),
    )
