import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class MessageRole(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ReplyStatus(str, enum.Enum):
    SUCCESS = "success"
    DEGRADED = "degraded"


class ChatMessage(BaseModel):
    """A single stored chat turn. Records are never edited after creation."""
    id: Optional[int] = None
    user_id: str
    role: MessageRole
    content: str = Field(..., min_length=1)
    language: str = "en"
    created_at: Optional[datetime] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content must not be blank")
        return value


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller for a single request."""
    user_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


@dataclass(frozen=True)
class ChatReply:
    text: str
    language: str
    fallback: bool = False
    status: ReplyStatus = ReplyStatus.SUCCESS
    persisted: bool = False
