from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime


class MessageRequest(BaseModel):
    """Request model for sending a chat message"""
    message: str = Field(..., min_length=1, max_length=10000, description="The user's message")
    language: Optional[str] = Field(
        None,
        min_length=2,
        max_length=16,
        description="Reply language code; detected from the message when omitted",
    )

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message cannot be empty")
        return value

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "I have been feeling anxious about work lately.",
                "language": "en",
            }
        }
    )


class MessageResponse(BaseModel):
    """Response model for a chat turn"""
    response: str = Field(..., description="The assistant's reply")
    success: bool = Field(True, description="Always true when a reply is delivered")
    language: str = Field(..., description="Language code of the reply")
    fallback: bool = Field(False, description="True when a canned reply was used instead of a generated one")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "response": "I'm sorry work has been weighing on you. Would you like to try a short breathing exercise?",
                "success": True,
                "language": "en",
                "fallback": False,
            }
        }
    )


class HistoryMessage(BaseModel):
    """Stored chat message"""
    id: int = Field(..., description="Message identifier")
    role: str = Field(..., description="Role of the message sender (user, assistant)")
    content: str = Field(..., description="Content of the message")
    language: str = Field("en", description="Language code of the message")
    created_at: Optional[datetime] = Field(None, description="Timestamp when message was created")


class HistoryResponse(BaseModel):
    """Chronological chat history of the signed-in user"""
    messages: List[HistoryMessage] = Field(..., description="Messages, oldest first")


class ClearHistoryResponse(BaseModel):
    success: bool = True
    deleted: int = Field(..., description="Number of messages removed")


class ErrorResponse(BaseModel):
    """Error response model"""
    detail: str = Field(..., description="Error message")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"detail": "Could not save your message"}
        }
    )
