import logging
from typing import Iterable, List

from sqlalchemy.exc import SQLAlchemyError

from mindful_chat.db.crud_helper import ChatMessageCRUD, chat_message_crud
from mindful_chat.errors import PersistenceError
from mindful_chat.models.chat import Message
from mindful_chat.services.schema import ChatMessage, MessageRole

logger = logging.getLogger(__name__)

ROLE_LABELS = {
    MessageRole.USER: "User",
    MessageRole.ASSISTANT: "Assistant",
}


class HistoryStore:
    """
    Append-only per-user chat log on top of the ``chat_messages`` table.

    Every storage failure surfaces as ``PersistenceError``; callers decide
    whether it is fatal for their request.
    """

    def __init__(self, crud: ChatMessageCRUD = chat_message_crud) -> None:
        self.crud = crud

    def append(self, message: ChatMessage) -> ChatMessage:
        data = message.model_dump(exclude={"id", "created_at"}, exclude_none=True)
        data["role"] = message.role.value
        try:
            row = self.crud.create_resource(data)
        except SQLAlchemyError as e:
            logger.error(f"Error saving chat message: {e}", exc_info=True)
            raise PersistenceError("Could not save chat message") from e
        return ChatMessage(**row)

    def list_messages(self, user_id: str, limit: int) -> List[ChatMessage]:
        """
        Return up to ``limit`` of the user's messages, most recent first.
        """
        try:
            rows = self.crud.list_resource(
                where=[Message.user_id == user_id],
                order_by=["-created_at", "-id"],
                limit=limit,
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching chat history: {e}", exc_info=True)
            raise PersistenceError("Could not load chat history") from e
        return [ChatMessage(**row) for row in rows]

    def chronological(self, user_id: str, limit: int) -> List[ChatMessage]:
        """Most recent ``limit`` messages, oldest first."""
        messages = self.list_messages(user_id, limit)
        messages.reverse()
        return messages

    def delete_all(self, user_id: str) -> int:
        try:
            deleted = self.crud.delete_resources(where=[Message.user_id == user_id])
        except SQLAlchemyError as e:
            logger.error(f"Error clearing chat history: {e}", exc_info=True)
            raise PersistenceError("Could not clear chat history") from e
        logger.info(f"Cleared {deleted} chat messages for user {user_id}")
        return deleted


def format_transcript(messages: Iterable[ChatMessage]) -> str:
    return "\n".join(
        f"{ROLE_LABELS[msg.role]}: {msg.content}" for msg in messages
    )
