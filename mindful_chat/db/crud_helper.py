from mindful_chat.db import CRUDCapability
from mindful_chat.models.chat import Message


class ChatMessageCRUD(CRUDCapability[Message]):
    resource_db = Message


chat_message_crud = ChatMessageCRUD(Message)
