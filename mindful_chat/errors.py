"""
Exceptions raised by the conversational session service.
"""


class ChatServiceError(Exception):
    """Base exception for chat service errors."""
    pass


class PersistenceError(ChatServiceError):
    """The history store could not read or write chat messages."""
    pass


class GenerationError(ChatServiceError):
    """The generative API failed or returned no usable reply."""
    pass


class UsageLimitExceeded(ChatServiceError):
    """The user has used up today's message allowance."""

    def __init__(self, user_id: str, limit: int) -> None:
        super().__init__(f"Daily message limit of {limit} reached")
        self.user_id = user_id
        self.limit = limit


class NotAuthenticatedError(ChatServiceError):
    """The operation requires a signed-in user."""
    pass
