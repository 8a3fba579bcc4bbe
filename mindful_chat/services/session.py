import logging
from typing import Callable, List, Optional

from mindful_chat.errors import GenerationError, NotAuthenticatedError, PersistenceError
from mindful_chat.services.access import AccessPolicy
from mindful_chat.services.fallback import FallbackPolicy
from mindful_chat.services.generator import GeminiResponseGenerator
from mindful_chat.services.history import HistoryStore, format_transcript
from mindful_chat.services.language import detect_language
from mindful_chat.services.schema import (
    ChatMessage,
    ChatReply,
    MessageRole,
    ReplyStatus,
    RequestContext,
)

logger = logging.getLogger(__name__)


class SessionOrchestrator:
    """
    Runs one chat turn end to end.

    Anonymous turns are never stored. Authenticated turns store the user's
    message before anything else and the assistant's reply only when it was
    actually generated. A failed generation is always answered with a
    fallback reply; only losing the user's own message is fatal.
    """

    def __init__(
        self,
        history: HistoryStore,
        generator: GeminiResponseGenerator,
        fallback: FallbackPolicy,
        access: Optional[AccessPolicy] = None,
        detector: Callable[[str], str] = detect_language,
        context_limit: int = 10,
    ) -> None:
        self.history = history
        self.generator = generator
        self.fallback = fallback
        self.access = access or AccessPolicy()
        self.detector = detector
        self.context_limit = context_limit

    def reply(self, context: RequestContext, message: str, language: Optional[str] = None) -> ChatReply:
        language = language or self.detector(message)
        if not context.is_authenticated:
            return self._reply_anonymous(message, language)
        return self._reply_authenticated(context.user_id, message, language)

    def _reply_anonymous(self, message: str, language: str) -> ChatReply:
        try:
            text = self.generator.generate(message, "", language)
        except GenerationError as e:
            return self._fallback_reply(language, e)
        return ChatReply(text=text, language=language)

    def _reply_authenticated(self, user_id: str, message: str, language: str) -> ChatReply:
        self.access.check(user_id, self.history)

        # Raises PersistenceError: the user's own message must never be lost silently.
        saved = self.history.append(
            ChatMessage(user_id=user_id, role=MessageRole.USER, content=message, language=language)
        )

        transcript = self._history_context(user_id, exclude_id=saved.id)

        try:
            text = self.generator.generate(message, transcript, language)
        except GenerationError as e:
            # Canned text is kept out of history so it never becomes model context.
            return self._fallback_reply(language, e)

        try:
            self.history.append(
                ChatMessage(user_id=user_id, role=MessageRole.ASSISTANT, content=text, language=language)
            )
        except PersistenceError:
            logger.warning(f"Assistant reply for user {user_id} was not saved")
            return ChatReply(text=text, language=language, status=ReplyStatus.DEGRADED)

        return ChatReply(text=text, language=language, persisted=True)

    def _history_context(self, user_id: str, exclude_id: Optional[int]) -> str:
        # One extra row covers the message just stored, which is sent on its own.
        try:
            recent = self.history.chronological(user_id, self.context_limit + 1)
        except PersistenceError:
            logger.warning(f"Continuing without conversation context for user {user_id}")
            return ""
        prior = [msg for msg in recent if msg.id != exclude_id]
        return format_transcript(prior[-self.context_limit:])

    def _fallback_reply(self, language: str, error: Exception) -> ChatReply:
        logger.warning(f"Using fallback reply ({language}): {error}")
        return ChatReply(
            text=self.fallback.choose(language),
            language=language,
            fallback=True,
            status=ReplyStatus.DEGRADED,
        )

    def history_for(self, context: RequestContext, limit: int = 50) -> List[ChatMessage]:
        """Chronological history for display. Anonymous callers have none."""
        if not context.is_authenticated:
            return []
        return self.history.chronological(context.user_id, limit)

    def clear_history(self, context: RequestContext) -> int:
        if not context.is_authenticated:
            raise NotAuthenticatedError("User not authenticated")
        return self.history.delete_all(context.user_id)
