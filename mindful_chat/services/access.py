import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterable, Optional

from mindful_chat.errors import PersistenceError, UsageLimitExceeded
from mindful_chat.services.schema import MessageRole

if TYPE_CHECKING:
    from mindful_chat.services.history import HistoryStore

logger = logging.getLogger(__name__)


class AccessPolicy:
    """
    Usage limits and premium gating for the chat assistant.

    Both switches are off by default: nobody is limited and every user is
    treated as premium. With ``premium_gating`` on only ``premium_user_ids``
    are premium, and with ``enforce_limits`` on everybody else may send at
    most ``daily_message_limit`` messages per UTC day.
    """

    def __init__(
        self,
        enforce_limits: bool = False,
        premium_gating: bool = False,
        daily_message_limit: int = 10,
        premium_user_ids: Optional[Iterable[str]] = None,
    ) -> None:
        self.enforce_limits = enforce_limits
        self.premium_gating = premium_gating
        self.daily_message_limit = daily_message_limit
        self.premium_user_ids = frozenset(premium_user_ids or ())

    def is_premium(self, user_id: Optional[str]) -> bool:
        if not self.premium_gating:
            return True
        return user_id is not None and user_id in self.premium_user_ids

    def check(self, user_id: Optional[str], history: "HistoryStore") -> None:
        # Anonymous conversations live only on the client, there is nothing to count.
        if not self.enforce_limits or user_id is None or self.is_premium(user_id):
            return

        try:
            recent = history.list_messages(user_id, self.daily_message_limit * 2)
        except PersistenceError as e:
            logger.warning(f"Skipping usage limit check for user {user_id}: {e}")
            return

        today = datetime.now(timezone.utc).date()
        sent_today = sum(
            1
            for msg in recent
            if msg.role == MessageRole.USER
            and msg.created_at is not None
            and _as_utc(msg.created_at).date() == today
        )
        if sent_today >= self.daily_message_limit:
            logger.info(f"User {user_id} reached the daily limit of {self.daily_message_limit} messages")
            raise UsageLimitExceeded(user_id, self.daily_message_limit)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they are stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
