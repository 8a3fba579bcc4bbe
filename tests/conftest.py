import os

# Settings are read once on import, so the environment must be in place first.
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("AUTH_JWT_SECRET", "test-jwt-secret")

import random  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.exc import OperationalError  # noqa: E402

from mindful_chat.db import init_db  # noqa: E402
from mindful_chat.db.crud_helper import ChatMessageCRUD  # noqa: E402
from mindful_chat.errors import GenerationError  # noqa: E402
from mindful_chat.models.chat import Message  # noqa: E402
from mindful_chat.services.fallback import FallbackPolicy  # noqa: E402
from mindful_chat.services.history import HistoryStore  # noqa: E402


class StubGenerator:
    """Stands in for the Gemini client and records every call."""

    def __init__(self, reply: str = "I'm here for you.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate(self, user_message, history_context="", language="en"):
        self.calls.append(
            {"message": user_message, "history": history_context, "language": language}
        )
        if self.error is not None:
            raise self.error
        return self.reply


class BrokenCRUD(ChatMessageCRUD):
    """CRUD helper whose database is unreachable."""

    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("could not connect to server"))

    create_resource = _fail
    list_resource = _fail
    delete_resources = _fail


@pytest.fixture
def db_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'chat_history.db'}"
    init_db(url)
    return url


@pytest.fixture
def history_store(db_url):
    return HistoryStore(ChatMessageCRUD(Message, db_url=db_url))


@pytest.fixture
def broken_store():
    return HistoryStore(BrokenCRUD(Message, db_url="sqlite://"))


@pytest.fixture
def fallback_policy():
    return FallbackPolicy(rng=random.Random(7))


@pytest.fixture
def working_generator():
    return StubGenerator()


@pytest.fixture
def failing_generator():
    return StubGenerator(error=GenerationError("Gemini API error: 503"))
