import pytest
from conftest import StubGenerator
from mindful_chat.errors import UsageLimitExceeded
from mindful_chat.services.access import AccessPolicy
from mindful_chat.services.schema import ChatMessage, MessageRole, RequestContext
from mindful_chat.services.session import SessionOrchestrator


def send(history_store, user_id, count):
    for i in range(count):
        history_store.append(
            ChatMessage(user_id=user_id, role=MessageRole.USER, content=f"message {i}")
        )
        history_store.append(
            ChatMessage(user_id=user_id, role=MessageRole.ASSISTANT, content=f"reply {i}")
        )


def test_everyone_is_premium_by_default():
    policy = AccessPolicy()
    assert policy.is_premium("user-1")
    assert policy.is_premium(None)


def test_premium_gating_uses_configured_ids():
    policy = AccessPolicy(premium_gating=True, premium_user_ids=["paid-user"])
    assert policy.is_premium("paid-user")
    assert not policy.is_premium("free-user")
    assert not policy.is_premium(None)


def test_limits_off_by_default(history_store):
    send(history_store, "user-1", 20)
    AccessPolicy().check("user-1", history_store)


def test_limits_do_not_apply_while_everyone_is_premium(history_store):
    send(history_store, "user-1", 5)
    AccessPolicy(enforce_limits=True, daily_message_limit=3).check("user-1", history_store)


def test_free_user_hits_daily_limit(history_store):
    policy = AccessPolicy(enforce_limits=True, premium_gating=True, daily_message_limit=3)
    send(history_store, "user-1", 2)
    policy.check("user-1", history_store)

    send(history_store, "user-1", 1)
    with pytest.raises(UsageLimitExceeded) as exc_info:
        policy.check("user-1", history_store)
    assert exc_info.value.limit == 3


def test_premium_user_is_not_limited(history_store):
    policy = AccessPolicy(
        enforce_limits=True,
        premium_gating=True,
        daily_message_limit=1,
        premium_user_ids=["user-1"],
    )
    send(history_store, "user-1", 5)
    policy.check("user-1", history_store)


def test_anonymous_is_not_limited(broken_store):
    policy = AccessPolicy(enforce_limits=True, premium_gating=True, daily_message_limit=1)
    policy.check(None, broken_store)


def test_limit_check_tolerates_read_failure(broken_store):
    policy = AccessPolicy(enforce_limits=True, premium_gating=True, daily_message_limit=1)
    policy.check("user-1", broken_store)


def test_limited_user_message_is_not_stored(history_store, fallback_policy):
    generator = StubGenerator()
    orchestrator = SessionOrchestrator(
        history=history_store,
        generator=generator,
        fallback=fallback_policy,
        access=AccessPolicy(enforce_limits=True, premium_gating=True, daily_message_limit=1),
    )
    user = RequestContext(user_id="user-1")
    orchestrator.reply(user, "first")

    with pytest.raises(UsageLimitExceeded):
        orchestrator.reply(user, "second")

    assert generator.calls[-1]["message"] == "first"
    assert len(history_store.list_messages("user-1", 10)) == 2
