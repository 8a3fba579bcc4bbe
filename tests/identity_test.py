import time

import pytest
from fastapi import HTTPException
from jose import jwt
from mindful_chat.utils.identity import JWTIdentityResolver

SECRET = "identity-secret"


def make_token(claims, secret=SECRET):
    payload = {"aud": "authenticated", "exp": int(time.time()) + 3600}
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def resolver():
    return JWTIdentityResolver(secret=SECRET)


def test_no_header_is_anonymous(resolver):
    context = resolver.resolve(None)
    assert context.user_id is None
    assert not context.is_authenticated


def test_valid_token_yields_user(resolver):
    context = resolver.resolve(f"Bearer {make_token({'sub': 'user-42'})}")
    assert context.user_id == "user-42"
    assert context.is_authenticated


@pytest.mark.parametrize("header", ["Token abc", "Bearer", "Bearer   ", "abc"])
def test_malformed_header_is_rejected(resolver, header):
    with pytest.raises(HTTPException) as exc_info:
        resolver.resolve(header)
    assert exc_info.value.status_code == 401


def test_wrong_signature_is_rejected(resolver):
    token = make_token({"sub": "user-42"}, secret="someone-else")
    with pytest.raises(HTTPException) as exc_info:
        resolver.resolve(f"Bearer {token}")
    assert exc_info.value.status_code == 401


def test_expired_token_is_rejected(resolver):
    token = make_token({"sub": "user-42", "exp": int(time.time()) - 60})
    with pytest.raises(HTTPException) as exc_info:
        resolver.resolve(f"Bearer {token}")
    assert exc_info.value.detail == "Token has expired"


def test_wrong_audience_is_rejected(resolver):
    token = make_token({"sub": "user-42", "aud": "anon"})
    with pytest.raises(HTTPException):
        resolver.resolve(f"Bearer {token}")


def test_missing_subject_is_rejected(resolver):
    with pytest.raises(HTTPException) as exc_info:
        resolver.resolve(f"Bearer {make_token({})}")
    assert "missing user ID" in exc_info.value.detail


def test_audience_check_can_be_disabled():
    resolver = JWTIdentityResolver(secret=SECRET, audience="")
    token = jwt.encode({"sub": "user-42"}, SECRET, algorithm="HS256")
    assert resolver.resolve(f"Bearer {token}").user_id == "user-42"


def test_without_secret_tokens_are_anonymous():
    resolver = JWTIdentityResolver(secret=None)
    context = resolver.resolve(f"Bearer {make_token({'sub': 'user-42'})}")
    assert context.user_id is None
