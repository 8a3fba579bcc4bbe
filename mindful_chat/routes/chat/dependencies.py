from functools import cache
from typing import Optional

from fastapi import Depends, Header

from mindful_chat.services.access import AccessPolicy
from mindful_chat.services.fallback import FallbackPolicy
from mindful_chat.services.generator import GeminiResponseGenerator
from mindful_chat.services.history import HistoryStore
from mindful_chat.services.schema import RequestContext
from mindful_chat.services.session import SessionOrchestrator
from mindful_chat.settings import config
from mindful_chat.utils.identity import JWTIdentityResolver


@cache
def get_session_orchestrator() -> SessionOrchestrator:
    return SessionOrchestrator(
        history=HistoryStore(),
        generator=GeminiResponseGenerator(
            api_key=config.gemini_api_key,
            model=config.gemini_model,
            api_base=config.gemini_api_base,
            timeout=config.gemini_timeout_seconds,
        ),
        fallback=FallbackPolicy(default_language=config.default_language),
        access=AccessPolicy(
            enforce_limits=config.enforce_limits,
            premium_gating=config.premium_gating,
            daily_message_limit=config.free_daily_message_limit,
            premium_user_ids=config.premium_user_ids,
        ),
        context_limit=config.chat_context_limit,
    )


@cache
def get_identity_resolver() -> JWTIdentityResolver:
    return JWTIdentityResolver(
        secret=config.auth_jwt_secret,
        algorithm=config.auth_jwt_algorithm,
        audience=config.auth_jwt_audience,
    )


def get_request_context(
    authorization: Optional[str] = Header(default=None),
    resolver: JWTIdentityResolver = Depends(get_identity_resolver),
) -> RequestContext:
    return resolver.resolve(authorization)
