import logging
from typing import Optional

from fastapi import HTTPException, status
from jose import JWTError, jwt

from mindful_chat.services.schema import RequestContext

logger = logging.getLogger(__name__)

ANONYMOUS = RequestContext(user_id=None)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class JWTIdentityResolver:
    """
    Resolve the caller from the auth service's access token.

    No ``Authorization`` header means an anonymous caller. A header that is
    present but cannot be verified is rejected rather than silently
    downgraded to anonymous.
    """

    def __init__(
        self,
        secret: Optional[str],
        algorithm: str = "HS256",
        audience: Optional[str] = "authenticated",
    ) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.audience = audience or None

    def resolve(self, authorization: Optional[str]) -> RequestContext:
        if not authorization:
            return ANONYMOUS

        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise _unauthorized("Missing or invalid Authorization header")

        if not self.secret:
            logger.warning("AUTH_JWT_SECRET is not set; treating bearer token as anonymous")
            return ANONYMOUS

        try:
            payload = jwt.decode(
                token.strip(),
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except jwt.ExpiredSignatureError:
            raise _unauthorized("Token has expired")
        except JWTError as e:
            logger.error(f"JWT error: {e}")
            raise _unauthorized("Invalid or expired token")

        user_id = payload.get("sub")
        if not user_id:
            raise _unauthorized("Invalid token: missing user ID")

        return RequestContext(user_id=str(user_id))
