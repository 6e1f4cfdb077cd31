"""Request gate — bearer token in, authenticated identity (or rejection) out.

Learn: The gate walks one request through
    no token → token extracted → token verified → identity resolved
and returns a value instead of raising:
    Authenticated(user)           → the route runs with `user`
    Rejected(status, message)     → the HTTP layer answers with it

Every token failure (expired, forged, garbage) gets the same message,
and so does a valid token whose user no longer exists. Callers can't
tell which one happened; the server log can.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional, Union

import structlog

from authgate.auth.jwt import TokenError, TokenService
from authgate.schemas.user import PublicUser, to_public
from authgate.store.base import StoreUnavailable, UserStore

logger = structlog.get_logger()

NO_TOKEN = "No token, authorization denied"
INVALID_TOKEN = "Token is not valid"
SERVER_ERROR = "Internal server error"

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class Authenticated:
    user: PublicUser


@dataclass(frozen=True)
class Rejected:
    status_code: int
    message: str


AuthResult = Union[Authenticated, Rejected]


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the token out of an Authorization header value.

    "Bearer abc" → "abc". A header without the prefix is taken as the
    raw token.
    """
    if not authorization:
        return None
    token = authorization
    if token.startswith(BEARER_PREFIX):
        token = token[len(BEARER_PREFIX):]
    return token.strip() or None


class AuthGate:
    """Turns an Authorization header into an AuthResult."""

    def __init__(
        self,
        tokens: TokenService,
        store: UserStore,
        lookup_timeout: float = 5.0,
    ):
        self.tokens = tokens
        self.store = store
        self.lookup_timeout = lookup_timeout

    async def authenticate(self, authorization: Optional[str]) -> AuthResult:
        token = extract_bearer_token(authorization)
        if token is None:
            return Rejected(401, NO_TOKEN)

        try:
            user_id = self.tokens.verify(token)
        except TokenError as e:
            logger.info(
                "auth.token_rejected", reason=type(e).__name__, error=str(e)
            )
            return Rejected(401, INVALID_TOKEN)

        try:
            record = await asyncio.wait_for(
                self.store.find_by_id(user_id), timeout=self.lookup_timeout
            )
        except asyncio.TimeoutError:
            logger.error(
                "auth.lookup_timeout", user_id=user_id, timeout=self.lookup_timeout
            )
            return Rejected(500, SERVER_ERROR)
        except StoreUnavailable as e:
            logger.error("auth.store_unavailable", user_id=user_id, error=str(e))
            return Rejected(500, SERVER_ERROR)

        if record is None:
            logger.info("auth.unknown_subject", user_id=user_id)
            return Rejected(401, INVALID_TOKEN)

        return Authenticated(to_public(record))
