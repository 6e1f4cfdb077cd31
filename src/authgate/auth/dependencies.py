"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers. They build the
auth components from settings (once per process), hand each request
its own user store, and turn the gate's result into either the current
user or an error response.

Tests swap pieces out through app.dependency_overrides — e.g. an
in-memory store instead of PostgreSQL, or a cheaper bcrypt work factor.
"""

from datetime import timedelta
from functools import lru_cache
from typing import AsyncIterator, Optional

from fastapi import Depends, Header

from authgate.auth.gate import AuthGate, Authenticated
from authgate.auth.jwt import TokenService
from authgate.auth.password import PasswordHasher
from authgate.config import settings
from authgate.errors import ApiError
from authgate.schemas.user import PublicUser
from authgate.services.auth_service import AuthService
from authgate.store.base import StoreUnavailable, UserStore
from authgate.store.memory import InMemoryUserStore


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(minutes=settings.jwt_expire_minutes),
    )


@lru_cache
def get_memory_store() -> InMemoryUserStore:
    """Process-wide in-memory store (AUTHGATE_USER_STORE=memory)."""
    return InMemoryUserStore()


async def get_user_store() -> AsyncIterator[UserStore]:
    """Yield the configured user store for the current request."""
    if settings.user_store == "memory":
        yield get_memory_store()
        return

    from authgate.db.engine import async_session_factory
    from authgate.store.sql import SqlUserStore

    async with async_session_factory() as session:
        yield SqlUserStore(session)


def get_auth_service(
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(store, hasher, tokens)


def get_auth_gate(
    store: UserStore = Depends(get_user_store),
    tokens: TokenService = Depends(get_token_service),
) -> AuthGate:
    return AuthGate(tokens, store, lookup_timeout=settings.store_timeout_seconds)


async def get_current_user(
    authorization: Optional[str] = Header(None),
    gate: AuthGate = Depends(get_auth_gate),
) -> PublicUser:
    """Resolve the authenticated user or answer with the gate's rejection.

    Learn: This is the "hard" auth dependency — protected routes list it
    in Depends() and only ever see a PublicUser.
    """
    result = await gate.authenticate(authorization)
    if isinstance(result, Authenticated):
        return result.user

    if result.status_code >= 500:
        # Same body as any other server fault: path, method, dev-only error.
        raise StoreUnavailable("user lookup failed")
    headers = {"WWW-Authenticate": "Bearer"} if result.status_code == 401 else None
    raise ApiError(result.status_code, result.message, headers=headers)
