"""Auth service — business logic for registration and login.

Learn: Service layer separates business logic from HTTP routing.
API routes call the service, the service calls the store, the hasher
and the token service. Nothing here knows about requests or status codes.

bcrypt is deliberately slow (~250ms at 12 rounds), so hashing and
verification run in Starlette's threadpool instead of on the event loop.
"""

from typing import Optional

import structlog
from starlette.concurrency import run_in_threadpool

from authgate.auth.jwt import TokenService
from authgate.auth.password import PasswordHasher
from authgate.auth.validation import validate_registration
from authgate.schemas.user import NewUser, PublicUser, to_public
from authgate.store.base import DuplicateIdentity, UserStore

logger = structlog.get_logger()


class RegistrationInvalid(Exception):
    """Registration input failed validation. Carries every message."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class InvalidCredentials(Exception):
    """Login failed. Deliberately says nothing about which part was wrong."""


class AuthService:
    """Registration and login flows."""

    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        tokens: TokenService,
    ):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    async def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> tuple[str, PublicUser]:
        """Create an account and return (token, user).

        Raises RegistrationInvalid or DuplicateIdentity.
        """
        errors = validate_registration(name, email, password)
        if errors:
            raise RegistrationInvalid(errors)

        if await self.store.find_by_email(email):
            raise DuplicateIdentity(email.lower())

        password_hash = await run_in_threadpool(self.hasher.hash, password)
        record = await self.store.insert(NewUser.build(name, email, password_hash))

        logger.info("auth.registered", user_id=record.id)
        return self.tokens.issue(record.id), to_public(record)

    async def login(
        self,
        email: Optional[str],
        password: Optional[str],
    ) -> tuple[str, PublicUser]:
        """Check credentials and return (token, user).

        Raises InvalidCredentials for an unknown email and for a wrong
        password alike.
        """
        if not email or not password:
            raise InvalidCredentials()

        record = await self.store.find_by_email(email)
        if record is None:
            logger.info("auth.login_failed", reason="unknown_email")
            raise InvalidCredentials()

        matches = await run_in_threadpool(
            self.hasher.verify, password, record.password_hash
        )
        if not matches:
            logger.info("auth.login_failed", reason="wrong_password", user_id=record.id)
            raise InvalidCredentials()

        logger.info("auth.logged_in", user_id=record.id)
        return self.tokens.issue(record.id), to_public(record)
