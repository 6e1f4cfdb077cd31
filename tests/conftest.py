"""Test fixtures — in-memory user store, cheap bcrypt, real auth pipeline.

Learn: Testing pattern for the auth API:

1. Environment is set before authgate is imported: in-memory store and
   bcrypt at 4 rounds (the minimum), so no PostgreSQL is needed and
   hashing takes milliseconds instead of ~250ms.
2. Each test gets a fresh InMemoryUserStore and its own TokenService,
   injected through app.dependency_overrides. Nothing leaks between tests.
3. The HTTP client talks to the ASGI app in-process via httpx's
   ASGITransport — no server, no sockets.
"""

import os

os.environ.setdefault("AUTHGATE_USER_STORE", "memory")
os.environ.setdefault("AUTHGATE_BCRYPT_ROUNDS", "4")

from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from authgate.auth.dependencies import (  # noqa: E402
    get_password_hasher,
    get_token_service,
    get_user_store,
)
from authgate.auth.jwt import TokenService  # noqa: E402
from authgate.auth.password import PasswordHasher  # noqa: E402
from authgate.main import app  # noqa: E402
from authgate.services.auth_service import AuthService  # noqa: E402
from authgate.store.memory import InMemoryUserStore  # noqa: E402

TEST_SECRET = "test-secret-do-not-use-outside-the-test-suite"


@pytest.fixture()
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture()
def secret():
    return TEST_SECRET


@pytest.fixture()
def tokens(secret):
    return TokenService(secret=secret, ttl=timedelta(hours=1))


@pytest.fixture()
def store():
    return InMemoryUserStore()


@pytest.fixture()
def service(store, hasher, tokens):
    return AuthService(store, hasher, tokens)


@pytest_asyncio.fixture()
async def client(store, hasher, tokens):
    """HTTP client with the store, hasher and token service overridden.

    Learn: Auth itself is NOT mocked — /me runs the real gate, so tests
    register, log in and send real bearer tokens.
    """
    app.dependency_overrides[get_user_store] = lambda: store
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_token_service] = lambda: tokens

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def register(client):
    """Register through the API; returns the response."""

    async def _register(
        email: str = "jane@example.com",
        name: str = "Jane Doe",
        password: str = "secret123",
    ):
        return await client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )

    return _register
