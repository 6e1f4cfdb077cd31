"""User store interface.

Learn: The auth core never talks to a database directly. It needs
exactly three operations — look up by id, look up by email, insert —
and any backend that provides them can sit behind the gate.
The store is handed in by FastAPI's dependency injection; nothing in
the core reaches for a global connection.
"""

from abc import ABC, abstractmethod
from typing import Optional

from authgate.schemas.user import NewUser, UserRecord


class DuplicateIdentity(Exception):
    """Raised when inserting a user whose email already exists."""


class StoreUnavailable(Exception):
    """Raised when the backing store cannot be reached or errors out."""


class UserStore(ABC):
    """Persistence for user identities."""

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        """Return the user with this id, or None (also for ids that cannot exist)."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        """Return the user with this email (case-insensitive), or None."""

    @abstractmethod
    async def insert(self, user: NewUser) -> UserRecord:
        """Persist a new user and return it with its assigned id.

        Raises DuplicateIdentity if the email is taken.
        """
