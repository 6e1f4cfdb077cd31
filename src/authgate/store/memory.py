"""In-memory user store for development and tests.

Learn: Same contract as the SQL store, without PostgreSQL. Users are
keyed by lower-cased email (which is what makes emails unique) with a
second index by id. Data is lost when the process exits.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Optional

from authgate.schemas.user import NewUser, UserRecord
from authgate.store.base import DuplicateIdentity, UserStore


class InMemoryUserStore(UserStore):
    """Dict-backed UserStore."""

    def __init__(self) -> None:
        self._by_email: dict[str, UserRecord] = {}
        self._by_id: dict[str, UserRecord] = {}
        self._lock = asyncio.Lock()

    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        return self._by_id.get(str(user_id))

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        return self._by_email.get(email.strip().lower())

    async def insert(self, user: NewUser) -> UserRecord:
        email = user.email.strip().lower()
        async with self._lock:
            if email in self._by_email:
                raise DuplicateIdentity(email)

            now = datetime.now(timezone.utc)
            record = UserRecord(
                id=str(uuid.uuid4()),
                name=user.name,
                email=email,
                password_hash=user.password_hash,
                created_at=now,
                updated_at=now,
            )
            self._by_email[email] = record
            self._by_id[record.id] = record
            return record

    def __len__(self) -> int:
        return len(self._by_id)
