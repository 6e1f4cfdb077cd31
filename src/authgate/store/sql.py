"""PostgreSQL-backed user store.

Learn: Wraps one AsyncSession (one per request, from get_db). Lookups are
read-only, so an aborted request can drop them halfway without leaving
anything behind. Inserts rely on the unique email index: a concurrent
registration that slips past the service's pre-check still ends up as
DuplicateIdentity, never as a second account.
"""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from authgate.db.models import User
from authgate.schemas.user import NewUser, UserRecord
from authgate.store.base import DuplicateIdentity, StoreUnavailable, UserStore


class SqlUserStore(UserStore):
    """UserStore on top of SQLAlchemy async."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        try:
            pk = uuid.UUID(str(user_id))
        except ValueError:
            return None

        try:
            user = await self.db.get(User, pk)
        except (OperationalError, DBAPIError) as e:
            raise StoreUnavailable(str(e)) from e
        return _to_record(user) if user else None

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        q = select(User).where(User.email == email.strip().lower())
        try:
            result = await self.db.execute(q)
        except (OperationalError, DBAPIError) as e:
            raise StoreUnavailable(str(e)) from e
        user = result.scalars().first()
        return _to_record(user) if user else None

    async def insert(self, user: NewUser) -> UserRecord:
        row = User(
            name=user.name,
            email=user.email.strip().lower(),
            password_hash=user.password_hash,
        )
        self.db.add(row)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateIdentity(user.email) from e
        except (OperationalError, DBAPIError) as e:
            await self.db.rollback()
            raise StoreUnavailable(str(e)) from e
        await self.db.refresh(row)
        return _to_record(row)


def _to_record(user: User) -> UserRecord:
    return UserRecord(
        id=str(user.id),
        name=user.name,
        email=user.email,
        password_hash=user.password_hash,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
