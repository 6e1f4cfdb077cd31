"""Pydantic schemas for users and the auth API.

Learn: Three shapes of a user, on purpose:
- NewUser: what the core hands to the store (hash, no id yet)
- UserRecord: what the store hands back (id, hash, timestamps)
- PublicUser: what leaves the system — it has no hash field at all,
  so a response built from it cannot leak one.

to_public() is the only way from a record to something you can return.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


# ─── Stored identity ────────────────────────────────────


class NewUser(BaseModel):
    name: str
    email: str
    password_hash: str

    @classmethod
    def build(cls, name: str, email: str, password_hash: str) -> "NewUser":
        """Normalize raw registration input: trimmed name, lower-cased email."""
        return cls(
            name=name.strip(),
            email=email.strip().lower(),
            password_hash=password_hash,
        )


class UserRecord(BaseModel):
    id: str
    name: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime


class PublicUser(BaseModel):
    """A user as seen from outside. Structurally cannot carry a password hash."""

    id: str
    name: str
    email: str


def to_public(record: UserRecord) -> PublicUser:
    return PublicUser(id=record.id, name=record.name, email=record.email)


# ─── Requests ───────────────────────────────────────────
# Fields are optional so that missing values reach the validator and come
# back as 400 messages instead of framework-level 422s.


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


# ─── Responses ──────────────────────────────────────────


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    user: PublicUser


class MeResponse(BaseModel):
    success: bool = True
    user: PublicUser


class ErrorResponse(BaseModel):
    """Body of every failed request."""

    success: bool = False
    message: str
    errors: Optional[list[Any]] = None
    # Server faults only
    path: Optional[str] = None
    method: Optional[str] = None
    error: Optional[str] = None
