"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. The token
carries the user id ("sub"), when it was issued ("iat") and when it
stops being valid ("exp"), signed with the process-wide secret. Checking
the signature never needs a database round trip; only the identity
lookup that follows does.

There is no refresh token: when a token expires the user logs in again.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt


class TokenError(Exception):
    """Raised when token verification fails."""


class ExpiredToken(TokenError):
    """The token is past its expiry time."""


class InvalidSignature(TokenError):
    """The signature does not match the secret key."""


class MalformedToken(TokenError):
    """The token cannot be parsed or is missing required claims."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and verifies signed, time-bounded identity tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = utcnow,
    ):
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl
        self._clock = clock

    def issue(self, subject_id: str) -> str:
        """Create a signed token for the given user id."""
        issued_at = self._clock()
        payload = {
            "sub": str(subject_id),
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Verify a token and return the subject id it was issued for.

        Raises ExpiredToken, InvalidSignature or MalformedToken.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredToken("Token has expired")
        except jwt.InvalidSignatureError:
            raise InvalidSignature("Token signature does not match")
        except jwt.InvalidTokenError as e:
            raise MalformedToken(f"Invalid token: {e}")

        subject = payload["sub"]
        if not isinstance(subject, str) or not subject:
            raise MalformedToken("Invalid token: empty subject")
        return subject
