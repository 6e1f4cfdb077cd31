"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks.
The work factor (rounds=12) takes ~250ms per hash on modern hardware,
which is the point: offline brute force gets just as slow.

Hashing the same password twice yields two different strings (fresh salt
each time), and both verify against the original password.
"""

import bcrypt

# bcrypt only looks at the first 72 bytes of the password.
MAX_PASSWORD_BYTES = 72


class HashingError(Exception):
    """Raised when hashing fails or a stored hash is malformed."""


class PasswordHasher:
    """bcrypt hasher with a fixed work factor.

    Learn: Immutable after construction, so one instance is shared
    by every request without locking.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password with a fresh random salt.

        Produces strings like "$2b$12$..." (always 60 characters).
        """
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(_encode(password), salt).decode("utf-8")
        except (ValueError, TypeError) as e:
            raise HashingError(f"Could not hash password: {e}") from e

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash in constant time.

        A wrong password returns False. Only a hash that is not a valid
        bcrypt string raises HashingError.
        """
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except (ValueError, TypeError, AttributeError) as e:
            raise HashingError("Stored password hash is malformed") from e


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]
