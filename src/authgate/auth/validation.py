"""Registration input validation.

Learn: A pure function over (name, email, password) — no storage, no
exceptions for bad input. Every rule runs, so the caller gets the full
list of problems in one response instead of fixing them one at a time.

The email check is deliberately coarse: word characters with single
"." or "-" separators, an "@", and a 2–3 character final label. Quoted
local parts, "+" tags and long TLDs are all rejected.
"""

import re
from typing import Optional

NAME_REQUIRED = "Name is required"
EMAIL_REQUIRED = "Valid email is required"
PASSWORD_TOO_SHORT = "Password must be at least 6 characters long"

MIN_PASSWORD_LENGTH = 6

# Same accepted set as ^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$ but
# each repetition needs a separator, so matching stays linear.
_EMAIL_RE = re.compile(r"\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}", re.ASCII)


def is_valid_email(email: str) -> bool:
    return _EMAIL_RE.fullmatch(email) is not None


def validate_registration(
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
) -> list[str]:
    """Return every validation error for a registration attempt.

    An empty list means the input is valid.
    """
    errors: list[str] = []

    if not name or not name.strip():
        errors.append(NAME_REQUIRED)

    if not email or not is_valid_email(email):
        errors.append(EMAIL_REQUIRED)

    if not password or _code_units(password) < MIN_PASSWORD_LENGTH:
        errors.append(PASSWORD_TOO_SHORT)

    return errors


def _code_units(value: str) -> int:
    """Length in UTF-16 code units (astral characters count twice)."""
    return len(value.encode("utf-16-le")) // 2
