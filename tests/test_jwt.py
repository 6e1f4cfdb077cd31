"""TokenService tests — issue/verify, expiry, tampering, malformed input."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from authgate.auth.jwt import (
    ExpiredToken,
    InvalidSignature,
    MalformedToken,
    TokenError,
    TokenService,
)

SECRET = "unit-test-secret-long-enough-for-hs256-keys"


def _tamper(token: str, segment: int) -> str:
    """Change one character in the middle of a token segment."""
    parts = token.split(".")
    seg = parts[segment]
    i = len(seg) // 2
    replacement = "A" if seg[i] != "A" else "B"
    parts[segment] = seg[:i] + replacement + seg[i + 1:]
    return ".".join(parts)


@pytest.fixture()
def svc():
    return TokenService(secret=SECRET, ttl=timedelta(hours=1))


def test_issue_then_verify_returns_subject(svc):
    user_id = str(uuid.uuid4())
    assert svc.verify(svc.issue(user_id)) == user_id


def test_token_has_three_segments(svc):
    assert svc.issue("abc").count(".") == 2


def test_claims(svc):
    token = svc.issue("user-1")
    claims = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert claims["sub"] == "user-1"
    assert claims["exp"] - claims["iat"] == 3600


def test_expired_token():
    """Issued two hours ago with a one-hour TTL."""
    two_hours_ago = datetime.now(timezone.utc) - timedelta(hours=2)
    old = TokenService(
        secret=SECRET, ttl=timedelta(hours=1), clock=lambda: two_hours_ago
    )
    token = old.issue("user-1")

    with pytest.raises(ExpiredToken):
        TokenService(secret=SECRET).verify(token)


def test_tampered_payload_is_invalid_signature(svc):
    token = svc.issue(str(uuid.uuid4()))
    with pytest.raises(InvalidSignature):
        svc.verify(_tamper(token, 1))


def test_tampered_signature_is_invalid_signature(svc):
    token = svc.issue(str(uuid.uuid4()))
    with pytest.raises(InvalidSignature):
        svc.verify(_tamper(token, 2))


def test_wrong_secret_is_invalid_signature(svc):
    forged = TokenService(secret="someone-elses-secret-of-similar-length-0000").issue("user-1")
    with pytest.raises(InvalidSignature):
        svc.verify(forged)


@pytest.mark.parametrize(
    "token",
    ["", "not-a-token", "a.b", "a.b.c", "...."],
)
def test_malformed_token(svc, token):
    with pytest.raises(MalformedToken):
        svc.verify(token)


def test_missing_subject_is_malformed(svc):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"iat": now, "exp": now + timedelta(hours=1)}, SECRET, algorithm="HS256"
    )
    with pytest.raises(MalformedToken):
        svc.verify(token)


def test_missing_expiry_is_malformed(svc):
    token = jwt.encode(
        {"sub": "user-1", "iat": datetime.now(timezone.utc)},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(MalformedToken):
        svc.verify(token)


def test_unexpected_algorithm_is_rejected(svc):
    token = jwt.encode(
        {
            "sub": "user-1",
            "iat": datetime.now(timezone.utc),
            "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        },
        SECRET,
        algorithm="HS512",
    )
    with pytest.raises(TokenError):
        svc.verify(token)


def test_all_failures_share_a_base_class():
    for exc in (ExpiredToken, InvalidSignature, MalformedToken):
        assert issubclass(exc, TokenError)
