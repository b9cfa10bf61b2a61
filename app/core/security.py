"""Password hashing and signing of the session cookie."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import settings

# Min lengths for username and password validation (exclusive lower bound is 2).
USERNAME_MIN_LEN = 3
PASSWORD_MIN_LEN = 3


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_session_token(session_id: str) -> str:
    """Sign an opaque session id for use as the session cookie value."""
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sid": session_id,
        "exp": now + timedelta(days=settings.SESSION_MAX_AGE_DAYS),
        "iat": now,
    }
    return jwt.encode(
        payload,
        settings.SESSION_SECRET.get_secret_value(),
        algorithm=settings.SESSION_ALGORITHM,
    )


def decode_session_token(token: str) -> str | None:
    """
    Return the session id carried by a cookie value.

    None when the token is tampered with, expired or has no session id.
    """
    try:
        payload = jwt.decode(
            token,
            settings.SESSION_SECRET.get_secret_value(),
            algorithms=[settings.SESSION_ALGORITHM],
        )
    except jwt.PyJWTError:
        return None
    sid = payload.get("sid")
    if not isinstance(sid, str) or not sid:
        return None
    return sid
