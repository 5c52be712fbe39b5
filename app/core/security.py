"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import settings
from app.core.errors import InvalidInputError

# bcrypt only looks at the first 72 bytes; longer passwords are rejected rather
# than truncated so two different passwords can never share a hash.
PASSWORD_MAX_BYTES = 72

# Length limits shared by the services and the request schemas.
USERNAME_MAX_LEN = 255
TITLE_MAX_LEN = 255


def _password_bytes(plain_password: str) -> bytes:
    if not plain_password or not plain_password.strip():
        raise InvalidInputError("Password is required.")
    pw_bytes = plain_password.encode("utf-8")
    if len(pw_bytes) > PASSWORD_MAX_BYTES:
        raise InvalidInputError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes.")
    return pw_bytes


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """
    Hash a plain-text password for storage. Do not store plain passwords.

    Salted, so hashing the same password twice gives two different strings
    that both verify. Raises InvalidInputError for a blank or over-long password.
    """
    pw_bytes = _password_bytes(plain_password)
    cost = rounds if rounds is not None else settings.BCRYPT_ROUNDS
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Never raises; a mismatch is False."""
    if not plain_password or not hashed:
        return False
    pw_bytes = plain_password.encode("utf-8")
    if len(pw_bytes) > PASSWORD_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(sub: str | int) -> str:
    """Create a JWT access token with sub (user id), exp and iat."""
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
    )
