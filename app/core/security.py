"""Password hashing and JWT creation/verification for access and refresh tokens."""

import logging
import re
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import settings
from app.core.errors import InvalidTokenError

logger = logging.getLogger(__name__)

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

REFRESH_TOKEN_TYPE = "refresh"

# Fallback for any TTL string that does not parse (7 days, the refresh default).
DEFAULT_TTL_SECONDS = 7 * 24 * 60 * 60

_TTL_PATTERN = re.compile(r"^(\d+)(s|m|h|d)$")
_TTL_UNIT_SECONDS = {"s": 1, "m": 60, "h": 60 * 60, "d": 24 * 60 * 60}


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def parse_ttl_to_seconds(ttl: str) -> int:
    """
    Convert a duration string such as "15m" or "7d" to seconds.

    Anything that does not match <int><s|m|h|d> yields DEFAULT_TTL_SECONDS.
    """
    match = _TTL_PATTERN.match((ttl or "").strip())
    if match is None:
        logger.warning("Unparseable token TTL %r; using %s seconds", ttl, DEFAULT_TTL_SECONDS)
        return DEFAULT_TTL_SECONDS
    amount, unit = match.groups()
    return int(amount) * _TTL_UNIT_SECONDS[unit]


def access_token_ttl_seconds() -> int:
    return parse_ttl_to_seconds(settings.ACCESS_TOKEN_TTL)


def refresh_token_ttl_seconds() -> int:
    return parse_ttl_to_seconds(settings.REFRESH_TOKEN_TTL)


def create_access_token(
    sub: str | int,
    email: str,
    role: str,
    now: datetime | None = None,
) -> str:
    """Create a JWT access token with sub, email, role, iat and exp."""
    now = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + timedelta(seconds=access_token_ttl_seconds()),
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def create_refresh_token(
    sub: str | int,
    email: str,
    now: datetime | None = None,
) -> str:
    """Create a JWT refresh token; signed with the refresh secret and tagged type=refresh."""
    now = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "email": email,
        "type": REFRESH_TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(seconds=refresh_token_ttl_seconds()),
    }
    return jwt.encode(
        payload,
        settings.JWT_REFRESH_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def _decode(token: str, secret: str, kind: str) -> dict[str, Any]:
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        logger.info("Rejected %s token: expired", kind)
        raise InvalidTokenError() from e
    except jwt.PyJWTError as e:
        logger.info("Rejected %s token: %s", kind, type(e).__name__)
        raise InvalidTokenError() from e
    if not payload.get("sub"):
        raise InvalidTokenError("Invalid token payload")
    return payload


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate an access token; return payload (sub, email, role, exp, iat).
    Raises InvalidTokenError on invalid, expired, or refresh-tagged tokens.
    """
    payload = _decode(token, settings.JWT_SECRET.get_secret_value(), "access")
    if payload.get("type") == REFRESH_TOKEN_TYPE:
        logger.info("Rejected access token: refresh token presented")
        raise InvalidTokenError("Use access token for this request")
    return payload


def decode_refresh_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a refresh token; return payload (sub, email, type, exp, iat).
    Raises InvalidTokenError unless the token is a valid, unexpired refresh token.
    """
    payload = _decode(token, settings.JWT_REFRESH_SECRET.get_secret_value(), "refresh")
    if payload.get("type") != REFRESH_TOKEN_TYPE:
        logger.info("Rejected refresh token: missing refresh type tag")
        raise InvalidTokenError("Invalid refresh token")
    return payload
