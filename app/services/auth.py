"""Session flows: login, refresh, profile lookup and refresh-cookie policy."""

import logging
from dataclasses import dataclass
from typing import Any, Literal, TypedDict

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import InvalidCredentialsError, InvalidTokenError, SessionInvalidError
from app.core.security import (
    create_access_token,
    create_refresh_token,
    refresh_token_ttl_seconds,
    verify_password,
)
from app.models import User
from app.services.authorization import Actor

logger = logging.getLogger(__name__)

REFRESH_COOKIE_NAME = "refreshToken"


class CookieOptions(TypedDict):
    httponly: bool
    secure: bool
    samesite: Literal["lax", "strict", "none"]
    path: str
    max_age: int


@dataclass
class LoginResult:
    access_token: str
    refresh_token: str
    user: User


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def _subject_id(claims: dict[str, Any]) -> int:
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        raise InvalidTokenError("Invalid token payload")


def _live_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        raise SessionInvalidError()
    return user


def issue_access_token(user: User) -> str:
    return create_access_token(sub=user.id, email=user.email, role=user.role)


def login(db: Session, email: str | None, password: str | None) -> LoginResult:
    """
    Check credentials and issue an access/refresh token pair.

    Blank or malformed email, unknown or inactive user, and wrong password all raise
    the same InvalidCredentialsError so callers cannot probe for accounts.
    """
    normalized = normalize_email(email)
    if not normalized or "@" not in normalized or not password:
        raise InvalidCredentialsError()
    user = db.query(User).filter(User.email == normalized).first()
    if user is None or not user.is_active:
        logger.info("Login rejected: no active account for email")
        raise InvalidCredentialsError()
    if not verify_password(password, user.password_hash):
        logger.info("Login rejected: password mismatch", extra={"user_id": user.id})
        raise InvalidCredentialsError()

    logger.info("Login succeeded", extra={"user_id": user.id, "role": user.role})
    return LoginResult(
        access_token=issue_access_token(user),
        refresh_token=create_refresh_token(sub=user.id, email=user.email),
        user=user,
    )


def refresh(db: Session, refresh_claims: dict[str, Any]) -> str:
    """
    Issue a new access token for an already-verified refresh token.

    The refresh token itself is neither rotated nor invalidated.
    """
    user_id = _subject_id(refresh_claims)
    try:
        user = _live_user(db, user_id)
    except SessionInvalidError:
        logger.info("Refresh rejected: user missing or inactive", extra={"user_id": user_id})
        raise
    return issue_access_token(user)


def get_profile(db: Session, user_id: int) -> User:
    return _live_user(db, user_id)


def resolve_actor(db: Session, access_claims: dict[str, Any]) -> Actor:
    """
    Turn verified access-token claims into an Actor built from the current user row.

    The role claim is not trusted; role, liveness and company link are re-read.
    """
    return Actor.from_user(_live_user(db, _subject_id(access_claims)))


def refresh_cookie_options() -> CookieOptions:
    return {
        "httponly": True,
        "secure": settings.REFRESH_COOKIE_SECURE,
        "samesite": "none",
        "path": "/",
        "max_age": refresh_token_ttl_seconds(),
    }


def logout_cookie_options() -> CookieOptions:
    return {
        "httponly": True,
        "secure": settings.REFRESH_COOKIE_SECURE,
        "samesite": "none",
        "path": "/",
        "max_age": 0,
    }
