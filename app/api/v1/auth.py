"""JWT login/refresh/logout routes and auth dependencies (get_current_user, require_roles)."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import InvalidTokenError
from app.core.security import decode_access_token, decode_refresh_token
from app.models import Role
from app.schemas.auth import AccessTokenResponse, LoginRequest, LoginResponse, UserProfile
from app.services import auth as auth_service
from app.services.authorization import Actor, decide_role

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> Actor:
    """Dependency: require a valid Bearer access token and return the current actor. 401 otherwise."""
    if credentials is None:
        raise InvalidTokenError("Not authenticated")
    payload = decode_access_token(credentials.credentials)
    return auth_service.resolve_actor(db, payload)


def require_roles(*roles: Role) -> Callable[[Actor], Actor]:
    """Dependency factory: require an authenticated actor whose current role is in roles. 403 otherwise."""

    def dependency(current_user: Annotated[Actor, Depends(get_current_user)]) -> Actor:
        decide_role(current_user, *roles).enforce(current_user, "role")
        return current_user

    return dependency


require_admin = require_roles(Role.ADMIN)


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate with email and password.

    Returns an access token for the Authorization header (Bearer <access_token>)
    and sets the refresh token as an http-only cookie.
    """
    result = auth_service.login(db, body.email, body.password)
    response.set_cookie(
        auth_service.REFRESH_COOKIE_NAME,
        result.refresh_token,
        **auth_service.refresh_cookie_options(),
    )
    return LoginResponse(
        access_token=result.access_token,
        user=UserProfile.model_validate(result.user),
    )


@router.post("/refresh", response_model=AccessTokenResponse)
def refresh(
    db: Annotated[Session, Depends(get_db)],
    refresh_token: Annotated[
        str | None, Cookie(alias=auth_service.REFRESH_COOKIE_NAME)
    ] = None,
) -> AccessTokenResponse:
    """Issue a new access token from the refresh cookie. The cookie itself is unchanged."""
    if not refresh_token:
        raise InvalidTokenError("Missing refresh token")
    claims = decode_refresh_token(refresh_token)
    return AccessTokenResponse(access_token=auth_service.refresh(db, claims))


@router.get("/profile", response_model=UserProfile)
def profile(
    current_user: Annotated[Actor, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserProfile:
    return UserProfile.model_validate(auth_service.get_profile(db, current_user.id))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    response: Response,
    _user: Annotated[Actor, Depends(get_current_user)],
) -> None:
    """Clear the refresh cookie. Tokens are not revoked server-side."""
    response.set_cookie(
        auth_service.REFRESH_COOKIE_NAME,
        "",
        **auth_service.logout_cookie_options(),
    )
