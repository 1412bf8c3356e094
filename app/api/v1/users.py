"""User administration (ADMIN) and self-service profile update."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_admin
from app.core.database import get_db
from app.models import Role
from app.schemas.users import (
    DeactivatedUser,
    ProfileUpdate,
    UserCreate,
    UserOut,
    UsersPage,
    UserUpdate,
)
from app.services import users as users_service
from app.services.authorization import Actor

router = APIRouter()


@router.patch("/me", response_model=UserOut)
def update_me(
    body: ProfileUpdate,
    current_user: Annotated[Actor, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    """Update own name, email or password."""
    user = users_service.update_own_profile(db, current_user.id, body)
    return UserOut.model_validate(user)


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    """Create an admin, employee or client user. CLIENT requires client_company_id."""
    return UserOut.model_validate(users_service.create_user(db, body))


@router.get("", response_model=UsersPage)
def list_users(
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    role: Role | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=users_service.MAX_PAGE_SIZE)] = 20,
) -> UsersPage:
    """List active users, optionally filtered by role."""
    items, total = users_service.list_users(db, role=role, page=page, limit=limit)
    return UsersPage(
        items=[UserOut.model_validate(u) for u in items],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: int,
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    return UserOut.model_validate(users_service.get_user(db, user_id))


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    body: UserUpdate,
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    return UserOut.model_validate(users_service.update_user(db, user_id, body))


@router.delete("/{user_id}", response_model=DeactivatedUser)
def deactivate_user(
    user_id: int,
    _admin: Annotated[Actor, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> DeactivatedUser:
    """Soft delete: sets is_active=false."""
    user = users_service.deactivate_user(db, user_id)
    return DeactivatedUser(id=user.id, is_active=user.is_active)
