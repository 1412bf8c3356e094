"""User administration and self-service profile updates."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.core.security import hash_password
from app.models import ClientCompany, Role, User
from app.schemas.users import ProfileUpdate, UserCreate, UserUpdate
from app.services.auth import normalize_email

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def _email_taken(db: Session, email: str, exclude_id: int | None = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def _check_client_link(db: Session, role: str, company_id: int | None) -> None:
    """A CLIENT user must point at an existing company."""
    if role != Role.CLIENT:
        return
    if company_id is None:
        raise BadRequestError("CLIENT role requires client_company_id")
    if db.get(ClientCompany, company_id) is None:
        raise NotFoundError("Client company not found")


@contextmanager
def _commit_email_change(db: Session, message: str) -> Iterator[None]:
    """
    Transaction for writes that may set an email.

    A concurrent writer can claim the email between the check and the commit; the
    unique index then rejects the row and the caller gets ConflictError.
    """
    try:
        with transaction(db):
            yield
    except IntegrityError as e:
        logger.info("Email uniqueness violated at commit")
        raise ConflictError(message) from e


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def create_user(db: Session, data: UserCreate) -> User:
    email = normalize_email(data.email)
    if _email_taken(db, email):
        raise ConflictError("User with this email already exists")
    _check_client_link(db, data.role, data.client_company_id)
    user = User(
        name=data.name.strip(),
        email=email,
        password_hash=hash_password(data.password),
        role=data.role.value,
        is_active=True,
        client_company_id=data.client_company_id,
    )
    with _commit_email_change(db, "User with this email already exists"):
        db.add(user)
    db.refresh(user)
    logger.info("User created", extra={"user_id": user.id, "role": user.role})
    return user


def list_users(
    db: Session,
    role: Role | None = None,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[User], int]:
    """Active users, newest first. Returns (items, total)."""
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    query = db.query(User).filter(User.is_active.is_(True))
    if role is not None:
        query = query.filter(User.role == role.value)
    total = query.count()
    items = (
        query.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total


def get_user(db: Session, user_id: int) -> User:
    return _get_user(db, user_id)


def update_user(db: Session, user_id: int, data: UserUpdate) -> User:
    """Admin update of any field, including role, liveness and company link."""
    user = _get_user(db, user_id)

    email = normalize_email(data.email) if data.email is not None else user.email
    if email != user.email and _email_taken(db, email, exclude_id=user.id):
        raise ConflictError("Email already in use")
    role = data.role.value if data.role is not None else user.role
    company_id = (
        data.client_company_id
        if "client_company_id" in data.model_fields_set
        else user.client_company_id
    )
    _check_client_link(db, role, company_id)

    with _commit_email_change(db, "Email already in use"):
        user.email = email
        user.role = role
        user.client_company_id = company_id
        if data.name is not None:
            user.name = data.name.strip()
        if data.password:
            user.password_hash = hash_password(data.password)
        if data.is_active is not None:
            user.is_active = data.is_active
    db.refresh(user)
    return user


def update_own_profile(db: Session, user_id: int, data: ProfileUpdate) -> User:
    """Self-service: only name, email and password can change."""
    user = _get_user(db, user_id)
    email = normalize_email(data.email) if data.email is not None else user.email
    if email != user.email and _email_taken(db, email, exclude_id=user.id):
        raise ConflictError("Email already in use")

    with _commit_email_change(db, "Email already in use"):
        user.email = email
        if data.name is not None:
            user.name = data.name.strip()
        if data.password:
            user.password_hash = hash_password(data.password)
    db.refresh(user)
    return user


def deactivate_user(db: Session, user_id: int) -> User:
    """Soft delete: the row stays, is_active becomes False."""
    user = _get_user(db, user_id)
    with transaction(db):
        user.is_active = False
    logger.info("User deactivated", extra={"user_id": user.id})
    return user
