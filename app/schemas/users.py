"""Schemas for user administration and self-service profile updates."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.models.user import Role


class UserSummary(BaseModel):
    """Minimal user reference embedded in projects and messages."""

    model_config = {"from_attributes": True}

    id: int
    name: str
    email: str


class UserOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    email: str
    role: Role
    is_active: bool
    client_company_id: int | None = None
    created_at: datetime
    updated_at: datetime


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role: Role
    client_company_id: int | None = Field(
        default=None,
        description="Required when role is CLIENT.",
    )


class UserUpdate(BaseModel):
    """Admin update. Omitted fields are left unchanged; client_company_id may be set to null."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )
    role: Role | None = None
    is_active: bool | None = None
    client_company_id: int | None = None


class ProfileUpdate(BaseModel):
    """Self-service update: name, email and password only."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )


class UsersPage(BaseModel):
    """Paginated response for GET /users (active users only)."""

    items: list[UserOut]
    total: int
    page: int
    limit: int


class DeactivatedUser(BaseModel):
    id: int
    is_active: bool = False
