"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field

from app.models.user import Role


class LoginRequest(BaseModel):
    """Credentials for login. Email format is checked by the login flow, not here."""

    email: str = Field(..., max_length=255, description="Account email (case-insensitive)")
    password: str = Field(..., max_length=128, description="Password")


class UserProfile(BaseModel):
    """Sanitized user profile; never carries the password hash."""

    model_config = {"from_attributes": True}

    id: int
    name: str
    email: str
    role: Role
    is_active: bool
    client_company_id: int | None = None


class LoginResponse(BaseModel):
    """Access token and profile. The refresh token is set as an http-only cookie."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserProfile


class AccessTokenResponse(BaseModel):
    """New access token issued from a valid refresh cookie."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
