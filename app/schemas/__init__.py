"""Pydantic request/response schemas."""

from app.schemas.auth import AccessTokenResponse, LoginRequest, LoginResponse, UserProfile
from app.schemas.catalog import ServiceCreate, ServiceOut, ServiceUpdate
from app.schemas.clients import CompanyCreate, CompanyOut, CompanyUpdate
from app.schemas.errors import ErrorResponse
from app.schemas.health import HealthResponse
from app.schemas.messages import ChatPartner, ConversationPage, MessageCreate, MessageOut
from app.schemas.projects import (
    AssignRequest,
    ProjectCreate,
    ProjectOut,
    ProjectStatusUpdate,
    ProjectUpdate,
)
from app.schemas.service_requests import ServiceRequestCreate, ServiceRequestOut
from app.schemas.stats import AdminStats
from app.schemas.users import (
    ProfileUpdate,
    UserCreate,
    UserOut,
    UsersPage,
    UserSummary,
    UserUpdate,
)

__all__ = [
    "AccessTokenResponse",
    "AdminStats",
    "AssignRequest",
    "ChatPartner",
    "CompanyCreate",
    "CompanyOut",
    "CompanyUpdate",
    "ConversationPage",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageCreate",
    "MessageOut",
    "ProfileUpdate",
    "ProjectCreate",
    "ProjectOut",
    "ProjectStatusUpdate",
    "ProjectUpdate",
    "ServiceCreate",
    "ServiceOut",
    "ServiceRequestCreate",
    "ServiceRequestOut",
    "ServiceUpdate",
    "UserCreate",
    "UserOut",
    "UserProfile",
    "UserSummary",
    "UserUpdate",
    "UsersPage",
]
