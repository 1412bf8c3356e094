"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.client_company import ClientCompany
from app.models.message import Message
from app.models.project import Project, ProjectEmployee, ProjectStatus
from app.models.service import Service
from app.models.service_request import RequestStatus, ServiceRequest
from app.models.user import Role, User

__all__ = [
    "Base",
    "ClientCompany",
    "Message",
    "Project",
    "ProjectEmployee",
    "ProjectStatus",
    "RequestStatus",
    "Role",
    "Service",
    "ServiceRequest",
    "User",
]
