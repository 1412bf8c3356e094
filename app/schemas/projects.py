"""Schemas for projects, assignments and status updates."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.project import ProjectStatus
from app.schemas.clients import CompanyOut
from app.schemas.users import UserSummary


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Mobile App Development"])
    description: str | None = None
    client_id: int = Field(..., description="Client company id")


class ProjectUpdate(BaseModel):
    """Admin update. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    client_id: int | None = None
    status: ProjectStatus | None = None


class ProjectStatusUpdate(BaseModel):
    status: ProjectStatus


class AssignRequest(BaseModel):
    employee_ids: list[int] = Field(..., min_length=1)


class AssignmentOut(BaseModel):
    model_config = {"from_attributes": True}

    employee: UserSummary
    assigned_at: datetime


class ProjectOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    description: str | None = None
    client_id: int
    client: CompanyOut | None = None
    status: ProjectStatus
    created_at: datetime
    updated_at: datetime
    assignments: list[AssignmentOut] = Field(default_factory=list)
