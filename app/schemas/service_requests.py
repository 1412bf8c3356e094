"""Schemas for client service requests."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.service_request import RequestStatus
from app.schemas.catalog import ServiceOut
from app.schemas.clients import CompanyOut


class ServiceRequestCreate(BaseModel):
    service_id: int
    client_id: int = Field(..., description="Must equal the caller's own client company id")
    details: str | None = None


class ServiceRequestOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    client_id: int
    service_id: int
    status: RequestStatus
    details: str | None = None
    created_by: int
    created_at: datetime
    updated_at: datetime
    service: ServiceOut | None = None
    client: CompanyOut | None = None
