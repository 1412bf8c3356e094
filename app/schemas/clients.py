"""Schemas for client companies."""

from datetime import datetime

from pydantic import BaseModel, Field


class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255, examples=["Acme Corp"])


class CompanyUpdate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)


class CompanyOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    created_at: datetime
    updated_at: datetime
