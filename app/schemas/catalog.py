"""Schemas for the service catalog."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Consulting"])
    description: str | None = None
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2, examples=["99.99"])


class ServiceUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)


class ServiceOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    description: str | None = None
    price: Decimal
    created_at: datetime
    updated_at: datetime
