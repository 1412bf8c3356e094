"""Schema for the health probe."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    environment: Literal["dev", "prod"] = Field(description="APP_ENV of the running instance")
    database: Literal["connected", "disconnected"]
