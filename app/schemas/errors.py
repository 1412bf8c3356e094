"""Error body returned for every failed request."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    statusCode: int = Field(..., description="HTTP status code")
    message: str | list[str] = Field(
        ..., description="Error message, or a list of validation messages"
    )
