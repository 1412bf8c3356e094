"""Schemas for direct messaging."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.user import Role
from app.schemas.users import UserSummary


class MessageCreate(BaseModel):
    receiver_id: int
    content: str = Field(..., min_length=1, max_length=10_000)


class MessageOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    sender_id: int
    receiver_id: int
    content: str
    created_at: datetime
    sender: UserSummary
    receiver: UserSummary


class ConversationPage(BaseModel):
    """Messages between the caller and one peer, newest first."""

    items: list[MessageOut]
    total: int
    page: int
    limit: int


class ChatPartner(BaseModel):
    """A user the caller may message, with a display grouping."""

    id: int
    name: str
    role: Role
    category: str
