"""Messaging: send, read a conversation, and list permitted chat partners."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.schemas.messages import ChatPartner, ConversationPage, MessageCreate, MessageOut
from app.services import messages as messages_service
from app.services.authorization import Actor

router = APIRouter()


@router.post("", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def send_message(
    body: MessageCreate,
    current_user: Annotated[Actor, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageOut:
    """
    Send a message. Allowed pairs: ADMIN with anyone; EMPLOYEE and CLIENT when the
    employee is assigned to a project of the client's company.
    """
    message = messages_service.send_message(db, current_user, body.receiver_id, body.content)
    return MessageOut.model_validate(message)


@router.get("/partners", response_model=list[ChatPartner])
def chat_partners(
    current_user: Annotated[Actor, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[ChatPartner]:
    """Users the caller may message."""
    return messages_service.list_chat_partners(db, current_user)


@router.get("", response_model=ConversationPage)
def get_conversation(
    current_user: Annotated[Actor, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    peer_id: int,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=messages_service.MAX_PAGE_SIZE)] = 20,
) -> ConversationPage:
    """Paginated conversation with peer_id, newest first. Polled by the dashboard."""
    items, total = messages_service.get_conversation(
        db, current_user, peer_id, page=page, limit=limit
    )
    return ConversationPage(
        items=[MessageOut.model_validate(m) for m in items],
        total=total,
        page=page,
        limit=limit,
    )
