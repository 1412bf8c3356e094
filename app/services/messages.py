"""Direct messages gated by the pairwise messaging rule. Clients poll for new messages."""

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query, Session, joinedload

from app.core.database import transaction
from app.core.errors import NotFoundError
from app.models import Message, User
from app.schemas.messages import ChatPartner
from app.services import authorization
from app.services.authorization import Actor

MAX_PAGE_SIZE = 100


def _message_query(db: Session) -> Query:
    return db.query(Message).options(
        joinedload(Message.sender),
        joinedload(Message.receiver),
    )


def send_message(db: Session, sender: Actor, receiver_id: int, content: str) -> Message:
    receiver = db.get(User, receiver_id)
    if receiver is None or not receiver.is_active:
        raise NotFoundError("Receiver not found")
    authorization.messaging_decision(db, sender.id, receiver_id).enforce(sender, "messaging")
    message = Message(sender_id=sender.id, receiver_id=receiver_id, content=content)
    with transaction(db):
        db.add(message)
    return _message_query(db).filter(Message.id == message.id).one()


def get_conversation(
    db: Session,
    viewer: Actor,
    peer_id: int,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[Message], int]:
    """
    Messages exchanged with one peer, newest first. Returns (items, total).

    Reading uses the same pairwise rule as sending.
    """
    authorization.messaging_decision(db, viewer.id, peer_id).enforce(viewer, "conversation")
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    between = or_(
        and_(Message.sender_id == viewer.id, Message.receiver_id == peer_id),
        and_(Message.sender_id == peer_id, Message.receiver_id == viewer.id),
    )
    total = db.query(Message).filter(between).count()
    items = (
        _message_query(db)
        .filter(between)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total


def list_chat_partners(db: Session, actor: Actor) -> list[ChatPartner]:
    return authorization.chat_partners(db, actor)
