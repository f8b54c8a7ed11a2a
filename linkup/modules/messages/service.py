from typing import List, Optional

from loguru import logger
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from linkup.core import config
from linkup.core.errors import AuthorizationError, NotFoundError, ValidationError
from linkup.modules.connections.service import are_connected
from linkup.modules.profiles.service import identity_exists
from linkup.schemas.enums import MessageKind

from .models import Message


# ---------- MESSAGING ----------

def send_message(
    db: Session,
    sender_id: str,
    receiver_id: str,
    body: str,
    kind=MessageKind.text,
    media_ref: Optional[str] = None,
) -> Message:
    try:
        kind = MessageKind(kind)
    except ValueError:
        raise ValidationError(f"Unsupported message kind: {kind}")

    body = body or ""

    if not receiver_id:
        raise ValidationError("Receiver ID is required")

    if sender_id == receiver_id:
        raise ValidationError("Cannot send a message to yourself")

    if kind == MessageKind.text and not body.strip():
        raise ValidationError("Message body is required")

    if kind != MessageKind.text and not media_ref:
        raise ValidationError(f"media_ref is required for {kind.value} messages")

    if not identity_exists(db, receiver_id):
        raise NotFoundError("User not found")

    if config.REQUIRE_CONNECTION_FOR_MESSAGES and not are_connected(db, sender_id, receiver_id):
        raise AuthorizationError("You can only message your connections")

    msg = Message(
        sender_id=sender_id,
        receiver_id=receiver_id,
        body=body,
        kind=kind.value,
        media_ref=media_ref,
    )
    db.add(msg)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(msg)

    logger.info(f"Message {msg.id} persisted: {sender_id} -> {receiver_id} ({kind.value})")
    return msg


def get_message(db: Session, message_id: int) -> Optional[Message]:
    return db.get(Message, message_id)


def get_history(db: Session, user_a: str, user_b: str) -> List[Message]:
    # id breaks ties between equal timestamps in insertion order
    return (
        db.query(Message)
        .filter(
            or_(
                and_(Message.sender_id == user_a, Message.receiver_id == user_b),
                and_(Message.sender_id == user_b, Message.receiver_id == user_a),
            )
        )
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )


def mark_read(db: Session, reader_id: str, other_id: str) -> int:
    updated = (
        db.query(Message)
        .filter(
            Message.sender_id == other_id,
            Message.receiver_id == reader_id,
            Message.read.is_(False),
        )
        .update({"read": True}, synchronize_session=False)
    )
    db.commit()
    logger.debug(f"Marked {updated} messages from {other_id} read for {reader_id}")
    return updated


def unread_count(db: Session, reader_id: str) -> int:
    return (
        db.query(Message)
        .filter(Message.receiver_id == reader_id, Message.read.is_(False))
        .count()
    )
