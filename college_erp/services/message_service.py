# college_erp/services/message_service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from college_erp.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from college_erp.models.message import Message
from college_erp.models.user import User
from college_erp.schemas.message import MessageCreate
from college_erp.schemas.realtime import RealtimeMessagePayload

logger = logging.getLogger(__name__)

DIRECT = "Direct"
BROADCAST = "Broadcast"


def get_message(db: Session, message_id: int) -> Optional[Message]:
    return (
        db.query(Message)
        .options(joinedload(Message.sender))
        .filter(Message.id == message_id)
        .first()
    )


def create_message(
    db: Session,
    *,
    sender_id: Optional[str],
    obj_in: MessageCreate,
) -> Message:
    """
    Persist a Direct or Broadcast message.

    Direct needs both a sender and an existing receiver; Broadcast drops
    whatever receiver_id was sent.
    """
    receiver_id = obj_in.receiver_id
    if obj_in.type == DIRECT:
        if not receiver_id:
            raise BadRequestError("Receiver ID is required for direct messages.")
        if not sender_id:
            raise BadRequestError("Sender ID is required for direct messages.")
        if db.get(User, receiver_id) is None:
            raise NotFoundError("Receiver not found.")
    else:
        receiver_id = None

    db_obj = Message(
        sender_id=sender_id,
        receiver_id=receiver_id,
        subject=obj_in.subject,
        content=obj_in.content,
        type=obj_in.type,
        priority=obj_in.priority,
        is_read=False,
        timestamp=datetime.now(timezone.utc),
    )
    db.add(db_obj)
    db.commit()
    logger.info(
        f"{obj_in.type} message {db_obj.id} created by {sender_id}"
        + (f" for {receiver_id}" if receiver_id else "")
    )
    return get_message(db, db_obj.id)


def list_received_messages(
    db: Session,
    *,
    user_id: str,
    skip: int = 0,
    limit: int = 100,
) -> List[Message]:
    """
    Direct messages addressed to ``user_id`` plus every Broadcast, newest first.
    """
    return (
        db.query(Message)
        .options(joinedload(Message.sender))
        .filter(
            or_(
                Message.type == BROADCAST,
                (Message.type == DIRECT) & (Message.receiver_id == user_id),
            )
        )
        .order_by(Message.timestamp.desc(), Message.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def mark_message_as_read(db: Session, *, message_id: int, user_id: str) -> Message:
    message = get_message(db, message_id)
    if message is None:
        raise NotFoundError("Message not found.")

    if message.type == BROADCAST:
        # per-user read state for broadcasts is not tracked
        return message

    if message.receiver_id != user_id:
        logger.warning(f"User {user_id} tried to mark message {message_id} as read")
        raise ForbiddenError("Forbidden to mark this message as read.")

    if not message.is_read:
        message.is_read = True
        db.add(message)
        db.commit()
        db.refresh(message)
        logger.info(f"Message {message_id} marked as read by {user_id}")
    return message


def build_realtime_payload(message: Message) -> RealtimeMessagePayload:
    if message.type == BROADCAST:
        title = f"Announcement: {message.subject}"
    else:
        title = f"New Message: {message.subject}"

    timestamp = message.timestamp or datetime.now(timezone.utc)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)

    return RealtimeMessagePayload(
        id=str(message.id),
        sender=message.sender.name if message.sender else None,
        subject=message.subject,
        content=message.content,
        timestamp=timestamp.isoformat(),
        priority=message.priority,
        type=message.type,
        title=title,
    )
