"""CRUD operations for message audit records"""
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from smsdesk.models.message import Message, MessageStatus, MessageType


def create_message(
    db: Session,
    user_id: int,
    phone: str,
    text: str,
    message_type: MessageType = MessageType.CUSTOM,
    status: MessageStatus = MessageStatus.SENT,
    commit: bool = True,
) -> Message:
    """
    Insert a message record. ``commit=False`` leaves the row pending in the
    session so callers can add related rows in the same transaction.
    """
    db_message = Message(
        user_id=user_id,
        phone=phone,
        message=text,
        type=message_type.value,
        status=status.value,
    )
    db.add(db_message)
    if commit:
        db.commit()
        db.refresh(db_message)
    else:
        db.flush()
    return db_message


def get_message(db: Session, message_id: int) -> Optional[Message]:
    return db.query(Message).filter(Message.id == message_id).first()


def get_user_messages(db: Session, user_id: int) -> List[Message]:
    """
    Messages belonging to one user, newest first
    """
    return (
        db.query(Message)
        .filter(Message.user_id == user_id)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .all()
    )


def get_all_messages(db: Session, message_type: Optional[str] = None) -> List[Message]:
    """
    All messages with their sender loaded, newest first, optionally filtered by type
    """
    query = db.query(Message).options(joinedload(Message.user))

    if message_type:
        query = query.filter(Message.type == message_type)

    return query.order_by(Message.created_at.desc(), Message.id.desc()).all()


def update_message_status(db: Session, message: Message, status: MessageStatus, commit: bool = True) -> Message:
    message.status = status.value
    if commit:
        db.commit()
        db.refresh(message)
    return message


def delete_message(db: Session, message_id: int) -> bool:
    """
    Delete one message. Returns False when it does not exist.
    """
    message = get_message(db, message_id)
    if message is None:
        return False
    db.delete(message)
    db.commit()
    return True


def delete_messages(db: Session, message_ids: List[int]) -> int:
    """
    Delete every message in *message_ids* that exists; returns how many went.
    Rows are deleted one by one so a credit request goes with its message.
    """
    messages = db.query(Message).filter(Message.id.in_(message_ids)).all()
    for message in messages:
        db.delete(message)
    db.commit()
    return len(messages)
