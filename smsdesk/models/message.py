"""Message audit records"""
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from smsdesk.db.base import Base


class MessageStatus(str, Enum):
    SENT = "sent"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    FAILED = "failed"


class MessageType(str, Enum):
    CUSTOM = "custom"
    BOMBER = "bomber"
    CREDIT_REQUEST = "credit_request"
    SYSTEM = "system"


class Message(Base):
    """One row per send, credit request or system action. Only ``status`` changes after insert."""
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    phone = Column(String(15), nullable=False)
    message = Column(Text, nullable=False)

    # Stored as plain strings so new values need no enum migration
    status = Column(String(20), nullable=False, default=MessageStatus.SENT.value, index=True)
    type = Column(String(20), nullable=False, default=MessageType.CUSTOM.value, index=True)

    created_at = Column(DateTime(timezone=False), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="messages")
    credit_request = relationship(
        "CreditRequest",
        back_populates="message",
        uselist=False,
        cascade="all, delete-orphan",
    )

    @property
    def username(self):
        return self.user.username if self.user else None

    def __repr__(self):
        return (
            f"<Message(id={self.id}, user_id={self.user_id}, "
            f"type={self.type}, status={self.status})>"
        )
