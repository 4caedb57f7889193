"""User model with credit balance and admin flag"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index, func
from sqlalchemy.orm import relationship
from smsdesk.db.base import Base


class User(Base):
    """
    Registered account. ``messages_remaining`` is the credit balance and
    ``messages_sent`` the lifetime send counter; both are mutated only through
    the ledger service.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    phone = Column(String(15), nullable=False, index=True)

    messages_remaining = Column(Integer, default=5, nullable=False)
    messages_sent = Column(Integer, default=0, nullable=False)

    is_admin = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # bumped to revoke every outstanding session token
    session_version = Column(Integer, default=0, nullable=False)

    last_activity = Column(DateTime(timezone=False), server_default=func.now(), nullable=True)
    created_at = Column(DateTime(timezone=False), server_default=func.now(), nullable=False)

    messages = relationship("Message", back_populates="user")
    contacts = relationship("Contact", back_populates="user", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_users_username_lower", func.lower(username), unique=True),
    )

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', admin={self.is_admin})>"
