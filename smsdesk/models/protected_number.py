"""Phone numbers exempt from bomber sends"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from smsdesk.db.base import Base


class ProtectedNumber(Base):
    __tablename__ = "protected_numbers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    phone = Column(String(15), unique=True, nullable=False, index=True)
    # NULL means the number was protected by an administrator
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=False), server_default=func.now(), nullable=False)

    @property
    def is_admin_protected(self) -> bool:
        return self.user_id is None

    def __repr__(self):
        return f"<ProtectedNumber(phone={self.phone!r}, user_id={self.user_id})>"
