"""CreditRequest: structured payload of a credit_request message."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from smsdesk.db.base import Base


class CreditRequest(Base):
    """
    Amount and reason of a user's request for more credits.

    The approval state lives on the companion ``Message`` row
    (pending -> approved | rejected) so the admin message views and the
    credit-request view never disagree.
    """
    __tablename__ = "credit_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    message_id = Column(
        Integer, ForeignKey("messages.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    credits = Column(Integer, nullable=False)
    reason = Column(String(200), nullable=False)

    processed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    processed_at = Column(DateTime(timezone=False), nullable=True)
    created_at = Column(DateTime(timezone=False), server_default=func.now(), nullable=False)

    message = relationship("Message", back_populates="credit_request")
    user = relationship("User", foreign_keys=[user_id])

    @property
    def status(self):
        return self.message.status if self.message else None

    @property
    def username(self):
        return self.user.username if self.user else None

    def __repr__(self):
        return (
            f"<CreditRequest(id={self.id}, user_id={self.user_id}, "
            f"credits={self.credits}, message_id={self.message_id})>"
        )
