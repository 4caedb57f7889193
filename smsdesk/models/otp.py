"""Otp: one-time codes that gate registration, keyed by phone."""
from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from smsdesk.db.base import Base


class Otp(Base):
    """
    Holds a 6-digit code sent by SMS before account creation.

    Lifecycle
    ---------
    1. User submits the registration form -> row inserted (verified=False).
    2. User enters the code -> verified=True.
    3. Completing registration requires the latest row for the phone to be
       verified. Resending inserts a newer row; old rows are never deleted.
    """

    __tablename__ = "otps"

    id = Column(Integer, primary_key=True, autoincrement=True)
    phone = Column(String(15), nullable=False, index=True)
    code = Column(String(6), nullable=False)

    expires_at = Column(DateTime(timezone=False), nullable=False)
    verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(
        DateTime(timezone=False), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<Otp(id={self.id}, phone={self.phone!r}, "
            f"expires_at={self.expires_at}, verified={self.verified})>"
        )
