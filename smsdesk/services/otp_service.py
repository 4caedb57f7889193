"""OTP registry: short-lived verification codes keyed by phone number."""
from datetime import timedelta
from typing import Optional
import logging
import secrets
import string

from sqlalchemy.orm import Session

from smsdesk.core.config import settings
from smsdesk.models.otp import Otp
from smsdesk.services.auth_service import utcnow

logger = logging.getLogger(__name__)


def generate_otp() -> str:
    """Return a cryptographically random 6-digit numeric OTP."""
    return "".join(secrets.choice(string.digits) for _ in range(6))


def issue_otp(db: Session, phone: str) -> Otp:
    """
    Persist a fresh, unverified code for *phone* and return the row.

    Earlier rows are left in place; only the newest one is ever consulted.
    """
    otp_row = Otp(
        phone=phone,
        code=generate_otp(),
        expires_at=utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
        verified=False,
        created_at=utcnow(),
    )
    db.add(otp_row)
    db.commit()
    db.refresh(otp_row)
    return otp_row


def get_latest_otp(db: Session, phone: str) -> Optional[Otp]:
    return (
        db.query(Otp)
        .filter(Otp.phone == phone)
        .order_by(Otp.created_at.desc(), Otp.id.desc())
        .first()
    )


def verify_otp(db: Session, phone: str, code: str) -> Otp:
    """
    Check *code* against the latest OTP issued for *phone*.

    Raises ValueError with a caller-facing message on failure. On success the
    row is marked verified and returned.
    """
    otp_row = get_latest_otp(db, phone)

    if otp_row is None:
        raise ValueError("No verification code found")

    if otp_row.verified:
        raise ValueError("Code already verified")

    if utcnow() > otp_row.expires_at:
        raise ValueError("Verification code expired")

    if otp_row.code != code.strip():
        raise ValueError("Invalid verification code")

    otp_row.verified = True
    db.commit()
    logger.info(f"OTP verified for phone={phone}")
    return otp_row


def is_phone_verified(db: Session, phone: str) -> bool:
    """
    True when the latest OTP for *phone* has been verified.

    Expiry is not re-checked here: once verified, the phone stays verified
    until a newer code is issued.
    """
    otp_row = get_latest_otp(db, phone)
    return bool(otp_row and otp_row.verified)
