"""Protected-number registry"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from smsdesk.models.protected_number import ProtectedNumber

logger = logging.getLogger(__name__)


class AlreadyProtectedError(ValueError):
    pass


class NotProtectedError(ValueError):
    pass


def is_protected(db: Session, phone: str) -> bool:
    return (
        db.query(ProtectedNumber.id).filter(ProtectedNumber.phone == phone).first()
        is not None
    )


def protect(db: Session, phone: str, user_id: Optional[int] = None) -> ProtectedNumber:
    """
    Add *phone* to the registry. ``user_id=None`` marks it admin-protected.
    """
    if is_protected(db, phone):
        raise AlreadyProtectedError(phone)

    row = ProtectedNumber(phone=phone, user_id=user_id)
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(f"Number protected: phone={phone}, owner={user_id or 'admin'}")
    return row


def unprotect(db: Session, phone: str) -> None:
    row = db.query(ProtectedNumber).filter(ProtectedNumber.phone == phone).first()
    if row is None:
        raise NotProtectedError(phone)

    db.delete(row)
    db.commit()
    logger.info(f"Number unprotected: phone={phone}")


def list_protected(db: Session) -> List[ProtectedNumber]:
    return (
        db.query(ProtectedNumber)
        .order_by(ProtectedNumber.created_at.desc(), ProtectedNumber.id.desc())
        .all()
    )
