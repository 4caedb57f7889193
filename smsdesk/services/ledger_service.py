"""Credit ledger: balance and send-counter bookkeeping on the User row."""
import logging

from sqlalchemy.orm import Session

from smsdesk.models.user import User
from smsdesk.services.auth_service import utcnow

logger = logging.getLogger(__name__)

# NOTE: every operation below is read-modify-write on the loaded row with no
# row lock, so two concurrent debits for the same user can race.


def debit(db: Session, user: User) -> User:
    """
    Charge one credit for a delivered message and bump the sent counter.
    """
    user.messages_remaining = max(0, (user.messages_remaining or 0) - 1)
    user.messages_sent = (user.messages_sent or 0) + 1
    user.last_activity = utcnow()
    db.commit()
    db.refresh(user)
    logger.info(
        f"Ledger debit: user_id={user.id}, "
        f"remaining={user.messages_remaining}, sent={user.messages_sent}"
    )
    return user


def add_credits(db: Session, user: User, credits: int) -> User:
    """
    Top-up *user* by *credits*. No upper bound.
    """
    if credits < 1:
        raise ValueError("Credits must be a positive number")
    user.messages_remaining = (user.messages_remaining or 0) + credits
    db.commit()
    db.refresh(user)
    logger.info(
        f"Ledger add: user_id={user.id}, added={credits}, "
        f"remaining={user.messages_remaining}"
    )
    return user


def remove_credits(db: Session, user: User, credits: int, commit: bool = True) -> User:
    """
    Remove up to *credits* from *user*; the balance never drops below zero.
    """
    if credits < 1:
        raise ValueError("Credits must be a positive number")
    user.messages_remaining = max(0, (user.messages_remaining or 0) - credits)
    if not commit:
        return user
    db.commit()
    db.refresh(user)
    logger.info(
        f"Ledger remove: user_id={user.id}, removed={credits}, "
        f"remaining={user.messages_remaining}"
    )
    return user


def debit_bomber(db: Session, user: User, repeat: int) -> User:
    """
    Charge a bomber burst: *repeat* credits are removed while
    ``messages_sent`` grows by one per burst regardless of *repeat*.
    Both changes land in a single commit.
    """
    remove_credits(db, user, repeat, commit=False)
    user.messages_sent = (user.messages_sent or 0) + 1
    user.last_activity = utcnow()
    db.commit()
    db.refresh(user)
    logger.info(
        f"Ledger bomber debit: user_id={user.id}, repeat={repeat}, "
        f"remaining={user.messages_remaining}, sent={user.messages_sent}"
    )
    return user
