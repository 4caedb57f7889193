"""Administrator account management and overview counters"""
import logging
from typing import List

from sqlalchemy.orm import Session, joinedload

from smsdesk.errors.exceptions import NotFoundException
from smsdesk.models.credit_request import CreditRequest
from smsdesk.models.message import Message, MessageStatus, MessageType
from smsdesk.models.user import User
from smsdesk.schemas.admin_schemas import CreditsUpdatedResponse, ToggleUserResponse
from smsdesk.schemas.dashboard_schemas import AdminDashboardStats
from smsdesk.services import ledger_service
from smsdesk.services.auth_service import get_user_by_username

logger = logging.getLogger(__name__)


def _require_user(db: Session, username: str) -> User:
    user = get_user_by_username(db, username)
    if user is None:
        raise NotFoundException(detail="User not found")
    return user


def get_dashboard_stats(db: Session) -> AdminDashboardStats:
    """
    Counters for the overview cards. ``active_users`` leaves admins out and
    ``failed_messages`` is everything whose status is not ``sent``.
    """
    total_users = db.query(User).count()
    active_users = (
        db.query(User)
        .filter(User.is_active == True, User.is_admin == False)
        .count()
    )
    total_messages = db.query(Message).count()
    failed_messages = (
        db.query(Message)
        .filter(Message.status != MessageStatus.SENT.value)
        .count()
    )
    pending_credit_requests = (
        db.query(Message)
        .filter(
            Message.type == MessageType.CREDIT_REQUEST.value,
            Message.status == MessageStatus.PENDING.value,
        )
        .count()
    )

    return AdminDashboardStats(
        total_users=total_users,
        active_users=active_users,
        total_messages=total_messages,
        failed_messages=failed_messages,
        pending_credit_requests=pending_credit_requests,
    )


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def add_credits(db: Session, username: str, credits: int) -> CreditsUpdatedResponse:
    user = _require_user(db, username)
    ledger_service.add_credits(db, user, credits)
    return CreditsUpdatedResponse(
        message=f"Added {credits} credits to user {user.username}",
        username=user.username,
        messages_remaining=user.messages_remaining,
    )


def remove_credits(db: Session, username: str, credits: int) -> CreditsUpdatedResponse:
    """Take credits away; the balance stops at zero."""
    user = _require_user(db, username)
    ledger_service.remove_credits(db, user, credits)
    return CreditsUpdatedResponse(
        message=f"Removed {credits} credits from user {user.username}",
        username=user.username,
        messages_remaining=user.messages_remaining,
    )


def toggle_user(db: Session, username: str, active: bool) -> ToggleUserResponse:
    """
    Enable or disable an account. Disabled users can no longer log in or
    send, but existing sessions still resolve.
    """
    user = _require_user(db, username)
    user.is_active = active
    db.commit()
    db.refresh(user)

    verb = "Activated" if active else "Deactivated"
    logger.warning(f"[Admin] {verb} user {user.username} (id={user.id})")
    return ToggleUserResponse(
        message=f"{verb} user {user.username}",
        username=user.username,
        is_active=user.is_active,
    )


def list_credit_requests(db: Session) -> List[CreditRequest]:
    """Every credit request with its message and requester loaded, newest first"""
    return (
        db.query(CreditRequest)
        .options(joinedload(CreditRequest.message), joinedload(CreditRequest.user))
        .order_by(CreditRequest.created_at.desc(), CreditRequest.id.desc())
        .all()
    )
