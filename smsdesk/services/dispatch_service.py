"""
Credit-gated message dispatch.

Each workflow is a straight line of checks with early exits. The ledger and
the audit trail are only touched after the gateway reports success, so a
failed call leaves no trace besides the log.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from smsdesk.errors.exceptions import (
    AccountDisabledException,
    BadRequestException,
    ForbiddenException,
    GatewayException,
    InsufficientCreditsException,
    NotFoundException,
    ProtectedNumberException,
)
from smsdesk.models.credit_request import CreditRequest
from smsdesk.models.message import MessageStatus, MessageType
from smsdesk.models.user import User
from smsdesk.schemas.admin_schemas import CreditRequestApproved
from smsdesk.schemas.message_schemas import (
    AdminBomberResponse,
    BomberResponse,
    CreditRequestSubmitted,
    CustomMessageResponse,
    GatewayResultItem,
    SendMessageResponse,
)
from smsdesk.services import ledger_service
from smsdesk.services.auth_service import get_user_by_id, utcnow
from smsdesk.services.message_crud import create_message, get_message, update_message_status
from smsdesk.services.protection_service import is_protected
from smsdesk.services.sms_gateway import SmsGatewayClient
from smsdesk.utils.logger import log_dispatch_operation

logger = logging.getLogger(__name__)

SYSTEM_PHONE = "SYSTEM"


# ── user sends ────────────────────────────────────────────────────────────────

async def send_single(
    db: Session,
    gateway: SmsGatewayClient,
    user: User,
    phone: str,
    text: str,
) -> SendMessageResponse:
    """One custom message, one credit."""
    if not user.is_active:
        raise AccountDisabledException()
    if user.messages_remaining <= 0:
        raise ForbiddenException(detail="You have no messages remaining")

    result = await gateway.send_custom(phone, text)
    log_dispatch_operation(
        "custom", phone, result.success, result.error or "",
        user_id=user.id, username=user.username,
    )
    if not result.success:
        raise GatewayException(detail=result.error or "Failed to send message")

    ledger_service.debit(db, user)
    saved = create_message(db, user.id, phone, text, MessageType.CUSTOM, MessageStatus.SENT)

    return SendMessageResponse(
        message="Message sent successfully",
        message_id=result.message_id,
        id=saved.id,
        messages_remaining=user.messages_remaining,
        messages_sent=user.messages_sent,
    )


async def send_bomber(
    db: Session,
    gateway: SmsGatewayClient,
    user: User,
    phone: str,
    repeat: int,
) -> BomberResponse:
    """A metered burst through the bomber endpoint."""
    if user.messages_remaining < repeat:
        raise InsufficientCreditsException()
    if not user.is_active:
        raise AccountDisabledException(detail="Your account is suspended")
    if is_protected(db, phone):
        raise ProtectedNumberException()

    result = await gateway.send_bomber(phone, repeat)
    log_dispatch_operation(
        "bomber", phone, result.success, f"x{repeat} {result.error or ''}",
        user_id=user.id, username=user.username,
    )
    if not result.success:
        raise GatewayException(detail=result.error or "Failed to send messages")

    ledger_service.debit_bomber(db, user, repeat)
    create_message(
        db, user.id, phone, f"BOMBER: Sent {repeat} messages",
        MessageType.BOMBER, MessageStatus.SENT,
    )

    return BomberResponse(
        message=f"Successfully sent {repeat} messages",
        messages_remaining=user.messages_remaining,
    )


# ── admin sends (unmetered) ───────────────────────────────────────────────────

async def admin_send_custom(
    db: Session,
    gateway: SmsGatewayClient,
    admin: User,
    phone: str,
    text: str,
) -> CustomMessageResponse:
    result = await gateway.send_custom(phone, text)
    log_dispatch_operation(
        "admin-custom", phone, result.success, result.error or "",
        user_id=admin.id, username=admin.username,
    )
    if not result.success:
        raise GatewayException(detail=result.error or "Failed to send message")

    create_message(db, admin.id, phone, text, MessageType.CUSTOM, MessageStatus.SENT)
    return CustomMessageResponse(
        message=f"Successfully sent message to {phone}",
        message_id=result.message_id,
    )


async def admin_bomber(
    db: Session,
    gateway: SmsGatewayClient,
    admin: User,
    phone: str,
    repeat: int,
    text: str = None,
) -> AdminBomberResponse:
    """
    With *text*: ``repeat`` sequential custom sends, reporting how many went
    through. Without: one call to the bomber endpoint.
    """
    if is_protected(db, phone):
        raise ProtectedNumberException()

    if text:
        outcome = await gateway.send_custom_repeated(phone, text, repeat)
        succeeded = outcome.success_count
        log_dispatch_operation(
            "admin-bomber", phone, succeeded > 0, f"{succeeded}/{repeat} delivered",
            user_id=admin.id, username=admin.username,
        )
        create_message(
            db, admin.id, phone, f"BOMBER: Sent {succeeded} of {repeat} messages: {text}",
            MessageType.BOMBER,
            MessageStatus.SENT if succeeded > 0 else MessageStatus.FAILED,
        )
        results: List[GatewayResultItem] = [
            GatewayResultItem(success=r.success, message_id=r.message_id, error=r.error)
            for r in outcome.results
        ]
        return AdminBomberResponse(
            message=f"Sent {succeeded} of {repeat} messages successfully",
            results=results,
        )

    result = await gateway.send_bomber(phone, repeat)
    log_dispatch_operation(
        "admin-bomber", phone, result.success, f"x{repeat} {result.error or ''}",
        user_id=admin.id, username=admin.username,
    )
    if not result.success:
        raise GatewayException(detail=result.error or "Failed to send bomber messages")

    create_message(
        db, admin.id, phone, f"BOMBER: Requested {repeat} messages",
        MessageType.BOMBER, MessageStatus.SENT,
    )
    return AdminBomberResponse(message=f"Requested {repeat} messages to be sent")


# ── credit requests ───────────────────────────────────────────────────────────

def submit_credit_request(db: Session, user: User, credits: int, reason: str) -> CreditRequestSubmitted:
    """
    Record a pending request: a readable message row for the admin inbox plus
    the structured amount/reason used when it is approved.
    """
    message = create_message(
        db,
        user.id,
        SYSTEM_PHONE,
        f"CREDIT REQUEST - User: {user.username}, Credits: {credits}, Reason: {reason}",
        MessageType.CREDIT_REQUEST,
        MessageStatus.PENDING,
        commit=False,
    )
    db.add(CreditRequest(message_id=message.id, user_id=user.id, credits=credits, reason=reason))
    db.commit()

    logger.info(f"Credit request: user_id={user.id}, credits={credits}, message_id={message.id}")
    return CreditRequestSubmitted(message="Credit request submitted successfully", credits=credits)


def _load_pending_request(db: Session, message_id: int) -> CreditRequest:
    message = get_message(db, message_id)
    if message is None or message.type != MessageType.CREDIT_REQUEST.value or message.credit_request is None:
        raise NotFoundException(detail="Credit request not found")
    if message.status != MessageStatus.PENDING.value:
        raise BadRequestException(detail="Credit request already processed")
    return message.credit_request


def approve_credit_request(db: Session, admin: User, message_id: int) -> CreditRequestApproved:
    """
    pending -> approved: credit the requester with the stored amount and leave
    a system message in their history.
    """
    request = _load_pending_request(db, message_id)
    requester = get_user_by_id(db, request.user_id)
    if requester is None:
        raise NotFoundException(detail="User not found")

    request.processed_by = admin.id
    request.processed_at = utcnow()
    update_message_status(db, request.message, MessageStatus.APPROVED, commit=False)
    ledger_service.add_credits(db, requester, request.credits)
    create_message(
        db, requester.id, SYSTEM_PHONE,
        f"ADMIN APPROVED {request.credits} credit request",
        MessageType.SYSTEM, MessageStatus.SENT,
    )

    logger.info(
        f"Credit request approved: message_id={message_id}, user_id={requester.id}, "
        f"credits={request.credits}, admin_id={admin.id}"
    )
    return CreditRequestApproved(
        message=f"Successfully approved {request.credits} credits",
        credits=request.credits,
    )


def reject_credit_request(db: Session, admin: User, message_id: int) -> None:
    """pending -> rejected. No ledger effect."""
    request = _load_pending_request(db, message_id)
    request.processed_by = admin.id
    request.processed_at = utcnow()
    update_message_status(db, request.message, MessageStatus.REJECTED)
    logger.info(f"Credit request rejected: message_id={message_id}, admin_id={admin.id}")
