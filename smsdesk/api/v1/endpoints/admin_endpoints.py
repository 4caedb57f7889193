"""Admin endpoints: accounts, credits, protection, credit requests and message moderation."""
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smsdesk.core.dependencies import get_db, get_gateway
from smsdesk.errors.exceptions import BadRequestException, NotFoundException
from smsdesk.middleware.auth import require_admin
from smsdesk.models.user import User
from smsdesk.schemas.admin_schemas import (
    CreditRequestAction,
    CreditRequestApproved,
    CreditRequestItem,
    CreditsUpdatedResponse,
    CustomMessageRequest,
    DeleteMessageRequest,
    DeleteMessageResponse,
    DeleteMessagesRequest,
    DeleteMessagesResponse,
    ToggleUserRequest,
    ToggleUserResponse,
    UpdateCreditsRequest,
)
from smsdesk.schemas.auth_schemas import AdminUserResponse
from smsdesk.schemas.base import MessageResponse
from smsdesk.schemas.dashboard_schemas import AdminDashboardStats
from smsdesk.schemas.message_schemas import (
    AdminBomberResponse,
    AdminMessageItem,
    BomberRequest,
    CustomMessageResponse,
)
from smsdesk.schemas.protection_schemas import (
    ProtectedNumberItem,
    ProtectNumberRequest,
    ProtectNumberResponse,
)
from smsdesk.services import admin_service, dispatch_service, message_crud, protection_service
from smsdesk.services.sms_gateway import SmsGatewayClient

router = APIRouter()
logger = logging.getLogger(__name__)


# ── overview ──────────────────────────────────────────────────────────────────

@router.get("/users", response_model=List[AdminUserResponse], summary="List all users")
async def get_users(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """**Role:** ADMIN only. Every account, newest first. Passwords are never included."""
    return admin_service.list_users(db)


@router.get("/dashboard-stats", response_model=AdminDashboardStats, summary="Admin overview statistics")
async def get_dashboard_stats(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    **Role:** ADMIN only.

    | Field                 | Description                                  |
    |-----------------------|----------------------------------------------|
    | totalUsers            | All accounts, admins included                |
    | activeUsers           | Active non-admin accounts                    |
    | totalMessages         | Every message row                            |
    | failedMessages        | Rows whose status is anything but `sent`     |
    | pendingCreditRequests | Credit requests still awaiting a decision    |
    """
    return admin_service.get_dashboard_stats(db)


@router.get("/messages", response_model=List[AdminMessageItem], summary="List all messages")
async def get_messages(
    type: Optional[str] = None,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    **Role:** ADMIN only. All messages with the sender's username, newest
    first. `?type=custom|bomber|credit_request|system` narrows the list.
    """
    return message_crud.get_all_messages(db, message_type=type)


@router.get("/credit-requests", response_model=List[CreditRequestItem])
async def get_credit_requests(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return admin_service.list_credit_requests(db)


@router.get("/protected-numbers", response_model=List[ProtectedNumberItem])
async def get_protected_numbers(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return protection_service.list_protected(db)


# ── unmetered sends ───────────────────────────────────────────────────────────

@router.post("/custom-message", response_model=CustomMessageResponse)
async def send_custom_message(
    body: CustomMessageRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
    gateway: SmsGatewayClient = Depends(get_gateway),
):
    """
    **Role:** ADMIN only. Sends one message without touching any credit
    balance. HTTP 500 when the gateway rejects it.
    """
    return await dispatch_service.admin_send_custom(
        db, gateway, current_user, body.phone, body.message
    )


@router.post("/bomber", response_model=AdminBomberResponse)
async def admin_bomber(
    body: BomberRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
    gateway: SmsGatewayClient = Depends(get_gateway),
):
    """
    ## Unmetered burst

    **Role:** ADMIN only.

    - With `message`: the text is sent `repeat` times, one call after the
      other, and the response reports how many went through plus each result.
    - Without `message`: a single request to the bomber service.

    Protected numbers are refused with HTTP 403 either way.
    """
    return await dispatch_service.admin_bomber(
        db, gateway, current_user, body.phone, body.repeat, body.message
    )


# ── accounts and credits ──────────────────────────────────────────────────────

@router.post("/add-credits", response_model=CreditsUpdatedResponse)
async def add_credits(
    body: UpdateCreditsRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return admin_service.add_credits(db, body.username, body.credits)


@router.post("/remove-credits", response_model=CreditsUpdatedResponse)
async def remove_credits(
    body: UpdateCreditsRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """The balance is floored at zero when more is removed than remains."""
    return admin_service.remove_credits(db, body.username, body.credits)


@router.post("/toggle-user", response_model=ToggleUserResponse)
async def toggle_user(
    body: ToggleUserRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return admin_service.toggle_user(db, body.username, body.active)


# ── protection ────────────────────────────────────────────────────────────────

@router.post("/protect-number", response_model=ProtectNumberResponse)
async def protect_number(
    body: ProtectNumberRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        protection_service.protect(db, body.phone)
    except protection_service.AlreadyProtectedError:
        raise BadRequestException(detail="This number is already protected")

    return ProtectNumberResponse(
        message="Number has been protected from bomber messages", phone=body.phone
    )


@router.post("/unprotect-number", response_model=ProtectNumberResponse)
async def unprotect_number(
    body: ProtectNumberRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Works for any protected number, including ones users protected themselves."""
    try:
        protection_service.unprotect(db, body.phone)
    except protection_service.NotProtectedError:
        raise BadRequestException(detail="This number is not protected")

    return ProtectNumberResponse(message="Protection removed from this number", phone=body.phone)


# ── credit requests ───────────────────────────────────────────────────────────

@router.post("/approve-credit-request", response_model=CreditRequestApproved)
async def approve_credit_request(
    body: CreditRequestAction,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    ## Approve a pending credit request

    **Role:** ADMIN only.

    The amount comes from the stored request, not from the body.

    ### Failures
    - HTTP 404 → "Credit request not found".
    - HTTP 400 → "Credit request already processed".
    """
    return dispatch_service.approve_credit_request(db, current_user, body.message_id)


@router.post("/reject-credit-request", response_model=MessageResponse)
async def reject_credit_request(
    body: CreditRequestAction,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    dispatch_service.reject_credit_request(db, current_user, body.message_id)
    return MessageResponse(message="Credit request rejected")


# ── message moderation ────────────────────────────────────────────────────────

@router.post("/delete-message", response_model=DeleteMessageResponse)
async def delete_message(
    body: DeleteMessageRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    if not message_crud.delete_message(db, body.id):
        raise NotFoundException(detail="Message not found")

    logger.info(f"Message deleted: id={body.id}, admin_id={current_user.id}")
    return DeleteMessageResponse(message="Message deleted successfully", id=body.id)


@router.post("/delete-messages", response_model=DeleteMessagesResponse)
async def delete_messages(
    body: DeleteMessagesRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Ids that do not exist are skipped; `count` is how many were actually deleted."""
    count = message_crud.delete_messages(db, body.ids)
    logger.info(f"Messages deleted: count={count}, admin_id={current_user.id}")
    return DeleteMessagesResponse(message=f"Deleted {count} messages", count=count)
