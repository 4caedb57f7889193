"""Self-service bomber protection for the caller's own phone number"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smsdesk.core.dependencies import get_db
from smsdesk.errors.exceptions import BadRequestException
from smsdesk.middleware.auth import require_user
from smsdesk.models.user import User
from smsdesk.schemas.protection_schemas import ProtectNumberResponse, ProtectionStatusResponse
from smsdesk.services import protection_service

router = APIRouter()


@router.post("/protect-my-number", response_model=ProtectNumberResponse)
async def protect_my_number(
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """
    **Role:** Any authenticated user. Adds the phone on the caller's account
    to the protected list; bomber sends to it are refused from then on.
    """
    try:
        protection_service.protect(db, current_user.phone, user_id=current_user.id)
    except protection_service.AlreadyProtectedError:
        raise BadRequestException(detail="Your number is already protected")

    return ProtectNumberResponse(
        message="Your number has been protected from bomber messages",
        phone=current_user.phone,
    )


@router.post("/unprotect-my-number", response_model=ProtectNumberResponse)
async def unprotect_my_number(
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        protection_service.unprotect(db, current_user.phone)
    except protection_service.NotProtectedError:
        raise BadRequestException(detail="Your number is not protected")

    return ProtectNumberResponse(
        message="Protection removed from your number",
        phone=current_user.phone,
    )


@router.get("/my-number-protection-status", response_model=ProtectionStatusResponse)
async def my_number_protection_status(
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return ProtectionStatusResponse(
        is_protected=protection_service.is_protected(db, current_user.phone),
        phone=current_user.phone,
    )
