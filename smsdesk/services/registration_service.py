"""OTP-gated registration workflow."""
import logging

from sqlalchemy.orm import Session

from smsdesk.core.config import settings
from smsdesk.errors.exceptions import BadRequestException, GatewayException, NotFoundException
from smsdesk.models.user import User
from smsdesk.schemas.auth_schemas import OTPRequest, UserCreate
from smsdesk.services.auth_service import create_user, get_user_by_phone, get_user_by_username
from smsdesk.services.otp_service import get_latest_otp, is_phone_verified, issue_otp
from smsdesk.services.sms_gateway import SmsGatewayClient
from smsdesk.utils.logger import log_dispatch_operation

logger = logging.getLogger(__name__)


def _ensure_available(db: Session, username: str, phone: str) -> None:
    if get_user_by_username(db, username):
        raise BadRequestException(detail="Username already exists")
    if get_user_by_phone(db, phone):
        raise BadRequestException(detail="Phone number already registered")


async def _deliver_code(db: Session, gateway: SmsGatewayClient, phone: str) -> None:
    otp_row = issue_otp(db, phone)
    sent = await gateway.send_otp(phone, otp_row.code)
    log_dispatch_operation("otp", phone, sent)
    if not sent:
        raise GatewayException(detail="Failed to send verification code")


async def start_registration(db: Session, gateway: SmsGatewayClient, user_data: UserCreate) -> OTPRequest:
    """
    Step 1: reject taken usernames/phones, then issue and deliver an OTP.
    Nothing is created besides the OTP row, which survives a failed delivery.
    """
    _ensure_available(db, user_data.username, user_data.phone)
    await _deliver_code(db, gateway, user_data.phone)
    return OTPRequest(
        message="Verification code sent",
        phone=user_data.phone,
        username=user_data.username,
    )


async def resend_code(db: Session, gateway: SmsGatewayClient, phone: str) -> OTPRequest:
    """
    Issue a new code for a pending registration; the new row supersedes older ones.
    """
    if get_user_by_phone(db, phone):
        raise BadRequestException(detail="Phone number already registered")
    if get_latest_otp(db, phone) is None:
        raise NotFoundException(detail="No pending registration found for this phone. Please register first.")

    await _deliver_code(db, gateway, phone)
    return OTPRequest(message="A new verification code has been sent", phone=phone)


def complete_registration(db: Session, user_data: UserCreate) -> User:
    """
    Step 3: create the account once the latest OTP for the phone is verified.
    """
    if not is_phone_verified(db, user_data.phone):
        raise BadRequestException(detail="Phone not verified")

    # Re-check in case another registration finished in between
    _ensure_available(db, user_data.username, user_data.phone)

    is_admin = bool(user_data.is_admin and settings.ALLOW_ADMIN_SELF_REGISTRATION)
    if user_data.is_admin and not is_admin:
        logger.warning(f"[Register] Ignoring admin flag on self-registration of {user_data.username}")

    return create_user(db, user_data, is_admin=is_admin)
