"""Registration, login and session endpoints"""
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
import logging

from smsdesk.core.dependencies import get_db, get_gateway
from smsdesk.errors.exceptions import BadRequestException
from smsdesk.middleware.auth import (
    end_session,
    get_optional_user,
    require_user,
    start_session,
)
from smsdesk.models.user import User
from smsdesk.schemas.auth_schemas import (
    LoginRequest,
    OTPRequest,
    OTPVerifyRequest,
    PasswordChange,
    ResendOTPRequest,
    UserCreate,
    UserResponse,
)
from smsdesk.schemas.base import MessageResponse
from smsdesk.services import auth_service, otp_service, registration_service
from smsdesk.services.sms_gateway import SmsGatewayClient

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", response_model=OTPRequest, status_code=status.HTTP_200_OK)
async def register(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    gateway: SmsGatewayClient = Depends(get_gateway),
):
    """
    ## Start a registration (Step 1 of 3)

    **Role:** Public — no authentication required.

    Checks that the username and phone are free, then texts a 6-digit
    verification code to the phone. No account is created yet.

    ### Required fields (JSON body)
    | Field    | Type   | Description                   |
    |----------|--------|-------------------------------|
    | username | string | 3-50 characters, unique       |
    | password | string | 6-100 characters              |
    | fullName | string | Display name                  |
    | phone    | string | 10-15 characters, unique      |

    ### Response
    `{ "message": "Verification code sent", "phone": "...", "username": "..." }`

    ### Frontend integration
    1. HTTP 200 → show the code entry screen, keep the form data in state.
    2. HTTP 400 → "Username already exists" / "Phone number already registered".
    3. HTTP 500 → the code could not be delivered; offer **POST /resend-otp**.
    """
    return await registration_service.start_registration(db, gateway, user_data)


@router.post("/verify-otp", response_model=MessageResponse)
async def verify_otp(body: OTPVerifyRequest, db: Session = Depends(get_db)):
    """
    ## Verify the texted code (Step 2 of 3)

    **Role:** Public — no authentication required.

    Only the most recently issued code for the phone counts. Each code can be
    verified once and expires after `OTP_EXPIRE_MINUTES`.

    ### Failures (HTTP 400)
    "No verification code found", "Code already verified",
    "Verification code expired", "Invalid verification code".
    """
    try:
        otp_service.verify_otp(db, body.phone, body.code)
    except ValueError as exc:
        raise BadRequestException(detail=str(exc))

    return MessageResponse(message="Verification successful")


@router.post("/resend-otp", response_model=OTPRequest)
async def resend_otp(
    body: ResendOTPRequest,
    db: Session = Depends(get_db),
    gateway: SmsGatewayClient = Depends(get_gateway),
):
    """
    ## Resend the verification code

    **Role:** Public — no authentication required.

    Issues a new code for a phone with a pending registration; older codes
    stop counting.

    ### Frontend integration
    - HTTP 404 → no pending registration, send the user back to the form.
    - HTTP 400 → the phone already has an account, redirect to login.
    """
    return await registration_service.resend_code(db, gateway, body.phone)


@router.post(
    "/complete-registration",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def complete_registration(
    user_data: UserCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    ## Create the account (Step 3 of 3)

    **Role:** Public — no authentication required.

    Send the same body as **POST /register**. Requires the latest code for the
    phone to be verified. On success the account is created with the starting
    credit balance and the session cookie is set.
    """
    user = registration_service.complete_registration(db, user_data)
    start_session(response, user)
    return user


@router.post("/login", response_model=UserResponse)
async def login(body: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """
    ## Login with username and password

    **Role:** Public — no authentication required.

    Usernames are matched case-insensitively. On success the session cookie
    is set and the user object is returned.

    ### Failures (HTTP 401)
    "Invalid username or password", "Account is disabled".
    """
    user = auth_service.authenticate_user(db, body.username, body.password)
    start_session(response, user)
    return user


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """
    ## Logout

    **Role:** Public. Without a valid session this only clears the cookie.

    Revokes every session token issued to the caller, whether sent as the
    cookie or as a Bearer header, then clears the cookie.
    """
    if current_user is not None:
        auth_service.revoke_sessions(db, current_user)
        logger.info(f"Logged out: user_id={current_user.id}")
    end_session(response)
    return MessageResponse(message="Logged out successfully")


@router.get("/user", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(require_user)):
    """
    ## The logged-in user

    Call on app start to hydrate the session. HTTP 401 → redirect to login.
    """
    return current_user


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    password_data: PasswordChange,
    response: Response,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """
    ## Change the password

    Signs out every other session; the caller receives a fresh cookie.

    ### Failures (HTTP 400)
    "Current password is incorrect".
    """
    try:
        auth_service.change_password(
            db, current_user, password_data.current_password, password_data.new_password
        )
    except ValueError as exc:
        raise BadRequestException(detail=str(exc))

    start_session(response, current_user)
    logger.info(f"Password changed: user_id={current_user.id}")
    return MessageResponse(message="Password changed successfully")
