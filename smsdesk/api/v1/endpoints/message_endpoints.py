"""User-facing send, history and credit-request endpoints"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smsdesk.core.dependencies import get_db, get_gateway
from smsdesk.middleware.auth import require_user
from smsdesk.models.user import User
from smsdesk.schemas.message_schemas import (
    BomberRequest,
    BomberResponse,
    CreditRequestCreate,
    CreditRequestSubmitted,
    MessageItem,
    SendMessageRequest,
    SendMessageResponse,
)
from smsdesk.services import dispatch_service
from smsdesk.services.message_crud import get_user_messages
from smsdesk.services.sms_gateway import SmsGatewayClient

router = APIRouter()


@router.post("/send-message", response_model=SendMessageResponse)
async def send_message(
    body: SendMessageRequest,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db),
    gateway: SmsGatewayClient = Depends(get_gateway),
):
    """
    ## Send one text message

    **Role:** Any authenticated user. Costs one credit, charged only when the
    gateway accepts the message.

    ### Required fields (JSON body)
    | Field   | Type   | Description          |
    |---------|--------|----------------------|
    | phone   | string | 10-15 characters     |
    | message | string | 1-160 characters     |

    ### Response
    `message`, `messageId` (gateway id, may be null), `id`,
    `messagesRemaining`, `messagesSent`.

    ### Failures
    - HTTP 403 → "Your account is disabled" / "You have no messages remaining".
    - HTTP 500 → the gateway rejected the message; nothing was charged.
    """
    return await dispatch_service.send_single(db, gateway, current_user, body.phone, body.message)


@router.get("/messages", response_model=List[MessageItem])
async def get_my_messages(
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Caller's message history, newest first."""
    return get_user_messages(db, current_user.id)


@router.post("/bomber", response_model=BomberResponse)
async def bomber(
    body: BomberRequest,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db),
    gateway: SmsGatewayClient = Depends(get_gateway),
):
    """
    ## Send a repeated burst to one number

    **Role:** Any authenticated user. Costs `repeat` credits.

    The remote bomber service does the fan-out; the optional `message` field
    is accepted but only used by the admin variant.

    ### Failures
    - HTTP 400 → "You don't have enough credits" (no gateway call is made).
    - HTTP 403 → "Your account is suspended" /
      "This number is protected from bomber messages".
    - HTTP 500 → "Failed to send bomber messages"; nothing was charged.
    """
    return await dispatch_service.send_bomber(db, gateway, current_user, body.phone, body.repeat)


@router.post("/request-credits", response_model=CreditRequestSubmitted)
async def request_credits(
    body: CreditRequestCreate,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """
    Ask an administrator for more credits. The request shows up as a pending
    message until it is approved or rejected.
    """
    return dispatch_service.submit_credit_request(db, current_user, body.credits, body.reason)
