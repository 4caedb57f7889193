"""Sending, bomber and credit-request schemas"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from smsdesk.schemas.base import CamelModel, PHONE_MIN_LENGTH, PHONE_MAX_LENGTH

MAX_SMS_LENGTH = 160
MAX_BOMBER_TEXT_LENGTH = 50


class SendMessageRequest(CamelModel):
    phone: str = Field(..., min_length=PHONE_MIN_LENGTH, max_length=PHONE_MAX_LENGTH)
    message: str = Field(..., min_length=1, max_length=MAX_SMS_LENGTH)


class SendMessageResponse(CamelModel):
    message: str
    message_id: Optional[str] = None
    id: int
    messages_remaining: int
    messages_sent: int


class BomberRequest(CamelModel):
    """Repeat count is checked against the caller's credits, not capped here"""
    phone: str = Field(..., min_length=PHONE_MIN_LENGTH, max_length=PHONE_MAX_LENGTH)
    repeat: int = Field(..., ge=1)
    message: Optional[str] = Field(None, max_length=MAX_BOMBER_TEXT_LENGTH)


class BomberResponse(CamelModel):
    message: str
    messages_remaining: int


class GatewayResultItem(CamelModel):
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class AdminBomberResponse(CamelModel):
    message: str
    results: Optional[List[GatewayResultItem]] = None


class CustomMessageResponse(CamelModel):
    message: str
    message_id: Optional[str] = None


class CreditRequestCreate(CamelModel):
    reason: str = Field(..., min_length=10, max_length=200)
    credits: int = Field(..., ge=1, le=100)


class CreditRequestSubmitted(CamelModel):
    message: str
    credits: int


class MessageItem(CamelModel):
    id: int
    user_id: int
    phone: str
    message: str
    status: str
    type: str
    created_at: Optional[datetime] = None


class AdminMessageItem(MessageItem):
    username: Optional[str] = None
