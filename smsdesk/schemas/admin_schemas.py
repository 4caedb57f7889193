"""Admin request/response schemas"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from smsdesk.schemas.base import CamelModel, PHONE_MIN_LENGTH, PHONE_MAX_LENGTH
from smsdesk.schemas.message_schemas import MAX_SMS_LENGTH


class UpdateCreditsRequest(CamelModel):
    username: str = Field(..., min_length=3)
    credits: int = Field(..., ge=1)


class CreditsUpdatedResponse(CamelModel):
    message: str
    username: str
    messages_remaining: int


class ToggleUserRequest(CamelModel):
    username: str = Field(..., min_length=3)
    active: bool


class ToggleUserResponse(CamelModel):
    message: str
    username: str
    is_active: bool


class CustomMessageRequest(CamelModel):
    phone: str = Field(..., min_length=PHONE_MIN_LENGTH, max_length=PHONE_MAX_LENGTH)
    message: str = Field(..., min_length=1, max_length=MAX_SMS_LENGTH)


class CreditRequestAction(CamelModel):
    """
    Identifies a credit request by its message id. Older clients also send
    ``userId`` and ``credits``; those are ignored in favour of the stored request.
    """
    message_id: int


class CreditRequestApproved(CamelModel):
    message: str
    credits: int


class CreditRequestItem(CamelModel):
    id: int
    message_id: int
    user_id: int
    username: Optional[str] = None
    credits: int
    reason: str
    status: Optional[str] = None
    processed_by: Optional[int] = None
    processed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class DeleteMessageRequest(CamelModel):
    id: int


class DeleteMessageResponse(CamelModel):
    message: str
    id: int


class DeleteMessagesRequest(CamelModel):
    ids: List[int] = Field(..., min_length=1)


class DeleteMessagesResponse(CamelModel):
    message: str
    count: int
