"""Protected-number schemas"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from smsdesk.schemas.base import CamelModel, PHONE_MIN_LENGTH, PHONE_MAX_LENGTH


class ProtectNumberRequest(CamelModel):
    phone: str = Field(..., min_length=PHONE_MIN_LENGTH, max_length=PHONE_MAX_LENGTH)


class ProtectNumberResponse(CamelModel):
    message: str
    phone: str


class ProtectionStatusResponse(CamelModel):
    is_protected: bool
    phone: str


class ProtectedNumberItem(CamelModel):
    id: int
    phone: str
    user_id: Optional[int] = None
    is_admin_protected: bool
    created_at: Optional[datetime] = None
