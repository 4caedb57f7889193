"""Contact book schemas"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from smsdesk.schemas.base import CamelModel, PHONE_MIN_LENGTH, PHONE_MAX_LENGTH


class ContactCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=30)
    phone: str = Field(..., min_length=PHONE_MIN_LENGTH, max_length=PHONE_MAX_LENGTH)


class ContactResponse(CamelModel):
    id: int
    user_id: int
    name: str
    phone: str
    created_at: Optional[datetime] = None
