"""Authentication, registration and user schemas"""
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from smsdesk.schemas.base import CamelModel, PHONE_MIN_LENGTH, PHONE_MAX_LENGTH


class UserCreate(CamelModel):
    """Registration payload, submitted to both /register and /complete-registration"""
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6, max_length=100)
    full_name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=PHONE_MIN_LENGTH, max_length=PHONE_MAX_LENGTH)
    is_admin: bool = False

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Username must be at least 3 characters long")
        return v


class OTPRequest(CamelModel):
    """Response after a verification code was dispatched"""
    message: str
    phone: str
    username: Optional[str] = None


class OTPVerifyRequest(CamelModel):
    phone: str = Field(..., min_length=PHONE_MIN_LENGTH, max_length=PHONE_MAX_LENGTH)
    code: str = Field(..., min_length=6, max_length=6)


class ResendOTPRequest(CamelModel):
    phone: str = Field(..., min_length=PHONE_MIN_LENGTH, max_length=PHONE_MAX_LENGTH)


class LoginRequest(CamelModel):
    username: str
    password: str


class UserResponse(CamelModel):
    """User object returned by login, /user and registration"""
    id: int
    username: str
    full_name: str
    phone: str
    messages_remaining: int
    messages_sent: int
    is_admin: bool
    is_active: bool


class AdminUserResponse(CamelModel):
    """User row as listed on the admin dashboard"""
    id: int
    username: str
    full_name: str
    phone: str
    messages_remaining: int
    messages_sent: int
    last_activity: Optional[datetime] = None
    is_admin: bool
    is_active: bool
    created_at: Optional[datetime] = None


class PasswordChange(CamelModel):
    """Schema for changing password"""
    current_password: str = Field(..., min_length=6)
    new_password: str = Field(..., min_length=6, max_length=100)
