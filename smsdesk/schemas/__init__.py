"""Pydantic schemas for request/response validation"""
from smsdesk.schemas.base import CamelModel, MessageResponse
from smsdesk.schemas.auth_schemas import (
    UserCreate,
    UserResponse,
    AdminUserResponse,
    LoginRequest,
    OTPRequest,
    OTPVerifyRequest,
    ResendOTPRequest,
    PasswordChange,
)
from smsdesk.schemas.message_schemas import (
    SendMessageRequest,
    SendMessageResponse,
    BomberRequest,
    BomberResponse,
    CreditRequestCreate,
    MessageItem,
    AdminMessageItem,
)

__all__ = [
    "CamelModel",
    "MessageResponse",
    "UserCreate",
    "UserResponse",
    "AdminUserResponse",
    "LoginRequest",
    "OTPRequest",
    "OTPVerifyRequest",
    "ResendOTPRequest",
    "PasswordChange",
    "SendMessageRequest",
    "SendMessageResponse",
    "BomberRequest",
    "BomberResponse",
    "CreditRequestCreate",
    "MessageItem",
    "AdminMessageItem",
]
