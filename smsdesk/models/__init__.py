"""Database models"""
from smsdesk.models.user import User
from smsdesk.models.otp import Otp
from smsdesk.models.message import Message, MessageStatus, MessageType
from smsdesk.models.protected_number import ProtectedNumber
from smsdesk.models.credit_request import CreditRequest
from smsdesk.models.contact import Contact

__all__ = [
    "User", "Otp", "Message", "MessageStatus", "MessageType",
    "ProtectedNumber", "CreditRequest", "Contact",
]
