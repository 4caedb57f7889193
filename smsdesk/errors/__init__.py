"""Error handling module"""
from smsdesk.errors.exceptions import (
    BadRequestException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    InternalServerException,
    InsufficientCreditsException,
    AccountDisabledException,
    ProtectedNumberException,
    GatewayException,
)

__all__ = [
    "BadRequestException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "InternalServerException",
    "InsufficientCreditsException",
    "AccountDisabledException",
    "ProtectedNumberException",
    "GatewayException",
]
