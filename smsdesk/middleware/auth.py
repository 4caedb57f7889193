"""Authentication guards and session-cookie helpers"""
from typing import Optional
import logging

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from smsdesk.core.config import settings
from smsdesk.core.dependencies import get_db
from smsdesk.errors.exceptions import (
    AccountDisabledException,
    ForbiddenException,
    UnauthorizedException,
)
from smsdesk.models.user import User
from smsdesk.services.auth_service import (
    create_session_token,
    decode_session_token,
    get_user_by_id,
)

bearer_scheme = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)


def _session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    """Cookie first, then an ``Authorization: Bearer`` header"""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token
    if credentials and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    return None


def start_session(response: Response, user: User) -> None:
    """Attach a fresh session cookie for *user* to *response*."""
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(user),
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def end_session(response: Response) -> None:
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME)


def _resolve_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
    db: Session,
) -> Optional[User]:
    token = _session_token(request, credentials)
    if not token:
        return None

    claims = decode_session_token(token)
    if claims is None:
        return None
    user_id, session_version = claims

    user = get_user_by_id(db, user_id)
    if user is None:
        return None
    if session_version != (user.session_version or 0):
        logger.info(f"Revoked session token presented: user_id={user_id}")
        return None
    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the session principal.

    Disabled accounts still resolve: each workflow decides what an inactive
    user may do.
    """
    user = _resolve_user(request, credentials, db)
    if user is None:
        raise UnauthorizedException()
    return user


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Like :func:`get_current_user` but None instead of 401"""
    return _resolve_user(request, credentials, db)


async def require_user(current_user: User = Depends(get_current_user)) -> User:
    """Any authenticated account"""
    return current_user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Authenticated, active administrators only"""
    if not current_user.is_admin:
        raise ForbiddenException()
    if not current_user.is_active:
        raise AccountDisabledException()
    return current_user
