"""FastAPI dependencies"""
from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from smsdesk.core.context import AppContext
from smsdesk.services.sms_gateway import SmsGatewayClient


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency
    Yields a database session and ensures it's closed after use
    """
    db = get_context(request).session_factory()
    try:
        yield db
    finally:
        db.close()


def get_gateway(request: Request) -> SmsGatewayClient:
    return get_context(request).gateway
