"""Process-wide resources, built once at start-up and closed at shutdown."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from smsdesk.db.session import make_engine, make_session_factory
from smsdesk.services.sms_gateway import SmsGatewayClient

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything a request handler needs beyond its own arguments."""
    engine: Engine
    session_factory: sessionmaker
    gateway: SmsGatewayClient

    async def close(self) -> None:
        await self.gateway.aclose()
        self.engine.dispose()
        logger.info("Application context closed")


def build_context(
    settings,
    engine: Optional[Engine] = None,
    gateway_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AppContext:
    """
    Wire the engine, session factory and gateway client from *settings*.

    *engine* and *gateway_transport* let callers substitute an in-memory
    database or a mocked gateway.
    """
    if engine is None:
        engine = make_engine(settings.DATABASE_URL)
    return AppContext(
        engine=engine,
        session_factory=make_session_factory(engine),
        gateway=SmsGatewayClient.from_settings(settings, transport=gateway_transport),
    )
