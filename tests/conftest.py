import asyncio
import os
import tempfile
from pathlib import Path

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_FILE", str(Path(tempfile.gettempdir()) / "smsdesk-test-log.txt"))

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from smsdesk.core.config import settings
from smsdesk.core.context import build_context
from smsdesk.db.base import Base
from smsdesk.db.init_db import init_db
from smsdesk.db.session import make_engine
from smsdesk.main import create_app
from smsdesk.schemas.auth_schemas import UserCreate
from smsdesk.services.auth_service import create_user

from gateway_fake import FakeGateway

PASSWORD = "secret123"


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def context(gateway):
    engine = make_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    ctx = build_context(settings, engine=engine, gateway_transport=httpx.MockTransport(gateway.handler))
    yield ctx
    Base.metadata.drop_all(bind=engine)
    asyncio.run(ctx.close())


@pytest.fixture
def db(context):
    session = context.session_factory()
    yield session
    session.close()


@pytest.fixture
def app(context):
    return create_app(context=context)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(username=None, phone=None, is_admin=False, **fields):
        counter["n"] += 1
        user = create_user(
            db,
            UserCreate(
                username=username or f"user{counter['n']}",
                password=PASSWORD,
                full_name="Test User",
                phone=phone or f"555000{counter['n']:04d}",
            ),
            is_admin=is_admin,
        )
        for name, value in fields.items():
            setattr(user, name, value)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def login(app):
    """Return a TestClient carrying the session cookie of *user*"""

    def _login(user):
        session_client = TestClient(app)
        resp = session_client.post("/api/login", json={"username": user.username, "password": PASSWORD})
        assert resp.status_code == 200, resp.text
        return session_client

    return _login


@pytest.fixture
def user(make_user):
    return make_user(username="alice", phone="5550001111")


@pytest.fixture
def admin(make_user):
    return make_user(username="boss", phone="5550009999", is_admin=True)


@pytest.fixture
def user_client(login, user):
    return login(user)


@pytest.fixture
def admin_client(login, admin):
    return login(admin)
