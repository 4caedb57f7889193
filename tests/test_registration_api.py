from datetime import timedelta

from gateway_fake import gateway_failure
from smsdesk.core.config import settings
from smsdesk.models.otp import Otp
from smsdesk.models.user import User
from smsdesk.services.auth_service import utcnow

PHONE = "5551234567"


def registration(**overrides):
    body = {
        "username": "dana",
        "password": "secret123",
        "fullName": "Dana Scully",
        "phone": PHONE,
    }
    body.update(overrides)
    return body


def register_and_verify(client, gateway, body=None):
    body = body or registration()
    assert client.post("/api/register", json=body).status_code == 200
    code = gateway.last_code(body["phone"])
    resp = client.post("/api/verify-otp", json={"phone": body["phone"], "code": code})
    assert resp.status_code == 200, resp.text
    return body


def test_register_sends_code(client, gateway, db):
    resp = client.post("/api/register", json=registration())
    assert resp.status_code == 200
    assert resp.json() == {"message": "Verification code sent", "phone": PHONE, "username": "dana"}

    code = gateway.last_code(PHONE)
    assert code is not None and len(code) == 6
    assert db.query(Otp).filter(Otp.phone == PHONE).count() == 1
    assert db.query(User).filter(User.phone == PHONE).count() == 0


def test_full_registration_flow_logs_the_user_in(client, gateway):
    body = register_and_verify(client, gateway)

    resp = client.post("/api/complete-registration", json=body)
    assert resp.status_code == 201
    data = resp.json()
    assert data["username"] == "dana"
    assert data["messagesRemaining"] == 5
    assert data["messagesSent"] == 0
    assert data["isAdmin"] is False
    assert "password" not in data
    assert settings.SESSION_COOKIE_NAME in resp.cookies

    me = client.get("/api/user")
    assert me.status_code == 200
    assert me.json()["username"] == "dana"


def test_duplicate_phone_is_rejected_before_any_code(client, gateway, db, make_user):
    make_user(username="existing", phone=PHONE)

    resp = client.post("/api/register", json=registration())
    assert resp.status_code == 400
    assert resp.json() == {"message": "Phone number already registered"}
    assert gateway.requests == []
    assert db.query(Otp).count() == 0


def test_duplicate_username_wins_over_duplicate_phone(client, gateway, make_user):
    make_user(username="Dana", phone=PHONE)
    resp = client.post("/api/register", json=registration())
    assert resp.status_code == 400
    assert resp.json()["message"] == "Username already exists"
    assert gateway.requests == []


def test_gateway_failure_keeps_the_otp_row(client, gateway, db):
    gateway.custom_replies.append(gateway_failure())
    resp = client.post("/api/register", json=registration())
    assert resp.status_code == 500
    assert resp.json() == {"message": "Failed to send verification code"}
    assert db.query(Otp).filter(Otp.phone == PHONE).count() == 1


def test_complete_without_verification(client, gateway):
    client.post("/api/register", json=registration())
    resp = client.post("/api/complete-registration", json=registration())
    assert resp.status_code == 400
    assert resp.json()["message"] == "Phone not verified"


def test_verify_twice(client, gateway):
    client.post("/api/register", json=registration())
    code = gateway.last_code(PHONE)
    assert client.post("/api/verify-otp", json={"phone": PHONE, "code": code}).status_code == 200

    resp = client.post("/api/verify-otp", json={"phone": PHONE, "code": code})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Code already verified"


def test_verify_expired_code(client, gateway, db):
    client.post("/api/register", json=registration())
    code = gateway.last_code(PHONE)
    otp_row = db.query(Otp).filter(Otp.phone == PHONE).one()
    otp_row.expires_at = utcnow() - timedelta(minutes=1)
    db.commit()

    resp = client.post("/api/verify-otp", json={"phone": PHONE, "code": code})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Verification code expired"


def test_resend_issues_a_new_code(client, gateway, db):
    client.post("/api/register", json=registration())
    resp = client.post("/api/resend-otp", json={"phone": PHONE})
    assert resp.status_code == 200
    assert resp.json()["message"] == "A new verification code has been sent"
    assert db.query(Otp).filter(Otp.phone == PHONE).count() == 2
    assert len(gateway.custom_calls) == 2


def test_resend_without_pending_registration(client):
    resp = client.post("/api/resend-otp", json={"phone": PHONE})
    assert resp.status_code == 404


def test_resend_for_registered_phone(client, make_user):
    make_user(phone=PHONE)
    resp = client.post("/api/resend-otp", json={"phone": PHONE})
    assert resp.status_code == 400


def test_admin_flag_is_ignored_on_self_registration(client, gateway):
    body = register_and_verify(client, gateway, registration(isAdmin=True))
    resp = client.post("/api/complete-registration", json=body)
    assert resp.status_code == 201
    assert resp.json()["isAdmin"] is False


def test_admin_flag_honoured_when_allowed(client, gateway, monkeypatch):
    monkeypatch.setattr(settings, "ALLOW_ADMIN_SELF_REGISTRATION", True)
    body = register_and_verify(client, gateway, registration(isAdmin=True))
    resp = client.post("/api/complete-registration", json=body)
    assert resp.json()["isAdmin"] is True


def test_complete_registration_rechecks_duplicates(client, gateway, make_user):
    body = register_and_verify(client, gateway)
    make_user(username="dana", phone="5559998888")

    resp = client.post("/api/complete-registration", json=body)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Username already exists"


def test_register_validation_error(client, gateway):
    resp = client.post("/api/register", json=registration(phone="123", password="x"))
    assert resp.status_code == 400
    data = resp.json()
    assert data["message"] == "Validation error"
    fields = {e["field"] for e in data["errors"]}
    assert {"phone", "password"} <= fields
    assert gateway.requests == []
