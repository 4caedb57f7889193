import httpx

from gateway_fake import gateway_failure
from smsdesk.models.credit_request import CreditRequest
from smsdesk.models.message import Message

TARGET = "5558675309"


def test_send_message_with_last_credit(user_client, gateway, db, user):
    user.messages_remaining = 1
    db.commit()
    text = "x" * 160

    resp = user_client.post("/api/send-message", json={"phone": TARGET, "message": text})
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["message"] == "Message sent successfully"
    assert data["messageId"] == "12345"
    assert data["messagesRemaining"] == 0
    assert data["messagesSent"] == 1

    db.refresh(user)
    assert user.messages_remaining == 0
    assert user.messages_sent == 1

    rows = db.query(Message).filter(Message.user_id == user.id).all()
    assert len(rows) == 1
    assert rows[0].id == data["id"]
    assert (rows[0].type, rows[0].status, rows[0].message) == ("custom", "sent", text)


def test_send_message_too_long(user_client, gateway):
    resp = user_client.post("/api/send-message", json={"phone": TARGET, "message": "x" * 161})
    assert resp.status_code == 400
    assert gateway.requests == []


def test_send_message_without_credits(user_client, gateway, db, user):
    user.messages_remaining = 0
    db.commit()

    resp = user_client.post("/api/send-message", json={"phone": TARGET, "message": "hi"})
    assert resp.status_code == 403
    assert resp.json() == {"message": "You have no messages remaining"}
    assert gateway.requests == []


def test_send_message_disabled_account(user_client, gateway, db, user):
    user.is_active = False
    db.commit()

    resp = user_client.post("/api/send-message", json={"phone": TARGET, "message": "hi"})
    assert resp.status_code == 403
    assert resp.json() == {"message": "Your account is disabled"}
    assert gateway.requests == []


def test_failed_send_charges_nothing(user_client, gateway, db, user):
    gateway.custom_replies.append(gateway_failure())

    resp = user_client.post("/api/send-message", json={"phone": TARGET, "message": "hi"})
    assert resp.status_code == 500
    assert resp.json() == {"message": "Failed to send message"}

    db.refresh(user)
    assert (user.messages_remaining, user.messages_sent) == (5, 0)
    assert db.query(Message).count() == 0


def test_gateway_transport_error(user_client, gateway, db, user):
    gateway.custom_replies.append(httpx.ConnectError("unreachable"))

    resp = user_client.post("/api/send-message", json={"phone": TARGET, "message": "hi"})
    assert resp.status_code == 500
    assert resp.json() == {"message": "Error processing request"}
    db.refresh(user)
    assert user.messages_remaining == 5


def test_send_requires_session(client, gateway):
    resp = client.post("/api/send-message", json={"phone": TARGET, "message": "hi"})
    assert resp.status_code == 401
    assert resp.json() == {"message": "Unauthorized"}


def test_message_history_is_own_and_newest_first(user_client, login, make_user, gateway):
    other = login(make_user())
    other.post("/api/send-message", json={"phone": TARGET, "message": "not yours"})
    user_client.post("/api/send-message", json={"phone": TARGET, "message": "first"})
    user_client.post("/api/send-message", json={"phone": TARGET, "message": "second"})

    resp = user_client.get("/api/messages")
    assert resp.status_code == 200
    assert [m["message"] for m in resp.json()] == ["second", "first"]


# ── bomber ────────────────────────────────────────────────────────────────────

def test_bomber_charges_repeat_and_counts_one_send(user_client, gateway, db, user):
    resp = user_client.post("/api/bomber", json={"phone": TARGET, "repeat": 3})
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"message": "Successfully sent 3 messages", "messagesRemaining": 2}

    assert len(gateway.bomber_calls) == 1
    db.refresh(user)
    assert (user.messages_remaining, user.messages_sent) == (2, 1)

    row = db.query(Message).filter(Message.user_id == user.id).one()
    assert (row.type, row.status, row.message) == ("bomber", "sent", "BOMBER: Sent 3 messages")


def test_bomber_over_balance_makes_no_call(user_client, gateway, db, user):
    resp = user_client.post("/api/bomber", json={"phone": TARGET, "repeat": 6})
    assert resp.status_code == 400
    assert resp.json() == {"message": "You don't have enough credits"}
    assert gateway.requests == []
    db.refresh(user)
    assert user.messages_remaining == 5


def test_bomber_suspended_account(user_client, gateway, db, user):
    user.is_active = False
    db.commit()
    resp = user_client.post("/api/bomber", json={"phone": TARGET, "repeat": 1})
    assert resp.status_code == 403
    assert resp.json() == {"message": "Your account is suspended"}
    assert gateway.requests == []


def test_bomber_protected_number(user_client, admin_client, gateway, db, user):
    admin_client.post("/api/admin/protect-number", json={"phone": TARGET})

    resp = user_client.post("/api/bomber", json={"phone": TARGET, "repeat": 2})
    assert resp.status_code == 403
    assert resp.json() == {"message": "This number is protected from bomber messages"}
    assert gateway.requests == []
    db.refresh(user)
    assert user.messages_remaining == 5


def test_bomber_gateway_failure(user_client, gateway, db, user):
    gateway.bomber_replies.append(httpx.Response(502, text="bad gateway"))
    resp = user_client.post("/api/bomber", json={"phone": TARGET, "repeat": 2})
    assert resp.status_code == 500
    db.refresh(user)
    assert (user.messages_remaining, user.messages_sent) == (5, 0)
    assert db.query(Message).count() == 0


def test_bomber_repeat_must_be_positive(user_client, gateway):
    resp = user_client.post("/api/bomber", json={"phone": TARGET, "repeat": 0})
    assert resp.status_code == 400
    assert gateway.requests == []


# ── credit requests ───────────────────────────────────────────────────────────

def test_request_credits(user_client, db, user):
    resp = user_client.post(
        "/api/request-credits", json={"credits": 20, "reason": "Running a campaign"}
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Credit request submitted successfully"

    message = db.query(Message).filter(Message.type == "credit_request").one()
    assert message.status == "pending"
    assert message.phone == "SYSTEM"
    assert message.message == "CREDIT REQUEST - User: alice, Credits: 20, Reason: Running a campaign"

    request = db.query(CreditRequest).one()
    assert (request.message_id, request.user_id, request.credits) == (message.id, user.id, 20)


def test_request_credits_validation(user_client):
    assert user_client.post("/api/request-credits", json={"credits": 0, "reason": "Long enough reason"}).status_code == 400
    assert user_client.post("/api/request-credits", json={"credits": 101, "reason": "Long enough reason"}).status_code == 400
    assert user_client.post("/api/request-credits", json={"credits": 5, "reason": "short"}).status_code == 400
