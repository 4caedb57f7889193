import asyncio
import json

import httpx
import pytest

from smsdesk.core.config import settings
from smsdesk.services.sms_gateway import SmsGatewayClient, extract_message_id

from gateway_fake import gateway_failure, gateway_success


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def sms_client(gateway):
    return SmsGatewayClient.from_settings(settings, transport=httpx.MockTransport(gateway.handler))


def test_extract_message_id():
    payload = json.dumps({"Response": {"Message": "Message Id: 98765 "}})
    assert extract_message_id(payload) == "98765"
    assert extract_message_id({"Response": {"Message": "Message Id:42"}}) == "42"


def test_send_custom_success(sms_client, gateway):
    result = run(sms_client.send_custom("5551112222", "hello there"))
    assert result.success
    assert result.message_id == "12345"

    params = gateway.params(gateway.custom_calls[0])
    assert params == {"phone": "5551112222", "message": "hello there"}


def test_send_custom_rejected(sms_client, gateway):
    gateway.custom_replies.append(gateway_failure())
    result = run(sms_client.send_custom("5551112222", "hello"))
    assert not result.success
    assert result.error == "Failed to send message"


def test_send_custom_transport_error(sms_client, gateway):
    gateway.custom_replies.append(httpx.ConnectError("boom"))
    result = run(sms_client.send_custom("5551112222", "hello"))
    assert not result.success
    assert result.error == "Error processing request"


def test_send_custom_non_json_reply(sms_client, gateway):
    gateway.custom_replies.append(httpx.Response(200, text="<html>oops</html>"))
    result = run(sms_client.send_custom("5551112222", "hello"))
    assert not result.success
    assert result.error == "Error processing request"


def test_send_custom_unparseable_id_still_succeeds(sms_client, gateway):
    gateway.custom_replies.append(
        httpx.Response(200, json={"status": "success", "api_response": "not json"})
    )
    result = run(sms_client.send_custom("5551112222", "hello"))
    assert result.success
    assert result.message_id is None


def test_send_otp(sms_client, gateway):
    assert run(sms_client.send_otp("5551112222", "424242"))
    params = gateway.params(gateway.custom_calls[0])
    assert params["message"] == "Your verification code is: 424242"


def test_send_otp_failure_returns_false(sms_client, gateway):
    gateway.custom_replies.append(gateway_failure())
    assert not run(sms_client.send_otp("5551112222", "424242"))

    gateway.custom_replies.append(httpx.ReadTimeout("slow"))
    assert not run(sms_client.send_otp("5551112222", "424242"))


def test_send_bomber_uses_mobile_and_repeat(sms_client, gateway):
    result = run(sms_client.send_bomber("5551112222", 7))
    assert result.success
    assert gateway.params(gateway.bomber_calls[0]) == {"mobile": "5551112222", "repeat": "7"}


def test_send_bomber_http_error_status(sms_client, gateway):
    gateway.bomber_replies.append(httpx.Response(503, text="down"))
    result = run(sms_client.send_bomber("5551112222", 3))
    assert not result.success
    assert result.error == "Failed to send bomber messages"


def test_repeated_send_attempts_every_iteration(sms_client, gateway):
    gateway.custom_replies.extend([gateway_success("1"), gateway_failure(), gateway_success("3")])
    outcome = run(sms_client.send_custom_repeated("5551112222", "hi", 3))
    assert outcome.success_count == 2
    assert [r.success for r in outcome.results] == [True, False, True]
    assert len(gateway.custom_calls) == 3
