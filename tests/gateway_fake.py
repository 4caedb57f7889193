"""In-process stand-in for the remote SMS gateway"""
import json
from collections import deque
from urllib.parse import parse_qs

import httpx

from smsdesk.core.config import settings


def gateway_success(message_id="12345"):
    """What the custom endpoint answers for an accepted message"""
    api_response = json.dumps({"Response": {"Message": f"Message Id: {message_id}"}})
    return httpx.Response(200, json={"status": "success", "api_response": api_response})


def gateway_failure():
    return httpx.Response(200, json={"status": "error", "api_response": "{}"})


class FakeGateway:
    """
    Stands in for both remote endpoints behind an httpx.MockTransport.

    Replies are queued per endpoint; once a queue is empty every call
    succeeds. Queue an exception instance to simulate a transport error.
    """

    def __init__(self):
        self.requests = []
        self.custom_replies = deque()
        self.bomber_replies = deque()
        self._bomber_host = httpx.URL(settings.SMS_BOMBER_ENDPOINT).host

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == self._bomber_host:
            reply = self.bomber_replies.popleft() if self.bomber_replies else httpx.Response(200, text="ok")
        else:
            reply = self.custom_replies.popleft() if self.custom_replies else gateway_success()
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def custom_calls(self):
        return [r for r in self.requests if r.url.host != self._bomber_host]

    @property
    def bomber_calls(self):
        return [r for r in self.requests if r.url.host == self._bomber_host]

    def params(self, request):
        return {k: v[0] for k, v in parse_qs(request.url.query.decode()).items()}

    def last_code(self, phone):
        """The OTP most recently texted to *phone*"""
        for request in reversed(self.custom_calls):
            params = self.params(request)
            if params.get("phone") == phone:
                return params["message"].rsplit(":", 1)[1].strip()
        return None


