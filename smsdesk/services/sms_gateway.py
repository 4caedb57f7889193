"""
Client for the external HTTP SMS gateway.

Two endpoints are used, both plain GET with query parameters:

* custom endpoint ``?phone=&message=`` answering
  ``{"status": "success", "api_response": "<json string>"}``
* bomber endpoint ``?mobile=&repeat=`` where only the HTTP status matters;
  the remote side does the fan-out.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import httpx

logger = logging.getLogger(__name__)

OTP_TEMPLATE = "Your verification code is: {code}"


@dataclass(frozen=True)
class GatewayResult:
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class RepeatedSendResult:
    repeat: int
    results: List[GatewayResult] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)


def extract_message_id(api_response) -> Optional[str]:
    """
    Pull the provider message id out of the nested ``api_response`` payload,
    e.g. ``{"Response": {"Message": "Message Id: 12345"}}`` -> ``"12345"``.
    """
    if isinstance(api_response, str):
        api_response = json.loads(api_response)
    text = api_response["Response"]["Message"]
    return text.split(":")[1].strip()


class SmsGatewayClient:
    def __init__(
        self,
        custom_endpoint: str,
        bomber_endpoint: str,
        http_client: httpx.AsyncClient,
    ) -> None:
        self._custom_endpoint = custom_endpoint
        self._bomber_endpoint = bomber_endpoint
        self._http = http_client

    @classmethod
    def from_settings(cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "SmsGatewayClient":
        http_client = httpx.AsyncClient(
            timeout=settings.SMS_GATEWAY_TIMEOUT,
            verify=settings.SMS_GATEWAY_VERIFY_TLS,
            transport=transport,
        )
        return cls(settings.SMS_CUSTOM_ENDPOINT, settings.SMS_BOMBER_ENDPOINT, http_client)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get_custom(self, phone: str, message: str) -> dict:
        resp = await self._http.get(
            self._custom_endpoint, params={"phone": phone, "message": message}
        )
        data = resp.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected gateway payload: {data!r}")
        return data

    async def send_otp(self, phone: str, code: str) -> bool:
        """Deliver a verification code. True iff the gateway reports success."""
        try:
            data = await self._get_custom(phone, OTP_TEMPLATE.format(code=code))
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(f"[Gateway] OTP delivery to {phone} failed: {exc}")
            return False
        return data.get("status") == "success"

    async def send_custom(self, phone: str, text: str) -> GatewayResult:
        """Send one free-text message."""
        try:
            data = await self._get_custom(phone, text)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(f"[Gateway] Custom message to {phone} failed: {exc}")
            return GatewayResult(success=False, error="Error processing request")

        if data.get("status") != "success":
            return GatewayResult(success=False, error="Failed to send message")

        try:
            message_id = extract_message_id(data.get("api_response"))
        except (ValueError, TypeError, KeyError, IndexError, AttributeError):
            return GatewayResult(success=True)
        return GatewayResult(success=True, message_id=message_id)

    async def send_bomber(self, phone: str, repeat: int) -> GatewayResult:
        """
        Ask the bomber endpoint to deliver *repeat* messages. Success means an
        HTTP 2xx came back, whatever the remote side actually delivered.
        """
        try:
            resp = await self._http.get(
                self._bomber_endpoint, params={"mobile": phone, "repeat": repeat}
            )
        except httpx.HTTPError as exc:
            logger.error(f"[Gateway] Bomber request to {phone} failed: {exc}")
            return GatewayResult(success=False, error="Error processing request")

        if resp.is_success:
            return GatewayResult(success=True)
        return GatewayResult(success=False, error="Failed to send bomber messages")

    async def send_custom_repeated(self, phone: str, text: str, repeat: int) -> RepeatedSendResult:
        """
        Send *text* to *phone* ``repeat`` times, one call after the other.
        Every iteration runs; failures are counted, not retried.
        """
        outcome = RepeatedSendResult(repeat=repeat)
        for _ in range(repeat):
            outcome.results.append(await self.send_custom(phone, text))
        return outcome
