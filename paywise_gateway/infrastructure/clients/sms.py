"""Twilio SMS client"""

import logging

import httpx

from paywise_gateway.config import settings
from paywise_gateway.domain.exceptions import NotificationError
from paywise_gateway.infrastructure.observability.metrics import provider_latency_histogram

logger = logging.getLogger(__name__)


class SMSClient:
    """Client for sending SMS through the Twilio REST API.

    Without a full set of credentials the client runs in mock mode: the
    message is logged and nothing leaves the process.
    """

    def __init__(
        self,
        account_sid: str | None = None,
        auth_token: str | None = None,
        from_number: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.account_sid = account_sid or settings.twilio_account_sid
        self.auth_token = auth_token or (
            settings.twilio_auth_token.get_secret_value() if settings.twilio_auth_token else None
        )
        self.from_number = from_number or settings.twilio_phone_number
        self.base_url = base_url or settings.twilio_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    @property
    def is_live(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    async def send(self, phone_number: str, message: str) -> None:
        """
        Send a text message to an E.164 phone number.

        Raises:
            NotificationError: On timeout, HTTP errors, or a response without a message SID
        """
        if not self.is_live:
            logger.info("MOCK SMS (Twilio not configured)", extra={"channel": "sms", "to": phone_number, "body": message})
            return

        url = f"{self.base_url}/2010-04-01/Accounts/{self.account_sid}/Messages.json"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with provider_latency_histogram.labels(provider="sms").time():
                    response = await client.post(
                        url,
                        auth=(self.account_sid, self.auth_token),
                        data={"To": phone_number, "From": self.from_number, "Body": message},
                    )
                response.raise_for_status()
                sid = response.json().get("sid")

            except httpx.TimeoutException as e:
                raise NotificationError(f"Twilio timeout after {self.timeout}s", channel="sms") from e
            except httpx.HTTPStatusError as e:
                raise NotificationError(f"Twilio error: {e.response.status_code}", channel="sms") from e
            except httpx.RequestError as e:
                raise NotificationError(f"Twilio unreachable: {e}", channel="sms") from e
            except (ValueError, AttributeError, TypeError) as e:
                raise NotificationError(f"Invalid response from Twilio: {e}", channel="sms") from e

        if not sid:
            raise NotificationError("Twilio accepted the request but returned no message SID", channel="sms")
        logger.info("SMS sent", extra={"channel": "sms", "to": phone_number, "sid": sid})
